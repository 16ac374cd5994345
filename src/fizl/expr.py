## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Infix expression language used by `expr`:  ||  &&  !  comparisons  + -  * / %  unary sign.
#

import math

import lark
from lark.visitors import Interpreter

from .errors import FizExprError


GRAMMAR = r"""?start: or_test
?or_test: and_test (OR and_test)*
?and_test: not_test (AND not_test)*
?not_test: BANG comparison -> negation
         | comparison
?comparison: sum (COMP_OP sum)?
?sum: product (ADD_OP product)*
?product: unary (MUL_OP unary)*
?unary: ADD_OP atom -> sign
      | atom
?atom: NUMBER -> number
     | "(" or_test ")"

OR: "||"
AND: "&&"
BANG: "!"
COMP_OP: /==|!=|>=|<=|=|>|</
ADD_OP: /[+-]/
MUL_OP: /[*\/%]/
NUMBER: /\d+(\.\d*)?/

%import common.WS
%ignore WS
"""

MAX_INTEGER = 2**63 - 1
EPSILON = 1e-8

_PARSER = lark.Lark(GRAMMAR, parser="lalr", lexer="contextual")


def _wrap(n: int) -> int:
    """Bring an integer back into signed 64-bit range, as machine arithmetic does."""
    return (n + 2**63) % 2**64 - 2**63

def _int_div(b: int, a: int) -> int:
    q = abs(b) // abs(a)
    return q if (b < 0) == (a < 0) else -q

def _int_rem(b: int, a: int) -> int:
    return b - a * _int_div(b, a)


def float_equal(b: float, a: float) -> bool:
    return abs(b - a) <= EPSILON * max(abs(b), abs(a))


def format_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    text = f"{value:f}".rstrip('0').rstrip('.')
    return '0' if text in ('-0', '') else text


class _Evaluator(Interpreter):
    """Walks the parse tree top-down so `||` and `&&` only visit the operands they need."""

    def __init__(self, floating: bool):
        super().__init__()
        self.floating = floating

    def _eval(self, node):
        return self.visit(node) if isinstance(node, lark.Tree) else self._literal(node)

    def _literal(self, token: lark.Token):
        whole, _, fraction = token.value.partition('.')
        if int(whole) > MAX_INTEGER:
            raise FizExprError("number too large")
        if '.' in token.value and not self.floating:
            raise FizExprError("fractional number in integer mode")
        return float(token.value) if self.floating else int(whole)

    def _truth(self, value) -> bool:
        return value != 0

    def number(self, tree):
        return self._literal(tree.children[0])

    def or_test(self, tree):
        result = False
        for operand in tree.children[::2]:
            result = result or self._truth(self._eval(operand))
            if result: break
        return int(result)

    def and_test(self, tree):
        result = True
        for operand in tree.children[::2]:
            result = result and self._truth(self._eval(operand))
            if not result: break
        return int(result)

    def negation(self, tree):
        return int(not self._truth(self._eval(tree.children[1])))

    def comparison(self, tree):
        lhs, op, rhs = tree.children
        b, a = self._eval(lhs), self._eval(rhs)
        if self.floating:
            eq = float_equal(b, a)
            match op.value:
                case '==' | '=': return int(eq)
                case '!=': return int(not eq)
                case '>':  return int(not eq and b > a)
                case '<':  return int(not eq and b < a)
                case '>=': return int(eq or b > a)
                case '<=': return int(eq or b < a)
        match op.value:
            case '==' | '=': return int(b == a)
            case '!=': return int(b != a)
            case '>':  return int(b > a)
            case '<':  return int(b < a)
            case '>=': return int(b >= a)
            case '<=': return int(b <= a)

    def sum(self, tree):
        result = self._eval(tree.children[0])
        for op, operand in zip(tree.children[1::2], tree.children[2::2]):
            value = self._eval(operand)
            result = result + value if op.value == '+' else result - value
            if not self.floating: result = _wrap(result)
        return result

    def product(self, tree):
        result = self._eval(tree.children[0])
        for op, operand in zip(tree.children[1::2], tree.children[2::2]):
            value = self._eval(operand)
            if op.value == '*':
                result = result * value
            elif value == 0:
                raise FizExprError("divide by zero")
            elif self.floating:
                result = result / value if op.value == '/' else math.fmod(result, value)
            else:
                result = _int_div(result, value) if op.value == '/' else _int_rem(result, value)
            if not self.floating: result = _wrap(result)
        return result

    def sign(self, tree):
        op, operand = tree.children
        value = self._eval(operand)
        if op.value == '+': return value
        return -value if self.floating else _wrap(-value)


def _describe_parse_error(exc: lark.exceptions.UnexpectedInput, text: str) -> str:
    if isinstance(exc, lark.exceptions.UnexpectedCharacters):
        return f"unexpected character '{exc.char}'"
    expected = set(getattr(exc, 'expected', None) or ())
    if 'NUMBER' in expected:
        return "number expected"
    # LALR lookaheads are shared between nesting levels, so count the parentheses still open.
    pos = getattr(exc, 'pos_in_stream', None)
    prefix = text if pos is None else text[:pos]
    if prefix.count('(') > prefix.count(')'):
        return "missing ')'"
    return "end of expression expected"


def evaluate(text: str, floating: bool = False) -> int | float:
    """Evaluate an expression, raising `FizExprError` with a readable message when malformed."""
    try:
        tree = _PARSER.parse(text)
    except lark.exceptions.UnexpectedInput as exc:
        raise FizExprError(_describe_parse_error(exc, text), expression=text) from None
    try:
        return _Evaluator(floating)._eval(tree)
    except FizExprError as exc:
        exc.expression = text
        raise


class ExprEvaluator:
    """Bound to the `expr` command as its data; holds the numeric mode."""

    def __init__(self, floating: bool = False):
        self.floating = floating

    def __call__(self, text: str) -> str:
        return format_number(evaluate(text, floating=self.floating))

    def __repr__(self):
        return f"ExprEvaluator(floating={self.floating})"
