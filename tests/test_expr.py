## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from fizl.errors import FizExprError
from fizl.expr import evaluate, format_number, float_equal, ExprEvaluator


@pytest.mark.parametrize("text, expected", [
    ("2 + 3 * 4", 14),
    ("(2 + 3) * 4", 20),
    ("7 / 2", 3),
    ("-7 / 2", -3),
    ("-7 % 3", -1),
    ("7 % -3", 1),
    ("10 - 2 - 3", 5),
    ("+5", 5),
])
def test_integer_arithmetic(text, expected):
    assert evaluate(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("3 > 2", 1),
    ("2 >= 3", 0),
    ("1 = 1", 1),
    ("1 == 1", 1),
    ("1 != 1", 0),
    ("2 <= 2", 1),
    ("1 && 0", 0),
    ("0 || 2", 1),
    ("!0", 1),
    ("!(1 < 2)", 0),
    ("1 + 1 == 2 && 3 > 2", 1),
])
def test_comparison_and_logic(text, expected):
    assert evaluate(text) == expected


def test_logic_short_circuits():
    assert evaluate("0 && 1 / 0") == 0
    assert evaluate("1 || 5 / 0") == 1


def test_integer_wraparound():
    assert evaluate("9223372036854775807 + 1") == -9223372036854775808


@pytest.mark.parametrize("text, reason", [
    ("5 / 0", "divide by zero"),
    ("5 % 0", "divide by zero"),
    ("(1 + 2", "missing ')'"),
    ("1 +", "number expected"),
    ("1 2", "end of expression expected"),
    ("2)", "end of expression expected"),
    ("1 $ 2", "unexpected character '$'"),
    ("99999999999999999999", "number too large"),
    ("1.5", "fractional number in integer mode"),
])
def test_expression_errors(text, reason):
    with pytest.raises(FizExprError) as info:
        evaluate(text)
    assert info.value.message == reason
    assert info.value.expression == text


def test_float_mode():
    assert evaluate("0.1 + 0.2 == 0.3", floating=True) == 1
    assert evaluate("0.3 >= 0.1 + 0.2", floating=True) == 1
    assert evaluate("0.3 > 0.1 + 0.2", floating=True) == 0
    assert evaluate("7 / 2", floating=True) == 3.5
    assert float_equal(1.0, 1.0 + 1e-12)


def test_format_number():
    assert format_number(14) == '14'
    assert format_number(3.0) == '3'
    assert format_number(0.1 + 0.2) == '0.3'
    assert format_number(-0.0) == '0'
    assert format_number(2.5) == '2.5'


def test_evaluator_returns_text():
    assert ExprEvaluator()("2+3") == '5'
    assert ExprEvaluator(floating=True)("1/4") == '0.25'
