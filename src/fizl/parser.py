## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# The word parser reads one word per call from a cursor, picking one of four
# disciplines from the first character:  bare, "quoted", [bracketed], {braced}.
# Substitution of $variables and [commands] happens while the word is read.
#

from .types import Code, Token
from .errors import FizParseError, FizIncompleteParse, FizSubstitutionError


ESCAPES = {'n': '\n', 'r': '\r', 't': '\t'}


class Cursor:
    __slots__ = ('text', 'pos')

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ''

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def __repr__(self):
        return f"Cursor({self.text[self.pos:self.pos+20]!r}…)"


def _is_name_char(c: str) -> bool:
    return c.isascii() and c.isalnum()

# C-locale whitespace only; other Unicode spaces belong to the word.
def _is_space(c: str) -> bool:
    return c in ' \t\n\r\v\f'


def _substitute_variable(interp, cur: Cursor) -> str:
    assert cur.peek() == '$'
    cur.pos += 1
    start = cur.pos
    while _is_name_char(cur.peek()):
        cur.pos += 1
    if cur.pos == start:
        raise FizParseError("Identifier expected after $", position=start)
    name = cur.text[start:cur.pos]
    if (value := interp.get_var(name)) is None:
        raise FizParseError(f"Unknown variable '{name}'", position=start)
    return value


def _substitute_command(interp, cur: Cursor) -> str:
    """Capture `[...]` up to the matching bracket, run it as a script and return its result."""
    assert cur.text[cur.pos-1] == '['
    script = parse_quote(interp, cur, ']')
    code = interp.execute(script)
    if code != Code.OK:
        raise FizSubstitutionError(interp.result, position=cur.pos, code=Code.OOM if code == Code.OOM else Code.ERROR)
    return interp.result


def parse_quote(interp, cur: Cursor, term: str | None) -> str:
    """Read a span ending with `term`, substituting `\\x`, `$name` and `[...]` inside it.
    With `term=None` the span runs to the end of the text and never fails for lack of terminator.
    """
    parts = []
    while (c := cur.peek()) != term:
        if c == '':
            if term is None: break
            raise FizIncompleteParse(f"Missing '{term}'", position=cur.pos)

        if c == '[':
            cur.pos += 1
            parts.append(_substitute_command(interp, cur))
            continue
        if c == '$':
            parts.append(_substitute_variable(interp, cur))
            continue
        if c == '\\':
            cur.pos += 1
            if cur.at_end():
                raise FizIncompleteParse(f"Missing '{term}'" if term else "Incomplete escape sequence", position=cur.pos)
            c = ESCAPES.get(cur.peek(), cur.peek())

        parts.append(c)
        cur.pos += 1

    if term is not None: cur.pos += 1
    return ''.join(parts)


def gobble_quote(cur: Cursor, parts: list[str], term: str) -> None:
    """Copy a `"..."` or `[...]` span found inside braces verbatim, respecting its escapes and nesting."""
    parts.append(cur.peek())
    cur.pos += 1
    while (c := cur.peek()) != term:
        if c == '':
            raise FizIncompleteParse(f"Missing '{term}'", position=cur.pos)
        if c == '[' or c == '"':
            gobble_quote(cur, parts, ']' if c == '[' else '"')
            continue
        if c == '\\':
            parts.append(c)
            cur.pos += 1
            if (c := cur.peek()) == '':
                raise FizIncompleteParse(f"Missing '{term}'", position=cur.pos)
        parts.append(c)
        cur.pos += 1
    parts.append(term)
    cur.pos += 1


def parse_brace(cur: Cursor) -> str:
    """Read a `{...}` word verbatim, the opening brace being already consumed."""
    parts, level = [], 1
    while True:
        c = cur.peek()
        if c == '[' or c == '"':
            gobble_quote(cur, parts, ']' if c == '[' else '"')
            continue

        match c:
            case '':
                raise FizIncompleteParse("Missing '}'", position=cur.pos)
            case '{':
                level += 1
            case '}':
                level -= 1
                if level == 0:
                    cur.pos += 1
                    return ''.join(parts)
            case '\\':
                parts.append(c)
                cur.pos += 1
                if (c := cur.peek()) == '':
                    raise FizIncompleteParse("Missing '}'", position=cur.pos)

        parts.append(c)
        cur.pos += 1


def parse_bare(interp, cur: Cursor) -> str:
    parts = []
    while (c := cur.peek()) and not _is_space(c):
        if c == '$':
            parts.append(_substitute_variable(interp, cur))
            continue
        if c == ';' or c == '[':  # Cases like `bar;` or `b[d e]` end the word here.
            break
        if c == '\\':
            cur.pos += 1
            if cur.at_end():
                raise FizParseError("Incomplete escape sequence", position=cur.pos)
            c = ESCAPES.get(cur.peek(), cur.peek())
        parts.append(c)
        cur.pos += 1
    return ''.join(parts)


def next_word(interp, cur: Cursor) -> tuple[Token, str | None]:
    """Read the next word, skipping whitespace and comments; report statement and input ends."""
    while True:
        while (c := cur.peek()) and _is_space(c):
            cur.pos += 1
            if c == '\n': return Token.EOS, None

        if (c := cur.peek()) == '':
            return Token.EOI, None
        if c == ';':
            cur.pos += 1
            return Token.EOS, None
        if c != '#':
            break

        # Comment runs to the newline, which is left to end the statement.
        newline = cur.text.find('\n', cur.pos)
        if newline < 0:
            cur.pos = len(cur.text)
            return Token.EOS, None
        cur.pos = newline

    cur.pos += c in '"[{'
    match c:
        case '"': return Token.WORD, parse_quote(interp, cur, '"')
        case '[': return Token.WORD, _substitute_command(interp, cur)
        case '{': return Token.WORD, parse_brace(cur)
        case _:   return Token.WORD, parse_bare(interp, cur)


def substitute(interp, text: str) -> str:
    """Perform `$name`, `\\x` and `[...]` substitution over all of `text`."""
    return parse_quote(interp, Cursor(text), None)


def is_complete(text: str) -> bool:
    """Check that all braces, quotes and brackets are closed, without substituting anything."""
    cur = Cursor(text)
    try:
        while (c := cur.peek()) != '':
            if c == '{':
                cur.pos += 1
                parse_brace(cur)
            elif c == '"' or c == '[':
                gobble_quote(cur, [], '"' if c == '"' else ']')
            elif c == '\\':
                cur.pos += 2
                if cur.pos > len(text): return False
            else:
                cur.pos += 1
    except FizIncompleteParse:
        return False
    return True
