## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from fizl.types import Code, GLOBAL, Procedure, Span, AbortToken, atoi, is_true
from fizl.types import _GlobalMarker
from fizl.library import Library


@pytest.mark.parametrize("text, value", [
    ("42", 42), ("  -7x", -7), ("+3", 3), ("abc", 0), ("", 0), ("12.9", 12),
])
def test_atoi_reads_leading_integer(text, value):
    assert atoi(text) == value


def test_truthiness():
    assert is_true("1") and is_true("-2") and is_true("5 apples")
    assert not is_true("0") and not is_true("") and not is_true("yes")


def test_result_codes_are_numeric():
    assert [int(c) for c in (Code.OK, Code.ERROR, Code.RETURN, Code.CONTINUE, Code.BREAK, Code.OOM)] == [0, 1, 2, 3, 4, 5]


def test_global_marker_is_singleton():
    assert _GlobalMarker() is GLOBAL
    assert repr(GLOBAL) == "<global>"


def test_procedure_parameter_names():
    assert Procedure("a  b\tc", "").names == ['a', 'b', 'c']
    assert Procedure("", "").names == []


def test_span_text():
    source = "set a 1\nset b 2"
    assert Span(source, 8).text() == "set b 2"
    assert Span(source, 0).text() == "set a 1"
    assert Span(source, 4, 7).text() == "a 1"


def test_abort_token_fires_once_per_transition():
    calls = []
    token = AbortToken(lambda: calls.append(1))
    assert token.set() and not token.set()
    assert token.is_set() and calls == [1]
    token.clear()
    assert not token.is_set()
    token.set()
    assert calls == [1, 1]


def test_library_dict_order_and_removal():
    lib = Library()
    for key in ('z', 'a', 'm'):
        lib.dict_insert('d', key, key.upper())
    assert lib.dict_next('d') == 'z'
    assert lib.dict_next('d', 'z') == 'a'
    assert lib.dict_delete('d', 'a') == 'A'
    assert lib.dict_next('d', 'z') == 'm'
    assert lib.dict_next('d', 'missing') is None
    assert lib.dict_next('nothing') is None
