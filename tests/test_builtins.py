## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from fizl.api import create
from fizl.types import Code
from fizl.interpreter import Interpreter


@pytest.fixture
def interp():
    return create()


def test_core_builtins_without_aux():
    interp = Interpreter()
    assert interp.execute("set x 5; set x") == Code.OK
    assert interp.result == '5'
    assert interp.execute("puts hi") == Code.ERROR
    assert interp.result == "undefined command 'puts'"


@pytest.mark.parametrize("source", ["set", "set a b c"])
def test_set_word_count(interp, source):
    assert interp.execute(source) == Code.ERROR
    assert interp.result == "set expected 3 words"


def test_set_unknown_variable(interp):
    assert interp.execute("set nothing") == Code.ERROR
    assert interp.result == "nothing not found"


def test_proc_word_count(interp):
    assert interp.execute("proc f {}") == Code.ERROR
    assert interp.result == "proc expected 4 words"


def test_return_requires_value(interp):
    interp.execute("proc f {} { set a 1; return }")
    assert interp.execute("f") == Code.ERROR
    assert interp.result == "return expected 2 words"


def test_if_branches(interp):
    interp.execute("if {expr 1} {set r a} else {set r b}")
    assert interp.get_var('r') == 'a'
    interp.execute("if {expr 0} {set r a} else {set r b}")
    assert interp.get_var('r') == 'b'


def test_if_false_without_else_is_ok(interp):
    assert interp.execute("set r none; if {expr 0} {set r a}") == Code.OK
    assert interp.get_var('r') == 'none'


def test_if_truthiness_is_leading_integer(interp):
    interp.execute("if {set t 12abc} {set r yes} else {set r no}")
    assert interp.get_var('r') == 'yes'
    interp.execute("if {set t abc} {set r yes} else {set r no}")
    assert interp.get_var('r') == 'no'


def test_if_requires_else_keyword(interp):
    assert interp.execute("if {expr 0} {set r a} otherwise {set r b}") == Code.ERROR
    assert interp.result == "4th parameter must be else in 'if'"


def test_if_word_count(interp):
    assert interp.execute("if {expr 1}") == Code.ERROR
    assert interp.result == "if expected 3 words"


def test_if_condition_error(interp):
    assert interp.execute("if {nope} {set r 1}") == Code.ERROR
    assert interp.result == "undefined command 'nope'"


def test_while_counts(interp):
    assert interp.execute("set i 0; set n 0; while {expr $i < 3} { incr i; incr n }") == Code.OK
    assert interp.get_var('n') == '3'


def test_while_break(interp):
    assert interp.execute("set i 0; while {expr 1} { incr i; if {expr $i == 5} {break} }") == Code.OK
    assert interp.get_var('i') == '5'


def test_while_continue(interp):
    source = "set i 0; set odd 0; while {expr $i < 6} { incr i; if {expr $i % 2 == 0} {continue}; incr odd }"
    assert interp.execute(source) == Code.OK
    assert interp.get_var('odd') == '3'


def test_while_keeps_looping_after_return(interp):
    interp.execute("proc f {} { set n 0; while {expr $n < 3} { incr n; return x }; return [set n] }")
    assert interp.execute("f") == Code.OK
    assert interp.result == '3'


def test_while_error_propagates(interp):
    assert interp.execute("set i 0; while {expr $i < 3} { incr i; nope }") == Code.ERROR
    assert interp.result == "undefined command 'nope'"
    assert interp.get_var('i') == '1'


def test_break_and_continue_take_no_words(interp):
    assert interp.execute("break now") == Code.ERROR
    assert interp.result == "break expected 1 words"


def test_global_result(interp):
    interp.execute("set g 1; proc f {} { global g }")
    assert interp.execute("f") == Code.OK
    assert interp.result == '1'
