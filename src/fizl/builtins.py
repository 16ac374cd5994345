## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Built-in commands that give the language its structure:  set, proc, return, if, while,
# break, continue, global.  Each takes `(interp, argv, data)` and returns a result code.
#

import sys

from .types import Code, is_true
from .library import Library
from .loader import iter_prefixed_commands


def cmd_set(interp, argv: list[str], data) -> Code:
    if len(argv) == 2:
        if (value := interp.get_var(argv[1])) is None:
            interp.result = f"{argv[1]} not found"
            return Code.ERROR
        interp.result = value
        return Code.OK
    if len(argv) != 3:
        return interp.argc_error(argv[0], 3)
    interp.set_var(argv[1], argv[2])
    interp.result = argv[2]
    return Code.OK

def cmd_proc(interp, argv: list[str], data) -> Code:
    """Registers the procedure, replacing any command of the same name; body stays unparsed."""
    if len(argv) != 4:
        return interp.argc_error(argv[0], 4)
    interp.add_procedure(argv[1], argv[2], argv[3])
    interp.result = argv[1]
    return Code.OK

def cmd_return(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    interp.result = argv[1]
    return Code.RETURN

def cmd_if(interp, argv: list[str], data) -> Code:
    """Runs the condition as a script, then one of the branches in the same call frame."""
    if len(argv) not in (3, 5):
        return interp.argc_error(argv[0], 3)
    if len(argv) == 5 and argv[3] != 'else':
        interp.result = "4th parameter must be else in 'if'"
        return Code.ERROR
    if interp.execute(argv[1]) != Code.OK:
        return Code.ERROR
    if is_true(interp.result):
        return interp.execute(argv[2])
    if len(argv) == 5:
        return interp.execute(argv[4])
    return Code.OK

def cmd_while(interp, argv: list[str], data) -> Code:
    """Loops while the condition script yields a true result.  `break` ends the loop normally,
    errors leave the loop with their code, any other code goes back to the condition.
    """
    if len(argv) != 3:
        return interp.argc_error(argv[0], 3)
    while True:
        if interp.check_abort():
            return Code.ERROR
        if interp.execute(argv[1]) != Code.OK:
            return Code.ERROR
        if not is_true(interp.result): break

        code = interp.execute(argv[2])
        if code == Code.BREAK: break
        if code in (Code.ERROR, Code.OOM): return code
    return Code.OK

def cmd_break(interp, argv: list[str], data) -> Code:
    if len(argv) != 1:
        return interp.argc_error(argv[0], 1)
    return Code.BREAK

def cmd_continue(interp, argv: list[str], data) -> Code:
    if len(argv) != 1:
        return interp.argc_error(argv[0], 1)
    return Code.CONTINUE

def cmd_global(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    interp.link_global(argv[1])
    interp.result = '1'
    return Code.OK


def load_builtins_library() -> Library:
    lib = Library()
    for name, fn in iter_prefixed_commands(sys.modules[__name__]):
        lib.add_command(name, fn)
    return lib
