## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Auxiliary commands, built only on the interpreter's public methods.
#

import sys

from .types import Code, atoi, is_true
from .errors import FizExprError
from .expr import ExprEvaluator
from .loader import find_script, iter_prefixed_commands


## OUTPUT & ARITHMETIC
def cmd_puts(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    print(argv[1], file=data)
    interp.result = argv[1]
    return Code.OK

def cmd_expr(interp, argv: list[str], data) -> Code:
    """Concatenates its words and evaluates them with the evaluator bound as command data."""
    if len(argv) < 2:
        return interp.argc_error(argv[0], 2)
    text = ''.join(argv[1:])
    evaluator = data if data is not None else ExprEvaluator()
    try:
        interp.result = evaluator(text)
    except FizExprError as exc:
        interp.result = f'expr: {exc.message} in "{text}"'
        return Code.ERROR
    return Code.OK

def _step_variable(interp, argv: list[str], delta: int) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    if (value := interp.get_var(argv[1])) is None:
        interp.result = f"{argv[1]} not found"
        return Code.ERROR
    value = str(atoi(value) + delta)
    interp.set_var(argv[1], value)
    interp.result = value
    return Code.OK

def cmd_incr(interp, argv: list[str], data) -> Code: return _step_variable(interp, argv, +1)
def cmd_decr(interp, argv: list[str], data) -> Code: return _step_variable(interp, argv, -1)

## STRING COMPARISON
def _compare(interp, argv: list[str], equal: bool) -> Code:
    if len(argv) != 3:
        return interp.argc_error(argv[0], 3)
    interp.result = '1' if (argv[1] == argv[2]) == equal else '0'
    return Code.OK

def cmd_eq(interp, argv: list[str], data) -> Code: return _compare(interp, argv, True)
def cmd_ne(interp, argv: list[str], data) -> Code: return _compare(interp, argv, False)

## DICTIONARIES
def cmd_dict(interp, argv: list[str], data) -> Code:
    """dict NAME put KEY VALUE | get KEY | has KEY | first | next KEY | remove KEY
    | foreach KEYVAR VALVAR do BODY
    """
    if len(argv) < 3:
        return interp.argc_error(argv[0], 3)
    name, action = argv[1], argv[2]
    needed = {'put': 5, 'get': 4, 'has': 4, 'first': 3, 'next': 4, 'remove': 4, 'foreach': 7}
    if action in needed and len(argv) < needed[action]:
        return interp.argc_error(argv[0], needed[action])

    match action:
        case 'put':
            interp.dict_insert(name, argv[3], argv[4])
            interp.result = argv[4]
        case 'get':
            if (value := interp.dict_find(name, argv[3])) is None:
                interp.result = f"no key {argv[3]} in dict {name}"
                return Code.ERROR
            interp.result = value
        case 'has':
            interp.result = '0' if interp.dict_find(name, argv[3]) is None else '1'
        case 'first':
            if (key := interp.dict_next(name)) is None:
                interp.result = f"dict {name} is empty or does not exist"
                return Code.ERROR
            interp.result = key
        case 'next':
            interp.result = interp.dict_next(name, argv[3]) or ''
        case 'remove':
            interp.dict_delete(name, argv[3])
            interp.result = ''
        case 'foreach':
            if argv[5] != 'do':
                interp.result = f"syntax is: {argv[0]} {name} {action} key val do {{body}}"
                return Code.ERROR
            return _dict_foreach(interp, name, argv[3], argv[4], argv[6])
        case _:
            interp.result = f"unknown command {action} to {argv[0]}"
            return Code.ERROR
    return Code.OK

def _dict_foreach(interp, name: str, key_var: str, value_var: str, body: str) -> Code:
    # Iterate over a snapshot so the body may modify the dictionary.
    for key in list(interp.library.dicts.get(name, {})):
        if (value := interp.dict_find(name, key)) is None: continue
        interp.set_var(key_var, key)
        interp.set_var(value_var, value)
        code = interp.execute(body)
        if code == Code.BREAK: break
        if code in (Code.ERROR, Code.OOM, Code.RETURN): return code
    return Code.OK

## ERRORS & CHECKS
def cmd_catch(interp, argv: list[str], data) -> Code:
    """Runs a script and yields its numeric result code; the script's result goes to VAR if given."""
    if len(argv) not in (2, 3):
        return interp.argc_error(argv[0], 2)
    code = interp.execute(argv[1])
    if len(argv) == 3:
        interp.set_var(argv[2], interp.result)
    interp.result = str(int(code))
    return Code.OK

def cmd_assert(interp, argv: list[str], data) -> Code:
    if len(argv) not in (2, 3):
        return interp.argc_error(argv[0], 2)
    if (code := interp.execute(argv[1])) != Code.OK:
        return Code.OOM if code == Code.OOM else Code.ERROR
    if not is_true(interp.result):
        interp.result = argv[2] if len(argv) == 3 else f"assertion failed: {argv[1].strip()}"
        return Code.ERROR
    return Code.OK

## FILES
def cmd_include(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    try:
        if (path := find_script(argv[1])) is None: raise FileNotFoundError(argv[1])
        source = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError):
        interp.result = f"unable to read {argv[1]}"
        return Code.ERROR
    return interp.execute(source)


def install_aux(interp, floating: bool = False) -> None:
    for name, fn in iter_prefixed_commands(sys.modules[__name__]):
        interp.add_command(name, fn)
    interp.add_command('expr', cmd_expr, ExprEvaluator(floating=floating))
