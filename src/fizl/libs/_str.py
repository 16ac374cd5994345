## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os

from fizl.types import Code, atoi
from fizl.errors import FizValueError


def cmd_length(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    interp.result = str(len(argv[1]))
    return Code.OK

def cmd_upper(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    interp.result = argv[1].upper()
    return Code.OK

def cmd_lower(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    interp.result = argv[1].lower()
    return Code.OK

def cmd_trim(interp, argv: list[str], data) -> Code:
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    interp.result = argv[1].strip()
    return Code.OK

def cmd_index(interp, argv: list[str], data) -> Code:
    # Out of range yields an empty string, like reading past the end of a word.
    if len(argv) != 3:
        return interp.argc_error(argv[0], 3)
    i = atoi(argv[2])
    interp.result = argv[1][i] if 0 <= i < len(argv[1]) else ''
    return Code.OK

def cmd_range(interp, argv: list[str], data) -> Code:
    if len(argv) != 4:
        return interp.argc_error(argv[0], 4)
    first, last = atoi(argv[2]), atoi(argv[3])
    interp.result = argv[1][max(first, 0):last + 1]
    return Code.OK

def cmd_repeat(interp, argv: list[str], data) -> Code:
    if len(argv) != 3:
        return interp.argc_error(argv[0], 3)
    if (count := atoi(argv[2])) < 0:
        raise FizValueError(f"{argv[0]} count must not be negative, got {count}.")
    interp.result = argv[1] * count
    return Code.OK


__commands__ = [ cmd_length, cmd_upper, cmd_lower, cmd_trim, cmd_index, cmd_range, cmd_repeat ]

if os.environ.get('FIZL_DEBUG'): print('LOADED libs/_str.py')
