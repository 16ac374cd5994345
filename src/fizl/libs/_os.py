## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import glob

from fizl.types import Code


def cmd_getenv(interp, argv: list[str], data) -> Code:
    if len(argv) not in (2, 3):
        return interp.argc_error(argv[0], 2)
    default = argv[2] if len(argv) == 3 else ''
    interp.result = os.environ.get(argv[1], default)
    return Code.OK


def cmd_files(interp, argv: list[str], data) -> Code:
    """List matching files, one per line; a directory lists the `.fiz` scripts directly inside it."""
    if len(argv) != 2:
        return interp.argc_error(argv[0], 2)
    pattern = argv[1]
    if os.path.isdir(pattern):
        pattern = os.path.join(pattern, '*.fiz')
    interp.result = '\n'.join(sorted(glob.glob(pattern, recursive=True)))
    return Code.OK


__commands__ = [ cmd_getenv, cmd_files ]

if os.environ.get('FIZL_DEBUG'): print('LOADED libs/_os.py')
