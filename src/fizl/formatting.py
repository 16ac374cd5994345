## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys

from .types import Code


CODE_LABELS = {
    Code.ERROR: 'ERROR.',
    Code.OOM: 'OUT OF MEMORY.',
    Code.RETURN: 'UNEXPECTED RETURN.',
    Code.BREAK: 'UNEXPECTED BREAK.',
    Code.CONTINUE: 'UNEXPECTED CONTINUE.',
}


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def abbreviate(text: str, width: int = 72) -> str:
    """Single-line rendering of a statement, cut down to `width` characters."""
    line = ' '.join(text.split())
    return line if len(line) <= width else line[:width-2] + ' …'

def format_failure(code: Code, message: str, statement: str, filename: str) -> str:
    label = CODE_LABELS.get(code, code.name)
    detail = message if message else '(no message)'
    return (f"\033[30;43m {label} \033[0m Script `\033[97m{filename}\033[0m` stopped: {detail}\n"
            f"\033[97m  In statement:\033[0m \033[90m{abbreviate(statement)}\033[0m")

def show_result(code: Code, result: str, file=None) -> None:
    if code == Code.OK:
        print(f"\033[90mok:\033[0m {result}", file=file or sys.stdout)
    else:
        print(f"\033[33merror:\033[0m {result}", file=file or sys.stderr)
