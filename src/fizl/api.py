## fizl — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Code, GLOBAL, NativeCommand, Procedure
from .errors import *
from .interpreter import Interpreter
from .operators import install_aux


def create(aux: bool = True, floating: bool = False, **options) -> Interpreter | None:
    """New interpreter with built-ins (and auxiliary commands), or None if it cannot be allocated."""
    try:
        interp = Interpreter(**options)
        if aux: install_aux(interp, floating=floating)
    except MemoryError:
        return None
    return interp


_INTERPRETER = create()

def __getattr__(name):
    return getattr(_INTERPRETER, name)
