## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Code


class FizError(Exception):
    def __init__(self, message: str = "", *, fiz_command=None):
        """Base class for all fizl-raised errors."""
        super().__init__(message)
        self.message: str = message
        self.fiz_command: str = fiz_command

class FizParseError(FizError):
    def __init__(self, message, *, position=None, code=Code.ERROR):
        super().__init__(message)
        self.position = position
        self.code = code

class FizSubstitutionError(FizParseError):
    """A `[...]` substitution did not finish OK; its message is already the interpreter's result."""
    pass

class FizIncompleteParse(FizParseError):
    """A quote, brace or bracket was still open when the text ended."""
    pass

class FizExprError(FizError, ValueError):
    def __init__(self, message, *, expression=None):
        super().__init__(message)
        self.expression = expression

class FizValueError(FizError, ValueError):
    pass

class FizRuntimeError(FizError, RuntimeError):
    pass


class FizScriptError(FizError):
    """Script finished with a code other than OK, raised by `Interpreter.eval` only."""
    def __init__(self, message: str = "", *, code=Code.ERROR, fiz_command=None):
        super().__init__(message, fiz_command=fiz_command)
        self.code = code


class FizModuleError(FizError, ImportError):
    def __init__(self, message, *, fiz_command=None, filename=None):
        super().__init__(message, fiz_command=fiz_command)
        self.filename = filename
