## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import sys
from typing import Any, Callable

from .types import Code, Token, GLOBAL, Procedure, Span, SpanState, AbortToken
from .errors import FizError, FizParseError, FizSubstitutionError, FizRuntimeError, FizScriptError
from .parser import Cursor, next_word, substitute as substitute_text
from .library import Library
from .loader import iter_module_commands
from .builtins import load_builtins_library


class Interpreter:
    """One interpreter state: commands, call frames, dictionaries and the current result.

    Not thread-safe; drive each instance from one thread at a time.  Only `abort()` may be
    called from elsewhere, and long-running native commands are expected to poll
    `check_abort()` and return promptly once it reports true.
    """

    def __init__(self, library: Library | None = None, *, max_depth: int = 128, verbosity: int = 0,
                 on_abort: Callable[[], None] | None = None):
        self.library = library if library is not None else load_builtins_library()
        self.library.module_loader = self._module_loader

        self.frames: list[dict[str, Any]] = [{}]
        self.max_depth = max_depth
        self.verbosity = verbosity
        self.steps = 0

        self._result = ''
        self._depth = 0
        self._abort = AbortToken(on_abort)
        self._span: Span | None = None
        self._span_state = SpanState.NONE

    def _module_loader(self, lib: Library, ns: str) -> None:
        for name, fn in iter_module_commands(ns):
            lib.add_command(f"{ns}.{name}", fn)
        lib.mark_module_loaded(ns)
        if os.environ.get('FIZL_DEBUG'): print(f'LOADED module `{ns}`', file=sys.stderr)

    # Result ──────────────────────────────────────────────────────────────────────────────────
    @property
    def result(self) -> str:
        return self._result

    @result.setter
    def result(self, value: str) -> None:
        self._result = str(value)

    def argc_error(self, command: str, expected: int) -> Code:
        self.result = f"{command} expected {expected} words"
        return Code.ERROR

    def oom_error(self) -> Code:
        self._result = ''
        if self._span_state is SpanState.CAPTURED:
            self._span, self._span_state = None, SpanState.INACCESSIBLE
        return Code.OOM

    # Variables ───────────────────────────────────────────────────────────────────────────────
    @property
    def frame_is_global(self) -> bool:
        return len(self.frames) == 1

    def get_var(self, name: str) -> str | None:
        value = self.frames[-1].get(name)
        if value is GLOBAL:
            value = self.frames[0].get(name)
        return value

    def set_var(self, name: str, value: str) -> None:
        frame = self.frames[-1]
        if frame.get(name) is GLOBAL:
            frame = self.frames[0]
        frame[name] = str(value)

    def link_global(self, name: str) -> None:
        """Make `name` in the current frame refer to the global frame's variable."""
        if self.frame_is_global:
            raise FizRuntimeError("Cannot call global from global context", fiz_command='global')
        self.frames[-1][name] = GLOBAL

    # Registration ────────────────────────────────────────────────────────────────────────────
    def add_command(self, name: str, fn: Callable[..., Code], data: Any = None) -> None:
        self.library.add_command(name, fn, data)

    def add_procedure(self, name: str, params: str, body: str) -> None:
        self.library.add_procedure(name, params, body)

    def list_commands(self) -> list[str]:
        return sorted(self.library.commands)

    # Dictionaries ────────────────────────────────────────────────────────────────────────────
    def dict_insert(self, dict_name: str, key: str, value: str) -> None:
        self.library.dict_insert(dict_name, key, str(value))

    def dict_find(self, dict_name: str, key: str) -> str | None:
        return self.library.dict_find(dict_name, key)

    def dict_delete(self, dict_name: str, key: str) -> None:
        self.library.dict_delete(dict_name, key)

    def dict_next(self, dict_name: str, key: str | None = None) -> str | None:
        return self.library.dict_next(dict_name, key)

    # Cancellation ────────────────────────────────────────────────────────────────────────────
    @property
    def aborted(self) -> bool:
        return self._abort.is_set()

    @property
    def on_abort(self) -> Callable[[], None] | None:
        return self._abort.callback

    @on_abort.setter
    def on_abort(self, callback: Callable[[], None] | None) -> None:
        self._abort.callback = callback

    def abort(self) -> bool:
        return self._abort.set()

    def reset_abort(self) -> None:
        self._abort.clear()

    def check_abort(self) -> bool:
        if not self._abort.is_set(): return False
        self.result = "execution aborted"
        return True

    # Diagnostics ─────────────────────────────────────────────────────────────────────────────
    def _set_span(self, span: Span | None) -> None:
        self._span = span
        self._span_state = SpanState.NONE if span is None else SpanState.CAPTURED

    @property
    def span_state(self) -> SpanState:
        return self._span_state

    def last_statement(self) -> str:
        if self._span_state is not SpanState.CAPTURED:
            return self._span_state.value
        return ' '.join(self._span.text().split())

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def execute(self, text: str) -> Code:
        """Run a script and return its result code; the result value is left in `result`."""
        return self._execute(text, record=self.frame_is_global)

    def eval(self, text: str) -> str:
        code = self.execute(text)
        if code in (Code.OK, Code.RETURN):
            return self.result
        raise FizScriptError(self.result, code=code)

    def substitute(self, text: str) -> str | None:
        """Substitute `$name` and `[...]` in text, or return None with the message in `result`."""
        try:
            return substitute_text(self, text)
        except FizParseError as exc:
            if not isinstance(exc, FizSubstitutionError): self.result = exc.message
            return None
        except (MemoryError, RecursionError):
            self.oom_error()
            return None

    def _execute(self, text: str, record: bool) -> Code:
        if self._depth >= self.max_depth:
            self.result = f"too many nested evaluations (limit {self.max_depth})"
            return Code.ERROR

        saved = (self._span, self._span_state) if record and self._depth > 0 else None
        self._depth += 1
        try:
            code = self._run_statements(text, record)
        except (MemoryError, RecursionError):
            code = self.oom_error()
        finally:
            self._depth -= 1

        # Nested runs that finished without failing hand the span back to the enclosing statement.
        if saved is not None and code not in (Code.ERROR, Code.OOM):
            self._span, self._span_state = saved
        return code

    def _run_statements(self, text: str, record: bool) -> Code:
        cur, code = Cursor(text), Code.OK
        if record: self._set_span(None)

        while True:
            if self.check_abort(): return Code.ERROR

            start = cur.pos
            try:
                kind, word = next_word(self, cur)
                if kind is Token.EOI: break
                if kind is Token.EOS: continue

                argv = [word]
                while (item := next_word(self, cur))[0] is Token.WORD:
                    argv.append(item[1])
            except FizParseError as exc:
                if record and not isinstance(exc, FizSubstitutionError):
                    self._set_span(Span(text, start, cur.pos))
                if not isinstance(exc, FizSubstitutionError): self.result = exc.message
                return exc.code

            if record: self._set_span(Span(text, start, cur.pos))
            if self.verbosity >= 2 or (self.verbosity == 1 and record):
                print(f"\033[90m{self.steps:>3} :\033[0m  {text[start:cur.pos].strip()}", file=sys.stderr)
            self.steps += 1

            code = self._invoke(argv)
            if code != Code.OK: break
        return code

    def _invoke(self, argv: list[str]) -> Code:
        name = argv[0]
        try:
            if (command := self.library.get_command(name)) is None:
                self.result = f"undefined command '{name}'"
                return Code.ERROR
            if isinstance(command, Procedure):
                return self._call_procedure(name, command, argv)
            return command.fn(self, argv, command.data)
        except FizError as exc:
            self.result = str(exc)
            return Code.ERROR
        except (MemoryError, RecursionError):
            raise
        except Exception as exc:
            if getattr(exc, 'fiz_command', None) is None:
                exc.fiz_command = name
            raise

    def _call_procedure(self, name: str, proc: Procedure, argv: list[str]) -> Code:
        params = proc.names
        if len(params) != len(argv) - 1:
            self.result = f"'{name}' wanted {len(params)} parameters, but got {len(argv) - 1}"
            return Code.ERROR

        self.frames.append(dict(zip(params, argv[1:])))
        try:
            code = self._execute(proc.body, record=True)
        finally:
            self.frames.pop()
        return Code.OK if code == Code.RETURN else code

    # Lifecycle ───────────────────────────────────────────────────────────────────────────────
    def close(self) -> None:
        if len(self.frames) > 1:
            raise FizRuntimeError(f"Interpreter closed with {len(self.frames) - 1} procedure frame(s) still active.")
        self.library.clear()
        self.frames.clear()
        self._result = ''
        self._set_span(None)

    def __enter__(self) -> "Interpreter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
