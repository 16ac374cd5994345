## fizl — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import enum
import threading
from typing import Any, Callable
from dataclasses import dataclass


class Code(enum.IntEnum):
    OK = 0
    ERROR = 1
    RETURN = 2
    CONTINUE = 3
    BREAK = 4
    OOM = 5


class Token(enum.Enum):
    WORD = 'word'
    EOS = 'end-of-statement'
    EOI = 'end-of-input'


class _GlobalMarker:
    """Stored in a call frame in place of a value: the name lives in the global frame."""
    __slots__ = ()
    _singleton = None

    def __new__(cls):
        if cls._singleton is None:
            cls._singleton = super().__new__(cls)
        return cls._singleton

    def __repr__(self):
        return "<global>"

GLOBAL = _GlobalMarker()


@dataclass(frozen=True)
class NativeCommand:
    fn: Callable[..., Code]
    data: Any = None

@dataclass(frozen=True)
class Procedure:
    params: str
    body: str

    @property
    def names(self) -> list[str]:
        return self.params.split()

Command = NativeCommand | Procedure


class SpanState(enum.Enum):
    NONE = '(none)'
    CAPTURED = 'captured'
    INACCESSIBLE = '(inaccessible)'


@dataclass
class Span:
    source: str
    start: int
    end: int | None = None

    def text(self) -> str:
        end = self.end
        if end is None:
            end = self.source.find('\n', self.start)
            end = len(self.source) if end < 0 else end
        return self.source[self.start:end]


class AbortToken:
    """Cooperative cancellation flag, firing its callback once each time it becomes set."""

    def __init__(self, callback: Callable[[], None] | None = None):
        self.callback = callback
        self._flag = threading.Event()
        self._lock = threading.Lock()

    def set(self) -> bool:
        with self._lock:
            if self._flag.is_set(): return False
            self._flag.set()
        if self.callback is not None:
            self.callback()
        return True

    def clear(self) -> None:
        with self._lock:
            self._flag.clear()

    def is_set(self) -> bool:
        return self._flag.is_set()


_LEADING_INT = re.compile(r'\s*([+-]?\d+)')

def atoi(text: str) -> int:
    """Read the leading base-10 integer of `text`, or 0 if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0

def is_true(text: str) -> bool:
    return atoi(text) != 0
