## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .types import Code, Command, NativeCommand, Procedure
from .loader import is_module_name


@dataclass
class Library:
    """Global registry of commands and named dictionaries; neither is scoped by call frames."""
    commands: dict[str, Command] = field(default_factory=dict)
    dicts: dict[str, dict[str, str]] = field(default_factory=dict)
    module_loader: Callable | None = None
    loaded_modules: set[str] = field(default_factory=set)

    # Registration helpers
    def add_command(self, name: str, fn: Callable[..., Code], data: Any = None) -> None:
        self.commands[name] = NativeCommand(fn, data)

    def add_procedure(self, name: str, params: str, body: str) -> None:
        self.commands[name] = Procedure(params, body)

    def _maybe_load_module(self, name: str) -> None:
        if '.' not in name or self.module_loader is None:
            return
        ns = name.split('.', 1)[0]
        if is_module_name(ns) and ns not in self.loaded_modules:
            # Load and register all commands from the module at once.
            self.module_loader(self, ns)

    def get_command(self, name: str) -> Command | None:
        if (command := self.commands.get(name)) is None:
            self._maybe_load_module(name)
            command = self.commands.get(name)
        return command

    def mark_module_loaded(self, ns: str):
        self.loaded_modules.add(ns)

    # Named dictionaries
    def dict_insert(self, dict_name: str, key: str, value: str) -> None:
        self.dicts.setdefault(dict_name, {})[key] = value

    def dict_find(self, dict_name: str, key: str) -> str | None:
        return self.dicts.get(dict_name, {}).get(key)

    def dict_delete(self, dict_name: str, key: str) -> str | None:
        return self.dicts.get(dict_name, {}).pop(key, None)

    def dict_next(self, dict_name: str, key: str | None = None) -> str | None:
        """Key following `key` in iteration order, the first key when `key` is None, else None at the end."""
        keys = iter(self.dicts.get(dict_name, {}))
        if key is not None:
            for k in keys:
                if k == key: break
            else:
                return None
        return next(keys, None)

    def clear(self) -> None:
        self.commands.clear()
        self.dicts.clear()
        self.loaded_modules.clear()
