## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
from pathlib import Path
from typing import Callable

from .errors import FizModuleError


_LIB_MODULES: dict[str, object] = {}


def _resolve_fizl_paths() -> list[Path]:
    parts = [p for p in os.environ.get("FIZL_PATH", "").split(os.pathsep) if p]
    return [Path(os.path.expanduser(os.path.expandvars(p))) for p in parts]

def get_python_name(command: str) -> str:
    """Map a command name to its Python function name."""
    return 'cmd_' + command.replace('-', '_')


def get_command_name(py_name: str) -> str:
    """Inverse of `get_python_name` for well-formed function names."""
    if not py_name.startswith("cmd_"):
        raise FizModuleError(f"Command function `{py_name}` requires prefix `cmd_` by convention.", fiz_command=py_name)
    return py_name[4:].replace('_', '-')


def is_module_name(x: str) -> bool:
    return x[:1].isalpha() and all(ch.isalpha() or ch.isdigit() for ch in x[1:])


def find_script(filename: str) -> Path | None:
    """Resolution order for `include`: the path as given, then relative to each FIZL_PATH entry."""
    path = Path(filename)
    if path.is_file(): return path
    if path.is_absolute(): return None
    for root in _resolve_fizl_paths():
        if (candidate := root / filename).is_file():
            return candidate
    return None


def load_library_module(ns: str):
    if ns in _LIB_MODULES: return _LIB_MODULES[ns]

    # Search FIZL_PATH entries first (plain {ns}.py), then packaged libs (underscore-only _{ns}.py).
    candidates = [(str(p / f'{ns}.py'), f"fizl.ext.{ns}") for p in _resolve_fizl_paths()]
    roots = (base := Path(__file__).resolve().parent, *base.parents[:2])
    candidates += [(str(d / 'libs' / f'_{ns}.py'), f"fizl.libs._{ns}") for d in roots]

    import importlib.util as importer
    for mod_path, mod_name in candidates:
        if not os.path.isfile(mod_path): continue
        spec, module = importer.spec_from_file_location(mod_name, mod_path), None
        if spec and spec.loader:
            module = importer.module_from_spec(spec)
            try:
                spec.loader.exec_module(module)
            except (SyntaxError, ImportError, Exception) as e:
                raise FizModuleError(str(e), filename=mod_path, fiz_command=ns) from e
        _LIB_MODULES[ns] = module
        return module
    raise FizModuleError(f"Module `{ns}` not found.", fiz_command=ns)


def iter_module_commands(ns: str):
    """Yield `(command_name, py_function)` pairs for all commands in a module for bulk loading."""
    py_module = load_library_module(ns)
    if not isinstance(getattr(py_module, '__commands__', None), list):
        raise FizModuleError(f"Module `{ns}` is missing command registry `__commands__`.", fiz_command=ns)
    for fn in py_module.__commands__:
        if not (py_name := getattr(fn, '__name__', '')): continue
        yield get_command_name(py_name), fn


def iter_prefixed_commands(module) -> list[tuple[str, Callable]]:
    """All `cmd_*` functions defined in a Python module, for built-in registration."""
    return [(get_command_name(k), getattr(module, k)) for k in dir(module) if k.startswith('cmd_')]
