## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import textwrap

import pytest

from fizl.api import create
from fizl.types import Code
from fizl.errors import FizModuleError
from fizl.loader import get_command_name, get_python_name, is_module_name, find_script


def test_command_name_mapping():
    assert get_command_name('cmd_to_upper') == 'to-upper'
    assert get_python_name('to-upper') == 'cmd_to_upper'
    with pytest.raises(FizModuleError):
        get_command_name('to_upper')


def test_module_names():
    assert is_module_name('str')
    assert is_module_name('mod2')
    assert not is_module_name('2mod')
    assert not is_module_name('')


def test_find_script(tmp_path, monkeypatch):
    (tmp_path / "lib.fiz").write_text("set x 1", encoding='utf-8')
    assert find_script(str(tmp_path / "lib.fiz")) == tmp_path / "lib.fiz"
    assert find_script("definitely_absent_lib.fiz") is None
    monkeypatch.setenv('FIZL_PATH', str(tmp_path))
    assert find_script("lib.fiz") == tmp_path / "lib.fiz"


def test_packaged_str_module_loads_lazily():
    interp = create()
    assert 'str' not in interp.library.loaded_modules
    assert interp.execute("str.length hello") == Code.OK
    assert interp.result == '5'
    assert 'str' in interp.library.loaded_modules
    assert 'str.upper' in interp.list_commands()


@pytest.mark.parametrize("source, expected", [
    ("str.upper abc", 'ABC'),
    ("str.lower ABC", 'abc'),
    ('str.trim "  pad  "', 'pad'),
    ("str.index abc 1", 'b'),
    ("str.index abc 9", ''),
    ("str.range abcdef 1 3", 'bcd'),
    ("str.repeat ab 3", 'ababab'),
])
def test_str_commands(source, expected):
    interp = create()
    assert interp.execute(source) == Code.OK
    assert interp.result == expected


def test_str_repeat_rejects_negative_count():
    interp = create()
    assert interp.execute("str.repeat ab -1") == Code.ERROR
    assert "must not be negative" in interp.result


def test_os_getenv(monkeypatch):
    monkeypatch.setenv('FIZL_TEST_VAR', 'xyz')
    monkeypatch.delenv('FIZL_NOPE_VAR', raising=False)
    interp = create()
    assert interp.execute("os.getenv FIZL_TEST_VAR") == Code.OK
    assert interp.result == 'xyz'
    assert interp.execute("os.getenv FIZL_NOPE_VAR fallback") == Code.OK
    assert interp.result == 'fallback'


def test_os_files_lists_scripts(tmp_path):
    (tmp_path / "a.fiz").write_text("", encoding='utf-8')
    (tmp_path / "b.txt").write_text("", encoding='utf-8')
    interp = create()
    assert interp.execute(f"os.files {{{tmp_path}}}") == Code.OK
    assert interp.result == str(tmp_path / "a.fiz")


def test_user_module_from_fizl_path(tmp_path, monkeypatch):
    (tmp_path / "greetmod.py").write_text(textwrap.dedent("""
        from fizl.types import Code

        def cmd_hello(interp, argv, data):
            interp.result = f"hello {argv[1]}"
            return Code.OK

        __commands__ = [cmd_hello]
    """), encoding='utf-8')
    monkeypatch.setenv('FIZL_PATH', str(tmp_path))
    interp = create()
    assert interp.execute("greetmod.hello bob") == Code.OK
    assert interp.result == 'hello bob'


def test_module_without_registry(tmp_path, monkeypatch):
    (tmp_path / "noregmod.py").write_text("x = 1\n", encoding='utf-8')
    monkeypatch.setenv('FIZL_PATH', str(tmp_path))
    interp = create()
    assert interp.execute("noregmod.anything") == Code.ERROR
    assert "missing command registry" in interp.result


def test_unknown_module():
    interp = create()
    assert interp.execute("nosuchmod.cmd") == Code.ERROR
    assert interp.result == "Module `nosuchmod` not found."
