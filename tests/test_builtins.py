import io
import os

import pytest

from minishell.builtins import (
    ShellExit,
    builtin_cd,
    builtin_echo,
    builtin_env,
    builtin_exit,
    builtin_export,
    builtin_pwd,
    builtin_unset,
    is_builtin,
    is_int_argument,
    run_builtin,
)
from minishell.environment import Environment, ShellState
from minishell.parser import Command


@pytest.fixture
def state():
    return ShellState(env=Environment(["A=1", "B=2"]), exit_status=7)


def test_is_builtin():
    assert is_builtin(Command(name="echo", args=["echo"]))
    assert is_builtin(Command(name="exit", args=["exit"]))
    assert not is_builtin(Command(name="ls", args=["ls"]))
    assert not is_builtin(Command())


@pytest.mark.parametrize(
    "text,expected",
    [
        ("42", True),
        ("+7", True),
        ("-2147483648", True),
        ("2147483647", True),
        ("2147483648", False),
        ("-", False),
        ("", False),
        ("12a", False),
    ],
)
def test_is_int_argument(text, expected):
    assert is_int_argument(text) is expected


def test_echo_joins_with_spaces():
    out = io.StringIO()
    assert builtin_echo(["echo", "a", "b"], out) == 0
    assert out.getvalue() == "a b\n"


def test_echo_n_suppresses_newline():
    out = io.StringIO()
    builtin_echo(["echo", "-n", "a", "b"], out)
    assert out.getvalue() == "a b"


def test_echo_empty():
    out = io.StringIO()
    builtin_echo(["echo"], out)
    assert out.getvalue() == "\n"


def test_env_prints_entries(state):
    out = io.StringIO()
    assert builtin_env(state, out) == 0
    assert out.getvalue() == "A=1\nB=2\n"


def test_export_lists_entries(state):
    out = io.StringIO()
    builtin_export(["export"], state, out)
    assert out.getvalue() == "declare -x A=1\ndeclare -x B=2\n"


def test_export_sets_and_replaces(state):
    assert builtin_export(["export", "C=3", "A=9"], state) == 0
    assert state.env.as_list() == ["A=9", "B=2", "C=3"]


def test_unset_removes(state):
    assert builtin_unset(["unset", "A", "MISSING"], state) == 0
    assert state.env.as_list() == ["B=2"]


def test_exit_without_argument_uses_last_status(state):
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit"], state, out, io.StringIO())
    assert info.value.code == state.exit_status
    assert out.getvalue() == "exit\n"


def test_exit_code_is_taken_modulo_256(state):
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "300"], state, io.StringIO(), io.StringIO())
    assert info.value.code == 44


def test_exit_non_numeric(state):
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "abc"], state, io.StringIO(), err)
    assert info.value.code == 2
    assert err.getvalue() == "minishell: exit: abc: numeric argument required\n"


def test_exit_too_many_arguments(state):
    err = io.StringIO()
    assert builtin_exit(["exit", "1", "2"], state, io.StringIO(), err) == 1
    assert err.getvalue() == "minishell: exit: too many arguments\n"


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert builtin_pwd(out, io.StringIO()) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_cd_changes_directory_and_updates_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    target = tmp_path / "sub"
    target.mkdir()
    shell = ShellState(env=Environment(["HOME=/nowhere"]))
    assert builtin_cd(["cd", str(target)], shell, io.StringIO()) == 0
    assert os.getcwd() == str(target.resolve())
    assert shell.env.get("OLDPWD") == start
    assert shell.env.get("PWD") == os.getcwd()


def test_cd_without_argument_goes_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    shell = ShellState(env=Environment([f"HOME={home}"]))
    assert builtin_cd(["cd"], shell, io.StringIO()) == 0
    assert os.getcwd() == str(home.resolve())


def test_cd_home_not_set(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    err = io.StringIO()
    shell = ShellState(env=Environment(["A=1"]))
    assert builtin_cd(["cd"], shell, err) == 1
    assert err.getvalue() == "minishell: cd: HOME not set\n"
    assert os.getcwd() == str(tmp_path)


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    err = io.StringIO()
    missing = str(tmp_path / "missing")
    shell = ShellState(env=Environment([]))
    assert builtin_cd(["cd", missing], shell, err) == 2
    assert err.getvalue().startswith(missing + ": ")
    assert os.getcwd() == str(tmp_path)


def test_run_builtin_dispatches(state):
    out = io.StringIO()
    command = Command(name="echo", args=["echo", "hi"])
    assert run_builtin(command, state, out, io.StringIO()) == 0
    assert out.getvalue() == "hi\n"


def test_run_builtin_unset(state):
    command = Command(name="unset", args=["unset", "B"])
    assert run_builtin(command, state, io.StringIO(), io.StringIO()) == 0
    assert state.env.find("B") is None