"""Commands run inside the shell itself."""

from __future__ import annotations

import os
import sys
from typing import Sequence, TextIO

from minishell.environment import ShellState
from minishell.numeric import atoi, atoi_long
from minishell.parser import Command

BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})

_INT_MAX = 2147483647
_INT_MIN = -2147483648


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``code``."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def _out(stream: TextIO | None) -> TextIO:
    return sys.stdout if stream is None else stream


def _err(stream: TextIO | None) -> TextIO:
    return sys.stderr if stream is None else stream


def is_builtin(command: Command) -> bool:
    """Return True if ``command`` names a builtin."""
    return command.name is not None and command.name in BUILTINS


def is_int_argument(text: str) -> bool:
    """Return True if ``text`` is a signed decimal that fits a 32-bit int."""
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not digits or any(c not in "0123456789" for c in digits):
        return False
    return _INT_MIN <= atoi_long(text) <= _INT_MAX


def builtin_echo(args: Sequence[str], stdout: TextIO | None = None) -> int:
    """Print the arguments; a first ``-n`` suppresses the newline."""
    words = list(args[1:])
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    _out(stdout).write(" ".join(words) + ("\n" if newline else ""))
    return 0


def _update_pwd(state: ShellState, name: str, stderr: TextIO) -> bool:
    try:
        cwd = os.getcwd()
    except OSError as error:
        stderr.write(f"pwd: {os.strerror(error.errno)}\n")
        return False
    state.env.set(f"{name}={cwd}")
    return True


def builtin_cd(args: Sequence[str], state: ShellState, stderr: TextIO | None = None) -> int:
    """Change directory, to ``HOME`` without an argument; update PWD and OLDPWD."""
    err = _err(stderr)
    if len(args) < 2:
        target = state.env.get("HOME")
        if target is None:
            err.write("minishell: cd: HOME not set\n")
            return 1
    else:
        target = args[1]
    if not _update_pwd(state, "OLDPWD", err):
        return 1
    try:
        os.chdir(target)
    except OSError as error:
        err.write(f"{target}: {os.strerror(error.errno)}\n")
        return 2
    if not _update_pwd(state, "PWD", err):
        return 1
    return 0


def builtin_pwd(stdout: TextIO | None = None, stderr: TextIO | None = None) -> int:
    """Print the working directory."""
    try:
        cwd = os.getcwd()
    except OSError as error:
        _err(stderr).write(f"pwd: {os.strerror(error.errno)}\n")
        return 2
    _out(stdout).write(cwd + "\n")
    return 0


def builtin_env(state: ShellState, stdout: TextIO | None = None) -> int:
    """Print every environment entry."""
    out = _out(stdout)
    for entry in state.env:
        out.write(entry + "\n")
    return 0


def builtin_export(args: Sequence[str], state: ShellState, stdout: TextIO | None = None) -> int:
    """Set entries, or list them all with ``declare -x`` when given none."""
    if len(args) < 2:
        out = _out(stdout)
        for entry in state.env:
            out.write(f"declare -x {entry}\n")
        return 0
    for entry in args[1:]:
        state.env.set(entry)
    return 0


def builtin_unset(args: Sequence[str], state: ShellState) -> int:
    """Remove the named entries."""
    for name in args[1:]:
        state.env.remove(name)
    return 0


def builtin_exit(
    args: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Raise ShellExit with the requested code; return 1 on too many arguments."""
    _out(stdout).write("exit\n")
    if len(args) < 2:
        raise ShellExit(state.exit_status)
    if not is_int_argument(args[1]):
        _err(stderr).write(f"minishell: exit: {args[1]}: numeric argument required\n")
        raise ShellExit(2)
    if len(args) > 2:
        _err(stderr).write("minishell: exit: too many arguments\n")
        return 1
    raise ShellExit(atoi(args[1]) % 256)


def run_builtin(
    command: Command,
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run the builtin named by ``command`` and return its status."""
    args = command.args or ([command.name] if command.name else [])
    name = command.name
    if name == "echo":
        return builtin_echo(args, stdout)
    if name == "cd":
        return builtin_cd(args, state, stderr)
    if name == "pwd":
        return builtin_pwd(stdout, stderr)
    if name == "export":
        return builtin_export(args, state, stdout)
    if name == "unset":
        return builtin_unset(args, state)
    if name == "env":
        return builtin_env(state, stdout)
    if name == "exit":
        return builtin_exit(args, state, stdout, stderr)
    return 0