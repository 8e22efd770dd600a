"""Running parsed pipelines: here-documents, redirections and processes."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import tempfile
import threading
from typing import Callable, Iterable, Optional, Sequence, Union

from minishell.builtins import ShellExit, is_builtin, run_builtin
from minishell.environment import Environment, ShellState
from minishell.parser import Command, Redirection, RedirType

ReadLine = Callable[[str], Optional[str]]
_Outcome = Union[int, subprocess.Popen]

_STDIN = 0
_STDOUT = 1


def find_executable(cmd: str, envp: Iterable[str]) -> str | None:
    """Locate ``cmd`` through the ``PATH`` entry of ``envp``.

    A name holding a ``/`` is returned as is when it is executable.
    Empty ``PATH`` segments are skipped.
    """
    if "/" in cmd:
        return cmd if os.access(cmd, os.X_OK) else None
    search = next((entry[5:] for entry in envp if entry.startswith("PATH=")), None)
    if search is None:
        return None
    for directory in filter(None, search.split(":")):
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def heredoc_warning(delimiter: str, line_num: int) -> str:
    """Return the warning shown when a here-document ends at end of input."""
    return (
        f"warning: here-document at line {line_num} "
        f"delimited by end-of-file (wanted `{delimiter}')\n"
    )


def read_heredoc(delimiter: str, state: ShellState, read_line: ReadLine) -> str:
    """Read lines until one starts with ``delimiter`` and return the body."""
    start = state.line_num
    lines: list[str] = []
    while True:
        line = read_line("> ")
        state.line_num += 1
        if line is None:
            sys.stderr.write(heredoc_warning(delimiter, start))
            break
        if line.startswith(delimiter):
            break
        lines.append(line + "\n")
    return "".join(lines)


def prepare_heredocs(
    commands: Sequence[Command], state: ShellState, read_line: ReadLine
) -> None:
    """Read the body of every here-document of the pipeline, in order."""
    for command in commands:
        for redir in command.redirections:
            if redir.type is RedirType.HEREDOC:
                redir.heredoc = read_heredoc(redir.target, state, read_line)


def _heredoc_fd(body: str) -> int:
    with tempfile.TemporaryFile() as spool:
        spool.write(body.encode(errors="surrogateescape"))
        spool.seek(0)
        return os.dup(spool.fileno())


def _open_redirection(redir: Redirection) -> tuple[int, int] | None:
    if redir.type is RedirType.IN:
        return _STDIN, os.open(redir.target, os.O_RDONLY)
    if redir.type is RedirType.OUT:
        flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
        return _STDOUT, os.open(redir.target, flags, 0o644)
    if redir.type is RedirType.APPEND:
        flags = os.O_WRONLY | os.O_CREAT | os.O_APPEND
        return _STDOUT, os.open(redir.target, flags, 0o644)
    if redir.heredoc is None:
        return None
    return _STDIN, _heredoc_fd(redir.heredoc)


def _apply_redirections(
    redirections: Iterable[Redirection], fds: dict[int, int | None]
) -> bool:
    for redir in redirections:
        try:
            opened = _open_redirection(redir)
        except OSError as error:
            sys.stderr.write(f"{redir.target}: {error.strerror}\n")
            return False
        if opened is None:
            return False
        slot, fd = opened
        previous = fds[slot]
        if previous is not None:
            os.close(previous)
        fds[slot] = fd
    return True


def _feed(fd: int, data: bytes) -> None:
    try:
        view = memoryview(data)
        while view:
            written = os.write(fd, view)
            view = view[written:]
    except OSError:
        pass
    finally:
        os.close(fd)


def _child_state(state: ShellState) -> ShellState:
    return ShellState(
        env=Environment(state.env.as_list()),
        exit_status=state.exit_status,
        line_num=state.line_num,
    )


def _run_builtin_stage(
    command: Command,
    fds: dict[int, int | None],
    state: ShellState,
    threads: list[threading.Thread],
) -> int:
    captured = io.StringIO()
    try:
        status = run_builtin(command, _child_state(state), captured, sys.stderr)
    except ShellExit as done:
        status = done.code
    text = captured.getvalue()
    target = fds[_STDOUT]
    if target is None:
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        writer = threading.Thread(
            target=_feed,
            args=(os.dup(target), text.encode(errors="surrogateescape")),
            daemon=True,
        )
        writer.start()
        threads.append(writer)
    return status


def _environ(state: ShellState) -> dict[str, str]:
    return dict(entry.split("=", 1) for entry in state.env.as_list() if "=" in entry)


def _run_stage(
    command: Command,
    fds: dict[int, int | None],
    state: ShellState,
    threads: list[threading.Thread],
) -> _Outcome:
    if is_builtin(command):
        return _run_builtin_stage(command, fds, state, threads)
    if command.name is None:
        return 127
    if "/" in command.name:
        path = command.name
    else:
        path = find_executable(command.name, state.env.as_list())
    command.path = path
    if path is None:
        sys.stderr.write(f"{command.name}: command not found\n")
        return 127
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        return subprocess.Popen(
            command.args or [command.name],
            executable=path,
            stdin=fds[_STDIN],
            stdout=fds[_STDOUT],
            env=_environ(state),
        )
    except OSError as error:
        sys.stderr.write(f"{command.name}: {error.strerror}\n")
        return 127


def _wait(outcome: _Outcome) -> int:
    if isinstance(outcome, int):
        return outcome
    return max(outcome.wait(), 0)


def _run_pipeline(commands: Sequence[Command], state: ShellState) -> int:
    outcomes: list[_Outcome] = []
    threads: list[threading.Thread] = []
    previous: int | None = None
    last = len(commands) - 1
    for index, command in enumerate(commands):
        read_end: int | None = None
        write_end: int | None = None
        if index < last:
            read_end, write_end = os.pipe()
        fds: dict[int, int | None] = {_STDIN: previous, _STDOUT: write_end}
        try:
            if _apply_redirections(command.redirections, fds):
                outcomes.append(_run_stage(command, fds, state, threads))
            else:
                outcomes.append(1)
        finally:
            for fd in fds.values():
                if fd is not None:
                    os.close(fd)
        previous = read_end
    statuses = [_wait(outcome) for outcome in outcomes]
    for writer in threads:
        writer.join()
    return statuses[-1]


def execute(
    commands: Sequence[Command], state: ShellState, read_line: ReadLine
) -> int:
    """Run a pipeline and record its exit status in ``state``.

    A lone builtin without redirections runs in the shell itself and may
    change its state; anything else runs in its own stage. ``exit`` run
    that way raises ShellExit.
    """
    prepare_heredocs(commands, state, read_line)
    first = commands[0]
    if is_builtin(first) and len(commands) == 1 and not first.redirections:
        state.exit_status = run_builtin(first, state)
        return state.exit_status
    state.exit_status = _run_pipeline(commands, state)
    return state.exit_status