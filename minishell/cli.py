"""Interactive loop of the shell."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from minishell.builtins import ShellExit
from minishell.environment import ShellState
from minishell.executor import ReadLine, execute
from minishell.expander import expand_arguments
from minishell.lexer import TokenType, UnclosedQuoteError, tokenize
from minishell.parser import parse

try:
    import readline  # noqa: F401  (gives input() line editing and history)
except ImportError:
    readline = None

PROMPT = "minishell>"


def _read_line(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


def run_line(line: str, state: ShellState, read_line: ReadLine | None = None) -> int:
    """Tokenize, parse, expand and run one input line; return the status.

    ShellExit raised by ``exit`` is passed on to the caller.
    """
    reader = read_line if read_line is not None else _read_line
    try:
        tokens = tokenize(line)
    except UnclosedQuoteError as error:
        print(error)
        return state.exit_status
    if all(token.type is TokenType.END for token in tokens):
        return state.exit_status
    try:
        commands = parse(tokens)
    except ValueError as error:
        sys.stderr.write(f"minishell: {error}\n")
        state.exit_status = 2
        return state.exit_status
    expand_arguments(commands[0], state)
    return execute(commands, state, reader)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shell until end of input or ``exit``; return the exit code."""
    state = ShellState.from_environ()
    state.env.increment_shlvl()
    while True:
        line = _read_line(PROMPT)
        if line is None:
            return state.exit_status
        try:
            run_line(line, state)
        except ShellExit as done:
            return done.code


if __name__ == "__main__":
    sys.exit(main())