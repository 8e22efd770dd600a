"""Variable expansion and quote removal for command arguments."""

from __future__ import annotations

import re
from typing import Iterable

from minishell.environment import ShellState
from minishell.parser import Command

_NAME = re.compile(r"[A-Za-z0-9_]*")
_QUOTED = re.compile(r"'([^']*)'?|\"([^\"]*)\"?")


def remove_quotes(text: str) -> str:
    """Drop single and double quotes, keeping what they enclose."""
    return _QUOTED.sub(lambda m: m.group(1) if m.group(1) is not None else m.group(2), text)


def name_length(text: str) -> int:
    """Return the length of the variable name that starts ``text``."""
    return _NAME.match(text).end()


def env_lookup(var: str, entries: Iterable[str] | None) -> str:
    """Return the value of ``var`` (given as ``NAME=``) among ``entries``.

    An empty name gives ``$``; an unknown name gives an empty string.
    """
    if len(var) == 1:
        return "$"
    if entries is None:
        return ""
    return next(
        (entry[len(var):] for entry in entries if entry.startswith(var)),
        "",
    )


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _expand(text: str, state: ShellState) -> str:
    entries = state.env.as_list()
    out: list[str] = []
    single_quotes = 0
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == "'":
            single_quotes += 1
        if char != "$" or single_quotes % 2:
            out.append(char)
            pos += 1
            continue
        following = text[pos + 1:pos + 2]
        if following == "?":
            out.append(str(state.exit_status))
            pos += 2
        elif not following:
            out.append("$")
            pos += 1
        elif not _is_alpha(following) and text[pos + 2:pos + 3] != "_":
            out.append(text[pos:pos + 2])
            pos += 2
        else:
            size = name_length(text[pos + 1:])
            out.append(env_lookup(text[pos + 1:pos + 1 + size] + "=", entries))
            pos += 1 + size
    return "".join(out)


def expand_arguments(command: Command, state: ShellState) -> list[str]:
    """Expand variables in ``command.args`` and strip their quotes.

    Text inside single quotes is left alone; ``$?`` gives the last exit
    status. The command name itself is not touched. Returns the new args.
    """
    command.args = [remove_quotes(_expand(arg, state)) for arg in command.args]
    return command.args