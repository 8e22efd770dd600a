"""Grouping of tokens into the commands of a pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable

from minishell.lexer import Token, TokenType


class RedirType(Enum):
    """Kind of a redirection."""

    IN = auto()
    OUT = auto()
    APPEND = auto()
    HEREDOC = auto()


_REDIRECTS = {
    TokenType.IN: RedirType.IN,
    TokenType.OUT: RedirType.OUT,
    TokenType.APPEND: RedirType.APPEND,
    TokenType.HEREDOC: RedirType.HEREDOC,
}


@dataclass
class Redirection:
    """A redirection: a file name, or a delimiter for a here-document."""

    type: RedirType
    target: str
    heredoc: str | None = None


@dataclass
class Command:
    """One command of a pipeline."""

    name: str | None = None
    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    path: str | None = None


def is_redirect(token: Token) -> bool:
    """Return True if ``token`` is a redirection operator."""
    return token.type in _REDIRECTS


def parse(tokens: Iterable[Token]) -> list[Command]:
    """Build the list of piped commands from ``tokens``.

    A run of words sets the command name and its arguments; a later run
    in the same command replaces them. Raises ValueError when a
    redirection is not followed by a word.
    """
    items = [t for t in tokens]
    commands = [Command()]
    pos = 0
    while pos < len(items) and items[pos].type is not TokenType.END:
        token = items[pos]
        current = commands[-1]
        if token.type is TokenType.WORD:
            stop = pos
            while stop < len(items) and items[stop].type is TokenType.WORD:
                stop += 1
            words = [t.content for t in items[pos:stop]]
            current.name = words[0]
            current.args = words
            pos = stop
        elif is_redirect(token):
            following = items[pos + 1] if pos + 1 < len(items) else None
            if following is None or following.type is not TokenType.WORD:
                raise ValueError("syntax error: redirection without a target")
            current.redirections.append(
                Redirection(_REDIRECTS[token.type], following.content)
            )
            pos += 2
        else:
            commands.append(Command())
            pos += 1
    return commands