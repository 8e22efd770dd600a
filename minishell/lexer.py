"""Splitting of an input line into shell tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

_SPACES = frozenset(" \t\n\r")
_QUOTES = frozenset("'\"")
_WORD_END = frozenset(" |<>")

_COUNT_BARE = re.compile(r"[^ \t\n\r|<>]*")
_WORD_BARE = re.compile(r"[^ |<>]*")

UNCLOSED_QUOTE_MESSAGE = "erreur, il manque une quote"


class TokenType(Enum):
    """Kind of a lexical token."""

    WORD = auto()
    PIPE = auto()
    IN = auto()
    OUT = auto()
    APPEND = auto()
    HEREDOC = auto()
    END = auto()


@dataclass(frozen=True)
class Token:
    """A token; only words carry content."""

    type: TokenType
    content: str | None = None


class UnclosedQuoteError(ValueError):
    """Raised when a quote opened on the line is never closed."""

    def __init__(self, message: str = UNCLOSED_QUOTE_MESSAGE) -> None:
        super().__init__(message)


def is_space(char: str) -> bool:
    """Return True for the blank characters that separate tokens."""
    return char in _SPACES


def count_tokens(line: str) -> int:
    """Count the tokens of ``line``; raise if a quote is left open.

    Every operator character counts on its own, so ``>>`` counts twice.
    """
    count = 0
    pos = 0
    end = len(line)
    while pos < end:
        while pos < end and is_space(line[pos]):
            pos += 1
        if pos >= end:
            break
        char = line[pos]
        if char in _QUOTES:
            close = line.find(char, pos + 1)
            if close == -1:
                raise UnclosedQuoteError()
            pos = _COUNT_BARE.match(line, close + 1).end()
        elif char in "|<>":
            pos += 1
        else:
            pos = _COUNT_BARE.match(line, pos).end()
        count += 1
    return count


def _extend_word(line: str, end: int) -> int:
    """Grow a word that currently ends at ``end`` by one lexical chunk."""
    char = line[end] if end < len(line) else ""
    if char in _QUOTES and char:
        close = line.find(char, end + 1)
        if close == -1:
            return len(line)
        if close == end + 1:
            return end + 1
        return close + 1
    return _WORD_BARE.match(line, end).end()


def _operator(line: str, pos: int) -> tuple[TokenType, int] | None:
    char = line[pos]
    if char == "|":
        return TokenType.PIPE, 1
    if char == ">":
        return (TokenType.APPEND, 2) if line.startswith(">>", pos) else (TokenType.OUT, 1)
    if char == "<":
        return (TokenType.HEREDOC, 2) if line.startswith("<<", pos) else (TokenType.IN, 1)
    return None


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens, ending with a ``TokenType.END`` token.

    Quotes are kept in the word text; they are removed later on.
    """
    count_tokens(line)
    tokens: list[Token] = []
    pos = 0
    pending = 0
    length = len(line)
    while pos < length:
        while pos < length and is_space(line[pos]):
            pos += 1
        if pos >= length:
            break
        operator = _operator(line, pos) if pending == 0 else None
        if operator is not None:
            kind, width = operator
            tokens.append(Token(kind))
            pos += width
            continue
        pending = _extend_word(line, pos + pending) - pos
        end = pos + pending
        if pending > 0 and (end >= length or line[end] in _WORD_END):
            tokens.append(Token(TokenType.WORD, line[pos:end]))
            pos = end
            pending = 0
    tokens.append(Token(TokenType.END))
    return tokens