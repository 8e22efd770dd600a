"""Environment entries and the state carried by a running shell."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping

from minishell.numeric import atoi

_SHLVL_PREFIX = "SHLVL="
_INT_MAX = 2147483647
_INT_MIN = -2147483648


class Environment:
    """An ordered list of ``NAME=value`` entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries = list(entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"

    def find(self, var: str) -> int | None:
        """Return the index of the entry named like ``var``, or None.

        The name is the part of ``var`` before its first ``=``, or all of it.
        """
        name = var.split("=", 1)[0]
        prefix = name + "="
        return next(
            (index for index, entry in enumerate(self._entries) if entry.startswith(prefix)),
            None,
        )

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None when it is not set."""
        index = self.find(name)
        if index is None:
            return None
        return self._entries[index].split("=", 1)[1]

    def set(self, entry: str) -> None:
        """Replace the entry with the same name, or append ``entry``."""
        index = self.find(entry)
        if index is None:
            self._entries.append(entry)
        else:
            self._entries[index] = entry

    def remove(self, name: str) -> None:
        """Drop the entry named ``name`` if there is one."""
        index = self.find(name)
        if index is not None:
            del self._entries[index]

    def increment_shlvl(self) -> None:
        """Raise ``SHLVL`` by one, resetting it to 0 when it is not a valid level."""
        index = next(
            (i for i, entry in enumerate(self._entries) if entry.startswith(_SHLVL_PREFIX)),
            None,
        )
        if index is None:
            self._entries.append(_SHLVL_PREFIX + "1")
            return
        value = self._entries[index][len(_SHLVL_PREFIX):]
        if value and (any(c not in "0123456789" for c in value) or atoi(value) < 0):
            self._entries[index] = _SHLVL_PREFIX + "0"
            return
        level = atoi(value) + 1
        if level > _INT_MAX:
            level = _INT_MIN
        self._entries[index] = f"{_SHLVL_PREFIX}{level}"

    def as_list(self) -> list[str]:
        """Return a copy of the entries."""
        return list(self._entries)


@dataclass
class ShellState:
    """Environment and counters shared by every command of a session."""

    env: Environment = field(default_factory=Environment)
    exit_status: int = 0
    line_num: int = 0

    @classmethod
    def from_environ(
        cls, envp: Mapping[str, str] | Iterable[str] | None = None
    ) -> "ShellState":
        """Build the starting state from ``envp`` (``os.environ`` by default).

        An empty environment starts with ``SHLVL=0`` alone.
        """
        if envp is None:
            envp = os.environ
        if isinstance(envp, Mapping):
            entries = [f"{key}={value}" for key, value in envp.items()]
        else:
            entries = list(envp)
        if not entries:
            entries = [_SHLVL_PREFIX + "0"]
        return cls(env=Environment(entries))