"""Integer parsing with C ``atoi`` semantics."""

from __future__ import annotations

import re

_LEADING_SPACE = " \t\n\v\f\r"
_NUMBER = re.compile(r"([+-]?)([0-9]*)")


def _wrap(value: int, bits: int) -> int:
    """Wrap ``value`` into a two's complement integer of ``bits`` bits."""
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half


def _parse(text: str) -> int:
    match = _NUMBER.match(text.lstrip(_LEADING_SPACE))
    sign, digits = match.groups()
    value = int(digits) if digits else 0
    return -value if sign == "-" else value


def atoi(text: str) -> int:
    """Parse a leading decimal integer, wrapping like a 32-bit int.

    Leading whitespace is skipped, one optional sign is accepted and
    parsing stops at the first non-digit. Text without digits yields 0.
    """
    return _wrap(_parse(text), 32)


def atoi_long(text: str) -> int:
    """Parse a leading decimal integer, wrapping like a 64-bit long."""
    return _wrap(_parse(text), 64)