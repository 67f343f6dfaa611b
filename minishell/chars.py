"""Single-character classification in the plain ASCII sense used by the shell."""

from __future__ import annotations

_SPACES = frozenset(" \t\n\v\f\r")


def _code(c: str) -> int | None:
    if len(c) != 1:
        return None
    return ord(c)


def is_alpha(c: str) -> bool:
    """Return True for an ASCII letter."""
    code = _code(c)
    return code is not None and (65 <= code <= 90 or 97 <= code <= 122)


def is_digit(c: str) -> bool:
    """Return True for an ASCII decimal digit."""
    code = _code(c)
    return code is not None and 48 <= code <= 57


def is_alnum(c: str) -> bool:
    """Return True for an ASCII letter or digit."""
    return is_alpha(c) or is_digit(c)


def is_ascii(c: str) -> bool:
    """Return True for a character in the 7-bit ASCII range."""
    code = _code(c)
    return code is not None and 0 <= code <= 127


def is_print(c: str) -> bool:
    """Return True for a printable ASCII character, space included."""
    code = _code(c)
    return code is not None and 32 <= code <= 126


def is_space(c: str) -> bool:
    """Return True for space, tab, newline, vertical tab, form feed or carriage return."""
    return c in _SPACES