"""Small string and number conversions used by the shell."""

from __future__ import annotations

from minishell.chars import is_digit, is_space

LONG_MAX = 9223372036854775807
_LONG_MAX_TEXT = "9223372036854775807"


def _skip_spaces(text: str) -> int:
    i = 0
    while i < len(text) and is_space(text[i]):
        i += 1
    return i


def _leading_digits(text: str, start: int) -> str:
    end = start
    while end < len(text) and is_digit(text[end]):
        end += 1
    return text[start:end]


def atoi(text: str) -> int:
    """Parse a leading decimal integer, returning 0 when there is none.

    Leading whitespace is skipped and a single sign is honoured only when a
    digit follows it directly.
    """
    i = _skip_spaces(text)
    head = text[i : i + 1]
    following = text[i + 1 : i + 2]
    if head in ("+", "-") and is_digit(following):
        sign = -1 if head == "-" else 1
        i += 1
    elif is_digit(head):
        sign = 1
    else:
        return 0
    return sign * int(_leading_digits(text, i))


def atol(text: str) -> int:
    """Parse a leading decimal integer that must fit in a signed 64-bit value.

    Raises ValueError when no digit starts the number or when it is too large.
    """
    i = _skip_spaces(text)
    negative = False
    if i < len(text) and text[i] in "+-":
        negative = text[i] == "-"
        i += 1
    rest = text[i:]
    if not rest or not is_digit(rest[0]):
        raise ValueError(f"not a number: {text!r}")
    if len(rest) > 19:
        raise ValueError(f"number out of range: {text!r}")
    if len(rest) == 19 and rest > _LONG_MAX_TEXT:
        raise ValueError(f"number out of range: {text!r}")
    value = int(_leading_digits(rest, 0))
    return -value if negative else value


def itoa(n: int) -> str:
    """Return the decimal representation of ``n``."""
    return str(int(n))


def join3(left: str | None, middle: str | None, right: str | None) -> str:
    """Concatenate three strings, all of which must be present."""
    missing = [
        name
        for name, value in (("left", left), ("middle", middle), ("right", right))
        if value is None
    ]
    if missing:
        raise ValueError(f"missing string(s): {', '.join(missing)}")
    return f"{left}{middle}{right}"