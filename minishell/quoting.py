"""Quote handling for builtin arguments: keys, values and echo checks."""

from __future__ import annotations

from minishell.chars import is_space

_QUOTES = "\"'"


def is_word_break(c: str) -> bool:
    """Return True for a character that ends a word: a pipe, whitespace or end of text."""
    return c in ("", "\0", "|") or is_space(c)


def has_odd_quotes(text: str) -> bool:
    """Return True when either kind of quote appears an odd number of times."""
    return text.count('"') % 2 != 0 or text.count("'") % 2 != 0


def has_invalid_chars(text: str) -> bool:
    """Return True if ``text`` holds whitespace, a pipe or unpaired quotes."""
    if any(is_space(ch) for ch in text):
        return True
    if has_odd_quotes(text):
        return True
    return "|" in text


def has_mixed_quotes(text: str) -> bool:
    """Return True if a quoted region holds the other kind of quote."""
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch in _QUOTES:
            other = "'" if ch == '"' else '"'
            end = text.find(ch, i + 1)
            if end == -1:
                end = length
            if other in text[i + 1 : end]:
                return True
            i = end
        i += 1
    return False


def get_search(text: str, sep: str | None = None) -> str | None:
    """Return the part of ``text`` before ``sep`` (or all of it) if it is a valid name.

    Returns None when that part holds whitespace, pipes, unpaired or mixed quotes.
    """
    search = text.split(sep, 1)[0] if sep else text
    if has_invalid_chars(search) or has_mixed_quotes(search):
        return None
    return search


def get_key(text: str, sep: str | None = None) -> str | None:
    """Return the key of ``text`` with its quotes removed, or None if it is not valid."""
    search = get_search(text, sep)
    if search is None:
        return None
    key = search.replace('"', "").replace("'", "")
    return key or None


def _is_opening_quote(text: str, i: int) -> bool:
    return text[i] in _QUOTES and (i == 0 or text[i - 1] != "\\")


def strip_quotes(text: str) -> str:
    """Remove unescaped quote pairs, keeping what they enclose.

    A quote preceded by a backslash is kept as it is; an unterminated
    quoted region runs to the end of the text.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        if _is_opening_quote(text, i):
            quote = text[i]
            i += 1
            while i < length and not (text[i] == quote and text[i - 1] != "\\"):
                out.append(text[i])
                i += 1
            if i < length:
                i += 1
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


def quote_value(entry: str) -> str:
    """Wrap the value of a ``KEY=value`` entry in double quotes."""
    key, sep, value = entry.partition("=")
    if not sep:
        raise ValueError(f"entry has no '=': {entry!r}")
    return f'{key}="{value}"'


def is_balanced(text: str) -> bool:
    """Return True if every unescaped quote in ``text`` has a closing partner."""
    i = 0
    length = len(text)
    while i < length:
        if _is_opening_quote(text, i):
            end = text.find(text[i], i + 1)
            if end == -1:
                return False
            i = end
        i += 1
    return True


def is_n_flag(arg: str | None) -> bool:
    """Return True for an echo option made of a dash followed by one or more ``n``."""
    if not arg or arg[0] != "-":
        return False
    rest = arg[1:]
    return bool(rest) and set(rest) == {"n"}