"""Variable expansion of a command line, with a check for malformed redirections."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from minishell.builtins import getenv
from minishell.chars import is_alnum, is_digit

SYNTAX_ERROR = "Syntax Error near token"

_BREAKS = frozenset("|>< \0$\"'")


class ExpansionError(Exception):
    """Raised when a line cannot be expanded at all."""


@dataclass(frozen=True)
class Expansion:
    """The outcome of expanding one command line."""

    text: str
    exit_status: int = 0
    undefined_variable: bool = False
    error: str | None = None


def is_var_char(c: str) -> bool:
    """Return True for a character that may appear in a variable name."""
    return c == "_" or is_alnum(c)


def is_expansion_break(c: str) -> bool:
    """Return True for a character that ends a word during expansion.

    The empty string stands for the end of the line and also counts.
    """
    return c == "" or c in _BREAKS


def check_arrow_syntax(line: str) -> str | None:
    """Return an error message if the redirection arrows in ``line`` are malformed.

    More than two arrows of one kind without a space between them, or the
    pairs ``><`` and ``<>``, are errors. Returns None when the line is fine.
    """
    for arrow in "><":
        run = 0
        for ch in line:
            if ch == arrow:
                run += 1
            if ch == " ":
                run = 0
            if run > 2:
                return SYNTAX_ERROR
    if "><" in line or "<>" in line:
        return SYNTAX_ERROR
    return None


class _Expander:
    def __init__(self, line: str, environ: Sequence[str], status: str, argv0: str) -> None:
        self.line = line
        self.environ = environ
        self.status = status
        self.argv0 = argv0
        self.out: list[str] = []
        self.undefined = False

    def _at(self, index: int) -> str:
        return self.line[index] if index < len(self.line) else ""

    def _arrow(self, i: int) -> int:
        """Copy an arrow and what directly follows it; return the pending index."""
        arrow = self.line[i]
        if self._at(i + 1) in (arrow, " "):
            self.out.append(self.line[i])
            i += 1
        if self._at(i + 1) == "$":
            self.out.append(self.line[i])
            i += 1
            if is_digit(self._at(i + 1)):
                raise ExpansionError(
                    f"positional parameter after redirection: {self.line!r}"
                )
            while is_var_char(self._at(i + 1)):
                self.out.append(self.line[i])
                i += 1
        return i

    def _variable(self, i: int) -> int:
        end = i + 1
        while is_var_char(self._at(end)):
            end += 1
        value = getenv(self.environ, self.line[i + 1:end])
        if value is None:
            self.undefined = True
        else:
            self.out.append(value)
        return end

    def _dollar(self, i: int) -> int:
        nxt = self._at(i + 1)
        if nxt == "?":
            self.out.append(self.status)
            return i + 2
        if nxt == "$":
            self.out.append("$$")
            return i + 2
        if nxt == "0":
            self.out.append(self.argv0)
            return i + 2
        if is_digit(nxt):
            return i + 2
        if not is_var_char(nxt):
            if is_expansion_break(nxt):
                self.out.append("$")
                return i + 1
            return i + 2
        return self._variable(i)

    def _single_quoted(self, i: int) -> int:
        end = self.line.find("'", i + 1)
        if end == -1:
            self.out.append(self.line[i:])
            return len(self.line)
        self.out.append(self.line[i:end + 1])
        return end + 1

    def run(self) -> str:
        i = 0
        length = len(self.line)
        while i < length:
            if self.line[i] in "<>":
                i = self._arrow(i)
            ch = self.line[i]
            if ch == "$":
                i = self._dollar(i)
            elif ch == "'":
                i = self._single_quoted(i)
            else:
                self.out.append(ch)
                i += 1
        return "".join(self.out)


def expand(
    line: str | None,
    environ: Sequence[str] | None = None,
    last_exit_code: int | str = 0,
    argv0: str = "minishell",
) -> Expansion | None:
    """Expand ``$NAME``, ``$?``, ``$0`` and ``$$`` in ``line``.

    Single-quoted text is kept as it is, and a variable right after a
    redirection arrow is left alone. A malformed redirection gives back the
    line unchanged with exit status 2. Returns None when ``line`` is None.
    """
    if line is None:
        return None
    message = check_arrow_syntax(line)
    if message is not None:
        return Expansion(text=line, exit_status=2, error=message)
    expander = _Expander(line, environ or [], str(last_exit_code), argv0)
    text = expander.run()
    return Expansion(text=text, undefined_variable=expander.undefined)