"""Input and output redirections and here-documents for one command."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TextIO

STDIN_NONE = 0
STDIN_HEREDOC = 1
STDIN_FILE = 2

Reader = Callable[[str], "str | None"]


@dataclass
class Redirected:
    """A command's arguments once redirections are taken out, and where its I/O goes."""

    args: list[str]
    stdout_path: str | None = None
    stdin_path: str | None = None
    stdin_text: str | None = None


def _default_reader(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def stdin_kind(cmd: Sequence[str]) -> int:
    """Tell which kind of input redirection wins for ``cmd``.

    Returns STDIN_HEREDOC when ``<<`` appears more often than ``<``,
    STDIN_FILE when ``<`` appears more often, and STDIN_NONE otherwise.
    """
    files = sum(1 for token in cmd if token == "<")
    heredocs = sum(1 for token in cmd if token == "<<")
    if heredocs > files:
        return STDIN_HEREDOC
    if files > heredocs:
        return STDIN_FILE
    return STDIN_NONE


def remove_heredocs(cmd: Sequence[str]) -> list[str]:
    """Return ``cmd`` without its ``<<`` operators and their delimiters."""
    result = list(cmd)
    while "<<" in result:
        index = result.index("<<")
        del result[index : index + 2]
    return result


def read_heredoc(
    delimiter: str,
    reader: Reader | None = None,
    prompt_stream: TextIO | None = None,
) -> str:
    """Read lines until ``delimiter`` or end of input and return them as text.

    Each line read keeps a trailing newline. ``reader`` is called with the
    prompt and returns a line, or None at end of input.
    """
    read = reader if reader is not None else _default_reader
    stream = prompt_stream if prompt_stream is not None else sys.stdout
    stream.write(f"Delimiter is: {delimiter}\n")
    lines: list[str] = []
    while True:
        line = read(">")
        if line is None:
            stream.write(
                "minishell: warning: here-document delimited by end-of-file "
                f"(wanted `{delimiter}')\n"
            )
            break
        if line == delimiter:
            break
        lines.append(f"{line}\n")
    return "".join(lines)


def collect_heredocs(
    segments: Iterable[Sequence[str]],
    reader: Reader | None = None,
    prompt_stream: TextIO | None = None,
) -> list[str | None]:
    """Read every here-document of every pipeline segment.

    All of them are read in order; for each segment only the last one is
    kept, or None when the segment has none.
    """
    collected: list[str | None] = []
    for segment in segments:
        last: str | None = None
        tokens = list(segment)
        for index, token in enumerate(tokens[:-1]):
            if token == "<<":
                last = read_heredoc(tokens[index + 1], reader, prompt_stream)
        collected.append(last)
    return collected


def _open_for_writing(path: str) -> None:
    fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_TRUNC, 0o644)
    os.close(fd)


def _check_readable(path: str) -> None:
    with open(path, "rb"):
        pass


def redirect_stdout(cmd: Sequence[str]) -> Redirected:
    """Take ``>`` and ``>>`` redirections out of ``cmd``.

    Every target is created and truncated in order; the last one becomes
    the command's output. Raises OSError when a target cannot be opened and
    ValueError when an operator has no target.
    """
    args = list(cmd)
    stdout_path: str | None = None
    i = 0
    while i < len(args):
        if args[i] in (">", ">>"):
            if i + 1 >= len(args):
                raise ValueError(f"missing target after {args[i]!r}")
            target = args[i + 1]
            _open_for_writing(target)
            stdout_path = target
            del args[i : i + 2]
            continue
        i += 1
    return Redirected(args=args, stdout_path=stdout_path)


def redirect_stdin(cmd: Sequence[str], heredoc: str | None = None) -> Redirected:
    """Take ``<`` and ``<<`` redirections out of ``cmd``.

    Every ``<`` file must be readable; the last one is the input unless
    here-documents outnumber file redirections, in which case ``heredoc``
    is. Raises OSError for a file that cannot be read.
    """
    args = list(cmd)
    if not any("<" in token for token in args):
        return Redirected(args=args)
    kind = stdin_kind(args)
    stdin_path: str | None = None
    i = 0
    while i < len(args):
        if args[i] == "<" and i + 1 < len(args):
            _check_readable(args[i + 1])
            stdin_path = args[i + 1]
            del args[i : i + 2]
            continue
        i += 1
    args = remove_heredocs(args)
    if kind == STDIN_HEREDOC:
        return Redirected(args=args, stdin_text=heredoc)
    return Redirected(args=args, stdin_path=stdin_path)


def apply_redirections(cmd: Sequence[str], heredoc: str | None = None) -> Redirected:
    """Apply output and then input redirections to ``cmd``."""
    out = redirect_stdout(cmd)
    inp = redirect_stdin(out.args, heredoc)
    return Redirected(
        args=inp.args,
        stdout_path=out.stdout_path,
        stdin_path=inp.stdin_path,
        stdin_text=inp.stdin_text,
    )