"""Builtin commands: echo, env, pwd, export and unset, plus their helpers."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TextIO

from minishell.arrays import append_item, fetch_containing, print_prefixed
from minishell.chars import is_digit
from minishell.quoting import get_key, is_balanced, is_n_flag, quote_value, strip_quotes

REDIRECTIONS = frozenset({">", "<", "<<", ">>"})


@dataclass
class ShellState:
    """The mutable state the builtins read and change."""

    environ: list[str] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)
    exit_status: int = 0
    cwd: str = ""
    expansion_error: bool = False

    @classmethod
    def from_environ(cls, mapping: Mapping[str, str]) -> ShellState:
        """Build a state whose environment and export list mirror ``mapping``."""
        environ = [f"{key}={value}" for key, value in mapping.items()]
        exports = [f'{key}="{value}"' for key, value in mapping.items()]
        return cls(environ=environ, exports=exports)


def is_redirection(token: str) -> bool:
    """Return True for one of the redirection operators."""
    return token in REDIRECTIONS


def getenv(environ: Sequence[str] | None, name: str | None) -> str | None:
    """Return the value of ``name`` in a list of ``KEY=value`` entries."""
    if not name or environ is None:
        return None
    prefix = f"{name}="
    for entry in environ:
        if entry.startswith(prefix):
            return entry[len(prefix):]
    return None


def find_key(arr: Sequence[str] | None, name: str | None) -> str | None:
    """Return the first entry whose key is exactly ``name``."""
    if not name or arr is None:
        return None
    for entry in arr:
        if entry == name or entry.startswith(f"{name}="):
            return entry
    return None


def _replace(key: str | None, arr: Sequence[str], entry: str | None, quoted: bool) -> list[str]:
    if not arr:
        raise ValueError("array is empty")
    result = list(arr)
    if not key or entry is None:
        return result
    for index, item in enumerate(result):
        if item.startswith(key):
            value = strip_quotes(entry)
            result[index] = quote_value(value) if quoted else value
            break
    return result


def replace_env(key: str | None, arr: Sequence[str], entry: str | None) -> list[str]:
    """Replace the first entry starting with ``key`` by ``entry`` without its quotes."""
    return _replace(key, arr, entry, quoted=False)


def replace_export(key: str | None, arr: Sequence[str], entry: str | None) -> list[str]:
    """Like :func:`replace_env`, but the new value is wrapped in double quotes."""
    return _replace(key, arr, entry, quoted=True)


def _unquote_arg(arg: str) -> str:
    out: list[str] = []
    i = 0
    length = len(arg)
    while i < length:
        ch = arg[i]
        if ch in "\"'" and (i == 0 or arg[i - 1] != "\\"):
            end = arg.find(ch, i + 1)
            if end == -1:
                end = length
            out.append(arg[i + 1:end])
            i = end + 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def handle_echo(cmd: Sequence[str], out: TextIO | None = None) -> None:
    """Print the arguments of ``echo``, honouring any leading ``-n`` flags."""
    stream = out if out is not None else sys.stdout
    if len(cmd) < 2:
        stream.write("\n")
        return
    start = 1
    while start < len(cmd) and is_n_flag(cmd[start]):
        start += 1
    newline = start == 1
    args = list(cmd[start:])
    if not all(is_balanced(arg) for arg in args):
        sys.stderr.write("syntax error")
    else:
        words: list[str] = []
        for arg in args:
            if is_redirection(arg):
                break
            words.append(_unquote_arg(arg))
        stream.write(" ".join(words))
    if newline:
        stream.write("\n")


def handle_env(
    state: ShellState, cmd: Sequence[str], out: TextIO | None = None, err: TextIO | None = None
) -> int:
    """Print the environment; any argument is reported as a missing file."""
    stream = out if out is not None else sys.stdout
    errors = err if err is not None else sys.stderr
    if len(cmd) > 1:
        errors.write(f"env: `{cmd[1]}': No such file or directory\n")
        state.exit_status = 127
    else:
        for entry in state.environ:
            stream.write(f"{entry}\n")
    return state.exit_status


def handle_pwd(state: ShellState, out: TextIO | None = None) -> int:
    """Print the current working directory."""
    stream = out if out is not None else sys.stdout
    state.cwd = os.getcwd()
    stream.write(f"{state.cwd}\n")
    return state.exit_status


def _export_assignment(state: ShellState, arg: str, out: TextIO) -> None:
    key = get_key(arg, "=")
    if key is None:
        out.write("The Key Not Valid\n")
        return
    if find_key(state.exports, key):
        state.exports = replace_export(key, state.exports, arg)
        if fetch_containing(state.environ, key):
            state.environ = replace_env(key, state.environ, arg)
        else:
            state.environ = append_item(arg, state.environ)
    else:
        value = strip_quotes(arg)
        state.environ = append_item(value, state.environ)
        state.exports = append_item(quote_value(value), state.exports)


def _export_name(state: ShellState, arg: str, out: TextIO) -> None:
    key = get_key(arg)
    if key is None:
        out.write("The Key Not Valid\n")
        return
    if not find_key(state.exports, key):
        state.exports = append_item(key, state.exports)


def handle_export(
    state: ShellState, cmd: Sequence[str], out: TextIO | None = None, err: TextIO | None = None
) -> int:
    """List exported names, or add and replace variables."""
    stream = out if out is not None else sys.stdout
    errors = err if err is not None else sys.stderr
    if state.expansion_error:
        errors.write("minishell: export: _err_ not a valid identifier\n")
        state.exit_status = 1
        return state.exit_status
    if len(cmd) < 2:
        try:
            print_prefixed("export ", state.exports, stream)
        except ValueError:
            errors.write("Addprintarr: Array doesn't exit\n")
    for arg in cmd[1:]:
        if is_redirection(arg):
            break
        if arg.startswith("=") or (arg and is_digit(arg[0])):
            errors.write(f"Minishell: export: `{arg}': not a valid identifier\n")
            state.exit_status = 1
        elif "=" in arg:
            _export_assignment(state, arg, stream)
        else:
            _export_name(state, arg, stream)
    return state.exit_status


def _without_key(arr: Sequence[str], name: str) -> list[str]:
    return [entry for entry in arr if not (entry == name or entry.startswith(f"{name}="))]


def handle_unset(state: ShellState, cmd: Sequence[str]) -> int:
    """Remove the named variables from the environment and export list."""
    for name in cmd[1:]:
        state.exports = _without_key(state.exports, name)
        state.environ = _without_key(state.environ, name)
    return state.exit_status


def run_builtin(
    state: ShellState, cmd: Sequence[str], out: TextIO | None = None, err: TextIO | None = None
) -> int | None:
    """Run ``cmd`` if it names a builtin and return its status, else return None."""
    if not cmd:
        return 0
    name = get_key(cmd[0])
    if name == "env":
        return handle_env(state, cmd, out, err)
    if name == "echo":
        handle_echo(cmd, out)
        return state.exit_status
    if name == "pwd":
        return handle_pwd(state, out)
    if name == "export":
        return handle_export(state, cmd, out, err)
    if name == "unset":
        return handle_unset(state, cmd)
    return None