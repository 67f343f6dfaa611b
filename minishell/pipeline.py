"""Running a tokenised command line: pipes, builtins and external programs."""

from __future__ import annotations

import io
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Sequence
from dataclasses import replace
from typing import IO, TextIO, Union

from minishell.builtins import ShellState, is_redirection, run_builtin
from minishell.quoting import get_key
from minishell.redirections import Redirected, apply_redirections

# Builtins that, when a redirection is present, run isolated like a child.
_ISOLATED_BUILTINS = frozenset({"echo", "env", "pwd", "export"})

_Input = Union[bytes, IO[bytes], None]


class CommandNotFound(LookupError):
    """Raised when a command is neither a path to a program nor found on PATH."""

    def __init__(self, name: str) -> None:
        super().__init__(f"minishell: command {name} doesn't exist")
        self.name = name


def split_pipeline(tokens: Sequence[str]) -> list[list[str]]:
    """Split ``tokens`` at each ``|`` into the commands of a pipeline.

    Raises ValueError when nothing follows the last pipe.
    """
    segments: list[list[str]] = [[]]
    for token in tokens:
        if token == "|":
            segments.append([])
        else:
            segments[-1].append(token)
    if not segments[-1]:
        raise ValueError("no command after the last pipe")
    return segments


def search_paths(environ: Sequence[str]) -> list[str] | None:
    """Return the directories listed in ``PATH``, or None when it is not set."""
    for entry in environ:
        if entry.startswith("PATH="):
            return [part for part in entry[len("PATH="):].split(":") if part]
    return None


def find_executable(name: str, environ: Sequence[str] | None) -> str | None:
    """Return the first ``dir/name`` on ``PATH`` that may be executed."""
    if environ is None:
        return None
    for directory in search_paths(environ) or []:
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def resolve_command(name: str, environ: Sequence[str] | None) -> str:
    """Return the program to run for ``name``.

    A name that exists as a file is used as it is when it is readable and
    executable; an existing file that cannot be executed raises
    PermissionError. Otherwise ``PATH`` is searched, and CommandNotFound is
    raised when that fails.
    """
    if not name:
        raise ValueError("empty command name")
    if os.access(name, os.F_OK):
        if not os.access(name, os.X_OK):
            raise PermissionError(f"minishell: {name} : Permission denied")
        if os.access(name, os.X_OK | os.R_OK):
            return name
    found = find_executable(name, environ)
    if found is None:
        raise CommandNotFound(name)
    return found


def exit_status_from_returncode(returncode: int) -> int:
    """Turn a process return code into a shell exit status.

    A process killed by signal N reports status 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def _environment(environ: Sequence[str]) -> dict[str, str]:
    env: dict[str, str] = {}
    for entry in environ:
        key, sep, value = entry.partition("=")
        if sep and key:
            env[key] = value
    return env


def _fileno(stream: TextIO) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _discard(source: _Input) -> None:
    if source is not None and not isinstance(source, bytes):
        source.close()


def _feed(pipe: IO[bytes], data: bytes) -> None:
    try:
        pipe.write(data)
    except OSError:
        pass
    finally:
        try:
            pipe.close()
        except OSError:
            pass


class _Runner:
    """Starts the stages of one pipeline and collects the last one's status."""

    def __init__(self, state: ShellState, out: TextIO, err: TextIO) -> None:
        self.state = replace(state, environ=list(state.environ), exports=list(state.exports))
        self.env = _environment(state.environ)
        self.out = out
        self.err = err
        self.out_fd = _fileno(out)
        self.err_fd = _fileno(err)
        self.procs: list[subprocess.Popen[bytes]] = []
        self.threads: list[threading.Thread] = []
        self.opened: list[IO[bytes]] = []
        self.err_chunks: list[bytes] = []
        self.previous: _Input = None
        self.status = 0
        self.last_proc: subprocess.Popen[bytes] | None = None
        self.capture: IO[bytes] | None = None

    def _thread(self, target, *args) -> None:
        thread = threading.Thread(target=target, args=args, daemon=True)
        thread.start()
        self.threads.append(thread)

    def _drain_errors(self, pipe: IO[bytes]) -> None:
        with pipe:
            self.err_chunks.append(pipe.read())

    def _input_for(self, redirected: Redirected, previous: _Input) -> _Input:
        if redirected.stdin_text is not None:
            _discard(previous)
            return redirected.stdin_text.encode()
        if redirected.stdin_path is not None:
            _discard(previous)
            handle = open(redirected.stdin_path, "rb")
            self.opened.append(handle)
            return handle
        return previous

    def _emit(self, text: str, path: str | None, is_last: bool) -> None:
        if path is not None:
            with open(path, "w", encoding="utf-8") as target:
                target.write(text)
        elif not is_last:
            self.previous = text.encode()
        else:
            self.out.write(text)

    def _fail(self, message: str, status: int, source: _Input) -> None:
        _discard(source)
        self.err.write(f"{message}\n")
        self.status = status

    def _stage(self, cmd: Sequence[str], heredoc: str | None, is_last: bool) -> None:
        previous, self.previous = self.previous, None
        self.last_proc = None
        try:
            redirected = apply_redirections(cmd, heredoc)
        except OSError as exc:
            self._fail(f"{exc.filename or ''}: {exc.strerror}", 1, previous)
            return
        except ValueError as exc:
            self._fail(f"minishell: {exc}", 2, previous)
            return
        source = self._input_for(redirected, previous)
        args = redirected.args
        if not args:
            _discard(source)
            self.status = 0
            return
        buffer = io.StringIO()
        status = run_builtin(self.state, args, buffer, self.err)
        if status is not None:
            _discard(source)
            self._emit(buffer.getvalue(), redirected.stdout_path, is_last)
            self.status = status
            return
        try:
            program = resolve_command(args[0], self.state.environ)
        except CommandNotFound as exc:
            self._fail(str(exc), 127, source)
            return
        except PermissionError as exc:
            self._fail(str(exc), 126, source)
            return
        self._spawn(args, program, source, redirected.stdout_path, is_last)

    def _spawn(
        self,
        args: list[str],
        program: str,
        source: _Input,
        stdout_path: str | None,
        is_last: bool,
    ) -> None:
        stdout_arg: int | IO[bytes]
        if stdout_path is not None:
            handle = open(stdout_path, "wb")
            self.opened.append(handle)
            stdout_arg = handle
        elif not is_last or self.out_fd is None:
            stdout_arg = subprocess.PIPE
        else:
            stdout_arg = self.out_fd
        stderr_arg = self.err_fd if self.err_fd is not None else subprocess.PIPE
        stdin_arg = subprocess.PIPE if isinstance(source, bytes) else source
        try:
            proc = subprocess.Popen(
                args,
                executable=program,
                env=self.env,
                stdin=stdin_arg,
                stdout=stdout_arg,
                stderr=stderr_arg,
            )
        except OSError as exc:
            self._fail(f"minishell: {args[0]}: {exc.strerror}", 126, source)
            return
        if isinstance(source, bytes):
            self._thread(_feed, proc.stdin, source)
        else:
            _discard(source)
        if proc.stderr is not None:
            self._thread(self._drain_errors, proc.stderr)
        self.procs.append(proc)
        if stdout_arg == subprocess.PIPE:
            if is_last:
                self.capture = proc.stdout
            else:
                self.previous = proc.stdout
        if is_last:
            self.last_proc = proc

    def run(self, segments: list[list[str]], heredocs: list[str | None]) -> int:
        if self.out_fd is not None:
            self.out.flush()
        if self.err_fd is not None:
            self.err.flush()
        last = len(segments) - 1
        try:
            for index, (cmd, heredoc) in enumerate(zip(segments, heredocs)):
                is_last = index == last
                self._stage(cmd, heredoc, is_last)
                if not is_last and self.previous is None:
                    self.previous = b""
            if self.capture is not None:
                with self.capture:
                    self.out.write(self.capture.read().decode(errors="replace"))
            for proc in self.procs:
                proc.wait()
            for thread in self.threads:
                thread.join()
        finally:
            for handle in self.opened:
                handle.close()
        if self.err_chunks:
            self.err.write(b"".join(self.err_chunks).decode(errors="replace"))
        if self.last_proc is None:
            return self.status
        returncode = self.last_proc.returncode
        if returncode == -signal.SIGQUIT:
            self.out.write("Quit (core dumped)\n")
        return exit_status_from_returncode(returncode)


def _run_single(
    state: ShellState, cmd: list[str], heredoc: str | None, out: TextIO, err: TextIO
) -> int:
    if any(is_redirection(token) for token in cmd):
        if any(get_key(token) in _ISOLATED_BUILTINS for token in cmd):
            _Runner(state, out, err).run([cmd], [heredoc])
            return 0
    status = run_builtin(state, cmd, out, err)
    if status is not None:
        return status
    return _Runner(state, out, err).run([cmd], [heredoc])


def execute_pipeline(
    state: ShellState,
    segments: Sequence[Sequence[str]],
    heredocs: Sequence[str | None] | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Run the commands of a pipeline and return the last command's status.

    A lone builtin runs in the shell itself and may change ``state``; in a
    pipeline every command is isolated from it. ``heredocs`` holds the
    here-document text of each segment, or None. The status is also stored
    in ``state.exit_status``.
    """
    stream = out if out is not None else sys.stdout
    errors = err if err is not None else sys.stderr
    commands = [list(segment) for segment in segments]
    if not commands:
        raise ValueError("no command to run")
    documents = list(heredocs or [])
    documents.extend([None] * (len(commands) - len(documents)))
    if len(commands) == 1:
        status = _run_single(state, commands[0], documents[0], stream, errors)
    else:
        status = _Runner(state, stream, errors).run(commands, documents)
    state.exit_status = status
    return status