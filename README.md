# minishell

The stages a small shell puts a command line through, in pure Python.
Each stage can be used on its own.

## Modules

- **`minishell.expander`**
  - `check_arrow_syntax(line)` returns an error message for malformed
    redirection arrows. Those are more than two arrows of one kind with no
    space between them, or `><` and `<>`. It returns `None` when the line
    is fine.
  - `expand(line, environ, last_exit_code, argv0)` returns an `Expansion`.
  - Expansion replaces `$NAME`, `$?` and `$0`. `$$` stays as `$$`, and
    other positional parameters (`$1`…`$9`) disappear.
  - Single-quoted text and a variable directly after a redirection arrow
    are left alone.
  - An undefined variable expands to nothing and sets
    `Expansion.undefined_variable`.
  - A line with malformed arrows comes back unchanged, with
    `exit_status` 2 and `error` set.
  - A positional parameter directly after an arrow raises `ExpansionError`.
- **`minishell.quoting`** handles quotes in keys and arguments:
  - `get_key` and `get_search`
  - `strip_quotes` and `quote_value`
  - `is_balanced` and `is_n_flag`
  - the checks they rely on: `is_word_break`, `has_odd_quotes`,
    `has_invalid_chars` and `has_mixed_quotes`.
- **`minishell.builtins`** provides the builtins `echo`, `env`, `pwd`,
  `export` and `unset`. They work on a `ShellState`, which holds:
  - the environment and the export list;
  - the last exit status;
  - the current directory.

  `ShellState.from_environ` builds a state from a mapping.
  `run_builtin(state, cmd, out, err)` runs a builtin and returns its
  status, or returns `None` when `cmd` is not a builtin.
- **`minishell.redirections`** handles `<`, `>`, `>>` and `<<`:
  - `read_heredoc` and `collect_heredocs` read here-documents through a
    reader callable, which defaults to `input`.
  - `redirect_stdout`, `redirect_stdin` and `apply_redirections` take the
    operators out of a command and return a `Redirected`, which holds the
    remaining arguments and the command's input and output.
  - Output targets are created and truncated. Input files must be
    readable, or `OSError` is raised.
- **`minishell.pipeline`**
  - `split_pipeline` splits tokens at `|`.
  - `search_paths`, `find_executable` and `resolve_command` look programs
    up on `PATH`. `resolve_command` raises `CommandNotFound` or
    `PermissionError`.
  - `exit_status_from_returncode` maps a process return code to a shell
    status.
  - `execute_pipeline` runs the commands with `subprocess`:
    - A lone builtin runs in the shell and may change the state.
    - Inside a pipeline, every command is isolated from the state.
    - The returned status is also stored in `state.exit_status`.
- **`minishell.arrays`**, **`minishell.chars`** and **`minishell.strutil`**
  hold the small list, character and string helpers the stages share.
  These include `atoi`, `atol`, `itoa` and `join3`.

## Example

```python
import io

from minishell.builtins import ShellState
from minishell.expander import expand
from minishell.pipeline import execute_pipeline, split_pipeline

state = ShellState.from_environ({"NAME": "world", "PATH": "/usr/bin:/bin"})
print(expand("echo $NAME", state.environ).text)   # echo world

out = io.StringIO()
status = execute_pipeline(state, split_pipeline(["echo", "-n", "hi"]), out=out)
assert out.getvalue() == "hi" and status == 0
```

Builtins write to the streams they are given, so their output can be
captured in an `io.StringIO` as easily as sent to the terminal. Exit
statuses follow the usual shell conventions:

- `127` for a command that cannot be found;
- `126` for one that cannot be executed;
- `128 + n` for a child killed by signal `n`.

## What it does not do

There is no interactive prompt and no command to start a shell. There is
also no tokenizer that splits a raw line into tokens. `split_pipeline` and
`execute_pipeline` expect a list of tokens the caller has already produced.
There is no `cd` or `exit` builtin.

## Requirements

Python 3.10 or later on a POSIX system. The package has no third-party
dependencies; the test suite uses pytest.