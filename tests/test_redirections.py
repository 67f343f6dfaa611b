import io

import pytest

from minishell.redirections import (
    STDIN_FILE,
    STDIN_HEREDOC,
    STDIN_NONE,
    apply_redirections,
    collect_heredocs,
    read_heredoc,
    redirect_stdin,
    redirect_stdout,
    remove_heredocs,
    stdin_kind,
)


def _reader(lines):
    it = iter(lines)
    return lambda prompt: next(it, None)


def test_stdin_kind():
    assert stdin_kind(["cat", "<<", "EOF"]) == STDIN_HEREDOC
    assert stdin_kind(["cat", "<", "f"]) == STDIN_FILE
    assert stdin_kind(["cat"]) == STDIN_NONE
    assert stdin_kind(["cat", "<", "f", "<<", "EOF"]) == STDIN_NONE


def test_remove_heredocs():
    assert remove_heredocs(["cat", "<<", "EOF", "-e"]) == ["cat", "-e"]
    assert remove_heredocs(["cat", "<<", "A", "<<", "B"]) == ["cat"]
    assert remove_heredocs(["cat", "<<"]) == ["cat"]


def test_read_heredoc_stops_at_delimiter():
    prompts = io.StringIO()
    text = read_heredoc("EOF", _reader(["a", "b", "EOF", "c"]), prompts)
    assert text == "a\nb\n"
    assert "Delimiter is: EOF" in prompts.getvalue()


def test_read_heredoc_warns_at_end_of_input():
    prompts = io.StringIO()
    text = read_heredoc("EOF", _reader(["only"]), prompts)
    assert text == "only\n"
    assert "wanted `EOF'" in prompts.getvalue()


def test_collect_heredocs_keeps_last_per_segment():
    segments = [["cat", "<<", "A", "<<", "B"], ["wc"], ["cat", "<<", "C"]]
    lines = ["x", "A", "y", "B", "z", "C"]
    result = collect_heredocs(segments, _reader(lines), io.StringIO())
    assert result == ["y\n", None, "z\n"]


def test_redirect_stdout_creates_and_truncates(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.write_text("old")
    result = redirect_stdout(["echo", "hi", ">", str(first), ">>", str(second)])
    assert result.args == ["echo", "hi"]
    assert result.stdout_path == str(second)
    assert first.read_text() == ""
    assert second.exists()


def test_redirect_stdout_without_operator_is_unchanged():
    result = redirect_stdout(["ls", "-l"])
    assert result.args == ["ls", "-l"]
    assert result.stdout_path is None


def test_redirect_stdout_missing_target():
    with pytest.raises(ValueError):
        redirect_stdout(["echo", ">"])


def test_redirect_stdin_uses_last_file(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_text("A")
    b.write_text("B")
    result = redirect_stdin(["cat", "<", str(a), "<", str(b)])
    assert result.args == ["cat"]
    assert result.stdin_path == str(b)
    assert result.stdin_text is None


def test_redirect_stdin_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        redirect_stdin(["cat", "<", str(tmp_path / "missing")])


def test_redirect_stdin_heredoc_wins():
    result = redirect_stdin(["cat", "<<", "EOF"], "body\n")
    assert result.args == ["cat"]
    assert result.stdin_text == "body\n"
    assert result.stdin_path is None


def test_apply_redirections_combines(tmp_path):
    src = tmp_path / "in"
    dst = tmp_path / "out"
    src.write_text("data")
    result = apply_redirections(["sort", "<", str(src), ">", str(dst)])
    assert result.args == ["sort"]
    assert result.stdin_path == str(src)
    assert result.stdout_path == str(dst)
    assert dst.read_text() == ""