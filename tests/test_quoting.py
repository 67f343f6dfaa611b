import pytest

from minishell.quoting import (
    get_key,
    get_search,
    has_invalid_chars,
    has_mixed_quotes,
    has_odd_quotes,
    is_balanced,
    is_n_flag,
    is_word_break,
    quote_value,
    strip_quotes,
)


@pytest.mark.parametrize("c", ["|", " ", "\t", "\n", "", "\0"])
def test_word_breaks(c):
    assert is_word_break(c) is True


@pytest.mark.parametrize("c", ["a", "=", "$", '"'])
def test_not_word_breaks(c):
    assert is_word_break(c) is False


@pytest.mark.parametrize(
    "text, expected",
    [('"a"', False), ("'a'", False), ('"a', True), ("a'", True), ("plain", False)],
)
def test_has_odd_quotes(text, expected):
    assert has_odd_quotes(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [("a b", True), ("a|b", True), ('"ab', True), ("ab", False), ('"ab"', False)],
)
def test_has_invalid_chars(text, expected):
    assert has_invalid_chars(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("\"a'b\"", True),
        ("'a\"b'", True),
        ("\"ab\"'cd'", False),
        ("abc", False),
    ],
)
def test_has_mixed_quotes(text, expected):
    assert has_mixed_quotes(text) is expected


def test_get_search_splits_on_separator():
    key, value = "PATH", "/bin:/usr/bin"
    assert get_search(f"{key}={value}", "=") == key


def test_get_search_without_separator_keeps_text():
    assert get_search("HOME") == "HOME"


@pytest.mark.parametrize("text", ["bad key=x", "a|b=x", '"open=x'])
def test_get_search_rejects_invalid(text):
    assert get_search(text, "=") is None


def test_get_key_removes_quotes():
    left, right = "ec", "ho"
    assert get_key(f'"{left}"{right}') == left + right


def test_get_key_with_separator():
    key = "USER"
    assert get_key(f"'{key}'=someone", "=") == key


@pytest.mark.parametrize("text", ['""', "''", "a b", "x|y", "\"a'b\""])
def test_get_key_invalid_returns_none(text):
    assert get_key(text) is None


def test_strip_quotes_round_trip_with_quote_value():
    entry = "NAME=value"
    assert strip_quotes(quote_value(entry)) == entry


@pytest.mark.parametrize("text", ['A="x y"', "'one'\"two\"", "a'b'c"])
def test_strip_quotes_leaves_no_quotes(text):
    result = strip_quotes(text)
    assert '"' not in result and "'" not in result
    assert len(result) < len(text)


def test_strip_quotes_plain_text_unchanged():
    assert strip_quotes("plain_text") == "plain_text"


def test_strip_quotes_unterminated_runs_to_end():
    word = "open"
    assert strip_quotes(f'"{word}') == word


def test_strip_quotes_keeps_escaped_quote():
    text = 'a\\"b'
    assert strip_quotes(text) == text


def test_quote_value_wraps_value():
    key, value = "KEY", "b=c"
    assert quote_value(f"{key}={value}") == f'{key}="{value}"'


def test_quote_value_requires_equals():
    with pytest.raises(ValueError):
        quote_value("NOEQUALS")


@pytest.mark.parametrize(
    "text, expected",
    [
        ('"abc"', True),
        ("'a' \"b\"", True),
        ('"abc', False),
        ("it's", False),
        ('a\\"b', True),
        ("", True),
    ],
)
def test_is_balanced(text, expected):
    assert is_balanced(text) is expected


@pytest.mark.parametrize(
    "arg, expected",
    [
        ("-n", True),
        ("-nnnn", True),
        ("-", False),
        ("-na", False),
        ("n", False),
        ("", False),
        (None, False),
    ],
)
def test_is_n_flag(arg, expected):
    assert is_n_flag(arg) is expected