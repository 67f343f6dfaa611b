import pytest

from minishell.chars import is_alnum, is_alpha, is_ascii, is_digit, is_print, is_space

ASCII = [chr(code) for code in range(128)]


@pytest.mark.parametrize("c", ASCII)
def test_is_alpha_matches_ascii_letters(c):
    assert is_alpha(c) == c.isalpha()


@pytest.mark.parametrize("c", ASCII)
def test_is_digit_matches_ascii_digits(c):
    assert is_digit(c) == c.isdigit()


@pytest.mark.parametrize("c", ASCII)
def test_is_alnum_is_union_of_alpha_and_digit(c):
    assert is_alnum(c) == (is_alpha(c) or is_digit(c))


@pytest.mark.parametrize("c", ASCII)
def test_is_print_matches_printable_ascii(c):
    assert is_print(c) == c.isprintable()


@pytest.mark.parametrize("c", ASCII)
def test_every_ascii_char_is_ascii(c):
    assert is_ascii(c) is True


@pytest.mark.parametrize("c", ["\x80", "é", "\u4e2d"])
def test_non_ascii_chars(c):
    assert is_ascii(c) is False
    assert is_alpha(c) is False
    assert is_print(c) is False


@pytest.mark.parametrize("c", [" ", "\t", "\n", "\v", "\f", "\r"])
def test_is_space_accepts_whitespace(c):
    assert is_space(c) is True


@pytest.mark.parametrize("c", ["a", "0", "|", "\0", "\x1c"])
def test_is_space_rejects_others(c):
    assert is_space(c) is False


@pytest.mark.parametrize("func", [is_alpha, is_digit, is_alnum, is_ascii, is_print, is_space])
def test_not_a_single_character(func):
    assert func("") is False
    assert func("ab") is False