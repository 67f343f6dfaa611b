import pytest

from minishell.strutil import LONG_MAX, atoi, atol, itoa, join3


def test_atoi_plain_and_signed():
    assert atoi("123") == 123
    assert atoi("  -42") == -42
    assert atoi("\t\n+7") == 7


def test_atoi_stops_at_non_digit():
    assert atoi("15abc") == 15


def test_atoi_without_number_is_zero():
    assert atoi("abc") == 0
    assert atoi("+-5") == 0
    assert atoi("") == 0


def test_atol_limits():
    assert atol("9223372036854775807") == LONG_MAX
    assert atol("  -17") == -17


def test_atol_rejects_overflow():
    with pytest.raises(ValueError):
        atol("9223372036854775808")
    with pytest.raises(ValueError):
        atol("12345678901234567890")


def test_atol_rejects_non_number():
    with pytest.raises(ValueError):
        atol("abc")
    with pytest.raises(ValueError):
        atol("-")


@pytest.mark.parametrize("n", [0, 1, -1, 2147483647, -2147483648, 90210])
def test_itoa_round_trip(n):
    assert atoi(itoa(n)) == n


def test_itoa_zero():
    assert itoa(0) == "0"


def test_join3_concatenates():
    assert join3("minishell: ", "ls", " : Permission denied") == "minishell: ls : Permission denied"


@pytest.mark.parametrize(
    "args", [(None, "b", "c"), ("a", None, "c"), ("a", "b", None)]
)
def test_join3_rejects_missing(args):
    with pytest.raises(ValueError):
        join3(*args)