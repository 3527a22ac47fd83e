import pytest

from utils.params import parse_int, parse_page


@pytest.mark.parametrize(
    "value, expected",
    [("12", 12), (" 7abc", 7), ("-3", -3), (5, 5), ("abc", None), ("", None), (None, None), (True, None)],
)
def test_parse_int(value, expected):
    assert parse_int(value) == expected


@pytest.mark.parametrize("value, expected", [("2", 2), ("0", 1), ("-1", 1), (None, 1), ("x", 1), (3, 3)])
def test_parse_page(value, expected):
    assert parse_page(value) == expected
