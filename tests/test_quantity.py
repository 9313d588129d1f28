import math

import pytest

from bakers_price.core.quantity import Quantity, parse_quantity


@pytest.mark.parametrize("text, expected", [
    ("2", 2),
    ("0.5", 0.5),
    ("1/4", 0.25),
    ("1 1/2", 1.5),
    ("  3/4  ", 0.75),
    ("2  1/4", 2.25),
    ("-2", -2),
    ("-1/2", -0.5),
])
def test_parse_quantity_values(text, expected):
    assert parse_quantity(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "1/0", "1/abc", "inf", "nan", "1 2 3", None])
def test_parse_quantity_unparseable_is_zero(text):
    assert parse_quantity(text) == 0


def test_parse_quantity_passes_numbers_through():
    assert parse_quantity(3) == 3
    assert parse_quantity(0.125) == 0.125


def test_parse_quantity_always_finite():
    for text in ["1e400", "-inf", "1/1e-400", "1 1/0", "//", "1//2", "½"]:
        assert math.isfinite(parse_quantity(text))


def test_quantity_keeps_raw_text():
    q = Quantity("1 1/2")
    assert str(q) == "1 1/2"
    assert q.to_number() == pytest.approx(1.5)


def test_quantity_coerce():
    assert Quantity.coerce("1/3").text == "1/3"
    assert Quantity.coerce(2.0).text == "2"
    assert Quantity.coerce(0.25).text == "0.25"
    assert Quantity.coerce(None).text == "0"
    q = Quantity("5")
    assert Quantity.coerce(q) is q


def test_parse_quantity_accepts_plain_ascii_decimals_only():
    assert parse_quantity("1_000") == 0
    assert parse_quantity("１２") == 0  # full-width digits
    assert parse_quantity("٣") == 0  # Arabic-Indic digit
    assert parse_quantity("1/2_0") == 0
    assert parse_quantity("1e3") == 1000
    assert parse_quantity(".5") == 0.5
    assert parse_quantity("+2.") == 2
