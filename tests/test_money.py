from decimal import Decimal

import pytest

from storefront.utils.fields import UNSET, is_set, pick
from storefront.utils.money import D, parse_money, round_money, to_float


@pytest.mark.parametrize("raw, expected", [
    ("0.005", "0.01"),
    ("0.004", "0.00"),
    ("2.675", "2.68"),
    ("-1.005", "-1.01"),
    (36, "36.00"),
])
def test_round_money_half_up(raw, expected):
    assert round_money(D(raw)) == Decimal(expected)


def test_d_treats_none_as_zero():
    assert D(None) == Decimal("0")
    assert D(1.1) == Decimal("1.1")


@pytest.mark.parametrize("raw", [None, True, "abc", "", "NaN", "Infinity", [1]])
def test_parse_money_rejects(raw):
    assert parse_money(raw) is None


def test_parse_money_accepts_numbers_and_strings():
    assert parse_money(" 12.50 ") == Decimal("12.50")
    assert parse_money(0) == Decimal("0")


def test_to_float_rounds():
    assert to_float(Decimal("19.999")) == 20.0


def test_pick_distinguishes_missing_from_falsy():
    data = {"stock": 0, "is_active": False, "name": ""}

    assert pick(data, "stock") == 0
    assert pick(data, "is_active") is False
    assert pick(data, "name") == ""
    assert pick(data, "price") is UNSET
    assert not is_set(pick(data, "price"))
    assert is_set(pick(data, "stock"))
