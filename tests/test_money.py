"""Tests for money utilities"""
from decimal import Decimal

from medcart.services.money import (
    format_money,
    multiply,
    round_money,
    subtract,
    to_cents,
    to_decimal,
    to_float,
)


def test_to_decimal_from_float_keeps_repr():
    assert to_decimal(0.1) == Decimal("0.1")


def test_to_decimal_handles_none_and_garbage():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("abc") == Decimal("0")


def test_round_money_half_up():
    assert round_money("2.675") == Decimal("2.68")
    assert round_money(Decimal("22.495")) == Decimal("22.50")


def test_arithmetic():
    assert subtract(100, "70") == Decimal("30")
    assert multiply("39.99", 3) == Decimal("119.97")


def test_format_money():
    assert format_money("1234.5") == "R1,234.50"
    assert format_money(10, "USD") == "$10.00"
    assert format_money(10, "KES") == "KES 10.00"


def test_to_float():
    assert to_float(Decimal("172.50")) == 172.5


def test_to_cents_half_up():
    assert to_cents("172.50") == 17250
    assert to_cents(0.125) == 13
    assert to_cents(Decimal("39.994")) == 3999
    assert to_cents(None) == 0
