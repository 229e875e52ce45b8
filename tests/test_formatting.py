import pytest

from conftest import make_tx
from formatting import format_inr, group_indian, signed_inr


@pytest.mark.parametrize("digits, expected", [
    ("0", "0"),
    ("999", "999"),
    ("1000", "1,000"),
    ("100000", "1,00,000"),
    ("1234567", "12,34,567"),
    ("123456789", "12,34,56,789"),
])
def test_group_indian(digits, expected):
    assert group_indian(digits) == expected


@pytest.mark.parametrize("amount, expected", [
    (0, "₹0"),
    (500, "₹500"),
    (9500.0, "₹9,500"),
    (1234567.5, "₹12,34,567.5"),
    (10.25, "₹10.25"),
    (-9500, "-₹9,500"),
])
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected


def test_signed_inr():
    assert signed_inr(make_tx(450, "expense")) == "-₹450"
    assert signed_inr(make_tx(100000, "income")) == "+₹1,00,000"
