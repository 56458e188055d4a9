"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from daybook.domain.errors import ValidationError
from daybook.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("₹ 1,234.56", Decimal("1234.56")),
        ("€7", Decimal("7")),
        ("9,999,999,999.99", Decimal("9999999999.99")),
        ("1.500", Decimal("1.50")),
        (" 0.01 ", Decimal("0.01")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "   ", "abc", "0", "-5", "Infinity", "NaN", "0.001", "1e400", "10,000,000,000", "12345678901234567890.01"],
)
def test_rejects_invalid_amounts(text):
    with pytest.raises(ValidationError):
        parse_amount(text)
