"""Tests for CLI text formatting helpers."""

from decimal import Decimal

from daybook.cli.formatting import format_amount, format_signed, format_totals
from daybook.domain.entities import LedgerTotals, TransactionType


def test_format_amount():
    assert format_amount(Decimal("1234.5")) == "1,234.50"
    assert format_amount(Decimal("-42.5")) == "-42.50"


def test_format_signed():
    assert format_signed(Decimal("500"), TransactionType.DEBIT) == "-500.00"
    assert format_signed(Decimal("500"), TransactionType.CREDIT) == "500.00"


def test_format_totals():
    totals = LedgerTotals(total_credit=Decimal("100"), total_debit=Decimal("40"), balance=Decimal("60"))
    lines = format_totals(totals)
    assert lines == [
        "Total credit: 100.00",
        "Total debit:  40.00",
        "Balance:      60.00",
    ]
