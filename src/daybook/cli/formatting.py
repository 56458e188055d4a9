"""Text rendering helpers shared by commands."""

from decimal import Decimal

from daybook.domain.entities import LedgerTotals, TransactionType


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def format_signed(amount: Decimal, type: TransactionType) -> str:
    """Credit amounts are shown positive, debit amounts negative."""
    sign = "" if type == TransactionType.CREDIT else "-"
    return f"{sign}{format_amount(amount)}"


def format_totals(totals: LedgerTotals) -> list[str]:
    return [
        f"Total credit: {format_amount(totals.total_credit)}",
        f"Total debit:  {format_amount(totals.total_debit)}",
        f"Balance:      {format_amount(totals.balance)}",
    ]
