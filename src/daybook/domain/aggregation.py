"""Aggregation of transaction sets into totals, balances and summaries.

Everything here is a pure function over an in-memory sequence of
transactions; nothing touches the store.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Sequence

from dateutil.relativedelta import relativedelta

from daybook.domain.entities import (
    AccountSummary,
    LedgerTotals,
    PeriodSummary,
    SummaryPeriod,
    Transaction,
    TransactionType,
    TransactionWithDetails,
)

ZERO = Decimal("0")


def signed_amount(txn: Transaction) -> Decimal:
    """Return the amount with credit positive and debit negative."""
    if txn.type == TransactionType.CREDIT:
        return txn.amount
    return -txn.amount


def calculate_totals(transactions: Sequence[Transaction]) -> LedgerTotals:
    """Sum credits and debits; balance is credit minus debit."""
    total_credit = ZERO
    total_debit = ZERO
    for txn in transactions:
        if txn.type == TransactionType.CREDIT:
            total_credit += txn.amount
        else:
            total_debit += txn.amount
    return LedgerTotals(
        total_credit=total_credit,
        total_debit=total_debit,
        balance=total_credit - total_debit,
    )


def running_balance(transactions: Sequence[Transaction]) -> dict[int, Decimal]:
    """Map each transaction ID to the balance accumulated up to and including it.

    The scan runs newest to oldest (date descending, ties in input order), so
    the value at a row is the balance of that row plus every newer row in the
    given set.
    """
    ordered = sorted(transactions, key=lambda txn: txn.date, reverse=True)
    balances: dict[int, Decimal] = {}
    acc = ZERO
    for txn in ordered:
        acc += signed_amount(txn)
        balances[txn.id] = acc
    return balances


def period_key(value: date, period: SummaryPeriod) -> str:
    """Return the grouping key for a date ("2024-01" or "2024")."""
    if period == SummaryPeriod.MONTHLY:
        return f"{value.year:04d}-{value.month:02d}"
    return f"{value.year:04d}"


def _summaries(
    grouped: dict[str, list[Transaction]], keys: Sequence[str]
) -> list[PeriodSummary]:
    result = []
    for key in keys:
        totals = calculate_totals(grouped.get(key, []))
        result.append(
            PeriodSummary(
                period=key,
                total_credit=totals.total_credit,
                total_debit=totals.total_debit,
                balance=totals.balance,
                count=len(grouped.get(key, [])),
            )
        )
    return result


def summarize_by_period(
    transactions: Sequence[Transaction], period: SummaryPeriod | str
) -> list[PeriodSummary]:
    """Group transactions by month or year; periods in ascending order."""
    period = SummaryPeriod(period)
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[period_key(txn.date, period)].append(txn)
    return _summaries(grouped, sorted(grouped))


def monthly_activity(
    transactions: Sequence[Transaction], today: date, months: int = 6
) -> list[PeriodSummary]:
    """Return the trailing ``months`` calendar months ending with ``today``'s month.

    Months without activity are included with zero totals; transactions outside
    the window are ignored.
    """
    first_of_month = today.replace(day=1)
    keys = [
        period_key(first_of_month - relativedelta(months=offset), SummaryPeriod.MONTHLY)
        for offset in range(months - 1, -1, -1)
    ]
    window = set(keys)
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        key = period_key(txn.date, SummaryPeriod.MONTHLY)
        if key in window:
            grouped[key].append(txn)
    return _summaries(grouped, keys)


def summarize_by_main_account(
    transactions: Sequence[TransactionWithDetails],
) -> list[AccountSummary]:
    """Per main account totals, ordered by account name."""
    grouped: dict[int, list[TransactionWithDetails]] = defaultdict(list)
    for txn in transactions:
        grouped[txn.main_account_id].append(txn)

    result = []
    for main_account_id, group in grouped.items():
        totals = calculate_totals(group)
        result.append(
            AccountSummary(
                main_account_id=main_account_id,
                account_name=group[0].main_account.name,
                total_credit=totals.total_credit,
                total_debit=totals.total_debit,
                balance=totals.balance,
            )
        )
    return sorted(result, key=lambda summary: (summary.account_name, summary.main_account_id))


def recent_transactions(
    transactions: Sequence[Transaction], limit: int = 5
) -> list[Transaction]:
    """Return the ``limit`` newest transactions, newest first."""
    ordered = sorted(transactions, key=lambda txn: txn.date, reverse=True)
    return ordered[:limit]


def search_transactions(
    transactions: Sequence[TransactionWithDetails], query: str | None
) -> list[TransactionWithDetails]:
    """Case-insensitive substring match on description and account names.

    A blank query matches everything. Order is preserved.
    """
    if query is None or not query.strip():
        return list(transactions)
    needle = query.strip().lower()
    return [
        txn
        for txn in transactions
        if needle in txn.description.lower()
        or needle in txn.sub_account.name.lower()
        or needle in txn.main_account.name.lower()
    ]
