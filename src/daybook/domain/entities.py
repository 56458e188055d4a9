"""Domain model entities for daybook.

These are pure data classes representing business concepts, independent of
database schema. The store layer maps its rows onto them, so the engine and
the aggregation functions never see ORM objects.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """The two mutually exclusive transaction polarities."""

    CREDIT = "credit"
    DEBIT = "debit"


class SummaryPeriod(str, Enum):
    """Period granularity for grouped ledger summaries."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class MainAccount:
    """Top-level chart-of-accounts category."""

    id: int
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SubAccount:
    """Child category under exactly one main account."""

    id: int
    name: str
    main_account_id: int
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    date: date
    main_account_id: int
    sub_account_id: int
    description: str
    amount: Decimal
    type: TransactionType
    created_by: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TransactionWithDetails(Transaction):
    """Transaction joined with the accounts it references."""

    main_account: MainAccount
    sub_account: SubAccount


@dataclass(frozen=True)
class ArchivedTransaction:
    """Snapshot of a deleted transaction, kept so the deletion can be undone."""

    id: int
    original_id: int
    transaction_data: dict[str, Any]
    deleted_at: datetime


@dataclass(frozen=True)
class TransactionFilters:
    """Conjunctive transaction filters; date bounds are inclusive."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    main_account_id: Optional[int] = None
    sub_account_id: Optional[int] = None


@dataclass(frozen=True)
class LedgerTotals:
    """Aggregates over a transaction set."""

    total_credit: Decimal = Decimal("0")
    total_debit: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class PeriodSummary:
    """Credit/debit totals for one month or year."""

    period: str
    total_credit: Decimal
    total_debit: Decimal
    balance: Decimal
    count: int


@dataclass(frozen=True)
class AccountSummary:
    """Credit/debit totals for one main account."""

    main_account_id: int
    account_name: str
    total_credit: Decimal
    total_debit: Decimal
    balance: Decimal
