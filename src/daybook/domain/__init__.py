"""Domain layer for daybook application."""

from daybook.domain.accounts import AccountDirectory
from daybook.domain.archive import TransactionArchive
from daybook.domain.ledger import LedgerStore

__all__ = [
    "AccountDirectory",
    "LedgerStore",
    "TransactionArchive",
]
