"""Abstract database interface.

This is the contract the engine requires from its store: four record sets
(main accounts, sub accounts, transactions, archived transactions) with
insert, update-by-id, delete-by-id, filtered/ordered selects and counts.
No multi-row atomicity is assumed.

Implementations raise ``ReferentialIntegrityError`` when a write would leave a
dangling reference, ``NotFoundError`` for a missing ID on update/delete, and
``StoreError`` for every other store failure.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

# Domain services only import Database for type checking, so this does not cycle
from daybook.domain.entities import (
    ArchivedTransaction,
    MainAccount,
    SubAccount,
    Transaction,
    TransactionFilters,
    TransactionType,
    TransactionWithDetails,
)


class Database(ABC):
    """Abstract database interface for daybook."""

    @abstractmethod
    async def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    async def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Main account operations
    @abstractmethod
    async def create_main_account(self, name: str, description: Optional[str] = None) -> MainAccount:
        """Insert a main account and return the stored row."""
        pass

    @abstractmethod
    async def get_main_account(self, main_account_id: int) -> Optional[MainAccount]:
        """Get main account by ID."""
        pass

    @abstractmethod
    async def list_main_accounts(self) -> list[MainAccount]:
        """List all main accounts ordered by name."""
        pass

    @abstractmethod
    async def update_main_account(self, main_account_id: int, **fields: Any) -> None:
        """Update mutable main account fields and stamp ``updated_at``."""
        pass

    @abstractmethod
    async def delete_main_account(self, main_account_id: int) -> None:
        """Delete a main account."""
        pass

    # Sub account operations
    @abstractmethod
    async def create_sub_account(
        self, name: str, main_account_id: int, description: Optional[str] = None
    ) -> SubAccount:
        """Insert a sub account and return the stored row."""
        pass

    @abstractmethod
    async def get_sub_account(self, sub_account_id: int) -> Optional[SubAccount]:
        """Get sub account by ID."""
        pass

    @abstractmethod
    async def list_sub_accounts(self, main_account_id: Optional[int] = None) -> list[SubAccount]:
        """List sub accounts ordered by name, optionally filtered by parent."""
        pass

    @abstractmethod
    async def update_sub_account(self, sub_account_id: int, **fields: Any) -> None:
        """Update mutable sub account fields and stamp ``updated_at``."""
        pass

    @abstractmethod
    async def delete_sub_account(self, sub_account_id: int) -> None:
        """Delete a sub account."""
        pass

    @abstractmethod
    async def count_sub_accounts(self, main_account_id: int) -> int:
        """Count sub accounts referencing a main account."""
        pass

    # Transaction operations
    @abstractmethod
    async def create_transaction(
        self,
        date: date,
        main_account_id: int,
        sub_account_id: int,
        description: str,
        amount: Decimal,
        type: TransactionType,
        created_by: str,
        created_at: Optional[datetime] = None,
    ) -> Transaction:
        """Insert a transaction and return the stored row."""
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    async def update_transaction(self, transaction_id: int, **fields: Any) -> None:
        """Update transaction fields and stamp ``updated_at``."""
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    async def list_transactions(
        self, filters: Optional[TransactionFilters] = None
    ) -> list[TransactionWithDetails]:
        """List transactions joined with their accounts.

        Ordered by date descending, newest ID first on equal dates. Filters are
        conjunctive and the date bounds are inclusive.
        """
        pass

    @abstractmethod
    async def count_transactions(
        self, main_account_id: Optional[int] = None, sub_account_id: Optional[int] = None
    ) -> int:
        """Count transactions referencing the given account(s)."""
        pass

    # Archive operations
    @abstractmethod
    async def archive_transaction(
        self, original_id: int, transaction_data: dict[str, Any], deleted_at: Optional[datetime] = None
    ) -> ArchivedTransaction:
        """Insert an archive entry and return the stored row."""
        pass

    @abstractmethod
    async def get_latest_archived_transaction(self, original_id: int) -> Optional[ArchivedTransaction]:
        """Most recent archive entry for an original transaction ID."""
        pass

    @abstractmethod
    async def list_archived_transactions(self, limit: Optional[int] = None) -> list[ArchivedTransaction]:
        """List archive entries, newest first."""
        pass

    @abstractmethod
    async def delete_archived_transaction(self, archived_id: int) -> None:
        """Delete an archive entry by its own ID."""
        pass
