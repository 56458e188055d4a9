"""Generic SQLAlchemy database implementation."""

from contextlib import asynccontextmanager
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Any, AsyncIterator, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from daybook.database.base import Database
from daybook.database.mappers import (
    archived_transaction_to_domain,
    main_account_to_domain,
    sub_account_to_domain,
    transaction_to_domain,
    transaction_with_details_to_domain,
)
from daybook.database.models import (
    ArchivedTransaction,
    Base,
    MainAccount,
    SubAccount,
    Transaction,
    create_engine,
    create_session_factory,
)
from daybook.domain.entities import (
    ArchivedTransaction as DomainArchivedTransaction,
    MainAccount as DomainMainAccount,
    SubAccount as DomainSubAccount,
    Transaction as DomainTransaction,
    TransactionFilters,
    TransactionType,
    TransactionWithDetails,
)
from daybook.domain.errors import (
    NotFoundError,
    ReferentialIntegrityError,
    StoreError,
    ValidationError,
    main_account_not_found,
    sub_account_not_found,
    transaction_not_found,
)
from daybook.logging_setup import get_logger

_logger = get_logger("daybook.database")

ACCOUNT_FIELDS = frozenset({"name", "description"})
TRANSACTION_FIELDS = frozenset(
    {"date", "main_account_id", "sub_account_id", "description", "amount", "type"}
)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: Async SQLAlchemy database URL (e.g.,
                'sqlite+aiosqlite:///path/to.db')
        """
        self.database_url = database_url
        self.engine = create_engine(database_url)
        self.session_factory = create_session_factory(self.engine)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Open a session and translate store failures into domain errors."""
        try:
            async with self.session_factory() as session:
                yield session
        except IntegrityError as e:
            message = str(e.orig) if e.orig is not None else str(e)
            if "FOREIGN KEY" in message.upper():
                raise ReferentialIntegrityError(
                    f"Operation rejected by the store: {message}"
                ) from e
            raise StoreError(f"Store constraint violated: {message}") from e
        except SQLAlchemyError as e:
            _logger.debug("Store failure: %s", e)
            raise StoreError(f"Store operation failed: {e}") from e

    async def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    async def disconnect(self) -> None:
        """Disconnect from the database."""
        await self.engine.dispose()

    async def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not initialize schema: {e}") from e

    @staticmethod
    def _checked_fields(fields: dict[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
        unknown = set(fields) - allowed
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        values = dict(fields)
        values["updated_at"] = datetime.now(UTC)
        return values

    # Main account operations
    async def create_main_account(self, name: str, description: Optional[str] = None) -> DomainMainAccount:
        """Insert a main account and return the stored row."""
        async with self._session() as session:
            account = MainAccount(name=name, description=description)
            session.add(account)
            await session.commit()
            await session.refresh(account)
            return main_account_to_domain(account)

    async def get_main_account(self, main_account_id: int) -> Optional[DomainMainAccount]:
        """Get main account by ID."""
        async with self._session() as session:
            account = await session.get(MainAccount, main_account_id)
            if account is None:
                return None
            return main_account_to_domain(account)

    async def list_main_accounts(self) -> list[DomainMainAccount]:
        """List all main accounts ordered by name."""
        async with self._session() as session:
            result = await session.execute(select(MainAccount).order_by(MainAccount.name, MainAccount.id))
            return [main_account_to_domain(acc) for acc in result.scalars().all()]

    async def update_main_account(self, main_account_id: int, **fields: Any) -> None:
        """Update mutable main account fields."""
        values = self._checked_fields(fields, ACCOUNT_FIELDS)
        async with self._session() as session:
            result = await session.execute(
                update(MainAccount).where(MainAccount.id == main_account_id).values(**values)
            )
            if result.rowcount == 0:
                raise NotFoundError(main_account_not_found(main_account_id))
            await session.commit()

    async def delete_main_account(self, main_account_id: int) -> None:
        """Delete a main account."""
        async with self._session() as session:
            result = await session.execute(delete(MainAccount).where(MainAccount.id == main_account_id))
            if result.rowcount == 0:
                raise NotFoundError(main_account_not_found(main_account_id))
            await session.commit()

    # Sub account operations
    async def create_sub_account(
        self, name: str, main_account_id: int, description: Optional[str] = None
    ) -> DomainSubAccount:
        """Insert a sub account and return the stored row."""
        async with self._session() as session:
            account = SubAccount(name=name, main_account_id=main_account_id, description=description)
            session.add(account)
            await session.commit()
            await session.refresh(account)
            return sub_account_to_domain(account)

    async def get_sub_account(self, sub_account_id: int) -> Optional[DomainSubAccount]:
        """Get sub account by ID."""
        async with self._session() as session:
            account = await session.get(SubAccount, sub_account_id)
            if account is None:
                return None
            return sub_account_to_domain(account)

    async def list_sub_accounts(self, main_account_id: Optional[int] = None) -> list[DomainSubAccount]:
        """List sub accounts, optionally filtered by parent."""
        async with self._session() as session:
            query = select(SubAccount)
            if main_account_id is not None:
                query = query.where(SubAccount.main_account_id == main_account_id)
            result = await session.execute(query.order_by(SubAccount.name, SubAccount.id))
            return [sub_account_to_domain(acc) for acc in result.scalars().all()]

    async def update_sub_account(self, sub_account_id: int, **fields: Any) -> None:
        """Update mutable sub account fields."""
        values = self._checked_fields(fields, ACCOUNT_FIELDS)
        async with self._session() as session:
            result = await session.execute(
                update(SubAccount).where(SubAccount.id == sub_account_id).values(**values)
            )
            if result.rowcount == 0:
                raise NotFoundError(sub_account_not_found(sub_account_id))
            await session.commit()

    async def delete_sub_account(self, sub_account_id: int) -> None:
        """Delete a sub account."""
        async with self._session() as session:
            result = await session.execute(delete(SubAccount).where(SubAccount.id == sub_account_id))
            if result.rowcount == 0:
                raise NotFoundError(sub_account_not_found(sub_account_id))
            await session.commit()

    async def count_sub_accounts(self, main_account_id: int) -> int:
        """Count sub accounts referencing a main account."""
        async with self._session() as session:
            result = await session.execute(
                select(func.count(SubAccount.id)).where(SubAccount.main_account_id == main_account_id)
            )
            return result.scalar_one()

    # Transaction operations
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
    ) -> DomainTransaction:
        """Insert a transaction and return the stored row."""
        async with self._session() as session:
            transaction = Transaction(
                date=date,
                main_account_id=main_account_id,
                sub_account_id=sub_account_id,
                description=description,
                amount=amount,
                type=TransactionType(type),
                created_by=created_by,
            )
            if created_at is not None:
                transaction.created_at = created_at
            session.add(transaction)
            await session.commit()
            await session.refresh(transaction)
            return transaction_to_domain(transaction)

    async def get_transaction(self, transaction_id: int) -> Optional[DomainTransaction]:
        """Get transaction by ID."""
        async with self._session() as session:
            txn = await session.get(Transaction, transaction_id)
            if txn is None:
                return None
            return transaction_to_domain(txn)

    async def update_transaction(self, transaction_id: int, **fields: Any) -> None:
        """Update transaction fields."""
        values = self._checked_fields(fields, TRANSACTION_FIELDS)
        async with self._session() as session:
            result = await session.execute(
                update(Transaction).where(Transaction.id == transaction_id).values(**values)
            )
            if result.rowcount == 0:
                raise NotFoundError(transaction_not_found(transaction_id))
            await session.commit()

    async def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        async with self._session() as session:
            result = await session.execute(delete(Transaction).where(Transaction.id == transaction_id))
            if result.rowcount == 0:
                raise NotFoundError(transaction_not_found(transaction_id))
            await session.commit()

    async def list_transactions(
        self, filters: Optional[TransactionFilters] = None
    ) -> list[TransactionWithDetails]:
        """List transactions joined with their accounts."""
        filters = filters or TransactionFilters()
        async with self._session() as session:
            query = select(Transaction).options(
                joinedload(Transaction.main_account), joinedload(Transaction.sub_account)
            )

            if filters.start_date is not None:
                query = query.where(Transaction.date >= filters.start_date)
            if filters.end_date is not None:
                query = query.where(Transaction.date <= filters.end_date)
            if filters.main_account_id is not None:
                query = query.where(Transaction.main_account_id == filters.main_account_id)
            if filters.sub_account_id is not None:
                query = query.where(Transaction.sub_account_id == filters.sub_account_id)

            result = await session.execute(query.order_by(Transaction.date.desc(), Transaction.id.desc()))
            return [transaction_with_details_to_domain(txn) for txn in result.scalars().all()]

    async def count_transactions(
        self, main_account_id: Optional[int] = None, sub_account_id: Optional[int] = None
    ) -> int:
        """Count transactions referencing the given account(s)."""
        async with self._session() as session:
            query = select(func.count(Transaction.id))
            if main_account_id is not None:
                query = query.where(Transaction.main_account_id == main_account_id)
            if sub_account_id is not None:
                query = query.where(Transaction.sub_account_id == sub_account_id)
            result = await session.execute(query)
            return result.scalar_one()

    # Archive operations
    async def archive_transaction(
        self, original_id: int, transaction_data: dict[str, Any], deleted_at: Optional[datetime] = None
    ) -> DomainArchivedTransaction:
        """Insert an archive entry and return the stored row."""
        async with self._session() as session:
            archived = ArchivedTransaction(
                original_id=original_id,
                transaction_data=transaction_data,
                deleted_at=deleted_at or datetime.now(UTC),
            )
            session.add(archived)
            await session.commit()
            await session.refresh(archived)
            return archived_transaction_to_domain(archived)

    async def get_latest_archived_transaction(self, original_id: int) -> Optional[DomainArchivedTransaction]:
        """Most recent archive entry for an original transaction ID."""
        async with self._session() as session:
            result = await session.execute(
                select(ArchivedTransaction)
                .where(ArchivedTransaction.original_id == original_id)
                .order_by(ArchivedTransaction.deleted_at.desc(), ArchivedTransaction.id.desc())
                .limit(1)
            )
            archived = result.scalars().first()
            if archived is None:
                return None
            return archived_transaction_to_domain(archived)

    async def list_archived_transactions(self, limit: Optional[int] = None) -> list[DomainArchivedTransaction]:
        """List archive entries, newest first."""
        async with self._session() as session:
            query = select(ArchivedTransaction).order_by(
                ArchivedTransaction.deleted_at.desc(), ArchivedTransaction.id.desc()
            )
            if limit is not None:
                query = query.limit(limit)
            result = await session.execute(query)
            return [archived_transaction_to_domain(a) for a in result.scalars().all()]

    async def delete_archived_transaction(self, archived_id: int) -> None:
        """Delete an archive entry by its own ID."""
        async with self._session() as session:
            result = await session.execute(
                delete(ArchivedTransaction).where(ArchivedTransaction.id == archived_id)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"Archive entry {archived_id} not found")
            await session.commit()
