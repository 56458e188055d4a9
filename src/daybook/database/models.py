"""SQLAlchemy models for daybook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    event,
)
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base, relationship

from daybook.domain.entities import TransactionType

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class MainAccount(Base):
    """Top-level ledger category."""

    __tablename__ = "main_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)


class SubAccount(Base):
    """Sub account model; exactly one parent main account."""

    __tablename__ = "sub_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    main_account_id = Column(Integer, ForeignKey("main_accounts.id"), nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    main_account_id = Column(Integer, ForeignKey("main_accounts.id"), nullable=False, index=True)
    sub_account_id = Column(Integer, ForeignKey("sub_accounts.id"), nullable=False, index=True)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(
        Enum(TransactionType, values_callable=lambda kinds: [k.value for k in kinds], name="transaction_type"),
        nullable=False,
    )
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)

    # Identities are never reused, so a restored transaction always gets a new one
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        {"sqlite_autoincrement": True},
    )

    # Relationships
    main_account = relationship("MainAccount")
    sub_account = relationship("SubAccount")


class ArchivedTransaction(Base):
    """Snapshot of a deleted transaction."""

    __tablename__ = "archived_transactions"

    id = Column(Integer, primary_key=True)
    original_id = Column(Integer, nullable=False, index=True)
    transaction_data = Column(JSON, nullable=False)
    deleted_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = ({"sqlite_autoincrement": True},)


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async engine; SQLite connections enforce foreign keys."""
    engine = create_async_engine(database_url, echo=False)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(bind=engine, expire_on_commit=False)
