"""Shared pytest fixtures for daybook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from daybook.database.factories import create_sqlite_database
from daybook.domain.accounts import AccountDirectory
from daybook.domain.archive import TransactionArchive
from daybook.domain.ledger import LedgerStore


@pytest.fixture
def db_path():
    """Path to a temporary database file, removed afterwards."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield path

    if os.path.exists(path):
        os.unlink(path)


@pytest_asyncio.fixture
async def temp_db(db_path):
    """Create a temporary database for testing."""
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    await db.connect()
    await db.initialize_schema()

    yield db

    await db.disconnect()


@pytest.fixture
def directory(temp_db):
    """Create an AccountDirectory with a temporary database."""
    return AccountDirectory(temp_db)


@pytest.fixture
def ledger(temp_db):
    """Create a LedgerStore with a temporary database."""
    return LedgerStore(temp_db)


@pytest.fixture
def archive(ledger):
    """Create a TransactionArchive on top of the ledger."""
    return TransactionArchive(ledger)


@pytest_asyncio.fixture
async def accounts(temp_db):
    """A small chart of accounts: two main accounts with sub accounts."""
    expenses = await temp_db.create_main_account("Expenses")
    income = await temp_db.create_main_account("Income", description="All income")
    rent = await temp_db.create_sub_account("Rent", expenses.id)
    food = await temp_db.create_sub_account("Food", expenses.id)
    salary = await temp_db.create_sub_account("Salary", income.id)
    return {
        "expenses": expenses,
        "income": income,
        "rent": rent,
        "food": food,
        "salary": salary,
    }


@pytest_asyncio.fixture
async def sample_transactions(temp_db, accounts):
    """Three transactions across both main accounts."""
    salary = await temp_db.create_transaction(
        date=date(2024, 1, 5),
        main_account_id=accounts["income"].id,
        sub_account_id=accounts["salary"].id,
        description="January salary",
        amount=Decimal("1000.00"),
        type="credit",
        created_by="alice",
    )
    rent = await temp_db.create_transaction(
        date=date(2024, 1, 10),
        main_account_id=accounts["expenses"].id,
        sub_account_id=accounts["rent"].id,
        description="rent",
        amount=Decimal("500.00"),
        type="debit",
        created_by="alice",
    )
    groceries = await temp_db.create_transaction(
        date=date(2024, 2, 3),
        main_account_id=accounts["expenses"].id,
        sub_account_id=accounts["food"].id,
        description="groceries",
        amount=Decimal("42.50"),
        type="debit",
        created_by="bob",
    )
    return {"salary": salary, "rent": rent, "groceries": groceries}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

