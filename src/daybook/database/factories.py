"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from daybook.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "DAYBOOK_DB_PATH"


def resolve_database_path(database_path: Optional[str] = None) -> str:
    """Resolve the SQLite file path.

    Args:
        database_path: Explicit path. If None, checks DAYBOOK_DB_PATH
            environment variable, then defaults to ~/.daybook/daybook.db
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        # Default to ~/.daybook/daybook.db
        home = Path.home()
        db_dir = home / ".daybook"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "daybook.db")

    return database_path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file, resolved by
            ``resolve_database_path``

    Returns:
        SQLAlchemyDatabase instance configured for SQLite (aiosqlite driver)
    """
    database_url = f"sqlite+aiosqlite:///{resolve_database_path(database_path)}"
    return SQLAlchemyDatabase(database_url)
