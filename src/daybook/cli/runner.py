"""Bridge between synchronous click commands and the async engine."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import click

from daybook.database.base import Database
from daybook.database.factories import create_sqlite_database
from daybook.domain.errors import DomainError

T = TypeVar("T")


def run_with_database(ctx: click.Context, operation: Callable[[Database], Awaitable[T]]) -> T:
    """Open the database, run ``operation`` on a fresh event loop and close it.

    The engine is created inside the loop that uses it, so each command gets
    its own connection pool.
    """

    async def runner() -> Any:
        db = create_sqlite_database(database_path=ctx.obj["db_path"])
        try:
            await db.connect()
            await db.initialize_schema()
            return await operation(db)
        finally:
            await db.disconnect()

    try:
        return asyncio.run(runner())
    except DomainError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
