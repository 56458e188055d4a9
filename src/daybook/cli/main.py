"""Main CLI entry point."""

import getpass
import os

import click

from daybook.database.factories import DB_PATH_ENV
from daybook.logging_setup import LOG_LEVEL_ENV, configure_logging

# Import and register all commands at module level
from daybook.cli.commands import (
    account,
    add,
    summary,
    transaction,
)

USER_ENV = "DAYBOOK_USER"


def default_user() -> str:
    """Actor recorded on new transactions when --user is not given."""
    if os.environ.get(USER_ENV):
        return os.environ[USER_ENV]
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return "unknown"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--user",
    help=f"Name recorded as creator of new transactions (defaults to {USER_ENV} or the login name)",
    envvar=USER_ENV,
)
@click.option(
    "--log-level",
    help=f"Logging level (overrides {LOG_LEVEL_ENV} environment variable)",
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, log_level: str | None):
    """Daybook - double-column bookkeeping.

    Record credits and debits against main and sub accounts, review the
    ledger with running balances, and undo deletions.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)
    ctx.obj["db_path"] = db_path
    ctx.obj["user"] = user or default_user()


# Register all commands
account.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
