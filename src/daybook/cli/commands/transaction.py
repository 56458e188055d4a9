"""Transaction management commands."""

import click

from daybook.cli.date_filters import period_option, resolve_cli_date_range
from daybook.cli.error_handling import handle_domain_error
from daybook.cli.formatting import format_amount, format_signed, format_totals
from daybook.cli.runner import run_with_database
from daybook.domain.accounts import AccountDirectory
from daybook.domain.aggregation import calculate_totals, running_balance, search_transactions
from daybook.domain.archive import TransactionArchive
from daybook.domain.entities import TransactionFilters, TransactionType
from daybook.domain.errors import ValidationError
from daybook.domain.ledger import LedgerStore
from daybook.utils.account_resolver import resolve_main_account, resolve_sub_account
from daybook.utils.amount_parser import parse_amount
from daybook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


async def build_filters(
    directory: AccountDirectory, start, end, main_account: str | None, sub_account: str | None
) -> TransactionFilters:
    """Resolve account names into a filter set."""
    main_id = None
    sub_id = None
    if main_account is not None or sub_account is not None:
        await directory.refresh()
    if main_account is not None:
        main_id = resolve_main_account(directory, main_account).id
    if sub_account is not None:
        sub_id = resolve_sub_account(directory, sub_account, main_id).id
    return TransactionFilters(
        start_date=start, end_date=end, main_account_id=main_id, sub_account_id=sub_id
    )


@transaction_group.command("list")
@click.option("--start-date", help="Start date, inclusive (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date, inclusive (YYYY-MM-DD or relative like 'today')")
@period_option
@click.option("--main", "main_account", help="Main account name or ID")
@click.option("--sub", "sub_account", help="Sub account name or ID")
@click.option("--search", help="Only rows whose description or account names contain this text")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    main_account: str | None,
    sub_account: str | None,
    search: str | None,
):
    """List transactions, newest first, with running balance and totals.

    With --search, balances and totals cover the matching rows only.
    """
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    async def operation(db):
        filters = await build_filters(AccountDirectory(db), start, end, main_account, sub_account)
        ledger = LedgerStore(db)
        if await ledger.fetch_transactions(filters) is None:
            handle_domain_error(ctx, ledger.error)

        transactions = search_transactions(ledger.transactions, search)
        if not transactions:
            click.echo("No transactions found.")
            return
        balances = running_balance(transactions)

        click.echo(f"\nFound {len(transactions)} transaction(s):")
        click.echo("-" * 110)
        click.echo(
            f"{'ID':<6} {'Date':<12} {'Account':<30} {'Amount':>14} {'Balance':>14}  {'Description':<30}"
        )
        click.echo("-" * 110)
        for txn in transactions:
            account = f"{txn.main_account.name} > {txn.sub_account.name}"[:30]
            click.echo(
                f"{txn.id:<6} {str(txn.date):<12} {account:<30} "
                f"{format_signed(txn.amount, txn.type):>14} "
                f"{format_amount(balances[txn.id]):>14}  {txn.description[:30]:<30}"
            )
        click.echo("-" * 110)
        for line in format_totals(calculate_totals(transactions)):
            click.echo(line)

    run_with_database(ctx, operation)


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--main", "main_account", help="Main account name or ID")
@click.option("--sub", "sub_account", help="Sub account name or ID")
@click.option("--type", "txn_type", type=click.Choice([t.value for t in TransactionType]))
@click.option("--amount", help="Positive amount")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: int,
    main_account: str | None,
    sub_account: str | None,
    txn_type: str | None,
    amount: str | None,
    date: str | None,
    description: str | None,
):
    """Update a transaction in place.

    Updates only the fields that are provided.

    Examples:
        daybook transaction edit 4 --amount 75
        daybook transaction edit 4 --main Expenses --sub Utilities
    """
    changes = {}
    try:
        if date is not None:
            changes["date"] = parse_date(date)
        if amount is not None:
            changes["amount"] = parse_amount(amount)
    except ValidationError as e:
        handle_domain_error(ctx, e)
    if txn_type is not None:
        changes["type"] = txn_type
    if description is not None:
        changes["description"] = description

    async def operation(db):
        directory = AccountDirectory(db)
        if main_account is not None or sub_account is not None:
            await directory.refresh()
        main_id = None
        if main_account is not None:
            main_id = resolve_main_account(directory, main_account).id
            changes["main_account_id"] = main_id
        if sub_account is not None:
            changes["sub_account_id"] = resolve_sub_account(directory, sub_account, main_id).id

        ledger = LedgerStore(db)
        if not await ledger.update_transaction(transaction_id, **changes):
            handle_domain_error(ctx, ledger.error)
        click.echo(f"Updated transaction {transaction_id}")

    run_with_database(ctx, operation)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction. It can be restored with 'transaction undo'."""

    async def operation(db):
        ledger = LedgerStore(db)
        if await ledger.fetch_transactions() is None:
            handle_domain_error(ctx, ledger.error)

        txn = ledger.get_transaction_by_id(transaction_id)
        if txn is not None and not yes and not click.confirm(
            f"Delete transaction {txn.id} ({txn.date}, {txn.type.value} {format_amount(txn.amount)})?"
        ):
            click.echo("Deletion cancelled.")
            return

        archive = TransactionArchive(ledger)
        if not await archive.delete_transaction(transaction_id):
            handle_domain_error(ctx, archive.error)
        click.echo(f"Deleted transaction {transaction_id}")
        click.echo(f"Undo with: daybook transaction undo {transaction_id}")

    run_with_database(ctx, operation)


@transaction_group.command("undo")
@click.argument("original_id", type=int)
@click.pass_context
def undo_transaction(ctx, original_id: int):
    """Restore a deleted transaction by its former ID."""

    async def operation(db):
        ledger = LedgerStore(db)
        archive = TransactionArchive(ledger)
        if not await archive.undo_transaction(original_id):
            handle_domain_error(ctx, archive.error)
        click.echo(f"Restored transaction {original_id}")

    run_with_database(ctx, operation)


@transaction_group.command("trash")
@click.option("--limit", type=int, default=20, show_default=True, help="Maximum entries to show")
@click.pass_context
def list_deleted(ctx, limit: int):
    """List deleted transactions that can be restored."""

    async def operation(db):
        archive = TransactionArchive(LedgerStore(db))
        entries = await archive.list_archived(limit=limit)
        if entries is None:
            handle_domain_error(ctx, archive.error)

        if not entries:
            click.echo("No deleted transactions.")
            return

        click.echo(f"\n{'Orig ID':<8} {'Deleted at':<20} {'Date':<12} {'Type':<7} {'Amount':>12}  Description")
        click.echo("-" * 90)
        for entry in entries:
            data = entry.transaction_data
            click.echo(
                f"{entry.original_id:<8} {entry.deleted_at:%Y-%m-%d %H:%M:%S}  {data['date']:<12} "
                f"{data['type']:<7} {data['amount']:>12}  {data.get('description', '')}"
            )

    run_with_database(ctx, operation)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
