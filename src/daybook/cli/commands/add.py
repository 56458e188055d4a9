"""Add transaction command."""

import click

from daybook.cli.error_handling import handle_domain_error
from daybook.cli.formatting import format_amount
from daybook.cli.runner import run_with_database
from daybook.domain.accounts import AccountDirectory
from daybook.domain.entities import MainAccount, SubAccount, TransactionType
from daybook.domain.errors import NotFoundError, ValidationError
from daybook.domain.ledger import LedgerStore
from daybook.utils.account_resolver import resolve_main_account, resolve_sub_account
from daybook.utils.amount_parser import parse_amount
from daybook.utils.date_parser import parse_date


async def _main_account(ctx, directory: AccountDirectory, name: str, create: bool) -> MainAccount:
    try:
        return resolve_main_account(directory, name)
    except NotFoundError:
        if not create:
            raise
    account = await directory.create_main_account(name)
    if account is None:
        handle_domain_error(ctx, directory.error)
    click.echo(f"Created main account '{account.name}' (ID: {account.id})")
    return account


async def _sub_account(
    ctx, directory: AccountDirectory, name: str, parent: MainAccount, create: bool
) -> SubAccount:
    try:
        return resolve_sub_account(directory, name, parent.id)
    except NotFoundError:
        if not create:
            raise
    account = await directory.create_sub_account(name, parent.id)
    if account is None:
        handle_domain_error(ctx, directory.error)
    click.echo(f"Created sub account '{account.name}' (ID: {account.id})")
    return account


@click.command("add")
@click.option("--main", "main_account", required=True, help="Main account name or ID")
@click.option("--sub", "sub_account", required=True, help="Sub account name or ID")
@click.option(
    "--type",
    "txn_type",
    required=True,
    type=click.Choice([t.value for t in TransactionType]),
    help="credit or debit",
)
@click.option("--amount", required=True, help="Positive amount (e.g., 123.45)")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", default="", help="Transaction description")
@click.option(
    "--create-accounts",
    is_flag=True,
    help="Create the main/sub account when no account with that name exists",
)
@click.pass_context
def add_transaction(
    ctx,
    main_account: str,
    sub_account: str,
    txn_type: str,
    amount: str,
    date: str,
    description: str,
    create_accounts: bool,
):
    """Record a transaction.

    Examples:
        daybook add --main Expenses --sub Rent --type debit --amount 500 --description "rent"
        daybook add --main Income --sub Salary --type credit --amount 2500 --create-accounts
    """
    try:
        txn_date = parse_date(date)
        txn_amount = parse_amount(amount)
    except ValidationError as e:
        handle_domain_error(ctx, e)

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.refresh()
        main = await _main_account(ctx, directory, main_account, create_accounts)
        sub = await _sub_account(ctx, directory, sub_account, main, create_accounts)

        ledger = LedgerStore(db)
        txn = await ledger.create_transaction(
            date=txn_date,
            main_account_id=main.id,
            sub_account_id=sub.id,
            description=description,
            amount=txn_amount,
            type=txn_type,
            created_by=ctx.obj["user"],
        )
        if txn is None:
            handle_domain_error(ctx, ledger.error)

        click.echo(f"Created transaction {txn.id}")
        click.echo(f"  Account: {main.name} > {sub.name}")
        click.echo(f"  Date: {txn.date}")
        click.echo(f"  {txn.type.value.capitalize()}: {format_amount(txn.amount)}")
        if txn.description:
            click.echo(f"  Description: {txn.description}")

    run_with_database(ctx, operation)


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
