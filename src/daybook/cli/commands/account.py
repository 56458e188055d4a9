"""Account management commands."""

import click

from daybook.cli.error_handling import handle_domain_error
from daybook.cli.runner import run_with_database
from daybook.domain.accounts import AccountDirectory
from daybook.utils.account_resolver import resolve_main_account, resolve_sub_account


@click.group()
def account_group():
    """Manage main and sub accounts."""
    pass


@account_group.group("main")
def main_group():
    """Manage main accounts."""
    pass


@account_group.group("sub")
def sub_group():
    """Manage sub accounts."""
    pass


@main_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--description", help="Optional description")
@click.pass_context
def create_main_account(ctx, name: str, description: str | None):
    """Create a main account.

    Examples:
        daybook account main create "Expenses"
        daybook account main create "Income" --description "All income sources"
    """

    async def operation(db):
        directory = AccountDirectory(db)
        account = await directory.create_main_account(name, description)
        if account is None:
            handle_domain_error(ctx, directory.error)
        click.echo(f"Created main account '{account.name}' (ID: {account.id})")

    run_with_database(ctx, operation)


@main_group.command("list")
@click.pass_context
def list_main_accounts(ctx):
    """List main accounts with their sub accounts."""

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.refresh()
        if directory.error is not None:
            handle_domain_error(ctx, directory.error)

        if not directory.main_accounts:
            click.echo("No main accounts found.")
            return

        click.echo("\nMain accounts:")
        click.echo("-" * 60)
        for acc in directory.main_accounts:
            click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {acc.description or ''}")
            for sub in directory.sub_accounts_for(acc.id):
                click.echo(f"       - {sub.id:3d} | {sub.name}")

    run_with_database(ctx, operation)


@main_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--description", help="New description (optional)")
@click.pass_context
def rename_main_account(ctx, account: str, new_name: str, description: str | None):
    """Rename a main account.

    ACCOUNT can be a main account name or ID.
    """

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.fetch_main_accounts()
        target = resolve_main_account(directory, account)
        if not await directory.update_main_account(target.id, name=new_name, description=description):
            handle_domain_error(ctx, directory.error)
        click.echo(f"Renamed main account to '{new_name}'")

    run_with_database(ctx, operation)


@main_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_main_account(ctx, account: str, yes: bool):
    """Delete a main account.

    The account can only be deleted if no sub accounts and no transactions
    reference it.
    """

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.fetch_main_accounts()
        target = resolve_main_account(directory, account)

        if not yes and not click.confirm(
            f"Are you sure you want to delete main account '{target.name}' (ID: {target.id})?"
        ):
            click.echo("Deletion cancelled.")
            return

        if not await directory.delete_main_account(target.id):
            handle_domain_error(ctx, directory.error)
        click.echo(f"Deleted main account '{target.name}'")

    run_with_database(ctx, operation)


@sub_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--main", "main_account", required=True, help="Parent main account name or ID")
@click.option("--description", help="Optional description")
@click.pass_context
def create_sub_account(ctx, name: str, main_account: str, description: str | None):
    """Create a sub account under a main account.

    Examples:
        daybook account sub create "Rent" --main "Expenses"
    """

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.fetch_main_accounts()
        parent = resolve_main_account(directory, main_account)
        account = await directory.create_sub_account(name, parent.id, description)
        if account is None:
            handle_domain_error(ctx, directory.error)
        click.echo(f"Created sub account '{account.name}' (ID: {account.id}) under '{parent.name}'")

    run_with_database(ctx, operation)


@sub_group.command("list")
@click.option("--main", "main_account", help="Only sub accounts of this main account (name or ID)")
@click.pass_context
def list_sub_accounts(ctx, main_account: str | None):
    """List sub accounts."""

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.fetch_main_accounts()
        parent_id = None
        if main_account is not None:
            parent_id = resolve_main_account(directory, main_account).id
        accounts = await directory.fetch_sub_accounts(parent_id)
        if accounts is None:
            handle_domain_error(ctx, directory.error)

        if not accounts:
            click.echo("No sub accounts found.")
            return

        click.echo("\nSub accounts:")
        click.echo("-" * 60)
        for acc in accounts:
            parent = directory.get_main_account_by_id(acc.main_account_id)
            parent_name = parent.name if parent else "Unknown"
            click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | Main: {parent_name}")

    run_with_database(ctx, operation)


@sub_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--main", "main_account", help="Main account the sub account belongs to (name or ID)")
@click.option("--description", help="New description (optional)")
@click.pass_context
def rename_sub_account(
    ctx, account: str, new_name: str, main_account: str | None, description: str | None
):
    """Rename a sub account.

    ACCOUNT can be a sub account name or ID.
    """

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.refresh()
        parent_id = resolve_main_account(directory, main_account).id if main_account else None
        target = resolve_sub_account(directory, account, parent_id)
        if not await directory.update_sub_account(target.id, name=new_name, description=description):
            handle_domain_error(ctx, directory.error)
        click.echo(f"Renamed sub account to '{new_name}'")

    run_with_database(ctx, operation)


@sub_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--main", "main_account", help="Main account the sub account belongs to (name or ID)")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_sub_account(ctx, account: str, main_account: str | None, yes: bool):
    """Delete a sub account.

    The account can only be deleted if no transactions reference it.
    """

    async def operation(db):
        directory = AccountDirectory(db)
        await directory.refresh()
        parent_id = resolve_main_account(directory, main_account).id if main_account else None
        target = resolve_sub_account(directory, account, parent_id)

        if not yes and not click.confirm(
            f"Are you sure you want to delete sub account '{target.name}' (ID: {target.id})?"
        ):
            click.echo("Deletion cancelled.")
            return

        if not await directory.delete_sub_account(target.id):
            handle_domain_error(ctx, directory.error)
        click.echo(f"Deleted sub account '{target.name}'")

    run_with_database(ctx, operation)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
