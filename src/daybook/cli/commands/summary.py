"""Summary and dashboard commands."""

from datetime import date

import click

from daybook.cli.commands.transaction import build_filters
from daybook.cli.date_filters import period_option, resolve_cli_date_range
from daybook.cli.error_handling import handle_domain_error
from daybook.cli.formatting import format_amount, format_signed, format_totals
from daybook.cli.runner import run_with_database
from daybook.domain.accounts import AccountDirectory
from daybook.domain.aggregation import (
    monthly_activity,
    recent_transactions,
    summarize_by_main_account,
    summarize_by_period,
)
from daybook.domain.entities import SummaryPeriod
from daybook.domain.ledger import LedgerStore


def _echo_rows(label: str, rows) -> None:
    click.echo(f"{label:<20} {'Credit':>14} {'Debit':>14} {'Balance':>14}")
    click.echo("-" * 65)
    for name, credit, debit, balance in rows:
        click.echo(
            f"{name:<20} {format_amount(credit):>14} {format_amount(debit):>14} {format_amount(balance):>14}"
        )


@click.command("summary")
@click.option("--start-date", help="Start date, inclusive")
@click.option("--end-date", help="End date, inclusive")
@period_option
@click.option("--main", "main_account", help="Main account name or ID")
@click.option("--sub", "sub_account", help="Sub account name or ID")
@click.option(
    "--by",
    "group_by",
    type=click.Choice(["none", "monthly", "yearly", "account"]),
    default="none",
    show_default=True,
    help="Break totals down by period or main account",
)
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    main_account: str | None,
    sub_account: str | None,
    group_by: str,
):
    """Show credit/debit totals and balance for the filtered ledger."""
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    async def operation(db):
        filters = await build_filters(AccountDirectory(db), start, end, main_account, sub_account)
        ledger = LedgerStore(db)
        transactions = await ledger.fetch_transactions(filters)
        if transactions is None:
            handle_domain_error(ctx, ledger.error)

        click.echo(f"\nTransactions: {len(transactions)}")
        for line in format_totals(ledger.totals):
            click.echo(line)

        if group_by in (SummaryPeriod.MONTHLY.value, SummaryPeriod.YEARLY.value):
            click.echo("")
            _echo_rows(
                "Period",
                [
                    (s.period, s.total_credit, s.total_debit, s.balance)
                    for s in summarize_by_period(transactions, group_by)
                ],
            )
        elif group_by == "account":
            click.echo("")
            _echo_rows(
                "Main account",
                [
                    (s.account_name[:20], s.total_credit, s.total_debit, s.balance)
                    for s in summarize_by_main_account(transactions)
                ],
            )

    run_with_database(ctx, operation)


@click.command("dashboard")
@click.option("--months", type=int, default=6, show_default=True, help="Months of activity to show")
@click.pass_context
def dashboard(ctx, months: int):
    """Overview: totals, recent months, account balances and latest entries."""

    async def operation(db):
        ledger = LedgerStore(db)
        transactions = await ledger.fetch_transactions()
        if transactions is None:
            handle_domain_error(ctx, ledger.error)

        click.echo("")
        for line in format_totals(ledger.totals):
            click.echo(line)

        click.echo(f"\nLast {months} months:")
        _echo_rows(
            "Month",
            [
                (s.period, s.total_credit, s.total_debit, s.balance)
                for s in monthly_activity(transactions, date.today(), months)
            ],
        )

        click.echo("\nBy main account:")
        _echo_rows(
            "Main account",
            [
                (s.account_name[:20], s.total_credit, s.total_debit, s.balance)
                for s in summarize_by_main_account(transactions)
            ],
        )

        click.echo("\nRecent transactions:")
        recent = recent_transactions(transactions)
        if not recent:
            click.echo("No recent transactions found.")
        for txn in recent:
            click.echo(
                f"{str(txn.date):<12} {txn.main_account.name[:20]:<20} "
                f"{format_signed(txn.amount, txn.type):>14}  {txn.description[:40]}"
            )

    run_with_database(ctx, operation)


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary)
    cli.add_command(dashboard)
