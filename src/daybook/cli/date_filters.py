"""CLI helpers for date range resolution."""

from datetime import date

import click

from daybook.domain.errors import ValidationError
from daybook.utils.date_parser import PERIODS, get_date_range, parse_date

period_option = click.option(
    "--period",
    type=click.Choice(PERIODS),
    help="Named period (cannot be combined with --start-date/--end-date)",
)


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a period name or explicit dates."""
    if period is not None and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period is not None:
        return get_date_range(period)

    start = None
    end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValidationError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: --start-date must not be after --end-date.", err=True)
        ctx.exit(1)

    return start, end
