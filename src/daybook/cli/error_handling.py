"""CLI error handling helpers."""

from typing import Optional

import click

from daybook.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: Optional[DomainError]) -> None:
    """Render a domain error and exit with failure."""
    message = str(error) if error is not None else "Operation failed"
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)
