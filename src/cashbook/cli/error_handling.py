"""CLI error handling helpers."""

from decimal import Decimal

import click

from cashbook.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | OSError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def format_money(amount: Decimal, currency: str = "") -> str:
    """Format an amount with thousands separators and two decimals."""
    text = f"{amount:,.2f}"
    return f"{text} {currency}" if currency else text
