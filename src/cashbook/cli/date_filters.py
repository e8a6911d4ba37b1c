"""CLI helpers for date range resolution."""

from datetime import date

import click

from cashbook.cli.error_handling import handle_domain_error
from cashbook.domain.budget_period import period_n_ago
from cashbook.domain.errors import DomainError
from cashbook.utils.date_parser import parse_date


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    periods_ago: int | None,
    start_day: int,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a budget period offset or explicit dates."""
    if periods_ago is not None and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    try:
        if periods_ago is not None:
            period = period_n_ago(start_day, periods_ago)
            return period.start, period.end

        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except DomainError as e:
        handle_domain_error(ctx, e)

    return start, end
