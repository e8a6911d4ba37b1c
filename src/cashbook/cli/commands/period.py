"""Budget period commands."""

import click
from cashbook.cli.error_handling import format_money, handle_domain_error
from cashbook.cli.resolution import resolve_household_or_exit
from cashbook.domain.budget_period import current_period, period_n_ago
from cashbook.domain.entities import TransactionKind
from cashbook.domain.errors import DomainError
from cashbook.domain.household import HouseholdService
from cashbook.domain.summary import SummaryService
from cashbook.utils.date_parser import parse_date


@click.group()
def period_group():
    """Show budget periods."""
    pass


@period_group.command("current")
@click.option("--date", "reference", help="Show the period containing this date instead of today")
@click.pass_context
def show_current(ctx, reference: str | None):
    """Show the budget period containing today (or --date)."""
    household_id = resolve_household_or_exit(ctx)
    try:
        start_day = HouseholdService(ctx.obj["db"]).get_budget_month_start_day(household_id)
        period = current_period(start_day, parse_date(reference) if reference else None)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{period.label} ({period.start_str} to {period.end_str})")


@period_group.command("recent")
@click.option("--count", type=click.IntRange(min=1), default=6, show_default=True, help="Number of periods")
@click.pass_context
def show_recent(ctx, count: int):
    """Show income and expenses for recent budget periods, oldest first."""
    household_id = resolve_household_or_exit(ctx)
    db = ctx.obj["db"]
    try:
        currency = HouseholdService(db).get_household(household_id).currency
        totals = SummaryService(db).period_totals(household_id, count=count)
    except DomainError as e:
        handle_domain_error(ctx, e)

    for item in totals:
        click.echo(
            f"{item.period.label:24s} | income {format_money(item.income, currency):>14s} | "
            f"expenses {format_money(item.expenses, currency):>14s} | net {format_money(item.net, currency):>14s}"
        )


@period_group.command("breakdown")
@click.option("--ago", "periods_ago", type=click.IntRange(min=0), default=0, help="Periods back (0 = current)")
@click.option("--income", is_flag=True, help="Break down income instead of expenses")
@click.pass_context
def show_breakdown(ctx, periods_ago: int, income: bool):
    """Show totals per category for one budget period."""
    household_id = resolve_household_or_exit(ctx)
    db = ctx.obj["db"]
    try:
        household = HouseholdService(db).get_household(household_id)
        period = period_n_ago(household.budget_month_start_day, periods_ago)
        totals = SummaryService(db).category_breakdown(
            household_id,
            start_date=period.start,
            end_date=period.end,
            kind=TransactionKind.INCOME if income else TransactionKind.EXPENSE,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{period.label} ({period.start_str} to {period.end_str})")
    if not totals:
        click.echo("No categorized transactions.")
        return
    for item in totals:
        click.echo(f"{item.name:16s} | {format_money(item.total, household.currency):>14s} | {item.count} transactions")


def register_commands(cli):
    """Register period commands with main CLI."""
    cli.add_command(period_group, name="period")
