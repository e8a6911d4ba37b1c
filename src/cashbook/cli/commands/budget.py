"""Budget commands."""

import click
from cashbook.cli.error_handling import format_money, handle_domain_error
from cashbook.cli.resolution import resolve_category_or_exit, resolve_household_or_exit
from cashbook.domain.budget import BudgetService
from cashbook.domain.category import CategoryService
from cashbook.domain.entities import BudgetPeriodType
from cashbook.domain.errors import DomainError
from cashbook.domain.household import HouseholdService
from cashbook.utils.amount_parser import parse_amount
from cashbook.utils.date_parser import parse_date

PERIOD_CHOICES = [period.value for period in BudgetPeriodType]


@click.group()
def budget_group():
    """Manage budgets."""
    pass


@budget_group.command("create")
@click.argument("category")
@click.argument("amount")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), default="monthly", show_default=True)
@click.option("--start-date", help="First day the budget applies (default: today)")
@click.option("--end-date", help="Last day the budget applies")
@click.pass_context
def create_budget(ctx, category: str, amount: str, period: str, start_date: str | None, end_date: str | None):
    """Create a budget for a category.

    Examples:
        cashbook budget create Groceries 600
        cashbook budget create Insurance 2400 --period yearly
    """
    household_id = resolve_household_or_exit(ctx)
    category_id = resolve_category_or_exit(ctx, household_id, category)
    try:
        budget_id = BudgetService(ctx.obj["db"]).create_budget(
            household_id,
            category_id,
            parse_amount(amount),
            period=BudgetPeriodType(period),
            start_date=parse_date(start_date) if start_date else None,
            end_date=parse_date(end_date) if end_date else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created budget {budget_id}")


@budget_group.command("list")
@click.pass_context
def list_budgets(ctx):
    """List budgets by category."""
    household_id = resolve_household_or_exit(ctx)
    db = ctx.obj["db"]
    budgets = BudgetService(db).list_budgets(household_id)
    if not budgets:
        click.echo("No budgets found.")
        return

    currency = HouseholdService(db).get_household(household_id).currency
    names = {cat.id: cat.name for cat in CategoryService(db).list_categories(household_id)}
    for budget in budgets:
        until = f" until {budget.end_date.isoformat()}" if budget.end_date else ""
        click.echo(
            f"ID: {budget.id:3d} | {names.get(budget.category_id, '?'):16s} | "
            f"{format_money(budget.amount, currency):>14s} {budget.period.value} "
            f"from {budget.start_date.isoformat()}{until}"
        )


@budget_group.command("progress")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), default="monthly", show_default=True)
@click.option("--ago", "periods_ago", type=click.IntRange(min=0), default=0, help="Periods back (0 = current)")
@click.pass_context
def budget_progress(ctx, period: str, periods_ago: int):
    """Show spending against budgets for one period.

    Monthly budgets follow the household's budget period start day;
    yearly budgets follow the calendar year.
    """
    household_id = resolve_household_or_exit(ctx)
    db = ctx.obj["db"]
    service = BudgetService(db)
    try:
        date_range = service.progress_range(household_id, BudgetPeriodType(period), periods_ago)
        progress = service.get_budget_progress(household_id, BudgetPeriodType(period), periods_ago)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Budget progress for {date_range.label} ({date_range.start_str} to {date_range.end_str})")
    if not progress:
        click.echo("No budgets found.")
        return

    currency = HouseholdService(db).get_household(household_id).currency
    for item in progress:
        flag = " OVER" if item.is_over else ""
        click.echo(
            f"{item.category_name:16s} | spent {format_money(item.spent, currency):>14s} "
            f"of {format_money(item.budget.amount, currency):>14s} | "
            f"left {format_money(item.remaining, currency):>14s}{flag}"
        )


@budget_group.command("delete")
@click.argument("budget_id", type=int)
@click.pass_context
def delete_budget(ctx, budget_id: int):
    """Delete a budget."""
    household_id = resolve_household_or_exit(ctx)
    try:
        BudgetService(ctx.obj["db"]).delete_budget(household_id, budget_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted budget {budget_id}")


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
