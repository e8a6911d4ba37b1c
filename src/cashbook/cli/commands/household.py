"""Household management commands."""

import click
from cashbook.cli.error_handling import handle_domain_error
from cashbook.cli.resolution import resolve_household_or_exit
from cashbook.domain.errors import DomainError
from cashbook.domain.household import ADMIN_ROLE, MEMBER_ROLE, HouseholdService


@click.group()
def household_group():
    """Manage households and their settings."""
    pass


@household_group.command("create")
@click.argument("name")
@click.option("--currency", default="USD", show_default=True, help="Three-letter currency code")
@click.option("--start-day", type=int, default=1, show_default=True, help="Day of month budget periods start (1-31)")
@click.pass_context
def create_household(ctx, name: str, currency: str, start_day: int):
    """Create a household with default categories and patterns.

    When --user is set, that user becomes the household admin.

    Examples:
        cashbook household create "Home"
        cashbook --user alice household create "Home" --currency SEK --start-day 25
    """
    service = HouseholdService(ctx.obj["db"])
    try:
        household_id = service.create_household(
            name=name,
            currency=currency,
            budget_month_start_day=start_day,
            owner=ctx.obj.get("user"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created household '{name}' (ID: {household_id})")


@household_group.command("list")
@click.pass_context
def list_households(ctx):
    """List all households."""
    service = HouseholdService(ctx.obj["db"])
    households = service.list_households()
    if not households:
        click.echo("No households found.")
        return
    for item in households:
        click.echo(f"ID: {item.id:3d} | {item.name:20s} | {item.currency} | starts day {item.budget_month_start_day}")


@household_group.command("show")
@click.pass_context
def show_household(ctx):
    """Show the selected household's settings."""
    household_id = resolve_household_or_exit(ctx)
    item = HouseholdService(ctx.obj["db"]).get_household(household_id)
    click.echo(f"Household: {item.name} (ID: {item.id})")
    click.echo(f"Currency: {item.currency}")
    click.echo(f"Budget period start day: {item.budget_month_start_day}")


@household_group.command("settings")
@click.option("--name", help="New household name")
@click.option("--currency", help="New three-letter currency code")
@click.option("--start-day", type=int, help="New budget period start day (1-31)")
@click.pass_context
def update_settings(ctx, name: str | None, currency: str | None, start_day: int | None):
    """Update household settings.

    When --user is set, the user must be a household admin.

    Examples:
        cashbook household settings --start-day 25
        cashbook household settings --currency EUR
    """
    household_id = resolve_household_or_exit(ctx)
    service = HouseholdService(ctx.obj["db"])
    try:
        item = service.update_settings(
            household_id,
            name=name,
            currency=currency,
            budget_month_start_day=start_day,
            user_id=ctx.obj.get("user"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated household '{item.name}'")


@household_group.command("add-member")
@click.argument("user_id")
@click.option("--admin", is_flag=True, help="Grant the admin role")
@click.pass_context
def add_member(ctx, user_id: str, admin: bool):
    """Add a user to the selected household."""
    household_id = resolve_household_or_exit(ctx)
    service = HouseholdService(ctx.obj["db"])
    try:
        service.add_member(household_id, user_id, role=ADMIN_ROLE if admin else MEMBER_ROLE)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added '{user_id}' to household {household_id}")


def register_commands(cli):
    """Register household commands with main CLI."""
    cli.add_command(household_group, name="household")
