"""Category management commands."""

import click
from cashbook.cli.error_handling import handle_domain_error
from cashbook.cli.resolution import resolve_household_or_exit
from cashbook.domain.category import DEFAULT_COLOR, CategoryService
from cashbook.domain.entities import TransactionKind
from cashbook.domain.errors import DomainError

KIND_CHOICES = [kind.value for kind in TransactionKind]


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--kind", type=click.Choice(KIND_CHOICES, case_sensitive=False), help="Only list one kind")
@click.pass_context
def list_categories(ctx, kind: str | None):
    """List categories by name."""
    household_id = resolve_household_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(
        household_id, kind=TransactionKind(kind.lower()) if kind else None
    )
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"ID: {cat.id:3d} | {cat.name:20s} | {cat.kind.value:7s} | {cat.color}")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--kind",
    type=click.Choice(KIND_CHOICES, case_sensitive=False),
    default="expense",
    show_default=True,
    help="Category kind",
)
@click.option("--color", default=DEFAULT_COLOR, show_default=True, help="Display color")
@click.pass_context
def create_category(ctx, name: str, kind: str, color: str):
    """Create a new category."""
    household_id = resolve_household_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(
            household_id, name=name, kind=TransactionKind(kind.lower()), color=color
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name.strip()}' (ID: {category_id})")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
