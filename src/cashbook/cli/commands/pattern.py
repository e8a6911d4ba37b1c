"""Categorization pattern commands."""

import click
from cashbook.cli.error_handling import handle_domain_error
from cashbook.cli.resolution import resolve_category_or_exit, resolve_household_or_exit
from cashbook.domain.categorization import CategorizationService, suggest_pattern
from cashbook.domain.category import CategoryService
from cashbook.domain.errors import DomainError
from cashbook.domain.transaction import TransactionService


@click.group()
def pattern_group():
    """Manage keyword patterns used for auto-categorization."""
    pass


@pattern_group.command("list")
@click.pass_context
def list_patterns(ctx):
    """List patterns in the order they are evaluated."""
    household_id = resolve_household_or_exit(ctx)
    db = ctx.obj["db"]
    patterns = CategorizationService(db).list_patterns(household_id)
    if not patterns:
        click.echo("No patterns found.")
        return

    names = {cat.id: cat.name for cat in CategoryService(db).list_categories(household_id)}
    for item in patterns:
        marker = " (default)" if item.is_default else ""
        click.echo(
            f"ID: {item.id:3d} | p{item.priority:<3d} | {names.get(item.category_id, '?'):16s} | {item.pattern}{marker}"
        )


@pattern_group.command("add")
@click.argument("category")
@click.argument("pattern")
@click.option("--priority", type=int, default=0, show_default=True, help="Higher priority patterns win")
@click.pass_context
def add_pattern(ctx, category: str, pattern: str, priority: int):
    """Add a pattern for a category.

    PATTERN is one or more keywords separated by '|'.

    Examples:
        cashbook pattern add Groceries "ica|coop|willys"
        cashbook pattern add Streaming netflix --priority 10
    """
    household_id = resolve_household_or_exit(ctx)
    category_id = resolve_category_or_exit(ctx, household_id, category)
    try:
        pattern_id = CategorizationService(ctx.obj["db"]).add_pattern(
            household_id, category_id, pattern, priority=priority
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added pattern {pattern_id}")


@pattern_group.command("delete")
@click.argument("pattern_id", type=int)
@click.pass_context
def delete_pattern(ctx, pattern_id: int):
    """Delete a pattern."""
    household_id = resolve_household_or_exit(ctx)
    try:
        CategorizationService(ctx.obj["db"]).delete_pattern(household_id, pattern_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted pattern {pattern_id}")


@pattern_group.command("suggest")
@click.argument("description")
def suggest(description: str):
    """Suggest a merchant keyword for a description."""
    click.echo(suggest_pattern(description))


@pattern_group.command("learn")
@click.argument("transaction_id", type=int)
@click.argument("category")
@click.option("--pattern", help="Keyword to learn (defaults to a suggestion from the description)")
@click.option("--apply/--no-apply", default=True, show_default=True, help="Categorize matching uncategorized transactions")
@click.pass_context
def learn(ctx, transaction_id: int, category: str, pattern: str | None, apply: bool):
    """Categorize a transaction and learn a pattern from it.

    The transaction gets CATEGORY, a pattern is saved for future imports,
    and other uncategorized transactions matching it are categorized too.

    Examples:
        cashbook pattern learn 42 Groceries
        cashbook pattern learn 42 Dining --pattern "pizza hut" --no-apply
    """
    household_id = resolve_household_or_exit(ctx)
    category_id = resolve_category_or_exit(ctx, household_id, category)
    db = ctx.obj["db"]
    service = CategorizationService(db)
    transaction_service = TransactionService(db)

    try:
        txn = transaction_service.get_transaction(household_id, transaction_id)
        keyword = pattern or suggest_pattern(txn.description)
        transaction_service.update_category(household_id, transaction_id, category_id)
        _, is_new = service.save_pattern(household_id, category_id, keyword)
        click.echo(f"Pattern '{keyword}' {'saved' if is_new else 'already exists'}")

        if apply:
            matches = service.find_matches(household_id, keyword, exclude_id=transaction_id)
            if matches:
                updated = service.bulk_apply(household_id, [m.id for m in matches], category_id)
                click.echo(f"Categorized {updated} matching transaction{'s' if updated != 1 else ''}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register pattern commands with main CLI."""
    cli.add_command(pattern_group, name="pattern")
