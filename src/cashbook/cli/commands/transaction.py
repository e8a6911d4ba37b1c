"""Transaction management commands."""

import click
from cashbook.cli.date_filters import resolve_cli_date_range
from cashbook.cli.error_handling import format_money, handle_domain_error
from cashbook.cli.resolution import (
    resolve_account_or_exit,
    resolve_category_or_exit,
    resolve_household_or_exit,
)
from cashbook.domain.category import CategoryService
from cashbook.domain.entities import TransactionKind
from cashbook.domain.errors import DomainError
from cashbook.domain.household import HouseholdService
from cashbook.domain.transaction import TransactionService
from cashbook.utils.amount_parser import parse_amount
from cashbook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--date", "txn_date", default="today", show_default=True, help="Date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--income", is_flag=True, help="Record income instead of an expense")
@click.option("--category", help="Category name or ID (auto-categorized if omitted)")
@click.option("--account", help="Account name or ID; its balance moves by the amount")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    amount: str,
    txn_date: str,
    income: bool,
    category: str | None,
    account: str | None,
):
    """Add a manual transaction.

    Examples:
        cashbook transaction add "Coffee at Starbucks" 4.50
        cashbook transaction add "Salary" 32000 --income --account Checking
        cashbook transaction add "Rent" 1200 --date 2024-01-01 --category Rent/Mortgage
    """
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account) if account else None
    category_id = resolve_category_or_exit(ctx, household_id, category) if category else None
    service = TransactionService(ctx.obj["db"])

    try:
        transaction_id = service.create_transaction(
            household_id,
            date=parse_date(txn_date),
            description=description,
            amount=parse_amount(amount),
            kind=TransactionKind.INCOME if income else TransactionKind.EXPENSE,
            category_id=category_id,
            account_id=account_id,
            created_by=ctx.obj.get("user"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--period", "periods_ago", type=click.IntRange(min=0), help="Budget period offset (0 = current, 1 = previous)")
@click.option("--category", help="Category name or ID")
@click.option("--account", help="Account name or ID")
@click.option("--uncategorized", is_flag=True, help="Show only uncategorized transactions")
@click.option("--batch", "batch_id", type=int, help="Show only one import batch")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    periods_ago: int | None,
    category: str | None,
    account: str | None,
    uncategorized: bool,
    batch_id: int | None,
):
    """View transactions with optional filters, newest first."""
    household_id = resolve_household_or_exit(ctx)
    db = ctx.obj["db"]
    start_day = HouseholdService(db).get_budget_month_start_day(household_id)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, periods_ago=periods_ago, start_day=start_day
    )
    category_id = resolve_category_or_exit(ctx, household_id, category) if category else None
    account_id = resolve_account_or_exit(ctx, household_id, account) if account else None

    try:
        transactions = TransactionService(db).list_transactions(
            household_id,
            start_date=start,
            end_date=end,
            category_id=category_id,
            account_id=account_id,
            uncategorized=uncategorized,
            import_batch_id=batch_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    names = {cat.id: cat.name for cat in CategoryService(db).list_categories(household_id)}
    for txn in transactions:
        category_name = names.get(txn.category_id, "-") if txn.category_id else "-"
        excluded = " [excluded]" if txn.excluded_from_reports else ""
        click.echo(
            f"{txn.id:5d} | {txn.date.isoformat()} | {format_money(txn.signed_amount):>12s} | "
            f"{category_name:16s} | {txn.description}{excluded}"
        )


@transaction_group.command("categorize")
@click.argument("transaction_id", type=int)
@click.argument("category", required=False)
@click.option("--clear", is_flag=True, help="Remove the category")
@click.pass_context
def categorize_transaction(ctx, transaction_id: int, category: str | None, clear: bool):
    """Set or clear a transaction's category.

    Use 'pattern learn' to also save a pattern for similar transactions.
    """
    household_id = resolve_household_or_exit(ctx)
    if not clear and category is None:
        click.echo("Error: Provide a CATEGORY or --clear.", err=True)
        ctx.exit(1)
    category_id = None if clear else resolve_category_or_exit(ctx, household_id, category)
    try:
        TransactionService(ctx.obj["db"]).update_category(household_id, transaction_id, category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--date", "txn_date", help="New date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--kind", type=click.Choice([k.value for k in TransactionKind]), help="New kind")
@click.option("--account", help="New account name or ID")
@click.option("--balance-after", help="Account balance after this transaction")
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: int,
    txn_date: str | None,
    description: str | None,
    amount: str | None,
    kind: str | None,
    account: str | None,
    balance_after: str | None,
):
    """Edit a transaction. The account balance is not adjusted.

    Examples:
        cashbook transaction edit 12 --amount 45.90
        cashbook transaction edit 12 --kind income --description "Refund"
        cashbook transaction edit 12 --balance-after 10250.00
    """
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account) if account else None
    try:
        TransactionService(ctx.obj["db"]).update_transaction(
            household_id,
            transaction_id,
            date=parse_date(txn_date) if txn_date else None,
            description=description,
            amount=parse_amount(amount) if amount else None,
            kind=kind,
            account_id=account_id,
            balance_after=parse_amount(balance_after) if balance_after else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("exclude")
@click.argument("transaction_id", type=int)
@click.option("--include", is_flag=True, help="Include the transaction in reports again")
@click.pass_context
def exclude_transaction(ctx, transaction_id: int, include: bool):
    """Exclude a transaction from reports and budget progress."""
    household_id = resolve_household_or_exit(ctx)
    try:
        TransactionService(ctx.obj["db"]).set_excluded(household_id, transaction_id, excluded=not include)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{'Included' if include else 'Excluded'} transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction."""
    household_id = resolve_household_or_exit(ctx)
    service = TransactionService(ctx.obj["db"])
    try:
        txn = service.get_transaction(household_id, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Delete transaction {transaction_id} ({txn.description})?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_transaction(household_id, transaction_id)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
