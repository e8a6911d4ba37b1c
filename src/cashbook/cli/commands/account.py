"""Account management commands."""

import click
from cashbook.cli.error_handling import format_money, handle_domain_error
from cashbook.cli.resolution import resolve_account_or_exit, resolve_household_or_exit
from cashbook.domain.account import AccountService
from cashbook.domain.entities import ACCOUNT_TYPES
from cashbook.domain.errors import DomainError
from cashbook.domain.reconciliation import ReconciliationService
from cashbook.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="checking", show_default=True)
@click.option("--institution", help="Bank or institution name")
@click.option("--last4", help="Last 4 digits of the account number")
@click.option("--balance", default="0", help="Opening balance (e.g., 1234.56 or 1.234,56)")
@click.option("--currency", help="Currency code (defaults to the household currency)")
@click.pass_context
def create_account(
    ctx,
    name: str,
    account_type: str,
    institution: str | None,
    last4: str | None,
    balance: str,
    currency: str | None,
):
    """Create a new account.

    The opening balance is recorded as the first balance snapshot.

    Examples:
        cashbook account create "Checking" --institution "Chase" --balance 1500
        cashbook account create "Savings" --type savings --balance "10.000,00"
    """
    household_id = resolve_household_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(
            household_id,
            name=name,
            account_type=account_type,
            institution=institution,
            account_number_last4=last4,
            balance=parse_amount(balance),
            currency=currency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--active", is_flag=True, help="Only show active accounts")
@click.pass_context
def list_accounts(ctx, active: bool):
    """List accounts, active first."""
    household_id = resolve_household_or_exit(ctx)
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(household_id, active_only=active)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type:11s} | "
            f"{format_money(acc.balance, acc.currency):>16s}{status}"
        )


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_balance", required=False)
@click.pass_context
def account_balance(ctx, account: str, new_balance: str | None):
    """Show or set an account's stored balance.

    ACCOUNT can be an account name or ID. Setting a balance records a
    snapshot in the balance history.

    Examples:
        cashbook account balance "Checking"
        cashbook account balance "Checking" 2500.00
    """
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account)
    service = AccountService(ctx.obj["db"])
    try:
        if new_balance is not None:
            service.set_balance(household_id, account_id, parse_amount(new_balance))
        acc = service.get_account(household_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{acc.name}: {format_money(acc.balance, acc.currency)}")


@account_group.command("reconcile")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def reconcile_account(ctx, account: str):
    """Compare the stored balance with the balance implied by transactions.

    ACCOUNT can be an account name or ID.
    """
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account)
    db = ctx.obj["db"]
    try:
        acc = AccountService(db).get_account(household_id, account_id)
        result = ReconciliationService(db).reconcile(account_id, household_id=household_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Account: {acc.name}")
    click.echo(f"  Stored balance:     {format_money(result.stored_balance, acc.currency)}")
    click.echo(f"  Calculated balance: {format_money(result.calculated_balance, acc.currency)} ({result.method})")
    click.echo(f"  Difference:         {format_money(result.difference, acc.currency)}")
    if not result.is_balanced():
        click.echo("Warning: stored and calculated balances differ.", err=True)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str):
    """Mark an account inactive, keeping its transactions."""
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account)
    try:
        AccountService(ctx.obj["db"]).deactivate(household_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated account {account_id}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if no transactions reference it; use
    'account deactivate' otherwise.

    Examples:
        cashbook account delete "Old Savings"
        cashbook account delete 3 --yes
    """
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account)
    service = AccountService(ctx.obj["db"])
    account_obj = service.get_account(household_id, account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(household_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


@account_group.command("history")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def balance_history(ctx, account: str):
    """Show an account's balance snapshots, oldest first."""
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account)
    service = AccountService(ctx.obj["db"])
    acc = service.get_account(household_id, account_id)
    snapshots = service.balance_history(household_id, account_id)
    if not snapshots:
        click.echo("No balance history.")
        return
    for snapshot in snapshots:
        click.echo(f"{snapshot.recorded_at:%Y-%m-%d %H:%M} | {format_money(snapshot.balance, acc.currency):>16s}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
