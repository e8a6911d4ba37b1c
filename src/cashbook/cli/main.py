"""Main CLI entry point."""

import logging

import click
from cashbook.database.factories import create_sqlite_database

# Import and register all commands at module level
from cashbook.cli.commands import (
    household,
    account,
    category,
    pattern,
    mapping,
    import_cmd,
    transaction,
    budget,
    period,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CASHBOOK_DB_PATH environment variable)",
    envvar="CASHBOOK_DB_PATH",
)
@click.option(
    "--household",
    "household",
    help="Household name or ID (defaults to the only household, if there is one)",
    envvar="CASHBOOK_HOUSEHOLD",
)
@click.option(
    "--user",
    help="Acting user ID; household commands then require membership",
    envvar="CASHBOOK_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="CASHBOOK_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, household: str | None, user: str | None, log_level: str):
    """Cashbook - Household finance tracking.

    Import bank statement CSV files, categorize transactions by keyword
    patterns, track budgets over payday-aligned periods and reconcile
    account balances.
    """
    logging.basicConfig(level=getattr(logging, log_level.upper()), format=LOG_FORMAT)
    ctx.ensure_object(dict)
    ctx.obj["household"] = household
    ctx.obj["user"] = user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
household.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
pattern.register_commands(cli)
mapping.register_commands(cli)
import_cmd.register_commands(cli)
transaction.register_commands(cli)
budget.register_commands(cli)
period.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
