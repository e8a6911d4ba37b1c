"""CSV import command."""

import click
from cashbook.cli.commands.mapping import read_csv_file
from cashbook.cli.error_handling import format_money, handle_domain_error
from cashbook.cli.resolution import resolve_account_or_exit, resolve_household_or_exit
from cashbook.domain.csv_detect import detect_structure
from cashbook.domain.csv_import import CSVImportService, ImportMapping
from cashbook.domain.errors import DomainError, ValidationError


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--mapping", "mapping_name", help="Saved CSV mapping name (detected from the file if omitted)")
@click.option("--account", help="Account name or ID the rows belong to")
@click.pass_context
def import_csv(ctx, csv_file: str, mapping_name: str | None, account: str | None):
    """Import transactions from a CSV file.

    Rows that fail to parse are reported and skipped; the rest are imported.
    When the file has a balance column and --account is given, the account
    balance is set to the last reported balance.

    Examples:
        cashbook import statement.csv --mapping "Nordea" --account Checking
        cashbook import export.csv
    """
    household_id = resolve_household_or_exit(ctx)
    account_id = resolve_account_or_exit(ctx, household_id, account) if account else None
    service = CSVImportService(ctx.obj["db"])

    try:
        csv_text = read_csv_file(csv_file)
        if mapping_name:
            result = service.import_with_mapping(
                household_id, csv_text, mapping_name, account_id=account_id, created_by=ctx.obj.get("user")
            )
        else:
            structure = detect_structure(csv_text)
            suggested = structure.suggested_mapping
            if suggested.date_column is None or suggested.amount_column is None:
                raise ValidationError("Could not detect date and amount columns; save a mapping with 'mapping save'")
            result = service.import_transactions(
                household_id,
                csv_text,
                ImportMapping(
                    date_column=suggested.date_column,
                    description_column=suggested.description_column or "",
                    amount_column=suggested.amount_column,
                    type_column=suggested.type_column,
                    balance_column=suggested.balance_column,
                    delimiter=structure.delimiter,
                ),
                account_id=account_id,
                created_by=ctx.obj.get("user"),
            )
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Failed: {result.failed}")
    click.echo(f"  Batch: {result.batch_id}")
    if result.final_balance is not None:
        click.echo(f"  Account balance set to {format_money(result.final_balance)}")
    for error in result.errors:
        click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
