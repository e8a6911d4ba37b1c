"""CSV mapping commands."""

from pathlib import Path

import click
from cashbook.cli.error_handling import handle_domain_error
from cashbook.cli.resolution import resolve_household_or_exit
from cashbook.domain.csv_detect import detect_structure
from cashbook.domain.csv_mapping import ALLOWED_DELIMITERS, DEFAULT_DATE_FORMAT, CSVMappingService
from cashbook.domain.errors import DomainError


def read_csv_file(csv_file: str) -> str:
    """Read a bank export, tolerating a UTF-8 byte order mark."""
    return Path(csv_file).read_text(encoding="utf-8-sig")


@click.group()
def mapping_group():
    """Manage saved CSV column mappings."""
    pass


@mapping_group.command("detect")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--rows", type=int, default=5, show_default=True, help="Sample rows to show")
@click.pass_context
def detect(ctx, csv_file: str, rows: int):
    """Detect the structure of a CSV file and suggest a mapping."""
    try:
        structure = detect_structure(read_csv_file(csv_file), preview_rows=rows)
    except DomainError as e:
        handle_domain_error(ctx, e)

    suggested = structure.suggested_mapping
    click.echo(f"Delimiter: {structure.delimiter!r}")
    click.echo(f"Columns: {', '.join(structure.headers)}")
    click.echo("\nSuggested mapping:")
    click.echo(f"  Date:        {suggested.date_column or '-'}")
    click.echo(f"  Description: {suggested.description_column or '-'}")
    click.echo(f"  Amount:      {suggested.amount_column or '-'}")
    click.echo(f"  Type:        {suggested.type_column or '-'}")
    click.echo(f"  Balance:     {suggested.balance_column or '-'}")

    if structure.sample_rows:
        click.echo("\nSample rows:")
        for row in structure.sample_rows:
            click.echo("  " + " | ".join(row.get(h, "") for h in structure.headers))


@mapping_group.command("save")
@click.argument("name")
@click.option("--date-column", required=True, help="Column holding the date")
@click.option("--description-column", required=True, help="Column holding the description")
@click.option("--amount-column", required=True, help="Column holding the amount")
@click.option("--type-column", help="Column holding a credit/debit marker")
@click.option("--balance-column", help="Column holding the running balance")
@click.option("--date-format", default=DEFAULT_DATE_FORMAT, show_default=True, help="Date format (YYYY, YY, MM, DD)")
@click.option("--delimiter", type=click.Choice(ALLOWED_DELIMITERS), default=",", show_default=True)
@click.option("--no-header", is_flag=True, help="The file has no header row; columns are 1-based positions")
@click.pass_context
def save_mapping(
    ctx,
    name: str,
    date_column: str,
    description_column: str,
    amount_column: str,
    type_column: str | None,
    balance_column: str | None,
    date_format: str,
    delimiter: str,
    no_header: bool,
):
    """Save a named CSV mapping.

    Examples:
        cashbook mapping save "Nordea" --date-column Bokföringsdag \\
            --description-column Rubrik --amount-column Belopp \\
            --balance-column Saldo --delimiter ";" --date-format YYYY/MM/DD
    """
    household_id = resolve_household_or_exit(ctx)
    service = CSVMappingService(ctx.obj["db"])
    try:
        mapping_id = service.save_mapping(
            household_id,
            name=name,
            date_column=date_column,
            description_column=description_column,
            amount_column=amount_column,
            type_column=type_column,
            balance_column=balance_column,
            date_format=date_format,
            delimiter=delimiter,
            has_header=not no_header,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Saved mapping '{name.strip()}' (ID: {mapping_id})")


@mapping_group.command("list")
@click.pass_context
def list_mappings(ctx):
    """List saved mappings, newest first."""
    household_id = resolve_household_or_exit(ctx)
    mappings = CSVMappingService(ctx.obj["db"]).list_mappings(household_id)
    if not mappings:
        click.echo("No CSV mappings found.")
        return

    for item in mappings:
        parts = [
            f"date={item.date_column}",
            f"description={item.description_column}",
            f"amount={item.amount_column}",
        ]
        if item.type_column:
            parts.append(f"type={item.type_column}")
        if item.balance_column:
            parts.append(f"balance={item.balance_column}")
        parts.append(f"format={item.date_format}")
        parts.append(f"delimiter={item.delimiter!r}")
        click.echo(f"{item.name}: {' '.join(parts)}")


@mapping_group.command("delete")
@click.argument("name")
@click.pass_context
def delete_mapping(ctx, name: str):
    """Delete a saved mapping."""
    household_id = resolve_household_or_exit(ctx)
    try:
        CSVMappingService(ctx.obj["db"]).delete_mapping(household_id, name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted mapping '{name}'")


def register_commands(cli):
    """Register mapping commands with main CLI."""
    cli.add_command(mapping_group, name="mapping")
