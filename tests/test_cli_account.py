"""Tests for account CLI commands."""

from datetime import date
from decimal import Decimal

from cashbook.cli.main import cli
from cashbook.domain.entities import TransactionKind


def _run(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def _line(output, label):
    return next(line for line in output.splitlines() if label in line)


def test_create_and_list(cli_runner, temp_db, household):
    result = _run(cli_runner, temp_db, "account", "create", "Savings", "--type", "savings", "--balance", "1.234,50")
    assert result.exit_code == 0
    assert "Created account 'Savings'" in result.output

    result = _run(cli_runner, temp_db, "account", "list")
    assert result.exit_code == 0
    assert "Savings" in result.output
    assert "1,234.50 USD" in result.output


def test_list_empty(cli_runner, temp_db, household):
    result = _run(cli_runner, temp_db, "account", "list")
    assert result.exit_code == 0
    assert "No accounts found." in result.output


def test_balance_show_and_set(cli_runner, temp_db, household, sample_account):
    result = _run(cli_runner, temp_db, "account", "balance", "Checking")
    assert result.exit_code == 0
    assert "Checking: 1,000.00 USD" in result.output

    result = _run(cli_runner, temp_db, "account", "balance", str(sample_account.id), "2500")
    assert result.exit_code == 0
    assert "Checking: 2,500.00 USD" in result.output

    result = _run(cli_runner, temp_db, "account", "history", "Checking")
    assert result.exit_code == 0
    assert "1,000.00 USD" in result.output
    assert "2,500.00 USD" in result.output


def test_unknown_account(cli_runner, temp_db, household):
    result = _run(cli_runner, temp_db, "account", "balance", "Nope")
    assert result.exit_code == 1
    assert "Error: Account 'Nope' not found" in result.output


def test_reconcile_balanced(cli_runner, temp_db, household, sample_account):
    result = _run(cli_runner, temp_db, "account", "reconcile", "Checking")
    assert result.exit_code == 0
    assert "(snapshot)" in result.output
    assert _line(result.output, "Difference").endswith(" 0.00 USD")
    assert "Warning" not in result.output


def test_reconcile_warns_on_drift(cli_runner, temp_db, household, sample_account):
    temp_db.update_account_balance(sample_account.id, Decimal("900"))
    result = _run(cli_runner, temp_db, "account", "reconcile", "Checking")
    assert result.exit_code == 0
    assert _line(result.output, "Difference").endswith(" -100.00 USD")
    assert "Warning: stored and calculated balances differ." in result.output


def test_delete_with_confirmation(cli_runner, temp_db, household, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Checking"], input="n\n"
    )
    assert result.exit_code == 0
    assert "Deletion cancelled." in result.output

    result = _run(cli_runner, temp_db, "account", "delete", "Checking", "--yes")
    assert result.exit_code == 0
    assert "Deleted account 'Checking'" in result.output


def test_delete_blocked(cli_runner, temp_db, household, sample_account):
    temp_db.create_transaction(
        household_id=household.id,
        date=date(2024, 1, 5),
        description="Coffee",
        amount=Decimal("4"),
        kind=TransactionKind.EXPENSE,
        account_id=sample_account.id,
    )
    result = _run(cli_runner, temp_db, "account", "delete", "Checking", "--yes")
    assert result.exit_code == 1
    assert "Set it as inactive instead." in result.output

    result = _run(cli_runner, temp_db, "account", "deactivate", "Checking")
    assert result.exit_code == 0
    result = _run(cli_runner, temp_db, "account", "list", "--active")
    assert "No accounts found." in result.output
