"""Tests for household selection and membership in the CLI."""

from cashbook.cli.main import cli


def _run(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_no_household(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "account", "list")
    assert result.exit_code == 1
    assert "No households found." in result.output


def test_create_and_show(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "household", "create", "Home", "--currency", "sek", "--start-day", "25")
    assert result.exit_code == 0
    assert "Created household 'Home'" in result.output

    result = _run(cli_runner, temp_db, "household", "show")
    assert result.exit_code == 0
    assert "Currency: SEK" in result.output
    assert "Budget period start day: 25" in result.output


def test_several_households_need_selection(cli_runner, temp_db):
    _run(cli_runner, temp_db, "household", "create", "One")
    _run(cli_runner, temp_db, "household", "create", "Two")

    result = _run(cli_runner, temp_db, "account", "list")
    assert result.exit_code == 1
    assert "--household" in result.output

    result = _run(cli_runner, temp_db, "--household", "Two", "household", "show")
    assert result.exit_code == 0
    assert "Household: Two" in result.output


def test_invalid_start_day(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "household", "create", "Home", "--start-day", "32")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_non_member_is_refused(cli_runner, temp_db, household):
    result = _run(cli_runner, temp_db, "--user", "mallory", "account", "list")
    assert result.exit_code == 1
    assert "not a member" in result.output

    result = _run(cli_runner, temp_db, "--user", "alice", "account", "list")
    assert result.exit_code == 0


def test_settings_require_admin(cli_runner, temp_db, household):
    result = _run(cli_runner, temp_db, "--user", "alice", "household", "add-member", "bob")
    assert result.exit_code == 0

    result = _run(cli_runner, temp_db, "--user", "bob", "household", "settings", "--start-day", "25")
    assert result.exit_code == 1
    assert "Only admins" in result.output

    result = _run(cli_runner, temp_db, "--user", "alice", "household", "settings", "--start-day", "25")
    assert result.exit_code == 0
    assert "Updated household 'Test Household'" in result.output
