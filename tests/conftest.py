"""Shared pytest fixtures for cashbook tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from cashbook.database.factories import create_sqlite_database
from cashbook.domain.account import AccountService
from cashbook.domain.budget import BudgetService
from cashbook.domain.categorization import CategorizationService
from cashbook.domain.category import CategoryService
from cashbook.domain.csv_import import CSVImportService
from cashbook.domain.csv_mapping import CSVMappingService
from cashbook.domain.household import HouseholdService
from cashbook.domain.reconciliation import ReconciliationService
from cashbook.domain.summary import SummaryService
from cashbook.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that open their own connection
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def household_service(temp_db):
    return HouseholdService(temp_db)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def categorization_service(temp_db):
    return CategorizationService(temp_db)


@pytest.fixture
def mapping_service(temp_db):
    return CSVMappingService(temp_db)


@pytest.fixture
def import_service(temp_db):
    return CSVImportService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    return ReconciliationService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    return BudgetService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    return SummaryService(temp_db)


@pytest.fixture
def household(household_service):
    """A household seeded with the default categories, owned by 'alice'."""
    household_id = household_service.create_household("Test Household", owner="alice")
    return household_service.get_household(household_id)


@pytest.fixture
def sample_account(account_service, household):
    """A checking account with an opening balance of 1000."""
    account_id = account_service.create_account(
        household.id, name="Checking", institution="Test Bank", balance=Decimal("1000")
    )
    return account_service.get_account(household.id, account_id)


@pytest.fixture
def empty_household(temp_db):
    """A household without categories, created straight through the store."""
    household_id = temp_db.create_household(name="Bare")
    return temp_db.get_household(household_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
