"""Tests for the SQLAlchemy store."""

import pytest
from datetime import date
from decimal import Decimal

from cashbook.database import Database
from cashbook.database.factories import DB_PATH_ENV, create_sqlite_database, default_database_path
from cashbook.domain.entities import TransactionKind
from cashbook.domain.errors import NotFoundError


def test_implements_interface(temp_db):
    assert isinstance(temp_db, Database)


def test_database_path_from_environment(monkeypatch, tmp_path):
    path = tmp_path / "env.db"
    monkeypatch.setenv(DB_PATH_ENV, str(path))
    db = create_sqlite_database()
    db.connect()
    db.initialize_schema()
    try:
        assert db.create_household(name="Env") == 1
    finally:
        db.disconnect()
    assert path.exists()


def test_default_path_is_in_home():
    assert default_database_path().name == "cashbook.db"


def test_money_round_trip(temp_db, empty_household):
    account_id = temp_db.create_account(empty_household.id, "Cash", balance=Decimal("1234.56"))
    assert temp_db.get_account(account_id).balance == Decimal("1234.56")

    temp_db.update_account_balance(account_id, Decimal("-0.10"))
    assert temp_db.get_account(account_id).balance == Decimal("-0.10")


def test_member_roles(temp_db, empty_household):
    temp_db.add_household_member(empty_household.id, "alice", role="admin")
    assert temp_db.is_household_member(empty_household.id, "alice")
    assert temp_db.get_member_role(empty_household.id, "alice") == "admin"
    assert temp_db.get_member_role(empty_household.id, "bob") is None


def test_patterns_in_evaluation_order(temp_db, empty_household):
    category_id = temp_db.create_category(empty_household.id, "Food", TransactionKind.EXPENSE)
    low = temp_db.create_pattern(empty_household.id, category_id, "low", priority=0)
    default = temp_db.create_pattern(empty_household.id, category_id, "default", priority=0, is_default=True)
    high = temp_db.create_pattern(empty_household.id, category_id, "high", priority=10)

    assert [p.id for p in temp_db.list_patterns(empty_household.id)] == [high, default, low]


def test_sum_transactions(temp_db, empty_household):
    def add(day, amount, kind, excluded=False):
        temp_db.create_transaction(
            household_id=empty_household.id,
            date=day,
            description="x",
            amount=Decimal(amount),
            kind=kind,
            excluded_from_reports=excluded,
        )

    add(date(2024, 1, 1), "10.10", TransactionKind.EXPENSE)
    add(date(2024, 1, 31), "0.20", TransactionKind.EXPENSE)
    add(date(2024, 2, 1), "5", TransactionKind.EXPENSE)
    add(date(2024, 1, 15), "99", TransactionKind.EXPENSE, excluded=True)
    add(date(2024, 1, 15), "1000", TransactionKind.INCOME)

    total = temp_db.sum_transactions(
        empty_household.id, TransactionKind.EXPENSE, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
    )
    assert total == Decimal("10.30")
    assert temp_db.sum_transactions(
        empty_household.id, TransactionKind.EXPENSE, include_excluded=True, end_date=date(2024, 1, 31)
    ) == Decimal("109.30")


def test_filter_household_transaction_ids(temp_db, empty_household):
    other_id = temp_db.create_household(name="Other")
    own = temp_db.create_transaction(
        household_id=empty_household.id, date=date(2024, 1, 1), description="a", amount=Decimal("1"),
        kind=TransactionKind.EXPENSE,
    )
    foreign = temp_db.create_transaction(
        household_id=other_id, date=date(2024, 1, 1), description="b", amount=Decimal("1"),
        kind=TransactionKind.EXPENSE,
    )
    assert set(temp_db.filter_household_transaction_ids(empty_household.id, [own, foreign, 999])) == {own}


def test_update_missing_rows(temp_db):
    with pytest.raises(NotFoundError):
        temp_db.update_account_balance(999, Decimal("1"))
    with pytest.raises(NotFoundError):
        temp_db.update_transaction_category(999, None)
