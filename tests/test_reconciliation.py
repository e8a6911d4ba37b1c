"""Tests for account balance reconciliation."""

import pytest
from datetime import date
from decimal import Decimal

from cashbook.domain.entities import TransactionKind
from cashbook.domain.errors import NotFoundError
from cashbook.domain.reconciliation import METHOD_CHECKPOINT, METHOD_SNAPSHOT, METHOD_STORED


def _add(db, household_id, account_id, day, amount, kind, balance_after=None):
    return db.create_transaction(
        household_id=household_id,
        date=day,
        description="Row",
        amount=Decimal(amount),
        kind=kind,
        account_id=account_id,
        balance_after=Decimal(balance_after) if balance_after is not None else None,
    )


class TestReconcile:
    """Tests for the three reconciliation baselines."""

    def test_checkpoint_plus_later_rows(self, temp_db, reconciliation_service, household, sample_account):
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 1), "100", TransactionKind.INCOME)
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 10), "30", TransactionKind.EXPENSE, "500")
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 12), "50", TransactionKind.EXPENSE)

        result = reconciliation_service.reconcile(sample_account.id)

        assert result.method == METHOD_CHECKPOINT
        assert result.calculated_balance == Decimal("450")
        assert result.stored_balance == Decimal("1000")
        assert result.difference == Decimal("550")
        assert not result.is_balanced()

    def test_latest_checkpoint_by_date(self, temp_db, reconciliation_service, household, sample_account):
        # Inserted out of order; the row dated later is the checkpoint
        _add(temp_db, household.id, sample_account.id, date(2024, 2, 1), "10", TransactionKind.EXPENSE, "990")
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 15), "10", TransactionKind.EXPENSE, "1200")

        result = reconciliation_service.reconcile(sample_account.id)

        assert result.calculated_balance == Decimal("990")

    def test_rows_before_checkpoint_are_ignored(self, temp_db, reconciliation_service, household, sample_account):
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 1), "5000", TransactionKind.EXPENSE)
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 2), "1", TransactionKind.EXPENSE, "1000")

        result = reconciliation_service.reconcile(sample_account.id)

        assert result.method == METHOD_CHECKPOINT
        assert result.is_balanced()

    def test_snapshot_baseline(self, transaction_service, reconciliation_service, household, sample_account):
        transaction_service.create_transaction(
            household.id, date(2024, 1, 5), "Groceries", Decimal("200"), TransactionKind.EXPENSE,
            account_id=sample_account.id,
        )
        transaction_service.create_transaction(
            household.id, date(2024, 1, 6), "Refund", Decimal("25"), TransactionKind.INCOME,
            account_id=sample_account.id,
        )

        result = reconciliation_service.reconcile(sample_account.id, household.id)

        assert result.method == METHOD_SNAPSHOT
        assert result.stored_balance == Decimal("825")
        assert result.calculated_balance == Decimal("825")
        assert result.difference == Decimal("0")
        assert result.is_balanced()

    def test_snapshot_detects_drift(self, temp_db, reconciliation_service, household, sample_account):
        temp_db.update_account_balance(sample_account.id, Decimal("1000.50"))

        result = reconciliation_service.reconcile(sample_account.id)

        assert result.method == METHOD_SNAPSHOT
        assert result.difference == Decimal("0.50")
        assert not result.is_balanced()
        assert result.is_balanced(tolerance=Decimal("1"))

    def test_stored_fallback(self, temp_db, reconciliation_service, household):
        account_id = temp_db.create_account(household.id, "Cash", balance=Decimal("42.00"))

        result = reconciliation_service.reconcile(account_id)

        assert result.method == METHOD_STORED
        assert result.calculated_balance == Decimal("42.00")
        assert result.difference == Decimal("0")

    def test_unknown_account(self, reconciliation_service):
        with pytest.raises(NotFoundError):
            reconciliation_service.reconcile(9999)

    def test_account_of_other_household(self, temp_db, reconciliation_service, sample_account):
        other_id = temp_db.create_household(name="Other")
        with pytest.raises(NotFoundError):
            reconciliation_service.reconcile(sample_account.id, other_id)


class TestAccountNet:
    """Tests for the signed account total."""

    def test_mixed_kinds(self, temp_db, household, sample_account):
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 1), "100.25", TransactionKind.INCOME)
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 2), "30.10", TransactionKind.EXPENSE)
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 3), "0.15", TransactionKind.EXPENSE)

        assert temp_db.get_account_net(sample_account.id) == Decimal("70.00")

    def test_empty_account(self, temp_db, sample_account):
        assert temp_db.get_account_net(sample_account.id) == Decimal("0")

    def test_after_checkpoint_skips_other_checkpoints(self, temp_db, household, sample_account):
        checkpoint_id = _add(
            temp_db, household.id, sample_account.id, date(2024, 1, 1), "10", TransactionKind.EXPENSE, "990"
        )
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 2), "40", TransactionKind.INCOME)
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 3), "15", TransactionKind.EXPENSE)
        _add(temp_db, household.id, sample_account.id, date(2024, 1, 4), "500", TransactionKind.EXPENSE, "515")

        checkpoint = temp_db.get_transaction(checkpoint_id)
        assert temp_db.get_account_net(sample_account.id, after=checkpoint) == Decimal("25")
