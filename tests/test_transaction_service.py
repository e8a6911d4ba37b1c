"""Tests for transaction service."""

import pytest
from datetime import date
from decimal import Decimal

from cashbook.domain.entities import TransactionKind
from cashbook.domain.errors import NotFoundError, ValidationError


def test_create_moves_account_balance(transaction_service, account_service, household, sample_account):
    transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Groceries", Decimal("-120.50"), TransactionKind.EXPENSE,
        account_id=sample_account.id,
    )
    transaction_service.create_transaction(
        household.id, date(2024, 1, 6), "Salary", Decimal("2000"), TransactionKind.INCOME,
        account_id=sample_account.id,
    )
    assert account_service.get_account(household.id, sample_account.id).balance == Decimal("2879.50")


def test_amount_stored_as_magnitude(transaction_service, household):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Refund", Decimal("-15"), TransactionKind.EXPENSE
    )
    transaction = transaction_service.get_transaction(household.id, transaction_id)
    assert transaction.amount == Decimal("15")
    assert transaction.signed_amount == Decimal("-15")


def test_auto_categorize(transaction_service, category_service, household):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "NETFLIX.COM", Decimal("15.99"), TransactionKind.EXPENSE
    )
    streaming = category_service.get_category_by_name(household.id, "Streaming")
    assert transaction_service.get_transaction(household.id, transaction_id).category_id == streaming.id


def test_explicit_category_wins(transaction_service, category_service, household):
    fun = category_service.get_category_by_name(household.id, "Entertainment")
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "NETFLIX.COM", Decimal("15.99"), TransactionKind.EXPENSE, category_id=fun.id
    )
    assert transaction_service.get_transaction(household.id, transaction_id).category_id == fun.id


def test_create_validation(transaction_service, household):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(household.id, date(2024, 1, 5), " ", Decimal("1"), "expense")
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(household.id, date(2024, 1, 5), "X", Decimal("1"), "transfer")
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            household.id, date(2024, 1, 5), "X", Decimal("1"), "expense", account_id=9999
        )
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            household.id, date(2024, 1, 5), "X", Decimal("1"), "expense", category_id=9999
        )


def test_list_filters(transaction_service, household, sample_account):
    early = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Unmatched thing", Decimal("1"), TransactionKind.EXPENSE
    )
    late = transaction_service.create_transaction(
        household.id, date(2024, 2, 5), "Another unmatched", Decimal("1"), TransactionKind.EXPENSE,
        account_id=sample_account.id,
    )

    assert [t.id for t in transaction_service.list_transactions(household.id)] == [late, early]
    assert [t.id for t in transaction_service.list_transactions(household.id, end_date=date(2024, 1, 31))] == [early]
    assert [t.id for t in transaction_service.list_transactions(household.id, account_id=sample_account.id)] == [late]
    assert len(transaction_service.list_transactions(household.id, uncategorized=True)) == 2


def test_list_rejects_inverted_range(transaction_service, household):
    with pytest.raises(ValidationError):
        transaction_service.list_transactions(household.id, start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


def test_update_and_clear_category(transaction_service, category_service, household):
    fun = category_service.get_category_by_name(household.id, "Entertainment")
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Unmatched thing", Decimal("1"), TransactionKind.EXPENSE
    )

    transaction_service.update_category(household.id, transaction_id, fun.id)
    assert transaction_service.get_transaction(household.id, transaction_id).category_id == fun.id

    transaction_service.update_category(household.id, transaction_id, None)
    assert transaction_service.get_transaction(household.id, transaction_id).category_id is None


def test_exclude(transaction_service, household):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Transfer", Decimal("100"), TransactionKind.EXPENSE
    )
    transaction_service.set_excluded(household.id, transaction_id)
    assert transaction_service.get_transaction(household.id, transaction_id).excluded_from_reports
    transaction_service.set_excluded(household.id, transaction_id, excluded=False)
    assert not transaction_service.get_transaction(household.id, transaction_id).excluded_from_reports


def test_delete_keeps_balance(transaction_service, account_service, household, sample_account):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Coffee", Decimal("5"), TransactionKind.EXPENSE, account_id=sample_account.id
    )
    transaction_service.delete_transaction(household.id, transaction_id)

    with pytest.raises(NotFoundError):
        transaction_service.get_transaction(household.id, transaction_id)
    assert account_service.get_account(household.id, sample_account.id).balance == Decimal("995")


def test_other_household_cannot_see_transaction(temp_db, transaction_service, household):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Coffee", Decimal("5"), TransactionKind.EXPENSE
    )
    other_id = temp_db.create_household(name="Other")
    with pytest.raises(NotFoundError):
        transaction_service.get_transaction(other_id, transaction_id)


def test_update_transaction_fields(transaction_service, household, sample_account):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Coffee", Decimal("5"), TransactionKind.EXPENSE
    )

    updated = transaction_service.update_transaction(
        household.id,
        transaction_id,
        date=date(2024, 1, 7),
        description="  Cafe refund ",
        amount=Decimal("-12.50"),
        kind="income",
        account_id=sample_account.id,
    )

    assert updated.date == date(2024, 1, 7)
    assert updated.description == "Cafe refund"
    assert updated.amount == Decimal("12.50")
    assert updated.kind == TransactionKind.INCOME
    assert updated.account_id == sample_account.id
    assert transaction_service.get_transaction(household.id, transaction_id).signed_amount == Decimal("12.50")


def test_update_transaction_keeps_balance(transaction_service, account_service, household, sample_account):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Coffee", Decimal("5"), TransactionKind.EXPENSE, account_id=sample_account.id
    )
    transaction_service.update_transaction(household.id, transaction_id, amount=Decimal("50"))
    assert account_service.get_account(household.id, sample_account.id).balance == Decimal("995")


def test_update_transaction_validation(temp_db, transaction_service, household):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Coffee", Decimal("5"), TransactionKind.EXPENSE
    )
    other_id = temp_db.create_household(name="Other")
    foreign_account = temp_db.create_account(other_id, "Savings")

    with pytest.raises(ValidationError):
        transaction_service.update_transaction(household.id, transaction_id)
    with pytest.raises(ValidationError):
        transaction_service.update_transaction(household.id, transaction_id, kind="transfer")
    with pytest.raises(ValidationError):
        transaction_service.update_transaction(household.id, transaction_id, description="   ")
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(household.id, transaction_id, account_id=foreign_account)
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(other_id, transaction_id, description="Tea")
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(household.id, 9999, description="Tea")

    assert transaction_service.get_transaction(household.id, transaction_id).description == "Coffee"


def test_update_balance_after_sets_checkpoint(transaction_service, reconciliation_service, household, sample_account):
    transaction_id = transaction_service.create_transaction(
        household.id, date(2024, 1, 5), "Coffee", Decimal("5"), TransactionKind.EXPENSE, account_id=sample_account.id
    )
    transaction_service.create_transaction(
        household.id, date(2024, 1, 6), "Salary", Decimal("100"), TransactionKind.INCOME, account_id=sample_account.id
    )
    transaction_service.create_transaction(
        household.id, date(2024, 1, 7), "Lunch", Decimal("20"), TransactionKind.EXPENSE, account_id=sample_account.id
    )

    transaction_service.update_transaction(household.id, transaction_id, balance_after=Decimal("995"))

    result = reconciliation_service.reconcile(sample_account.id)
    assert result.method == "checkpoint"
    assert result.calculated_balance == Decimal("1075")
    assert result.is_balanced()
