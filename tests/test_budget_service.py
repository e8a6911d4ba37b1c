"""Tests for budgets and budget progress."""

import pytest
from datetime import date
from decimal import Decimal

from cashbook.domain.entities import BudgetPeriodType, TransactionKind
from cashbook.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def groceries(category_service, household):
    return category_service.get_category_by_name(household.id, "Groceries")


def _spend(transaction_service, household_id, day, amount, category_id, kind=TransactionKind.EXPENSE):
    return transaction_service.create_transaction(
        household_id, day, "Spend", Decimal(amount), kind, category_id=category_id
    )


def test_create_and_get(budget_service, household, groceries):
    budget_id = budget_service.create_budget(household.id, groceries.id, Decimal("500"), start_date=date(2024, 1, 1))
    budget = budget_service.get_budget(household.id, budget_id)
    assert budget.amount == Decimal("500")
    assert budget.period == BudgetPeriodType.MONTHLY
    assert budget.end_date is None


def test_start_date_defaults_to_today(budget_service, household, groceries):
    budget_id = budget_service.create_budget(household.id, groceries.id, Decimal("500"))
    assert budget_service.get_budget(household.id, budget_id).start_date == date.today()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"amount": Decimal("-1")},
        {"amount": Decimal("10"), "period": "weekly"},
        {"amount": Decimal("10"), "start_date": date(2024, 2, 1), "end_date": date(2024, 1, 1)},
    ],
)
def test_create_validation(budget_service, household, groceries, kwargs):
    with pytest.raises(ValidationError):
        budget_service.create_budget(household.id, groceries.id, **kwargs)


def test_unknown_category(budget_service, household):
    with pytest.raises(NotFoundError):
        budget_service.create_budget(household.id, 9999, Decimal("10"))


def test_update_and_delete(budget_service, household, groceries):
    budget_id = budget_service.create_budget(household.id, groceries.id, Decimal("500"), start_date=date(2024, 1, 1))

    updated = budget_service.update_budget(household.id, budget_id, amount=Decimal("650"), end_date=date(2024, 12, 31))
    assert updated.amount == Decimal("650")
    assert updated.end_date == date(2024, 12, 31)

    cleared = budget_service.update_budget(household.id, budget_id, clear_end_date=True)
    assert cleared.end_date is None

    budget_service.delete_budget(household.id, budget_id)
    with pytest.raises(NotFoundError):
        budget_service.get_budget(household.id, budget_id)


def test_list_budgets_by_category_name(budget_service, category_service, household, groceries):
    dining = category_service.get_category_by_name(household.id, "Dining")
    budget_service.create_budget(household.id, groceries.id, Decimal("500"))
    budget_service.create_budget(household.id, dining.id, Decimal("200"))
    budget_service.create_budget(household.id, dining.id, Decimal("2000"), period=BudgetPeriodType.YEARLY)

    monthly = budget_service.list_budgets(household.id, period=BudgetPeriodType.MONTHLY)
    assert [b.category_id for b in monthly] == [dining.id, groceries.id]
    assert len(budget_service.list_budgets(household.id)) == 3


class TestBudgetProgress:
    """Tests for live spending against budgets."""

    def test_spent_within_period(self, budget_service, transaction_service, household, groceries):
        budget_service.create_budget(household.id, groceries.id, Decimal("500"), start_date=date(2024, 1, 1))
        _spend(transaction_service, household.id, date(2024, 3, 3), "120.50", groceries.id)
        _spend(transaction_service, household.id, date(2024, 3, 20), "400", groceries.id)
        _spend(transaction_service, household.id, date(2024, 2, 28), "999", groceries.id)
        _spend(transaction_service, household.id, date(2024, 3, 5), "50", groceries.id, TransactionKind.INCOME)

        progress = budget_service.get_budget_progress(household.id, today=date(2024, 3, 25))

        assert len(progress) == 1
        item = progress[0]
        assert item.category_name == "Groceries"
        assert item.spent == Decimal("520.50")
        assert item.remaining == Decimal("-20.50")
        assert item.is_over
        assert (item.start_date, item.end_date) == (date(2024, 3, 1), date(2024, 3, 31))

    def test_excluded_transactions_not_counted(self, budget_service, transaction_service, household, groceries):
        budget_service.create_budget(household.id, groceries.id, Decimal("500"), start_date=date(2024, 1, 1))
        transaction_id = _spend(transaction_service, household.id, date(2024, 3, 3), "300", groceries.id)
        _spend(transaction_service, household.id, date(2024, 3, 4), "100", groceries.id)
        transaction_service.set_excluded(household.id, transaction_id)

        progress = budget_service.get_budget_progress(household.id, today=date(2024, 3, 25))

        assert progress[0].spent == Decimal("100")
        assert not progress[0].is_over

    def test_follows_household_start_day(self, budget_service, household_service, transaction_service, household, groceries):
        household_service.update_settings(household.id, budget_month_start_day=25)
        budget_service.create_budget(household.id, groceries.id, Decimal("500"), start_date=date(2024, 1, 1))
        _spend(transaction_service, household.id, date(2024, 1, 24), "10", groceries.id)
        _spend(transaction_service, household.id, date(2024, 1, 25), "20", groceries.id)
        _spend(transaction_service, household.id, date(2024, 2, 24), "30", groceries.id)

        current = budget_service.get_budget_progress(household.id, today=date(2024, 2, 10))
        previous = budget_service.get_budget_progress(household.id, periods_ago=1, today=date(2024, 2, 10))

        assert current[0].spent == Decimal("50")
        assert (current[0].start_date, current[0].end_date) == (date(2024, 1, 25), date(2024, 2, 24))
        assert previous[0].spent == Decimal("10")

    def test_yearly_uses_calendar_year(self, budget_service, transaction_service, household, groceries):
        budget_service.create_budget(
            household.id, groceries.id, Decimal("6000"), period=BudgetPeriodType.YEARLY, start_date=date(2024, 1, 1)
        )
        _spend(transaction_service, household.id, date(2024, 1, 2), "100", groceries.id)
        _spend(transaction_service, household.id, date(2024, 11, 30), "200", groceries.id)
        _spend(transaction_service, household.id, date(2023, 12, 31), "999", groceries.id)

        progress = budget_service.get_budget_progress(
            household.id, period=BudgetPeriodType.YEARLY, today=date(2024, 12, 1)
        )
        assert progress[0].spent == Decimal("300")
        assert (progress[0].start_date, progress[0].end_date) == (date(2024, 1, 1), date(2024, 12, 31))

    def test_ended_budgets_skipped(self, budget_service, household, groceries):
        budget_service.create_budget(
            household.id, groceries.id, Decimal("500"), start_date=date(2023, 1, 1), end_date=date(2023, 12, 31)
        )
        assert budget_service.get_budget_progress(household.id, today=date(2024, 3, 1)) == []

    def test_no_budgets(self, budget_service, household):
        assert budget_service.get_budget_progress(household.id, today=date(2024, 3, 1)) == []
