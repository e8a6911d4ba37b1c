"""Tests for period summaries."""

from datetime import date
from decimal import Decimal

from cashbook.domain.entities import TransactionKind


def _add(transaction_service, household_id, day, description, amount, kind, category_id=None):
    return transaction_service.create_transaction(
        household_id, day, description, Decimal(amount), kind, category_id=category_id
    )


def test_period_totals(summary_service, transaction_service, household):
    _add(transaction_service, household.id, date(2024, 1, 10), "Salary", "3000", TransactionKind.INCOME)
    _add(transaction_service, household.id, date(2024, 1, 12), "Rent", "1200", TransactionKind.EXPENSE)
    _add(transaction_service, household.id, date(2024, 3, 1), "Coffee", "4.50", TransactionKind.EXPENSE)
    excluded = _add(transaction_service, household.id, date(2024, 3, 2), "Transfer", "500", TransactionKind.EXPENSE)
    transaction_service.set_excluded(household.id, excluded)

    totals = summary_service.period_totals(household.id, count=3, today=date(2024, 3, 15))

    assert [t.period.start for t in totals] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
    assert totals[0].income == Decimal("3000")
    assert totals[0].expenses == Decimal("1200")
    assert totals[0].net == Decimal("1800")
    assert totals[1].income == Decimal("0")
    assert totals[2].expenses == Decimal("4.50")


def test_category_breakdown(summary_service, transaction_service, category_service, household):
    groceries = category_service.get_category_by_name(household.id, "Groceries")
    dining = category_service.get_category_by_name(household.id, "Dining")
    _add(transaction_service, household.id, date(2024, 1, 3), "Food", "80", TransactionKind.EXPENSE, groceries.id)
    _add(transaction_service, household.id, date(2024, 1, 4), "Food", "40", TransactionKind.EXPENSE, groceries.id)
    _add(transaction_service, household.id, date(2024, 1, 5), "Lunch", "30", TransactionKind.EXPENSE, dining.id)
    _add(transaction_service, household.id, date(2024, 1, 6), "Mystery item", "999", TransactionKind.EXPENSE)
    _add(transaction_service, household.id, date(2024, 2, 6), "Food", "500", TransactionKind.EXPENSE, groceries.id)

    breakdown = summary_service.category_breakdown(household.id, date(2024, 1, 1), date(2024, 1, 31))

    assert [(row.name, row.total, row.count) for row in breakdown] == [
        ("Groceries", Decimal("120"), 2),
        ("Dining", Decimal("30"), 1),
    ]


def test_category_breakdown_income(summary_service, transaction_service, category_service, household):
    salary = category_service.get_category_by_name(household.id, "Salary")
    _add(transaction_service, household.id, date(2024, 1, 25), "Pay", "3000", TransactionKind.INCOME, salary.id)

    breakdown = summary_service.category_breakdown(
        household.id, date(2024, 1, 1), date(2024, 1, 31), kind=TransactionKind.INCOME
    )
    assert [(row.name, row.total) for row in breakdown] == [("Salary", Decimal("3000"))]
