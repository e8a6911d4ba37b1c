"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so column types (Numeric money,
string enums) never leak into the domain layer.
"""

from decimal import Decimal
from typing import Optional

from cashbook.domain import entities as domain
from cashbook.database.models import (
    Household as ORMHousehold,
    Account as ORMAccount,
    AccountBalanceHistory as ORMAccountBalanceHistory,
    Category as ORMCategory,
    CategorizationPattern as ORMCategorizationPattern,
    CSVMapping as ORMCSVMapping,
    Transaction as ORMTransaction,
    Budget as ORMBudget,
)


def _money(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _optional_money(value) -> Optional[Decimal]:
    return None if value is None else _money(value)


def household_to_domain(orm_household: ORMHousehold) -> domain.Household:
    """Convert SQLAlchemy Household model to domain Household entity."""
    return domain.Household(
        id=orm_household.id,
        name=orm_household.name,
        currency=orm_household.currency,
        budget_month_start_day=orm_household.budget_month_start_day,
        created_at=orm_household.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        household_id=orm_account.household_id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        institution=orm_account.institution,
        account_number_last4=orm_account.account_number_last4,
        balance=_money(orm_account.balance),
        currency=orm_account.currency,
        is_active=bool(orm_account.is_active),
        created_at=orm_account.created_at,
    )


def balance_snapshot_to_domain(
    orm_snapshot: ORMAccountBalanceHistory,
) -> domain.AccountBalanceSnapshot:
    """Convert SQLAlchemy balance history row to domain snapshot."""
    return domain.AccountBalanceSnapshot(
        id=orm_snapshot.id,
        account_id=orm_snapshot.account_id,
        balance=_money(orm_snapshot.balance),
        recorded_at=orm_snapshot.recorded_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        household_id=orm_category.household_id,
        name=orm_category.name,
        kind=domain.TransactionKind(orm_category.kind),
        color=orm_category.color,
        created_at=orm_category.created_at,
    )


def pattern_to_domain(orm_pattern: ORMCategorizationPattern) -> domain.CategorizationPattern:
    """Convert SQLAlchemy CategorizationPattern model to domain entity."""
    return domain.CategorizationPattern(
        id=orm_pattern.id,
        household_id=orm_pattern.household_id,
        category_id=orm_pattern.category_id,
        pattern=orm_pattern.pattern,
        priority=orm_pattern.priority,
        is_default=bool(orm_pattern.is_default),
        created_at=orm_pattern.created_at,
    )


def csv_mapping_to_domain(orm_mapping: ORMCSVMapping) -> domain.CSVMapping:
    """Convert SQLAlchemy CSVMapping model to domain CSVMapping entity."""
    return domain.CSVMapping(
        id=orm_mapping.id,
        household_id=orm_mapping.household_id,
        name=orm_mapping.name,
        date_column=orm_mapping.date_column,
        description_column=orm_mapping.description_column,
        amount_column=orm_mapping.amount_column,
        type_column=orm_mapping.type_column,
        balance_column=orm_mapping.balance_column,
        date_format=orm_mapping.date_format,
        delimiter=orm_mapping.delimiter,
        has_header=bool(orm_mapping.has_header),
        created_at=orm_mapping.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        household_id=orm_transaction.household_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=_money(orm_transaction.amount),
        kind=domain.TransactionKind(orm_transaction.kind),
        category_id=orm_transaction.category_id,
        account_id=orm_transaction.account_id,
        balance_after=_optional_money(orm_transaction.balance_after),
        excluded_from_reports=bool(orm_transaction.excluded_from_reports),
        import_batch_id=orm_transaction.import_batch_id,
        created_by=orm_transaction.created_by,
        created_at=orm_transaction.created_at,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        household_id=orm_budget.household_id,
        category_id=orm_budget.category_id,
        amount=_money(orm_budget.amount),
        period=domain.BudgetPeriodType(orm_budget.period),
        start_date=orm_budget.start_date,
        end_date=orm_budget.end_date,
        created_at=orm_budget.created_at,
    )
