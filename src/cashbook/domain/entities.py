"""Domain model entities for cashbook.

These are pure data classes representing business concepts, independent of
database schema. The store layer converts its rows into these before
handing them to services, so business logic never touches ORM objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionKind(str, Enum):
    """Direction of money for transactions and categories."""

    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriodType(str, Enum):
    """Recurrence of a budget amount."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


ACCOUNT_TYPES = ("checking", "savings", "credit_card", "investment", "other")


@dataclass(frozen=True)
class Household:
    """Household domain entity holding shared settings."""

    id: int
    name: str
    currency: str
    budget_month_start_day: int
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    household_id: int
    name: str
    account_type: str
    institution: Optional[str]
    account_number_last4: Optional[str]
    balance: Decimal
    currency: str
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class AccountBalanceSnapshot:
    """A balance known to be accurate at the time it was recorded."""

    id: int
    account_id: int
    balance: Decimal
    recorded_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    household_id: int
    name: str
    kind: TransactionKind
    color: str
    created_at: datetime


@dataclass(frozen=True)
class CategorizationPattern:
    """Pipe-delimited keyword rule assigning descriptions to a category."""

    id: int
    household_id: int
    category_id: int
    pattern: str
    priority: int
    is_default: bool
    created_at: datetime

    @property
    def keywords(self) -> list[str]:
        """Lowercased, trimmed, non-empty fragments of the pattern."""
        parts = (part.strip().lower() for part in self.pattern.split("|"))
        return [part for part in parts if part]


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always a non-negative magnitude; the direction comes from
    ``kind``.
    """

    id: int
    household_id: int
    date: date
    description: str
    amount: Decimal
    kind: TransactionKind
    category_id: Optional[int]
    account_id: Optional[int]
    balance_after: Optional[Decimal]
    excluded_from_reports: bool
    import_batch_id: Optional[int]
    created_by: Optional[str]
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount with income positive and expense negative."""
        return self.amount if self.kind == TransactionKind.INCOME else -self.amount


@dataclass(frozen=True)
class CSVMapping:
    """Reusable assignment of CSV columns to transaction fields."""

    id: int
    household_id: int
    name: str
    date_column: str
    description_column: str
    amount_column: str
    type_column: Optional[str]
    balance_column: Optional[str]
    date_format: str
    delimiter: str
    has_header: bool
    created_at: datetime


@dataclass(frozen=True)
class Budget:
    """Spending limit for one category over a period type."""

    id: int
    household_id: int
    category_id: int
    amount: Decimal
    period: BudgetPeriodType
    start_date: date
    end_date: Optional[date]
    created_at: datetime


@dataclass(frozen=True)
class BudgetPeriod:
    """Date bounds of one budget cycle (inclusive on both ends)."""

    start: date
    end: date

    @property
    def start_str(self) -> str:
        return self.start.isoformat()

    @property
    def end_str(self) -> str:
        return self.end.isoformat()

    @property
    def label(self) -> str:
        from cashbook.domain.budget_period import format_budget_period

        return format_budget_period(self)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class SuggestedMapping:
    """Best-guess column roles produced by CSV structure detection."""

    date_column: Optional[str]
    description_column: Optional[str]
    amount_column: Optional[str]
    type_column: Optional[str]
    balance_column: Optional[str]


@dataclass(frozen=True)
class CSVStructure:
    """Result of inspecting raw CSV text."""

    delimiter: str
    headers: list[str]
    sample_rows: list[dict[str, str]]
    suggested_mapping: SuggestedMapping


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one CSV import batch."""

    imported: int
    failed: int
    batch_id: int
    final_balance: Optional[Decimal]
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Reconciliation:
    """Stored versus calculated balance for one account."""

    account_id: int
    stored_balance: Decimal
    calculated_balance: Decimal
    difference: Decimal
    method: str

    def is_balanced(self, tolerance: Decimal = Decimal("0.01")) -> bool:
        """Return True if the discrepancy is within ``tolerance``."""
        return abs(self.difference) <= tolerance


@dataclass(frozen=True)
class BudgetProgress:
    """Live spending against a budget within one date range."""

    budget: Budget
    category_name: str
    spent: Decimal
    start_date: date
    end_date: date

    @property
    def remaining(self) -> Decimal:
        return self.budget.amount - self.spent

    @property
    def is_over(self) -> bool:
        return self.spent > self.budget.amount


@dataclass(frozen=True)
class PeriodTotals:
    """Income and expense totals for one budget period."""

    period: BudgetPeriod
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class CategoryTotal:
    """Amount and transaction count for one category in a date range."""

    category_id: int
    name: str
    total: Decimal
    count: int
