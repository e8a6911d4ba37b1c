"""Budget domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from cashbook.database.base import Database
from cashbook.domain.budget_period import period_n_ago
from cashbook.domain.entities import (
    Budget,
    BudgetPeriod,
    BudgetPeriodType,
    BudgetProgress,
    TransactionKind,
)
from cashbook.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_not_found,
    category_not_found,
    household_not_found,
)


class BudgetService:
    """Service for budgets and live budget progress."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    @staticmethod
    def _period_type(period) -> BudgetPeriodType:
        try:
            return BudgetPeriodType(period)
        except ValueError:
            raise ValidationError(f"Unknown budget period '{period}'") from None

    @staticmethod
    def _check_amount(amount: Decimal) -> None:
        if amount < 0:
            raise ValidationError(f"Budget amount must not be negative, got {amount}")

    def create_budget(
        self,
        household_id: int,
        category_id: int,
        amount: Decimal,
        period: BudgetPeriodType = BudgetPeriodType.MONTHLY,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Create a budget for a category.

        Args:
            household_id: Household ID
            category_id: Category being budgeted
            amount: Budgeted amount per period
            period: Monthly or yearly
            start_date: First day the budget applies; defaults to today
            end_date: Optional last day the budget applies

        Returns:
            Budget ID

        Raises:
            NotFoundError: If category doesn't exist in the household
            ValidationError: If amount, period or dates are invalid
        """
        category = self.db.get_category(category_id)
        if category is None or category.household_id != household_id:
            raise NotFoundError(category_not_found(category_id))
        period = self._period_type(period)
        self._check_amount(amount)
        if start_date is None:
            start_date = date.today()
        if end_date is not None and end_date < start_date:
            raise ValidationError(f"End date {end_date} is before start date {start_date}")

        return self.db.create_budget(
            household_id=household_id,
            category_id=category_id,
            amount=amount,
            period=period,
            start_date=start_date,
            end_date=end_date,
        )

    def get_budget(self, household_id: int, budget_id: int) -> Budget:
        """Get a budget of a household.

        Raises:
            NotFoundError: If budget doesn't exist in the household
        """
        budget = self.db.get_budget(budget_id)
        if budget is None or budget.household_id != household_id:
            raise NotFoundError(budget_not_found(budget_id))
        return budget

    def list_budgets(self, household_id: int, period: Optional[BudgetPeriodType] = None) -> list[Budget]:
        """List budgets ordered by category name."""
        if period is not None:
            period = self._period_type(period)
        return self.db.list_budgets(household_id, period=period)

    def update_budget(
        self,
        household_id: int,
        budget_id: int,
        amount: Optional[Decimal] = None,
        period: Optional[BudgetPeriodType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        clear_end_date: bool = False,
    ) -> Budget:
        """Update budget fields; None leaves a field unchanged.

        Returns:
            The updated budget
        """
        budget = self.get_budget(household_id, budget_id)
        if amount is not None:
            self._check_amount(amount)
        if period is not None:
            period = self._period_type(period)
        new_start = start_date or budget.start_date
        new_end = None if clear_end_date else (end_date or budget.end_date)
        if new_end is not None and new_end < new_start:
            raise ValidationError(f"End date {new_end} is before start date {new_start}")

        self.db.update_budget(
            budget_id,
            amount=amount,
            period=period,
            start_date=start_date,
            end_date=end_date,
            clear_end_date=clear_end_date,
        )
        return self.get_budget(household_id, budget_id)

    def delete_budget(self, household_id: int, budget_id: int) -> None:
        """Delete a budget."""
        self.get_budget(household_id, budget_id)
        self.db.delete_budget(budget_id)

    def progress_range(
        self,
        household_id: int,
        period: BudgetPeriodType = BudgetPeriodType.MONTHLY,
        periods_ago: int = 0,
        today: Optional[date] = None,
    ) -> BudgetPeriod:
        """Date range budget progress is measured over.

        Monthly budgets follow the household's budget period; yearly
        budgets follow the calendar year.
        """
        period = self._period_type(period)
        if periods_ago < 0:
            raise ValidationError(f"Periods ago must not be negative, got {periods_ago}")
        if today is None:
            today = date.today()

        if period == BudgetPeriodType.YEARLY:
            year = today.year - periods_ago
            return BudgetPeriod(start=date(year, 1, 1), end=date(year, 12, 31))

        household = self.db.get_household(household_id)
        if household is None:
            raise NotFoundError(household_not_found(household_id))
        return period_n_ago(household.budget_month_start_day, periods_ago, today)

    def get_budget_progress(
        self,
        household_id: int,
        period: BudgetPeriodType = BudgetPeriodType.MONTHLY,
        periods_ago: int = 0,
        today: Optional[date] = None,
    ) -> list[BudgetProgress]:
        """Compute spending against each budget of one period type.

        Spent is the sum of expense transactions in the budget's category
        within the range, excluding transactions hidden from reports.
        Budgets that ended before the range starts are skipped.

        Args:
            household_id: Household ID
            period: Monthly or yearly
            periods_ago: 0 for the current period, 1 for the previous, ...
            today: Reference date; defaults to today

        Returns:
            One BudgetProgress per budget, ordered by category name
        """
        date_range = self.progress_range(household_id, period, periods_ago, today)

        progress = []
        for budget in self.db.list_budgets(household_id, period=self._period_type(period)):
            if budget.end_date is not None and budget.end_date < date_range.start:
                continue
            category = self.db.get_category(budget.category_id)
            spent = self.db.sum_transactions(
                household_id,
                TransactionKind.EXPENSE,
                start_date=date_range.start,
                end_date=date_range.end,
                category_id=budget.category_id,
            )
            progress.append(
                BudgetProgress(
                    budget=budget,
                    category_name=category.name if category is not None else "",
                    spent=spent,
                    start_date=date_range.start,
                    end_date=date_range.end,
                )
            )
        return progress
