"""Period summary domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from cashbook.database.base import Database
from cashbook.domain.budget_period import recent_periods
from cashbook.domain.entities import CategoryTotal, PeriodTotals, TransactionKind
from cashbook.domain.errors import NotFoundError, household_not_found


class SummaryService:
    """Service for income and expense summaries over budget periods."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def _start_day(self, household_id: int) -> int:
        household = self.db.get_household(household_id)
        if household is None:
            raise NotFoundError(household_not_found(household_id))
        return household.budget_month_start_day

    def period_totals(self, household_id: int, count: int = 6, today: Optional[date] = None) -> list[PeriodTotals]:
        """Income and expenses for each of the recent budget periods.

        Transactions excluded from reports are not counted.

        Args:
            household_id: Household ID
            count: Number of periods, including the current one
            today: Reference date; defaults to today

        Returns:
            PeriodTotals, oldest period first
        """
        periods = recent_periods(self._start_day(household_id), count, today)
        totals = []
        for period in reversed(periods):
            income = self.db.sum_transactions(
                household_id, TransactionKind.INCOME, start_date=period.start, end_date=period.end
            )
            expenses = self.db.sum_transactions(
                household_id, TransactionKind.EXPENSE, start_date=period.start, end_date=period.end
            )
            totals.append(PeriodTotals(period=period, income=income, expenses=expenses))
        return totals

    def category_breakdown(
        self,
        household_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: TransactionKind = TransactionKind.EXPENSE,
    ) -> list[CategoryTotal]:
        """Totals per category for one kind of transaction.

        Uncategorized and excluded transactions are left out.

        Returns:
            CategoryTotal list, largest total first
        """
        transactions = self.db.list_transactions(household_id, start_date=start_date, end_date=end_date)

        summary_dict: dict[int, list] = {}
        for txn in transactions:
            if txn.kind != kind or txn.excluded_from_reports or txn.category_id is None:
                continue
            entry = summary_dict.setdefault(txn.category_id, [Decimal("0"), 0])
            entry[0] += txn.amount
            entry[1] += 1

        names = {cat.id: cat.name for cat in self.db.list_categories(household_id)}
        results = [
            CategoryTotal(category_id=category_id, name=names.get(category_id, ""), total=total, count=count)
            for category_id, (total, count) in summary_dict.items()
        ]
        results.sort(key=lambda item: (-item.total, item.name))
        return results
