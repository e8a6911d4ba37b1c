"""Budget period calculations based on a household's cycle start day.

A period anchored at month M runs from ``start_day`` of M through
``start_day - 1`` of the following month. A cycle starting on the 25th
therefore covers Jan 25 - Feb 24, Feb 25 - Mar 24, and so on.

Months shorter than ``start_day`` are handled at both ends:

- the end date is clamped to the last day of the intended end month
  (start day 31 gives Jan 31 - Feb 29 in 2024, never spilling into March);
- a start day that does not exist in the anchor month rolls forward to the
  1st of the next month, which keeps consecutive periods contiguous
  (start day 31: Jan 31 - Feb 29, Mar 1 - Mar 30, Mar 31 - Apr 30).
"""

import calendar
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from cashbook.domain.entities import BudgetPeriod
from cashbook.domain.errors import ValidationError

MIN_START_DAY = 1
MAX_START_DAY = 31


def validate_start_day(start_day: int) -> int:
    """Return ``start_day`` if it is a valid day of month (1-31).

    Raises:
        ValidationError: If start_day is outside 1-31
    """
    if not isinstance(start_day, int) or isinstance(start_day, bool):
        raise ValidationError(f"Budget start day must be an integer, got {start_day!r}")
    if not MIN_START_DAY <= start_day <= MAX_START_DAY:
        raise ValidationError(
            f"Budget start day must be between {MIN_START_DAY} and {MAX_START_DAY}, got {start_day}"
        )
    return start_day


def _last_day(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _anchor_month(start_day: int, reference_date: date) -> date:
    """First day of the month in which the period containing the date began."""
    anchor = reference_date.replace(day=1)
    if reference_date.day < start_day:
        anchor -= relativedelta(months=1)
    return anchor


def period_for_anchor(start_day: int, anchor: date) -> BudgetPeriod:
    """Build the period that begins in the month of ``anchor``.

    Args:
        start_day: Day of month the cycle starts on (1-31)
        anchor: Any date within the anchor month

    Returns:
        BudgetPeriod with inclusive start and end dates
    """
    validate_start_day(start_day)
    year, month = anchor.year, anchor.month
    next_month = anchor.replace(day=1) + relativedelta(months=1)

    if start_day <= _last_day(year, month):
        start = date(year, month, start_day)
    else:
        start = next_month

    if start_day == 1:
        end = date(year, month, _last_day(year, month))
    else:
        end_day = min(start_day - 1, _last_day(next_month.year, next_month.month))
        end = next_month.replace(day=end_day)

    return BudgetPeriod(start=start, end=end)


def current_period(start_day: int = 1, reference_date: Optional[date] = None) -> BudgetPeriod:
    """Get the budget period containing ``reference_date``.

    Args:
        start_day: Day of month when budget period starts (1-31)
        reference_date: Date to locate; defaults to today

    Returns:
        The budget period containing the reference date
    """
    validate_start_day(start_day)
    if reference_date is None:
        reference_date = date.today()

    return period_for_anchor(start_day, _anchor_month(start_day, reference_date))


def period_n_ago(start_day: int = 1, n: int = 0, today: Optional[date] = None) -> BudgetPeriod:
    """Get the budget period ``n`` periods before the current one.

    Uses the same anchor rule as :func:`current_period`, so
    ``period_n_ago(day, 0, today) == current_period(day, today)``.

    Args:
        start_day: Day of month when budget period starts (1-31)
        n: Number of periods in the past (0 = current, 1 = last period, ...)
        today: Reference date; defaults to today

    Returns:
        The budget period
    """
    if n < 0:
        raise ValidationError(f"Periods ago must not be negative, got {n}")
    validate_start_day(start_day)
    if today is None:
        today = date.today()
    anchor = _anchor_month(start_day, today) - relativedelta(months=n)
    return period_for_anchor(start_day, anchor)


def recent_periods(start_day: int = 1, count: int = 6, today: Optional[date] = None) -> list[BudgetPeriod]:
    """Get ``count`` consecutive periods, most recent first.

    Args:
        start_day: Day of month when budget period starts (1-31)
        count: Number of periods to retrieve (including current)
        today: Reference date; defaults to today

    Returns:
        List of budget periods, most recent first
    """
    if today is None:
        today = date.today()
    return [period_n_ago(start_day, i, today) for i in range(count)]


def format_budget_period(period: BudgetPeriod) -> str:
    """Get a human-readable label for a budget period.

    Returns:
        "Jan 5-20, 2024" when both ends share a month, otherwise
        "Jan 25 - Feb 24, 2024" (the year of the end date)
    """
    start_month = period.start.strftime("%b")
    end_month = period.end.strftime("%b")
    year = period.end.year

    if (period.start.year, period.start.month) == (period.end.year, period.end.month):
        return f"{start_month} {period.start.day}-{period.end.day}, {year}"
    return f"{start_month} {period.start.day} - {end_month} {period.end.day}, {year}"
