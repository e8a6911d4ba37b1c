"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from cashbook.domain.errors import InvalidDateError

# Mapping format tokens, longest first so YYYY wins over YY
_FORMAT_TOKENS = (
    ("YYYY", "%Y"),
    ("YY", "%y"),
    ("MM", "%m"),
    ("DD", "%d"),
)


def parse_date(date_str: str) -> date:
    """Parse a user-entered date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        InvalidDateError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)
        elif period == "week":
            return today + timedelta(days=(7 - today.weekday()))

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise InvalidDateError(f"Could not parse date '{date_str}': {e}")


def format_to_strptime(date_format: str) -> str:
    """Translate a mapping date format such as ``DD.MM.YYYY`` to strptime."""
    result = date_format
    for token, directive in _FORMAT_TOKENS:
        result = result.replace(token, directive)
    return result


def parse_csv_date(date_str: Optional[str], date_format: Optional[str] = None) -> date:
    """Parse a date cell from an imported CSV row.

    The mapping's declared format is tried first; bank exports are not
    always faithful to it, so anything it rejects falls through to
    dateutil, reading day-first when the declared format starts with the
    day.

    Args:
        date_str: Raw cell text
        date_format: Optional mapping format built from YYYY/YY/MM/DD tokens

    Returns:
        Date object

    Raises:
        InvalidDateError: If the cell is blank or not a calendar date
    """
    if date_str is None or not date_str.strip():
        raise InvalidDateError("Missing date")

    text = date_str.strip()

    if date_format:
        try:
            return datetime.strptime(text, format_to_strptime(date_format)).date()
        except ValueError:
            pass

    dayfirst = bool(date_format) and date_format.upper().startswith("DD")
    try:
        return date_parser.parse(text, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise InvalidDateError(f"Invalid date '{text}': {e}")
