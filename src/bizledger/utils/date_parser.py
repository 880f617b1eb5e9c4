"""Date parsing utilities.

Absolute dates are read day-first (``15/01/2024`` is 15 January), matching
Australian convention. Periods include quarters and the Australian
financial year, which runs from 1 July to 30 June.
"""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
    "this-fy",
    "last-fy",
)

FY_START_MONTH = 7


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Day-first dates: "15/01/2024", "15 Jan 2024"
    - Relative dates: "today", "yesterday", "this month", "last month",
      "this year", "last year" (the month/year forms give the first day)

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        # ISO strings are unambiguous; everything else is day-first
        dayfirst = not (len(date_str) >= 10 and date_str[4] == "-")
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def quarter_start(day: date) -> date:
    """Return the first day of the calendar quarter containing ``day``."""
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def financial_year_start(day: date) -> date:
    """Return 1 July of the Australian financial year containing ``day``."""
    year = day.year if day.month >= FY_START_MONTH else day.year - 1
    return date(year, FY_START_MONTH, 1)


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods end today; "last-*" periods cover the whole previous
    period.

    Args:
        period: One of PERIODS
        today: Reference date, defaults to today

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower().replace("_", "-")
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today

    if period == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        return start, today.replace(day=1) - timedelta(days=1)

    if period == "this-quarter":
        return quarter_start(today), today

    if period == "last-quarter":
        end = quarter_start(today) - timedelta(days=1)
        return quarter_start(end), end

    if period == "this-year":
        return today.replace(month=1, day=1), today

    if period == "last-year":
        start = today.replace(month=1, day=1) - relativedelta(years=1)
        return start, today.replace(month=1, day=1) - timedelta(days=1)

    if period == "this-fy":
        return financial_year_start(today), today

    if period == "last-fy":
        end = financial_year_start(today) - timedelta(days=1)
        return financial_year_start(end), end

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
