"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def parse_statement_date(date_str: str, date_format: str) -> date:
    """Parse a date from a statement row using the bank's fixed format.

    Unlike ``parse_date`` this never guesses: "2025/01/18" only parses with
    "%Y/%m/%d".

    Raises:
        ValueError: If the string does not match ``date_format``
    """
    return datetime.strptime(date_str.strip(), date_format).date()


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    dates: "today", "yesterday", "this week|month|year" and
    "last week|month|year". Relative periods resolve to their first day.

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if date_str == "today":
        return today
    if date_str == "yesterday":
        return today - timedelta(days=1)

    for prefix in ("this ", "last "):
        if date_str.startswith(prefix):
            period = f"{prefix.strip()}-{date_str[len(prefix):].strip()}"
            if period in PERIODS:
                return get_date_range(period)[0]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods end today; "last-*" periods cover the whole previous
    week (Monday to Sunday), month or year.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    week_start = today - timedelta(days=today.weekday())
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)

    if period == "this-week":
        return week_start, today
    if period == "this-month":
        return month_start, today
    if period == "this-year":
        return year_start, today
    if period == "last-week":
        return week_start - timedelta(days=7), week_start - timedelta(days=1)
    if period == "last-month":
        return month_start - relativedelta(months=1), month_start - timedelta(days=1)
    if period == "last-year":
        return year_start - relativedelta(years=1), year_start - timedelta(days=1)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
