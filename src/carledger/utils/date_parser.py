"""Date parsing utilities."""

from calendar import monthrange
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from carledger.domain.errors import ValidationError

PERIODS = ("this-month", "this-year", "last-month", "last-year")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO and free-form absolute dates ("2024-01-15", "15 Jan 2024")
    and a few relative words: "today", "yesterday", "this month",
    "last month", "this year", "last year".

    Raises:
        ValidationError: If the string is not a recognizable date
    """
    text = (date_str or "").strip().lower()
    if not text:
        raise ValidationError("Empty date string")

    today = date.today()
    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if text in relative:
        return relative[text]

    try:
        return date_parser.parse(text, yearfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}")


def parse_optional_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a date string, treating None and blanks as no date."""
    if date_str is None or not date_str.strip():
        return None
    return parse_date(date_str)


def month_range(month_key: str) -> tuple[date, date]:
    """Return the first and last day of a ``YYYY-MM`` month key."""
    try:
        year_str, month_str = month_key.strip().split("-")
        year, month = int(year_str), int(month_str)
        start = date(year, month, 1)
    except ValueError:
        raise ValidationError(f"Invalid month '{month_key}', expected YYYY-MM")
    return start, start.replace(day=monthrange(year, month)[1])


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, this-year, last-month, last-year

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-month":
        first_of_this_month = today.replace(day=1)
        return first_of_this_month - relativedelta(months=1), first_of_this_month - timedelta(days=1)
    if period == "last-year":
        first_of_this_year = today.replace(month=1, day=1)
        return first_of_this_year - relativedelta(years=1), first_of_this_year - timedelta(days=1)

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}"
    )
