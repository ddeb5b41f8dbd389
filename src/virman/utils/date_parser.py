"""Date parsing utilities for transaction list filters."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from virman.domain.errors import ValidationError

PERIODS = ("today", "this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15 Jan 2024") and the relative
    words "today", "yesterday", "tomorrow".

    Args:
        date_str: Date string
        today: Reference day for relative words (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative:
        return relative[text]

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates (inclusive) for a named period.

    Args:
        period: One of PERIODS
        today: Reference day (defaults to date.today())

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    monday = today - timedelta(days=today.weekday())
    first_of_month = today.replace(day=1)
    first_of_year = today.replace(month=1, day=1)

    if period == "today":
        return today, today
    if period == "this-week":
        return monday, today
    if period == "this-month":
        return first_of_month, today
    if period == "this-year":
        return first_of_year, today
    if period == "last-week":
        start = monday - timedelta(days=7)
        return start, start + timedelta(days=6)
    if period == "last-month":
        return first_of_month - relativedelta(months=1), first_of_month - timedelta(days=1)
    if period == "last-year":
        return first_of_year - relativedelta(years=1), first_of_year - timedelta(days=1)

    raise ValidationError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
