"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(value: str | date) -> date:
    """Parse a date string into a date object.

    Supports ISO dates and timestamps as sent by the banking aggregator
    ("2024-01-15", "2024-01-15T08:30:00Z") plus anything dateutil
    understands, and the relative words "today", "yesterday" and "tomorrow".

    Args:
        value: Date string, or a date/datetime passed through unchanged

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Could not parse date {value!r}")

    date_str = value.strip()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str.lower() in relative_dates:
        return relative_dates[date_str.lower()]

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}") from e


def days_ago(days: int, today: date | None = None) -> date:
    """Return the first day of a trailing window of ``days`` days ending today."""
    today = today or date.today()
    return today - timedelta(days=days)


def months_ago(months: int, today: date | None = None) -> date:
    """Return the date ``months`` calendar months before today."""
    today = today or date.today()
    return today - relativedelta(months=months)
