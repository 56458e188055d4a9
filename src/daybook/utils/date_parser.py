"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from daybook.domain.errors import ValidationError

PERIODS = ("this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def _start_of(period: str, today: date) -> date:
    if period == "week":
        return today - timedelta(days=today.weekday())
    if period == "month":
        return today.replace(day=1)
    return today.replace(month=1, day=1)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15 Jan 2024") and a few relative
    forms: "today", "yesterday", "this week|month|year" and
    "last week|month|year" (each resolving to the first day of that period).

    Raises:
        ValidationError: If date string cannot be parsed
    """
    value = date_str.strip().lower()
    today = date.today()

    if value == "today":
        return today
    if value == "yesterday":
        return today - timedelta(days=1)

    prefix, _, period = value.partition(" ")
    if prefix in ("this", "last") and period in ("week", "month", "year"):
        start = _start_of(period, today)
        if prefix == "this":
            return start
        if period == "week":
            return start - timedelta(days=7)
        if period == "month":
            return start - relativedelta(months=1)
        return start - relativedelta(years=1)

    try:
        return date_parser.parse(value).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Args:
        period: One of this-week, this-month, this-year, last-week,
            last-month, last-year
        today: Reference day (defaults to today)

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    which, _, unit = period.partition("-")

    if period not in PERIODS:
        raise ValidationError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")

    start = _start_of(unit, today)
    if which == "this":
        return (start, today)

    # Previous period ends the day before the current one starts
    end = start - timedelta(days=1)
    return (_start_of(unit, end), end)
