"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta

from daybook.domain.errors import ValidationError
from daybook.utils.date_parser import parse_date, get_date_range


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("15 Jan 2024") == date(2024, 1, 15)


def test_parse_today():
    assert parse_date("today") == date.today()
    assert parse_date("  Today ") == date.today()


def test_parse_yesterday():
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_this_and_last_month():
    """Relative periods resolve to the first day of the period."""
    first = date.today().replace(day=1)
    assert parse_date("this month") == first
    assert parse_date("last month") == first - relativedelta(months=1)


def test_parse_last_week():
    today = date.today()
    monday = today - timedelta(days=today.weekday())
    assert parse_date("this week") == monday
    assert parse_date("last week") == monday - timedelta(days=7)


def test_parse_last_year():
    assert parse_date("last year") == date(date.today().year - 1, 1, 1)


def test_parse_invalid_date():
    with pytest.raises(ValidationError, match="Could not parse date"):
        parse_date("not a date")


class TestGetDateRange:
    def test_this_month(self):
        assert get_date_range("this-month", today=date(2024, 3, 15)) == (date(2024, 3, 1), date(2024, 3, 15))

    def test_last_month_across_year(self):
        assert get_date_range("last-month", today=date(2024, 1, 20)) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_last_month_leap_february(self):
        assert get_date_range("last-month", today=date(2024, 3, 5)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_this_week(self):
        # 2024-03-14 is a Thursday
        assert get_date_range("this-week", today=date(2024, 3, 14)) == (date(2024, 3, 11), date(2024, 3, 14))

    def test_last_week(self):
        assert get_date_range("last-week", today=date(2024, 3, 14)) == (date(2024, 3, 4), date(2024, 3, 10))

    def test_years(self):
        today = date(2024, 6, 30)
        assert get_date_range("this-year", today=today) == (date(2024, 1, 1), today)
        assert get_date_range("last-year", today=today) == (date(2023, 1, 1), date(2023, 12, 31))

    def test_unknown_period(self):
        with pytest.raises(ValidationError, match="Unknown period"):
            get_date_range("next-decade")
