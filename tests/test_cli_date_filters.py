"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from daybook.cli.date_filters import resolve_cli_date_range
from daybook.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date="2024-01-01", end_date=None, period="this-month")

    assert excinfo.value.exit_code == 1
    assert "--period cannot be combined" in capsys.readouterr().err


def test_resolve_cli_date_range_uses_period():
    start, end = resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period="last-month")
    assert (start, end) == get_date_range("last-month")


def test_resolve_cli_date_range_parses_dates():
    start, end = resolve_cli_date_range(_ctx(), start_date="2024-01-01", end_date="2024-01-31", period=None)
    assert start == date(2024, 1, 1)
    assert end == date(2024, 1, 31)


def test_resolve_cli_date_range_open_ended():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period=None) == (None, None)


def test_resolve_cli_date_range_rejects_invalid_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date="not a date", end_date=None, period=None)
    assert "Invalid date" in capsys.readouterr().err


def test_resolve_cli_date_range_rejects_reversed_range(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date="2024-02-01", end_date="2024-01-01", period=None)
    assert "must not be after" in capsys.readouterr().err
