"""Utility functions for daybook."""

from daybook.utils.amount_parser import parse_amount
from daybook.utils.date_parser import get_date_range, parse_date

__all__ = ["parse_amount", "parse_date", "get_date_range"]
