"""Utility functions for carledger."""

from carledger.utils.date_parser import parse_date, parse_optional_date
from carledger.utils.amount_parser import parse_amount, format_money, round_money

__all__ = ["parse_date", "parse_optional_date", "parse_amount", "format_money", "round_money"]
