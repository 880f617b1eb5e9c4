"""Utility functions for bizledger."""

from bizledger.utils.date_parser import parse_date, get_date_range
from bizledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "get_date_range", "parse_amount"]
