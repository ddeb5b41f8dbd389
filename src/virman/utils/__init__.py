"""Utility functions for virman."""

from virman.utils.date_parser import parse_date, get_date_range
from virman.utils.amount_parser import parse_amount, normalize_amount, quantize_amount

__all__ = ["parse_date", "get_date_range", "parse_amount", "normalize_amount", "quantize_amount"]
