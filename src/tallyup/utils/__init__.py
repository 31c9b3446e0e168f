"""Utility functions for tallyup."""

from tallyup.utils.date_parser import parse_date, parse_statement_date, get_date_range
from tallyup.utils.amount_parser import parse_amount
from tallyup.utils.logging_config import setup_logging

__all__ = ["parse_date", "parse_statement_date", "get_date_range", "parse_amount", "setup_logging"]
