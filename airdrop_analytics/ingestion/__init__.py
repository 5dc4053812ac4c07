"""CSV ingestion module."""

from .csv_parser import parse_allocations, parse_amount

__all__ = ["parse_allocations", "parse_amount"]
