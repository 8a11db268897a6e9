"""Utility helpers for the application."""

from .time import format_timestamp, parse_timestamp, to_utc, to_utc_series

__all__ = [
    "format_timestamp",
    "parse_timestamp",
    "to_utc",
    "to_utc_series",
]
