"""Utility functions for time handling and cron schedules."""

from .timestamps import (
    ensure_utc,
    format_timestamp,
    parse_iso_datetime,
    utc_now,
    utc_today,
)

__all__ = [
    "utc_now",
    "utc_today",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
]
