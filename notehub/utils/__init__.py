"""Utility modules for shared functionality."""

from .github import normalize_repository, parse_next_page, split_repository
from .retry import retry_on_rate_limit
from .timestamps import format_timestamp, parse_timestamp, utc_now

__all__ = [
    "normalize_repository",
    "parse_next_page",
    "split_repository",
    "retry_on_rate_limit",
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
]
