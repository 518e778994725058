"""Utility modules for GitHub Stats."""

from github_stats.utils.pagination import (
    get_next_page_url,
    get_total_pages,
    parse_link_header,
)
from github_stats.utils.rate_limiter import RateLimitStatus, check_rate_limits

__all__ = [
    "RateLimitStatus",
    "check_rate_limits",
    "parse_link_header",
    "get_next_page_url",
    "get_total_pages",
]
