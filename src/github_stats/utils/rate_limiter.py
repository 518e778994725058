"""Upfront rate-limit guard for GitHub API runs."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Mapping, Optional

from github_stats.exceptions import RateLimitExceededError

if TYPE_CHECKING:
    from github_stats.services.github_rest_client import GitHubRestClient

logger = logging.getLogger(__name__)

# Below this many remaining requests, the guard warns but lets the run proceed
LOW_REMAINING_THRESHOLD = 10


def format_time_remaining(seconds: float) -> str:
    """Format seconds into a human-friendly string."""
    if seconds <= 0:
        return "now"

    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        if secs > 0:
            return f"{minutes} min {secs} sec"
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        if minutes > 0:
            return f"{hours} hr {minutes} min"
        return f"{hours} hour{'s' if hours != 1 else ''}"


def format_reset_time(reset_timestamp: float) -> str:
    """Format reset timestamp to a human-readable local time."""
    reset_dt = datetime.fromtimestamp(reset_timestamp)
    return reset_dt.strftime("%H:%M:%S")


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class RateLimitStatus:
    """Quota reported by GitHub's x-ratelimit-* headers."""

    limit: Optional[int]
    remaining: int
    used: Optional[int]
    reset_time: Optional[float]  # Unix timestamp

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitStatus":
        """Build from response headers. A missing remaining count reads as zero."""
        reset = _parse_int(headers.get("x-ratelimit-reset"))
        return cls(
            limit=_parse_int(headers.get("x-ratelimit-limit")),
            remaining=_parse_int(headers.get("x-ratelimit-remaining")) or 0,
            used=_parse_int(headers.get("x-ratelimit-used")),
            reset_time=float(reset) if reset is not None else None,
        )

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining <= 0

    @property
    def seconds_until_reset(self) -> int:
        """Get whole seconds until rate limit resets."""
        if self.reset_time is None:
            return 0
        return max(0, int(self.reset_time - time.time()))

    def describe(self) -> str:
        """Human-readable one-line summary."""
        if self.reset_time is None:
            reset = "unknown"
        else:
            reset = f"{format_reset_time(self.reset_time)} ({self.seconds_until_reset}s)"
        return (
            f"{self.remaining} requests left, used {self.used}/{self.limit}. "
            f"Reset at {reset}"
        )


async def check_rate_limits(rest_client: "GitHubRestClient") -> RateLimitStatus:
    """Query the current GitHub quota and abort if nothing is left.

    Args:
        rest_client: GitHubRestClient used to call ``/rate_limit``

    Returns:
        The parsed RateLimitStatus when requests remain

    Raises:
        RateLimitExceededError: When the remaining quota is zero
    """
    headers = await rest_client.get_rate_limit()
    status = RateLimitStatus.from_headers(headers)

    logger.info(status.describe())

    if status.is_exhausted:
        wait = format_time_remaining(status.seconds_until_reset)
        logger.error("Rate limit exhausted, resets in %s", wait)
        raise RateLimitExceededError("Rate limit exceeded", reset_time=status.reset_time)

    if status.remaining < LOW_REMAINING_THRESHOLD:
        logger.warning(
            "Only %d/%s API requests remaining", status.remaining, status.limit
        )

    return status
