"""GitHub organization data models."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel


class Member(BaseModel):
    """Organization member."""

    login: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Member":
        """Create from GitHub REST API response."""
        return cls(login=data.get("login", ""))


class Repository(BaseModel):
    """Organization repository."""

    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        """Create from GitHub REST API response."""
        return cls(name=data.get("name", ""))


class JoinRecord(BaseModel):
    """An org.add_member event from the enterprise audit log."""

    user: str
    user_id: int | None = None
    created_at: datetime

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "JoinRecord":
        """Create from an audit log event."""
        created_at = parse_datetime(data.get("created_at") or data.get("@timestamp"))
        if created_at is None:
            raise ValueError(f"Audit log event has no timestamp: {data!r}")
        return cls(
            user=data.get("user", ""),
            user_id=data.get("user_id"),
            created_at=created_at,
        )


class DeveloperStats(BaseModel):
    """First contribution dates for one member."""

    login: str
    first_commit_date: datetime | None = None
    first_pr_date: datetime | None = None

    @property
    def has_facts(self) -> bool:
        """Check if at least one date was found."""
        return self.first_commit_date is not None or self.first_pr_date is not None


def parse_datetime(value: str | int | float | None) -> datetime | None:
    """Parse an ISO datetime string or epoch milliseconds.

    The audit log reports ``created_at`` in epoch milliseconds, the rest of
    the API uses ISO-8601 with a ``Z`` suffix. Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except (ValueError, TypeError, AttributeError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
