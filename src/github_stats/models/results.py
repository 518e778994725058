"""Per-item outcomes for steps that must not abort a run."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ItemResult(Generic[T]):
    """Outcome of one repository lookup, PR search or catalog upsert.

    ``key`` names the item (repository, login or entity identifier) so a
    failure can be reported against it.
    """

    key: str
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def capture(key: str, awaitable: Awaitable[T]) -> ItemResult[T]:
    """Await one item, turning any exception into a failed result."""
    try:
        return ItemResult(key=key, value=await awaitable)
    except Exception as e:
        return ItemResult(key=key, error=e)


def successes(results: list[ItemResult[T]]) -> list[ItemResult[T]]:
    return [r for r in results if r.ok]


def failures(results: list[ItemResult[T]]) -> list[ItemResult[T]]:
    return [r for r in results if not r.ok]


def log_failures(
    logger: logging.Logger,
    results: list[ItemResult[T]],
    message: str,
    level: int = logging.WARNING,
) -> None:
    """Log each failed result as ``message % (key, error)``."""
    for result in failures(results):
        logger.log(level, message, result.key, result.error)
