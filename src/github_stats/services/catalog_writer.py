"""Merge collected facts into catalog users and write them back."""

import logging
from typing import Any, Iterable

from github_stats.models.catalog import CatalogUser, Properties, merge_properties
from github_stats.models.github import DeveloperStats, JoinRecord
from github_stats.models.results import ItemResult, capture, log_failures
from github_stats.services.port_client import PortClient

logger = logging.getLogger(__name__)


class CatalogWriter:
    """Writes new properties onto existing catalog entities.

    The catalog replaces an entity with whatever is upserted, so each write
    carries the user's full existing property set with the new facts laid
    over it, and the user's relations as they were read.
    """

    def __init__(self, port_client: PortClient, blueprint: str):
        self.port_client = port_client
        self.blueprint = blueprint

    async def upsert_user(self, user: CatalogUser, fragment: Properties) -> Any:
        """Upsert one user with ``fragment`` merged into its properties."""
        return await self.port_client.upsert_entity(
            self.blueprint,
            user.identifier,
            user.title,
            merge_properties(user.properties, fragment),
            user.relations,
        )

    async def write(
        self,
        updates: Iterable[tuple[CatalogUser, Properties]],
        description: str,
    ) -> list[ItemResult[Any]]:
        """Upsert each user in turn. A failed upsert does not stop the others.

        Args:
            updates: (user, new properties) pairs
            description: What is being written, for the log

        Returns:
            One result per attempted upsert
        """
        results = []
        for user, fragment in updates:
            logger.info("Attempting to update %s", user.identifier)
            result = await capture(user.identifier, self.upsert_user(user, fragment))
            if result.ok:
                logger.info("Updated %s for user %s", description, user.identifier)
            results.append(result)

        log_failures(logger, results, "Failed to update user %s: %s", level=logging.ERROR)
        return results


def join_date_updates(
    users: list[CatalogUser],
    records: dict[str, JoinRecord],
) -> list[tuple[CatalogUser, Properties]]:
    """Pair each catalog user that has a join record with its join_date property."""
    updates = []
    for user in users:
        record = records.get(user.identifier)
        if record is not None:
            updates.append((user, {"join_date": record.created_at}))
    return updates


def developer_stats_updates(
    users: list[CatalogUser],
    stats: list[DeveloperStats],
) -> list[tuple[CatalogUser, Properties]]:
    """Pair each catalog user with whichever first_commit / first_pr dates were found.

    Users without either date are left out.
    """
    by_login = {s.login: s for s in stats}
    updates = []
    for user in users:
        found = by_login.get(user.identifier)
        if found is None or not found.has_facts:
            continue

        fragment: Properties = {}
        if found.first_commit_date is not None:
            fragment["first_commit"] = found.first_commit_date
        if found.first_pr_date is not None:
            fragment["first_pr"] = found.first_pr_date
        updates.append((user, fragment))
    return updates
