"""GitHub Stats - collect organization statistics and write them to Port."""

import logging
from typing import Any

from github_stats.config import Config
from github_stats.exceptions import GitHubStatsError
from github_stats.models.catalog import CatalogUser
from github_stats.models.github import DeveloperStats, JoinRecord
from github_stats.models.results import ItemResult
from github_stats.services.catalog_writer import (
    CatalogWriter,
    developer_stats_updates,
    join_date_updates,
)
from github_stats.services.developer_stats_collector import DeveloperStatsCollector
from github_stats.services.github_rest_client import GitHubRestClient
from github_stats.services.join_date_collector import (
    JoinDateCollector,
    latest_join_records,
)
from github_stats.services.port_client import PortClient
from github_stats.utils.rate_limiter import RateLimitStatus, check_rate_limits

logger = logging.getLogger(__name__)


class StatsSync:
    """Runs one collection command against GitHub and writes the results to Port.

    Example usage:
        ```python
        async with StatsSync(config) as sync:
            await sync.ensure_quota()
            users = await sync.load_users()
            stats = await sync.collect_developer_stats()
            results = await sync.write_developer_stats(users, stats)
        ```

    Every step is awaited in turn; nothing runs concurrently.
    """

    def __init__(
        self,
        config: Config,
        rest_client: GitHubRestClient | None = None,
        port_client: PortClient | None = None,
    ):
        self._config = config
        self._rest_client = rest_client or GitHubRestClient(config=config)
        self._port_client = port_client or PortClient(config=config)
        self._writer = CatalogWriter(self._port_client, config.user_blueprint)

    async def __aenter__(self) -> "StatsSync":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close all HTTP connections."""
        await self._rest_client.close()
        await self._port_client.close()

    async def ensure_quota(self) -> RateLimitStatus:
        """Abort with RateLimitExceededError if no GitHub requests remain."""
        return await check_rate_limits(self._rest_client)

    async def load_users(self) -> list[CatalogUser]:
        """Read the user entities that collected facts may be written to."""
        users = await self._port_client.get_entities(self._config.user_blueprint)
        logger.info("Loaded %d %s entities from Port", len(users), self._config.user_blueprint)
        return users

    async def collect_join_records(self) -> list[JoinRecord]:
        """Collect member additions from the enterprise audit log."""
        if not self._config.github_enterprise:
            raise GitHubStatsError("No enterprise configured for join dates")
        collector = JoinDateCollector(self._rest_client)
        return await collector.collect_join_records(self._config.github_enterprise)

    async def write_join_dates(
        self,
        users: list[CatalogUser],
        records: list[JoinRecord],
    ) -> list[ItemResult[Any]]:
        """Write join_date onto every user with a matching audit log record."""
        updates = join_date_updates(users, latest_join_records(records))
        return await self._writer.write(updates, "join date")

    async def collect_developer_stats(self) -> list[DeveloperStats]:
        """Collect first commit and first merged PR dates for every member."""
        collector = DeveloperStatsCollector(self._rest_client)
        return await collector.collect_stats(self._config.github_org or "")

    async def write_developer_stats(
        self,
        users: list[CatalogUser],
        stats: list[DeveloperStats],
    ) -> list[ItemResult[Any]]:
        """Write first_commit / first_pr onto users that have either date."""
        updates = developer_stats_updates(users, stats)
        return await self._writer.write(updates, "first commit and PR dates")
