"""GitHub Stats - Collect GitHub organization statistics into a Port catalog.

Two collections are available:
- Member join dates, from a GitHub Enterprise audit log
- Each member's first commit and first merged pull request

Collected dates are merged into the properties of the matching
``githubUser`` entities in Port.

Example usage:
    ```python
    from github_stats import Config, StatsSync

    async with StatsSync(Config.from_env()) as sync:
        await sync.ensure_quota()
        users = await sync.load_users()
        stats = await sync.collect_developer_stats()
        await sync.write_developer_stats(users, stats)
    ```
"""

__version__ = "0.1.0"

from github_stats.config import Config
from github_stats.exceptions import (
    ConfigurationError,
    GitHubAPIError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubStatsError,
    PortAPIError,
    PortAuthenticationError,
    RateLimitExceededError,
)
from github_stats.models import (
    CatalogUser,
    DeveloperStats,
    ItemResult,
    JoinRecord,
    Member,
    Repository,
)
from github_stats.sync import StatsSync

__all__ = [
    # Main entry point
    "StatsSync",
    # Configuration
    "Config",
    # Exceptions
    "GitHubStatsError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubNotFoundError",
    "RateLimitExceededError",
    "PortAPIError",
    "PortAuthenticationError",
    "ConfigurationError",
    # Models
    "Member",
    "Repository",
    "JoinRecord",
    "DeveloperStats",
    "CatalogUser",
    "ItemResult",
]
