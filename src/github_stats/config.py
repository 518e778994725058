"""Configuration management for GitHub Stats."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from github_stats.exceptions import ConfigurationError

JOIN_DATES_COMMAND = "get-member-join-dates"
DEVELOPER_STATS_COMMAND = "get-developer-stats"


@dataclass
class Config:
    """Application configuration."""

    github_token: str | None = None
    github_org: str | None = None
    github_enterprise: str | None = None
    port_client_id: str | None = None
    port_client_secret: str | None = None

    github_api_url: str = "https://api.github.com"
    port_api_url: str = "https://api.getport.io/v1"

    # Port blueprint holding one entity per GitHub user
    user_blueprint: str = "githubUser"

    # Pagination
    default_per_page: int = 100
    max_pages: int | None = None  # None follows every page

    # Timeouts
    request_timeout: float = 30.0

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        # override=False ensures environment variables take precedence over .env
        load_dotenv(override=False)

        max_pages = os.getenv("GITHUB_STATS_MAX_PAGES")
        try:
            max_pages_value = int(max_pages) if max_pages else None
        except ValueError:
            raise ValueError(f"GITHUB_STATS_MAX_PAGES must be an integer, got {max_pages!r}") from None

        return cls(
            github_token=os.getenv("X_GITHUB_AUTH_TOKEN") or os.getenv("GITHUB_TOKEN"),
            github_org=os.getenv("X_GITHUB_ORG"),
            github_enterprise=os.getenv("X_GITHUB_ENTERPRISE"),
            port_client_id=os.getenv("PORT_CLIENT_ID"),
            port_client_secret=os.getenv("PORT_CLIENT_SECRET"),
            github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            port_api_url=os.getenv("PORT_API_URL", "https://api.getport.io/v1"),
            user_blueprint=os.getenv("PORT_USER_BLUEPRINT", "githubUser"),
            max_pages=max_pages_value,
            log_level=os.getenv("GITHUB_STATS_LOG_LEVEL", "INFO").upper(),
        )

    def missing_for(self, command: str) -> list[str]:
        """List the environment variables a command needs but are unset."""
        missing = []
        if not self.github_org:
            missing.append("X_GITHUB_ORG")
        if not self.github_token:
            missing.append("X_GITHUB_AUTH_TOKEN")
        if not self.port_client_id:
            missing.append("PORT_CLIENT_ID")
        if not self.port_client_secret:
            missing.append("PORT_CLIENT_SECRET")
        if command == JOIN_DATES_COMMAND and not self.github_enterprise:
            missing.append("X_GITHUB_ENTERPRISE")
        return missing

    def require(self, command: str) -> None:
        """Raise ConfigurationError if a command cannot run with this configuration."""
        missing = self.missing_for(command)
        if missing:
            raise ConfigurationError(missing)


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_config(config: Config | None) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config
