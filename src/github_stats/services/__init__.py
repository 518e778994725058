"""Services for GitHub data collection and catalog updates."""

from github_stats.services.github_rest_client import GitHubRestClient
from github_stats.services.port_client import PortClient

__all__ = [
    "GitHubRestClient",
    "PortClient",
]
