"""Developer first-contribution collector service."""

import logging
from datetime import datetime
from typing import Iterable, Optional

from github_stats.models.github import DeveloperStats, Member, Repository, parse_datetime
from github_stats.models.results import ItemResult, capture, log_failures, successes
from github_stats.services.github_rest_client import GitHubRestClient

logger = logging.getLogger(__name__)


class DeveloperStatsCollector:
    """Collects each member's first commit and first merged pull request."""

    def __init__(self, rest_client: GitHubRestClient):
        self.rest_client = rest_client

    async def collect_members(self, org: str) -> list[Member]:
        """Collect organization members."""
        logger.debug("Fetching members of %s", org)
        members = [Member.from_api(m) for m in await self.rest_client.get_org_members(org)]
        logger.debug("Found %d members", len(members))
        return members

    async def collect_repos(self, org: str) -> list[Repository]:
        """Collect organization repositories."""
        logger.debug("Fetching repositories of %s", org)
        repos = [Repository.from_api(r) for r in await self.rest_client.get_org_repos(org)]
        logger.debug("Found %d repositories", len(repos))
        return repos

    async def collect_stats(self, org: str) -> list[DeveloperStats]:
        """Collect first contribution dates for every member of an organization.

        Every member yields a record, including members with no commits and
        no merged pull requests. Lookups are made one at a time.

        Args:
            org: Organization login

        Returns:
            One DeveloperStats per member, in member listing order
        """
        members = await self.collect_members(org)
        repos = await self.collect_repos(org)

        stats = []
        for member in members:
            logger.info("Collecting stats for %s", member.login)
            first_commit = await self.find_first_commit(org, member.login, repos)
            first_pr = await self.find_first_pr(org, member.login)
            stats.append(
                DeveloperStats(
                    login=member.login,
                    first_commit_date=first_commit,
                    first_pr_date=first_pr,
                )
            )

        return stats

    async def find_first_commit(
        self,
        org: str,
        login: str,
        repos: list[Repository],
    ) -> Optional[datetime]:
        """Find a member's earliest commit date across repositories.

        A repository whose lookup fails counts as having no commits.
        """
        results: list[ItemResult[Optional[datetime]]] = []
        for repo in repos:
            results.append(
                await capture(repo.name, self._fetch_commit_date(org, repo.name, login))
            )

        log_failures(logger, results, "Error fetching commits for %s: %s")

        return earliest(r.value for r in successes(results))

    async def find_first_pr(self, org: str, login: str) -> Optional[datetime]:
        """Find the creation date of a member's earliest merged pull request."""
        result = await capture(login, self.rest_client.search_first_merged_pr(login, org))
        if not result.ok:
            logger.warning("Error fetching PRs for %s: %s", login, result.error)
            return None
        if result.value is None:
            return None
        return parse_datetime(result.value.get("created_at"))

    async def _fetch_commit_date(self, org: str, repo: str, login: str) -> Optional[datetime]:
        commit = await self.rest_client.get_first_commit(org, repo, login)
        if commit is None:
            return None
        author = (commit.get("commit") or {}).get("author") or {}
        return parse_datetime(author.get("date"))


def earliest(dates: Iterable[Optional[datetime]]) -> Optional[datetime]:
    """Return the earliest of some optional datetimes, or None if there are none."""
    first: Optional[datetime] = None
    for value in dates:
        if value is not None and (first is None or value < first):
            first = value
    return first
