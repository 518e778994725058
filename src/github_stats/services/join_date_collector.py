"""Member join date collector service."""

import logging

from github_stats.models.github import JoinRecord
from github_stats.services.github_rest_client import GitHubRestClient

logger = logging.getLogger(__name__)

ADD_MEMBER_PHRASE = "action:org.add_member"


class JoinDateCollector:
    """Collects the date each member was added, from an enterprise audit log.

    Only available where the organization belongs to a GitHub Enterprise
    account, since the audit log endpoint is scoped to the enterprise.
    """

    def __init__(self, rest_client: GitHubRestClient):
        self.rest_client = rest_client

    async def collect_join_records(self, enterprise: str) -> list[JoinRecord]:
        """Collect org.add_member events for an enterprise.

        Args:
            enterprise: Enterprise slug

        Returns:
            One JoinRecord per event, in the order the audit log returns them
        """
        logger.debug("Searching audit log of %s for member additions", enterprise)

        events = await self.rest_client.get_audit_log(enterprise, ADD_MEMBER_PHRASE)

        records = []
        for event in events:
            try:
                records.append(JoinRecord.from_api(event))
            except ValueError as e:
                logger.warning("Skipping malformed audit log event: %s", e)

        logger.debug("Found %d member additions", len(records))
        return records


def latest_join_records(records: list[JoinRecord]) -> dict[str, JoinRecord]:
    """Index records by user, keeping the first one the audit log returned.

    The audit log lists newest events first, so a re-added member maps to
    their most recent addition.
    """
    by_user: dict[str, JoinRecord] = {}
    for record in records:
        by_user.setdefault(record.user, record)
    return by_user
