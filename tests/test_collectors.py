"""Tests for join date and developer stats collectors."""

import itertools
import logging
from datetime import datetime, timezone

import pytest

from github_stats.exceptions import GitHubAPIError, GitHubNotFoundError
from github_stats.models.github import JoinRecord
from github_stats.services.developer_stats_collector import (
    DeveloperStatsCollector,
    earliest,
)
from github_stats.services.join_date_collector import (
    ADD_MEMBER_PHRASE,
    JoinDateCollector,
    latest_join_records,
)
from helpers import commit_payload


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def commits_by(table: dict):
    """Side effect for get_first_commit backed by {(repo, login): date or exception}."""

    async def lookup(owner, repo, login):
        value = table.get((repo, login))
        if isinstance(value, Exception):
            raise value
        return commit_payload(value) if value else None

    return lookup


class TestEarliest:
    """Tests for the earliest-date fold."""

    def test_empty(self):
        assert earliest([]) is None

    def test_ignores_none(self):
        assert earliest([None, utc(2023, 2, 1), None]) == utc(2023, 2, 1)

    @pytest.mark.parametrize(
        "order",
        list(itertools.permutations([utc(2023, 1, 5), utc(2023, 2, 1), utc(2023, 3, 9)])),
    )
    def test_order_independent(self, order):
        """Test the minimum does not depend on iteration order."""
        assert earliest(order) == utc(2023, 1, 5)


class TestDeveloperStatsCollector:
    """Tests for DeveloperStatsCollector."""

    @pytest.mark.asyncio
    async def test_one_record_per_member(self, rest_client):
        """Test every member gets a record even when every lookup fails."""
        rest_client.get_org_members.return_value = [{"login": "alice"}, {"login": "bob"}, {"login": "carol"}]
        rest_client.get_org_repos.return_value = [{"name": "r1"}, {"name": "r2"}]
        rest_client.get_first_commit.side_effect = GitHubAPIError("boom", status_code=500)
        rest_client.search_first_merged_pr.side_effect = GitHubAPIError("boom", status_code=422)

        stats = await DeveloperStatsCollector(rest_client).collect_stats("acme")

        assert [s.login for s in stats] == ["alice", "bob", "carol"]
        assert all(not s.has_facts for s in stats)

    @pytest.mark.asyncio
    async def test_first_commit_is_minimum_across_repos(self, rest_client):
        """Test the earliest commit wins whichever repository is scanned first."""
        rest_client.get_org_members.return_value = [{"login": "alice"}]
        rest_client.get_org_repos.return_value = [{"name": "r3"}, {"name": "r1"}, {"name": "r2"}]
        rest_client.get_first_commit.side_effect = commits_by(
            {
                ("r1", "alice"): "2023-02-01T00:00:00Z",
                ("r2", "alice"): "2023-01-05T00:00:00Z",
                ("r3", "alice"): "2023-03-09T00:00:00Z",
            }
        )

        stats = await DeveloperStatsCollector(rest_client).collect_stats("acme")

        assert stats[0].first_commit_date == utc(2023, 1, 5)

    @pytest.mark.asyncio
    async def test_compares_instants_not_strings(self, rest_client):
        """Test offsets are honoured when picking the earliest commit."""
        rest_client.get_org_members.return_value = [{"login": "alice"}]
        rest_client.get_org_repos.return_value = [{"name": "r1"}, {"name": "r2"}]
        rest_client.get_first_commit.side_effect = commits_by(
            {
                ("r1", "alice"): "2023-01-05T09:00:00Z",
                ("r2", "alice"): "2023-01-05T10:00:00+02:00",
            }
        )

        stats = await DeveloperStatsCollector(rest_client).collect_stats("acme")

        assert stats[0].first_commit_date == utc(2023, 1, 5, 8)

    @pytest.mark.asyncio
    async def test_failed_repo_does_not_affect_other_members(self, rest_client, caplog):
        """Test a failing lookup is logged and isolated to that member and repository."""
        rest_client.get_org_members.return_value = [{"login": "alice"}, {"login": "bob"}]
        rest_client.get_org_repos.return_value = [{"name": "r1"}, {"name": "r2"}]
        rest_client.get_first_commit.side_effect = commits_by(
            {
                ("r1", "alice"): "2023-01-05T00:00:00Z",
                ("r2", "alice"): GitHubNotFoundError("gone"),
                ("r1", "bob"): "2023-04-01T00:00:00Z",
                ("r2", "bob"): GitHubAPIError("boom", status_code=500),
            }
        )

        with caplog.at_level(logging.WARNING):
            stats = await DeveloperStatsCollector(rest_client).collect_stats("acme")

        assert stats[0].first_commit_date == utc(2023, 1, 5)
        assert stats[1].first_commit_date == utc(2023, 4, 1)
        assert "Error fetching commits for r2" in caplog.text

    @pytest.mark.asyncio
    async def test_first_pr(self, rest_client):
        """Test the PR search result's creation date is used."""
        rest_client.get_org_members.return_value = [{"login": "alice"}]
        rest_client.search_first_merged_pr.return_value = {"number": 7, "created_at": "2023-03-01T12:00:00Z"}

        stats = await DeveloperStatsCollector(rest_client).collect_stats("acme")

        assert stats[0].first_pr_date == utc(2023, 3, 1, 12)
        rest_client.search_first_merged_pr.assert_awaited_once_with("alice", "acme")

    @pytest.mark.asyncio
    async def test_pr_search_failure_is_logged(self, rest_client, caplog):
        """Test a failing PR search leaves the date empty."""
        rest_client.get_org_members.return_value = [{"login": "alice"}]
        rest_client.search_first_merged_pr.side_effect = GitHubAPIError("Validation Failed", status_code=422)

        with caplog.at_level(logging.WARNING):
            stats = await DeveloperStatsCollector(rest_client).collect_stats("acme")

        assert stats[0].first_pr_date is None
        assert "Error fetching PRs for alice" in caplog.text

    @pytest.mark.asyncio
    async def test_scans_every_repo_for_every_member(self, rest_client):
        """Test the lookups made for a members x repositories scan."""
        rest_client.get_org_members.return_value = [{"login": "alice"}, {"login": "bob"}]
        rest_client.get_org_repos.return_value = [{"name": "r1"}, {"name": "r2"}, {"name": "r3"}]

        await DeveloperStatsCollector(rest_client).collect_stats("acme")

        assert rest_client.get_first_commit.await_count == 6
        assert rest_client.search_first_merged_pr.await_count == 2


class TestJoinDateCollector:
    """Tests for JoinDateCollector."""

    @pytest.mark.asyncio
    async def test_collect_join_records(self, rest_client):
        """Test mapping audit log events to records."""
        rest_client.get_audit_log.return_value = [
            {"action": "org.add_member", "user": "alice", "user_id": 1, "created_at": 1672531200000},
            {"action": "org.add_member", "user": "bob", "user_id": 2, "created_at": "2023-02-01T00:00:00Z"},
        ]

        records = await JoinDateCollector(rest_client).collect_join_records("acme-enterprise")

        rest_client.get_audit_log.assert_awaited_once_with("acme-enterprise", ADD_MEMBER_PHRASE)
        assert [(r.user, r.user_id) for r in records] == [("alice", 1), ("bob", 2)]
        assert records[0].created_at == utc(2023, 1, 1)
        assert records[1].created_at == utc(2023, 2, 1)

    @pytest.mark.asyncio
    async def test_skips_events_without_timestamp(self, rest_client, caplog):
        """Test malformed events are logged and dropped."""
        rest_client.get_audit_log.return_value = [
            {"user": "alice", "created_at": 1672531200000},
            {"user": "ghost"},
        ]

        with caplog.at_level(logging.WARNING):
            records = await JoinDateCollector(rest_client).collect_join_records("acme-enterprise")

        assert [r.user for r in records] == ["alice"]
        assert "malformed audit log event" in caplog.text

    def test_latest_join_records(self):
        """Test a re-added member keeps the first record the audit log returned."""
        records = [
            JoinRecord(user="alice", user_id=1, created_at=utc(2024, 6, 1)),
            JoinRecord(user="bob", user_id=2, created_at=utc(2023, 2, 1)),
            JoinRecord(user="alice", user_id=1, created_at=utc(2023, 1, 1)),
        ]

        by_user = latest_join_records(records)

        assert by_user["alice"].created_at == utc(2024, 6, 1)
        assert by_user["bob"].created_at == utc(2023, 2, 1)
