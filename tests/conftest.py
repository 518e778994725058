"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from github_stats.config import Config, set_config


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset global state before each test."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def test_config():
    """Create a test configuration."""
    config = Config(
        github_token="test_token",
        github_org="acme",
        github_enterprise="acme-enterprise",
        port_client_id="port_id",
        port_client_secret="port_secret",
    )
    set_config(config)
    return config


@pytest.fixture
def rest_client():
    """GitHubRestClient stand-in with async endpoint methods."""
    client = MagicMock()
    client.get_rate_limit = AsyncMock(
        return_value={
            "x-ratelimit-limit": "5000",
            "x-ratelimit-remaining": "4999",
            "x-ratelimit-used": "1",
            "x-ratelimit-reset": "1700000000",
        }
    )
    client.get_org_members = AsyncMock(return_value=[])
    client.get_org_repos = AsyncMock(return_value=[])
    client.get_first_commit = AsyncMock(return_value=None)
    client.search_first_merged_pr = AsyncMock(return_value=None)
    client.get_audit_log = AsyncMock(return_value=[])
    client.close = AsyncMock()
    return client


@pytest.fixture
def port_client():
    """PortClient stand-in recording upserts."""
    client = MagicMock()
    client.get_entities = AsyncMock(return_value=[])
    client.upsert_entity = AsyncMock(return_value={"ok": True})
    client.close = AsyncMock()
    return client
