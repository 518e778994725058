"""Shared payload builders for tests."""

from github_stats.models.catalog import CatalogUser


def commit_payload(date: str) -> dict:
    """Minimal commit as returned by the commits API."""
    return {"sha": "abc123", "commit": {"author": {"name": "x", "date": date}}}


def catalog_user(identifier: str, **properties) -> CatalogUser:
    return CatalogUser(
        identifier=identifier,
        title=identifier.title(),
        properties=properties,
        relations={"team": ["platform"]},
    )
