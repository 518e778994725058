"""Data models for GitHub Stats."""

from github_stats.models.catalog import CatalogUser, PropertyValue, merge_properties
from github_stats.models.github import (
    DeveloperStats,
    JoinRecord,
    Member,
    Repository,
    parse_datetime,
)
from github_stats.models.results import ItemResult

__all__ = [
    "Member",
    "Repository",
    "JoinRecord",
    "DeveloperStats",
    "parse_datetime",
    "CatalogUser",
    "PropertyValue",
    "merge_properties",
    "ItemResult",
]
