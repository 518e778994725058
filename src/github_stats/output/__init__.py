"""Output handlers for GitHub Stats."""

from github_stats.output.console import Console

__all__ = ["Console"]
