"""CLI interface for GitHub Stats."""

import asyncio
import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from github_stats.config import (
    DEVELOPER_STATS_COMMAND,
    JOIN_DATES_COMMAND,
    Config,
    get_config,
)
from github_stats.exceptions import ConfigurationError, GitHubStatsError
from github_stats.models.results import ItemResult
from github_stats.output.console import Console as OutputConsole
from github_stats.sync import StatsSync

app = typer.Typer(
    name="github-stats",
    help="CLI to fetch GitHub organization statistics",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_config(command: str) -> Config:
    """Load configuration, exiting cleanly if anything the command needs is unset."""
    try:
        config = get_config()
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)
    try:
        config.require(command)
    except ConfigurationError as e:
        console.print(f"Please provide env vars {' and '.join(e.missing)}")
        raise typer.Exit(0)
    setup_logging(config.log_level)
    return config


@app.callback()
def main():
    """GitHub Stats - collect organization statistics into Port."""
    pass


@app.command(name=JOIN_DATES_COMMAND)
def get_member_join_dates():
    """Get member add dates for a GitHub enterprise."""
    config = load_config(JOIN_DATES_COMMAND)
    _run(_run_join_dates(config, OutputConsole()))


@app.command(name=DEVELOPER_STATS_COMMAND)
def get_developer_stats():
    """Get developer statistics for an organization."""
    config = load_config(DEVELOPER_STATS_COMMAND)
    _run(_run_developer_stats(config, OutputConsole()))


def _run(coro) -> None:
    """Run a command coroutine, turning failures into exit status 1."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[yellow]Collection cancelled[/yellow]")
        raise typer.Exit(1)
    except GitHubStatsError as e:
        logger.error("Error: %s", e)
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        raise typer.Exit(1)


async def _run_join_dates(config: Config, output: OutputConsole) -> list[ItemResult[Any]]:
    """Collect join dates from the audit log and write them to Port."""
    output.print_header("Member Join Dates", f"Enterprise: {config.github_enterprise}")

    async with StatsSync(config) as sync:
        await sync.ensure_quota()
        users = await sync.load_users()
        records = await sync.collect_join_records()
        output.print_join_records(records)
        results = await sync.write_join_dates(users, records)

    output.print_write_summary(results)
    return results


async def _run_developer_stats(config: Config, output: OutputConsole) -> list[ItemResult[Any]]:
    """Collect first commit and PR dates and write them to Port."""
    output.print_header("Developer Stats", f"Organization: {config.github_org}")

    async with StatsSync(config) as sync:
        await sync.ensure_quota()
        users = await sync.load_users()
        stats = await sync.collect_developer_stats()
        output.print_developer_stats(stats)
        results = await sync.write_developer_stats(users, stats)

    output.print_write_summary(results)
    return results


if __name__ == "__main__":
    app()
