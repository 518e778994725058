"""Rich console output for collection runs."""

from datetime import datetime
from typing import Any, Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from github_stats.models.github import DeveloperStats, JoinRecord
from github_stats.models.results import ItemResult


def _format_date(value: Optional[datetime]) -> str:
    return value.isoformat() if value else "-"


class Console:
    """Wrapper for rich console output."""

    def __init__(self, quiet: bool = False, console: Optional[RichConsole] = None):
        self.console = console or RichConsole()
        self.quiet = quiet

    def print_warning(self, message: str):
        """Print warning message."""
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str):
        """Print success message."""
        if not self.quiet:
            self.console.print(f"[green]{message}[/green]")

    def print_header(self, title: str, target: str):
        """Print command header."""
        if self.quiet:
            return

        self.console.print()
        self.console.print(
            Panel(
                f"[bold blue]{title}[/bold blue]\n[dim]{target}[/dim]",
                expand=False,
            )
        )
        self.console.print()

    def print_join_records(self, records: list[JoinRecord]):
        """Print member additions found in the audit log."""
        if self.quiet:
            return

        table = Table(title="Member Join Dates", expand=False)
        table.add_column("User")
        table.add_column("User ID", justify="right")
        table.add_column("Added At")

        for record in records:
            table.add_row(
                record.user,
                str(record.user_id) if record.user_id is not None else "-",
                _format_date(record.created_at),
            )

        self.console.print(table)
        self.console.print()

    def print_developer_stats(self, stats: list[DeveloperStats]):
        """Print first contribution dates per member."""
        if self.quiet:
            return

        table = Table(title="Developer Stats", expand=False)
        table.add_column("Login")
        table.add_column("First Commit")
        table.add_column("First PR")

        for row in stats:
            table.add_row(
                row.login,
                _format_date(row.first_commit_date),
                _format_date(row.first_pr_date),
            )

        self.console.print(table)
        self.console.print()

    def print_write_summary(self, results: list[ItemResult[Any]]):
        """Print how many catalog updates succeeded and which failed."""
        failed = [r for r in results if not r.ok]
        updated = len(results) - len(failed)

        self.print_success(f"Updated {updated} user(s) in Port")
        for result in failed:
            self.print_warning(f"Could not update {result.key}: {result.error}")
