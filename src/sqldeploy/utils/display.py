"""
Console output for migration runs.

Echoes migration SQL and renders migration status tables with rich.
"""

from typing import Any

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from sqldeploy.migrations.status import MigrationStatus


class ConsoleOutput:
    """Writes SQL (and other lines) to a rich Console."""

    def __init__(self, console: Console | None = None, highlight: bool = True):
        self.console = console or Console()
        self.highlight = highlight

    def emit(self, line: str) -> None:
        if self.highlight:
            self.console.print(Syntax(line.rstrip(), "sql", theme="ansi_dark", word_wrap=True))
        else:
            self.console.print(line, markup=False, highlight=False)


class NullOutput:
    """Discards everything."""

    def emit(self, line: str) -> None:
        pass


def _format_dt(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


def build_status_table(status: MigrationStatus) -> Table:
    """Tabulate every known revision as applied, pending or orphaned."""
    table = Table(title="Migrations", show_lines=False)
    table.add_column("Revision", justify="right", style="bold")
    table.add_column("Status")
    table.add_column("Description")
    table.add_column("Applied at")
    table.add_column("Applied by")

    revisions = sorted(set(status.all_migrations) | set(status.applied_migrations))
    for revision in revisions:
        row = status.applied_migrations.get(revision)
        if revision in status.pending_migrations:
            record = status.pending_migrations[revision]
            table.add_row(str(revision), "[yellow]pending[/yellow]", record.description, "", "")
        elif revision not in status.all_migrations:
            table.add_row(
                str(revision),
                "[red]missing file[/red]",
                row.description,
                _format_dt(row.complete_dt),
                row.applied_by or "",
            )
        else:
            table.add_row(
                str(revision),
                "[green]applied[/green]",
                row.description,
                _format_dt(row.complete_dt),
                row.applied_by or "",
            )
    return table


def render_status(status: MigrationStatus, console: Console | None = None) -> None:
    """Print the status table and a one-line summary."""
    console = console or Console()
    if not status.all_migrations and not status.applied_migrations:
        console.print("No migrations found")
        return

    console.print(build_status_table(status))
    summary = (
        f"Applied: {len(status.applied_migrations)}, Pending: {len(status.pending_migrations)}"
    )
    if status.orphaned_revisions:
        summary += f", Missing files: {len(status.orphaned_revisions)}"
    console.print(summary)
