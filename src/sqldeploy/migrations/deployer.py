"""
Deployer: status computation and migration of one database.

Wires the repository scanner, changelog reader and applier together around
an explicitly injected connection.
"""

from pathlib import Path
from typing import Any

from sqldeploy.connections.base import BaseConnection
from sqldeploy.migrations.applier import MigrationApplier
from sqldeploy.migrations.changelog import CHANGELOG_TABLE, ChangelogReader
from sqldeploy.migrations.models import MigrationRecord
from sqldeploy.migrations.repository import MigrationRepository
from sqldeploy.migrations.status import MigrationStatus, compute_status
from sqldeploy.utils.logging import get_logger

logger = get_logger("sqldeploy.migrations.deployer")


class Deployer:
    """
    Brings a database up to date with a migrations directory.

    Example::

        from sqldeploy.connections import DuckDBConnection
        from sqldeploy.migrations import Deployer

        with DuckDBConnection("default", {"path": "app.duckdb"}) as conn:
            applied = Deployer(conn, "migrations").migrate()
            print(f"Applied {len(applied)} migrations")
    """

    def __init__(
        self,
        connection: BaseConnection,
        migrations_dir: str | Path,
        filesystem: Any | None = None,
        pattern: str = "*.sql",
        table: str = CHANGELOG_TABLE,
        verify_change_numbers: bool = True,
    ):
        self.connection = connection
        self.repository = MigrationRepository(migrations_dir, filesystem=filesystem, pattern=pattern)
        self.changelog = ChangelogReader(connection, table=table, verify_change_numbers=verify_change_numbers)
        self.applier = MigrationApplier(connection, table=table)

    def current_status(self) -> MigrationStatus:
        """Compare the migrations directory with the changelog."""
        self.changelog.ensure_table()
        all_migrations = self.repository.scan(applied_by=self.connection.current_user())
        applied_migrations = self.changelog.read(ensure_table=False)
        status = compute_status(all_migrations, applied_migrations)
        logger.debug(
            f"Status: {len(status.all_migrations)} known, {len(status.applied_migrations)} applied, "
            f"{len(status.pending_migrations)} pending"
        )
        if status.orphaned_revisions:
            logger.warning(
                f"Applied revisions without a migration file: {', '.join(map(str, status.orphaned_revisions))}"
            )
        return status

    def apply(self, status: MigrationStatus, show_sql: bool = False, output: Any | None = None) -> list[int]:
        """Apply the pending migrations of a previously computed status."""
        return self.applier.apply(status, show_sql=show_sql, output=output)

    def migrate(self, show_sql: bool = False, output: Any | None = None) -> dict[int, MigrationRecord]:
        """
        Compute a fresh status and apply everything pending.

        Returns:
            The migrations that were applied, by revision
        """
        status = self.current_status()
        self.apply(status, show_sql=show_sql, output=output)
        return dict(status.pending_migrations)
