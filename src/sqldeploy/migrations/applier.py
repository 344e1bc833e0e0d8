"""
Transactional migration applier.

Applies every pending migration of a MigrationStatus inside a single
transaction: all of them are committed together or none is.
"""

from typing import Any

from sqldeploy.connections.base import BaseConnection
from sqldeploy.migrations.changelog import CHANGELOG_TABLE
from sqldeploy.migrations.status import MigrationStatus
from sqldeploy.utils.logging import get_logger

logger = get_logger("sqldeploy.migrations.applier")


class MigrationApplier:
    """
    Runs pending migrations and records them in the changelog.

    The connection is used exclusively for the duration of ``apply``; callers
    must not share it with other work mid-transaction, and concurrent runs
    against one database must be serialized externally.
    """

    def __init__(self, connection: BaseConnection, table: str = CHANGELOG_TABLE):
        self.connection = connection
        self.table = table

    def apply(self, status: MigrationStatus, show_sql: bool = False, output: Any | None = None) -> list[int]:
        """
        Apply the pending migrations of ``status`` in ascending revision order.

        Args:
            status: Freshly computed migration status
            show_sql: Emit each migration's SQL to ``output`` before running it
            output: Object with an ``emit(line)`` method

        Returns:
            Applied revisions, in the order they ran

        Raises:
            Exception: Whatever the database raised for the failing statement.
                The transaction is rolled back before it propagates.
        """
        pending = status.pending_migrations
        if not pending:
            logger.info("No pending migrations")
            return []

        applied: list[int] = []
        with self.connection.transaction():
            for revision, migration in pending.items():
                if show_sql and output is not None:
                    output.emit(migration.sql)
                try:
                    self.connection.execute(migration.sql)
                    self.connection.insert_row(self.table, migration.changelog_values())
                except Exception as e:
                    logger.error(f"Migration {revision} ({migration.description}) failed, rolling back: {e}")
                    raise
                logger.info(f"Applied migration {revision}: {migration.description}")
                applied.append(revision)

        logger.info(f"Committed {len(applied)} migration(s)")
        return applied
