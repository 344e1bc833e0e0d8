"""
Changelog reader.

The ``changelog`` table records one row per applied migration. This module
owns its schema and rebuilds the set of applied revisions from it.
"""

from sqldeploy.connections.base import BaseConnection
from sqldeploy.connections.schema import Column, TableSchema
from sqldeploy.exceptions import DuplicateRevisionError, InconsistentChangelogError
from sqldeploy.migrations.models import ChangelogRow
from sqldeploy.migrations.naming import parse_revision
from sqldeploy.utils.logging import get_logger
from sqldeploy.utils.sql_escape import escape_identifier

logger = get_logger("sqldeploy.migrations.changelog")

CHANGELOG_TABLE = "changelog"


def changelog_schema(table: str = CHANGELOG_TABLE) -> TableSchema:
    """Schema of the changelog table (compatible with dbdeploy's)."""
    return TableSchema(
        name=table,
        columns=(
            Column("change_number", "BIGINT", nullable=False),
            Column("complete_dt", "TIMESTAMP", nullable=False, default="CURRENT_TIMESTAMP"),
            Column("applied_by", "VARCHAR", length=100, nullable=False),
            Column("description", "VARCHAR", length=500, nullable=False),
        ),
        primary_key=("change_number",),
    )


CHANGELOG_SCHEMA = changelog_schema()


class ChangelogReader:
    """
    Reads applied migrations from the changelog table.

    Args:
        connection: Database connection holding the changelog
        table: Changelog table name
        verify_change_numbers: Fail when a row's description resolves to a
            revision other than its stored ``change_number``
    """

    def __init__(
        self,
        connection: BaseConnection,
        table: str = CHANGELOG_TABLE,
        verify_change_numbers: bool = True,
    ):
        self.connection = connection
        self.table = table
        self.verify_change_numbers = verify_change_numbers

    def ensure_table(self) -> bool:
        """
        Create the changelog table if it does not exist.

        Returns:
            True if the table was created
        """
        if self.table in self.connection.list_tables():
            return False
        logger.info(f"Creating changelog table '{self.table}'")
        self.connection.create_table(changelog_schema(self.table))
        return True

    def read(self, ensure_table: bool = True) -> dict[int, ChangelogRow]:
        """
        Read the applied migrations.

        The revision of each row is parsed from its ``description`` (the
        original file name), not taken from ``change_number``.

        Args:
            ensure_table: Create the table first if it is missing; pass False
                when the caller has already done so

        Returns:
            Mapping of revision -> ChangelogRow in ascending revision order

        Raises:
            MalformedNameError: A description carries no revision
            DuplicateRevisionError: Two rows resolve to the same revision
            InconsistentChangelogError: Description and change_number disagree
        """
        if ensure_table:
            self.ensure_table()

        applied: dict[int, ChangelogRow] = {}
        for row in self.connection.query(f"SELECT * FROM {escape_identifier(self.table)}"):
            description = row["description"]
            revision = parse_revision(description)

            if revision in applied:
                raise DuplicateRevisionError(revision, (applied[revision].description, description))

            entry = ChangelogRow.from_row(row, revision)
            if self.verify_change_numbers and entry.change_number != revision:
                raise InconsistentChangelogError(revision, entry.change_number, description)

            applied[revision] = entry

        logger.debug(f"Changelog '{self.table}' lists {len(applied)} applied migration(s)")
        return dict(sorted(applied.items()))
