"""
Migration system for schema changes.

Scans ``<revision> - <description>.sql`` files, compares them with the
``changelog`` table and applies what is pending in one transaction.
"""

from sqldeploy.migrations.applier import MigrationApplier
from sqldeploy.migrations.changelog import CHANGELOG_SCHEMA, CHANGELOG_TABLE, ChangelogReader, changelog_schema
from sqldeploy.migrations.deployer import Deployer
from sqldeploy.migrations.models import ChangelogRow, MigrationRecord
from sqldeploy.migrations.naming import REVISION_PATTERN, UNDO_MARKER, parse_revision
from sqldeploy.migrations.repository import MigrationRepository
from sqldeploy.migrations.status import MigrationStatus, compute_status

__all__ = [
    "Deployer",
    "MigrationApplier",
    "MigrationRepository",
    "ChangelogReader",
    "MigrationStatus",
    "compute_status",
    "MigrationRecord",
    "ChangelogRow",
    "parse_revision",
    "REVISION_PATTERN",
    "UNDO_MARKER",
    "CHANGELOG_TABLE",
    "CHANGELOG_SCHEMA",
    "changelog_schema",
]
