"""
Migration status: what is on disk, what is applied, what is pending.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from sqldeploy.exceptions import OrphanedRevisionError
from sqldeploy.migrations.models import ChangelogRow, MigrationRecord


@dataclass(frozen=True)
class MigrationStatus:
    """
    Snapshot of the migration state of one database.

    All mappings are read-only and iterate in ascending revision order.
    Recompute the status (``compute_status``) whenever the directory or the
    changelog changes; a snapshot is never updated in place.
    """

    all_migrations: Mapping[int, MigrationRecord]
    applied_migrations: Mapping[int, ChangelogRow]
    pending_migrations: Mapping[int, MigrationRecord]

    @property
    def orphaned_revisions(self) -> tuple[int, ...]:
        """Applied revisions that have no migration file on disk."""
        return tuple(r for r in self.applied_migrations if r not in self.all_migrations)

    @property
    def is_up_to_date(self) -> bool:
        return not self.pending_migrations

    @property
    def current_revision(self) -> int | None:
        """Highest applied revision, or None for an empty changelog."""
        return max(self.applied_migrations, default=None)

    @property
    def target_revision(self) -> int | None:
        """Highest revision found on disk."""
        return max(self.all_migrations, default=None)

    def raise_for_orphans(self) -> None:
        """
        Opt-in drift check.

        Raises:
            OrphanedRevisionError: If applied revisions are missing on disk
        """
        orphaned = self.orphaned_revisions
        if orphaned:
            raise OrphanedRevisionError(orphaned)


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(sorted(mapping.items())))


def compute_status(
    all_migrations: Mapping[int, MigrationRecord],
    applied_migrations: Mapping[int, ChangelogRow],
) -> MigrationStatus:
    """
    Combine scanned migrations and changelog rows into a MigrationStatus.

    Pending migrations are those on disk without a changelog row. Applied
    revisions missing from disk are not an error here; see
    ``MigrationStatus.orphaned_revisions``.
    """
    pending = {revision: record for revision, record in all_migrations.items() if revision not in applied_migrations}
    return MigrationStatus(
        all_migrations=_frozen(all_migrations),
        applied_migrations=_frozen(applied_migrations),
        pending_migrations=_frozen(pending),
    )
