"""
Tests for migration status computation.
"""

import dataclasses
from pathlib import Path

import pytest

from sqldeploy.exceptions import OrphanedRevisionError
from sqldeploy.migrations.models import ChangelogRow, MigrationRecord
from sqldeploy.migrations.status import compute_status


def record(revision: int) -> MigrationRecord:
    name = f"{revision} - step.sql"
    return MigrationRecord(
        revision=revision,
        sql=f"SELECT {revision}",
        path=Path("migrations") / name,
        description=name,
        applied_by="tester",
    )


def row(revision: int) -> ChangelogRow:
    return ChangelogRow(
        revision=revision,
        change_number=revision,
        description=f"{revision} - step.sql",
        applied_by="tester",
    )


def records(*revisions: int) -> dict:
    return {r: record(r) for r in revisions}


def rows(*revisions: int) -> dict:
    return {r: row(r) for r in revisions}


class TestComputeStatus:
    """Tests for compute_status."""

    def test_pending_is_difference(self):
        status = compute_status(records(1, 2, 3), rows(1))
        assert list(status.pending_migrations) == [2, 3]
        assert status.pending_migrations[2] == record(2)

    def test_nothing_applied(self):
        status = compute_status(records(1, 2), {})
        assert list(status.pending_migrations) == [1, 2]
        assert status.current_revision is None

    def test_everything_applied(self):
        status = compute_status(records(1, 2), rows(1, 2))
        assert dict(status.pending_migrations) == {}
        assert status.is_up_to_date

    def test_extra_applied_revision_is_not_an_error(self):
        status = compute_status(records(1), rows(1, 2))
        assert dict(status.pending_migrations) == {}
        assert status.orphaned_revisions == (2,)

    def test_pending_sorted_regardless_of_input_order(self):
        all_migrations = {10: record(10), 3: record(3), 9: record(9), 1: record(1)}
        status = compute_status(all_migrations, rows(3))
        assert list(status.pending_migrations) == [1, 9, 10]
        assert list(status.all_migrations) == [1, 3, 9, 10]

    def test_deterministic(self):
        first = compute_status(records(5, 1, 3), rows(3))
        second = compute_status(records(5, 1, 3), rows(3))
        assert list(first.pending_migrations.items()) == list(second.pending_migrations.items())

    def test_revisions(self):
        status = compute_status(records(1, 2, 7), rows(1, 2))
        assert status.current_revision == 2
        assert status.target_revision == 7

    def test_empty(self):
        status = compute_status({}, {})
        assert status.is_up_to_date
        assert status.target_revision is None
        assert status.orphaned_revisions == ()


class TestStatusImmutability:
    """A status snapshot cannot be changed after construction."""

    def test_mappings_are_read_only(self):
        status = compute_status(records(1, 2), rows(1))
        with pytest.raises(TypeError):
            status.pending_migrations[3] = record(3)
        with pytest.raises(TypeError):
            del status.all_migrations[1]

    def test_fields_are_frozen(self):
        status = compute_status(records(1), {})
        with pytest.raises(dataclasses.FrozenInstanceError):
            status.pending_migrations = {}

    def test_inputs_are_copied(self):
        all_migrations = records(1, 2)
        status = compute_status(all_migrations, {})
        all_migrations[3] = record(3)
        assert list(status.all_migrations) == [1, 2]
        assert list(status.pending_migrations) == [1, 2]


class TestOrphans:
    """Opt-in drift detection."""

    def test_raise_for_orphans(self):
        status = compute_status(records(1, 3), rows(1, 2, 4))
        with pytest.raises(OrphanedRevisionError) as exc_info:
            status.raise_for_orphans()
        assert exc_info.value.revisions == (2, 4)

    def test_no_orphans_does_not_raise(self):
        compute_status(records(1, 2), rows(1)).raise_for_orphans()
