"""
Tests for the exception hierarchy.
"""

import pytest

from sqldeploy.exceptions import (
    ConfigurationError,
    ConnectionError_,
    ConnectionLockError,
    ConnectionNotFoundError,
    DuplicateRevisionError,
    InconsistentChangelogError,
    MalformedNameError,
    MigrationError,
    OrphanedRevisionError,
    SqlDeployConnectionError,
    SqlDeployError,
    UnsupportedFeatureError,
)


class TestHierarchy:
    """Verify all exceptions inherit from SqlDeployError."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            ConnectionError_,
            ConnectionLockError,
            ConnectionNotFoundError,
            MigrationError,
            MalformedNameError,
            DuplicateRevisionError,
            UnsupportedFeatureError,
            InconsistentChangelogError,
            OrphanedRevisionError,
        ],
    )
    def test_inherits_from_sqldeploy_error(self, exc_class):
        assert issubclass(exc_class, SqlDeployError)

    def test_connection_alias(self):
        assert SqlDeployConnectionError is ConnectionError_

    @pytest.mark.parametrize(
        "exc_class",
        [
            MalformedNameError,
            DuplicateRevisionError,
            UnsupportedFeatureError,
            InconsistentChangelogError,
            OrphanedRevisionError,
        ],
    )
    def test_migration_errors(self, exc_class):
        assert issubclass(exc_class, MigrationError)

    def test_configuration_error_is_not_a_migration_error(self):
        assert not issubclass(ConfigurationError, MigrationError)


class TestExceptionMessages:
    """Test exception constructors and details."""

    def test_sqldeploy_error(self):
        e = SqlDeployError("boom", details={"key": "val"})
        assert str(e) == "boom"
        assert e.message == "boom"
        assert e.details == {"key": "val"}

    def test_malformed_name_error(self):
        e = MalformedNameError("init.sql")
        assert "init.sql" in str(e)
        assert e.name == "init.sql"

    def test_duplicate_revision_error(self):
        e = DuplicateRevisionError(1, ("1 - a.sql", "1 - b.sql"))
        assert "'1'" in str(e)
        assert "1 - a.sql" in str(e)
        assert "1 - b.sql" in str(e)
        assert e.revision == 1
        assert e.details["sources"] == ["1 - a.sql", "1 - b.sql"]

    def test_duplicate_revision_error_without_sources(self):
        e = DuplicateRevisionError(7)
        assert str(e) == "Duplicate revision number '7' is not allowed."

    def test_unsupported_feature_error(self):
        e = UnsupportedFeatureError("migrations/3 - x.sql", "--//@UNDO")
        assert "--//@UNDO" in str(e)
        assert e.path == "migrations/3 - x.sql"

    def test_inconsistent_changelog_error(self):
        e = InconsistentChangelogError(4, 5, "4 - x.sql")
        assert e.revision == 4
        assert e.change_number == 5
        assert "4 - x.sql" in str(e)

    def test_orphaned_revision_error(self):
        e = OrphanedRevisionError((2, 5))
        assert "2, 5" in str(e)
        assert e.revisions == (2, 5)

    def test_connection_lock_error(self):
        e = ConnectionLockError("locked", pid="1234", path="/tmp/db")
        assert e.pid == "1234"
        assert e.details["path"] == "/tmp/db"

    def test_connection_not_found_error(self):
        e = ConnectionNotFoundError("my_conn")
        assert "my_conn" in str(e)
        assert e.connection_name == "my_conn"

    def test_catchable_with_base(self):
        with pytest.raises(SqlDeployError):
            raise DuplicateRevisionError(1)

        with pytest.raises(MigrationError):
            raise UnsupportedFeatureError("x.sql", "--//@UNDO")
