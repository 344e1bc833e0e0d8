"""
Tests for the changelog table and the changelog reader.
"""

from unittest.mock import patch

import pytest

from sqldeploy.connections.duckdb import DuckDBConnection
from sqldeploy.exceptions import DuplicateRevisionError, InconsistentChangelogError, MalformedNameError
from sqldeploy.migrations.changelog import CHANGELOG_SCHEMA, CHANGELOG_TABLE, ChangelogReader, changelog_schema


@pytest.fixture
def conn():
    conn = DuckDBConnection("test", {"path": ":memory:", "user": "tester"})
    yield conn
    conn.close()


def add_row(conn, change_number: int, description: str, applied_by: str = "tester"):
    conn.insert_row(
        CHANGELOG_TABLE,
        {"change_number": change_number, "description": description, "applied_by": applied_by},
    )


class TestChangelogSchema:
    """Tests for the changelog table definition."""

    def test_columns(self):
        assert CHANGELOG_SCHEMA.name == "changelog"
        assert CHANGELOG_SCHEMA.column_names == ["change_number", "complete_dt", "applied_by", "description"]
        assert CHANGELOG_SCHEMA.primary_key == ("change_number",)

    def test_lengths(self):
        columns = {c.name: c for c in CHANGELOG_SCHEMA.columns}
        assert columns["applied_by"].length == 100
        assert columns["description"].length == 500
        assert columns["complete_dt"].default == "CURRENT_TIMESTAMP"

    def test_change_number_is_64_bit(self):
        columns = {c.name: c for c in CHANGELOG_SCHEMA.columns}
        assert columns["change_number"].type == "BIGINT"

    def test_custom_table_name(self):
        assert changelog_schema("schema_log").name == "schema_log"


class TestEnsureTable:
    """Tests for changelog table creation."""

    def test_creates_table_once(self, conn):
        reader = ChangelogReader(conn)
        assert reader.ensure_table() is True
        assert "changelog" in conn.list_tables()
        assert reader.ensure_table() is False

    def test_complete_dt_defaults_to_now(self, conn):
        ChangelogReader(conn).ensure_table()
        add_row(conn, 1, "1 - a.sql")
        row = conn.query("SELECT * FROM changelog")[0]
        assert row["complete_dt"] is not None

    def test_primary_key_enforced(self, conn):
        ChangelogReader(conn).ensure_table()
        add_row(conn, 1, "1 - a.sql")
        with pytest.raises(Exception):
            add_row(conn, 1, "1 - a.sql")


class TestChangelogRead:
    """Tests for ChangelogReader.read."""

    def test_empty_changelog(self, conn):
        assert ChangelogReader(conn).read() == {}
        assert "changelog" in conn.list_tables()

    def test_reads_rows_in_revision_order(self, conn):
        reader = ChangelogReader(conn)
        reader.ensure_table()
        add_row(conn, 10, "10 - c.sql")
        add_row(conn, 2, "2 - b.sql", applied_by="alice")
        add_row(conn, 9, "9 - a.sql")

        applied = reader.read()

        assert list(applied) == [2, 9, 10]
        row = applied[2]
        assert row.revision == 2
        assert row.change_number == 2
        assert row.description == "2 - b.sql"
        assert row.applied_by == "alice"
        assert row.complete_dt is not None

    def test_revision_comes_from_description(self, conn):
        reader = ChangelogReader(conn, verify_change_numbers=False)
        reader.ensure_table()
        add_row(conn, 5, "4 - renamed.sql")

        applied = reader.read()
        assert list(applied) == [4]
        assert applied[4].change_number == 5

    def test_inconsistent_change_number(self, conn):
        reader = ChangelogReader(conn)
        reader.ensure_table()
        add_row(conn, 5, "4 - renamed.sql")

        with pytest.raises(InconsistentChangelogError) as exc_info:
            reader.read()
        assert exc_info.value.revision == 4
        assert exc_info.value.change_number == 5

    def test_malformed_description(self, conn):
        reader = ChangelogReader(conn)
        reader.ensure_table()
        add_row(conn, 1, "1 - a.sql")
        add_row(conn, 7, "seven.sql")

        with pytest.raises(MalformedNameError) as exc_info:
            reader.read()
        assert exc_info.value.name == "seven.sql"

    def test_duplicate_revision(self, conn):
        reader = ChangelogReader(conn, verify_change_numbers=False)
        reader.ensure_table()
        add_row(conn, 1, "1 - a.sql")
        add_row(conn, 2, "1 - b.sql")

        with pytest.raises(DuplicateRevisionError) as exc_info:
            reader.read()
        assert exc_info.value.revision == 1

    def test_custom_table(self, conn):
        reader = ChangelogReader(conn, table="schema_log")
        assert reader.read() == {}
        assert "schema_log" in conn.list_tables()
        assert "changelog" not in conn.list_tables()

    def test_timestamp_revision(self, conn):
        reader = ChangelogReader(conn)
        reader.ensure_table()
        add_row(conn, 20240101120000, "20240101120000 - add index.sql")

        applied = reader.read()
        assert list(applied) == [20240101120000]
        assert applied[20240101120000].change_number == 20240101120000

    def test_read_without_ensure_table(self, conn):
        reader = ChangelogReader(conn)
        reader.ensure_table()
        with patch.object(conn, "list_tables", wraps=conn.list_tables) as list_tables:
            assert reader.read(ensure_table=False) == {}
        list_tables.assert_not_called()
