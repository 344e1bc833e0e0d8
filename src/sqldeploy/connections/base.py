"""
Abstract base connection class for the database execution layer.

Connections are opened through ibis; catalog lookups and reads go through
the ibis backend while statements run on the backend's DB-API handle, so
migration SQL and changelog inserts share one transaction.
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from contextlib import closing, contextmanager
from typing import Any

import ibis

from sqldeploy.connections.schema import TableSchema
from sqldeploy.utils.logging import get_logger
from sqldeploy.utils.sql_escape import escape_identifier, sql_literal

logger = get_logger("sqldeploy.connections.base")


class ReadOnlyConnectionError(RuntimeError):
    """Raised when a write operation is attempted on a read-only connection."""

    pass


class BaseConnection(ABC):
    """
    Base class for database connections using ibis.

    Provides the operations the migration core needs: list tables, create a
    table, run arbitrary SQL, query rows, insert a row, transaction control
    and the identity of the session user.

    Connection access policy:
        - ``access``: ``"readwrite"`` (default) or ``"read"`` -- controls whether
          write operations (create_table, execute, insert_row) are permitted.
    """

    def __init__(self, name: str, config: dict[str, Any]):
        """
        Initialize connection.

        Args:
            name: Connection name (from config)
            config: Connection configuration dictionary
        """
        self.name = name
        self.config = config
        self._connection: ibis.BaseBackend | None = None
        self._in_transaction = False

        self._access: str = config.get("access", "readwrite")
        if self._access not in ("read", "readwrite"):
            raise ValueError(
                f"Connection '{name}': invalid access policy '{self._access}'. " f"Must be 'read' or 'readwrite'."
            )

    @property
    def access(self) -> str:
        """Get the access policy for this connection ('read' or 'readwrite')."""
        return self._access

    @property
    def is_read_only(self) -> bool:
        """Whether this connection is read-only."""
        return self._access == "read"

    @property
    def in_transaction(self) -> bool:
        """Whether a transaction opened with ``begin()`` is still open."""
        return self._in_transaction

    def assert_writable(self, operation: str = "write") -> None:
        """
        Assert that this connection allows write operations.

        Raises:
            ReadOnlyConnectionError: If connection is read-only
        """
        if self.is_read_only:
            raise ReadOnlyConnectionError(
                f"Cannot perform {operation} on read-only connection '{self.name}'. "
                f"This connection has access='read'. To allow writes, "
                f"set access='readwrite' in the connection config."
            )

    @property
    @abstractmethod
    def connection(self) -> ibis.BaseBackend:
        """
        Get ibis backend connection (lazy initialization).

        Returns:
            ibis.BaseBackend: ibis backend connection
        """
        pass

    @property
    def dbapi(self) -> Any:
        """DB-API connection underneath the ibis backend."""
        return self.connection.con

    # ------------------------------------------------------------------
    # Catalog and reads
    # ------------------------------------------------------------------

    def list_tables(self) -> set[str]:
        """Names of the tables in the current database/schema."""
        return set(self.connection.list_tables())

    def query(self, query: str) -> list[dict[str, Any]]:
        """
        Run a SELECT and return its rows as dictionaries.

        Args:
            query: SQL query string

        Returns:
            One dict per row, keyed by column name
        """
        result = self.connection.sql(query).execute()
        if result is None:
            return []
        if hasattr(result, "to_dict"):
            return result.to_dict(orient="records")
        return [dict(row) for row in result]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def execute(self, sql: str) -> None:
        """
        Execute arbitrary SQL (DDL, DML, several statements).

        Inside ``begin()``/``commit()`` the statement joins the open
        transaction; otherwise it is committed immediately.
        """
        self.assert_writable("execute")
        self._run(sql)
        if not self._in_transaction:
            self._autocommit()

    def create_table(self, schema: TableSchema) -> None:
        """Create a table with typed columns and an optional primary key."""
        self.assert_writable(f"create_table({schema.name})")
        logger.debug(f"Creating table {schema.name} on connection '{self.name}'")
        self.execute(schema.to_sql())

    def insert_row(self, table: str, values: Mapping[str, Any]) -> None:
        """Insert a single row given as a column -> value mapping."""
        if not values:
            raise ValueError(f"Cannot insert an empty row into {table}")
        self.assert_writable(f"insert into {table}")
        columns = ", ".join(escape_identifier(column) for column in values)
        literals = ", ".join(sql_literal(value) for value in values.values())
        self.execute(f"INSERT INTO {escape_identifier(table)} ({columns}) VALUES ({literals})")

    def _run(self, sql: str) -> None:
        """Run SQL on the DB-API handle."""
        with closing(self.dbapi.cursor()) as cursor:
            cursor.execute(sql)

    def _autocommit(self) -> None:
        """Commit a statement executed outside an explicit transaction."""
        pass

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin(self) -> None:
        """Open a transaction."""
        if self._in_transaction:
            raise RuntimeError(f"Connection '{self.name}' already has an open transaction")
        self._begin()
        self._in_transaction = True

    def commit(self) -> None:
        """Commit the open transaction."""
        if not self._in_transaction:
            raise RuntimeError(f"Connection '{self.name}' has no open transaction to commit")
        self.dbapi.commit()
        self._in_transaction = False
        self._end()

    def rollback(self) -> None:
        """Roll back the open transaction (no-op when none is open)."""
        if not self._in_transaction:
            return
        try:
            self.dbapi.rollback()
        finally:
            self._in_transaction = False
            self._end()

    @contextmanager
    def transaction(self) -> Iterator["BaseConnection"]:
        """
        Scope a transaction: commit on success, roll back on any exception.

        The original exception always propagates; a failing rollback is
        logged rather than raised over it.
        """
        self.begin()
        try:
            yield self
        except BaseException:
            try:
                self.rollback()
            except Exception as rollback_error:
                logger.warning(f"Rollback failed on connection '{self.name}': {rollback_error}")
            raise
        else:
            self.commit()

    def _begin(self) -> None:
        """Backend hook run by ``begin()``. DB-API transactions start implicitly."""
        pass

    def _end(self) -> None:
        """Backend hook run after commit or rollback."""
        pass

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def current_user(self) -> str:
        """Identity recorded as ``applied_by`` in the changelog."""
        return (
            self.config.get("user")
            or os.environ.get("USER")
            or os.environ.get("USERNAME")
            or "unknown"
        )

    def close(self) -> None:
        """Close connection and cleanup resources."""
        if self._connection:
            if self._in_transaction:
                logger.warning(f"Closing connection '{self.name}' with an open transaction; rolling back")
                self.rollback()
            if hasattr(self._connection, "disconnect"):
                try:
                    self._connection.disconnect()
                except Exception as e:
                    logger.debug(f"Error during disconnect() for {self.name}: {e}")

            self._connection = None

    def __enter__(self) -> "BaseConnection":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        """Context manager exit - closes connection."""
        try:
            self.close()
        except Exception as e:
            # Don't override the original exception if one occurred
            if exc_type is None:
                raise
            else:
                logger.warning(f"Error closing connection {self.name} during context exit: {e}")

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(name='{self.name}')"
