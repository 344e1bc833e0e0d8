"""
DuckDB connection via ibis.
"""

import re
from pathlib import Path
from typing import Any

import ibis

from sqldeploy.connections.base import BaseConnection
from sqldeploy.exceptions import ConnectionError_, ConnectionLockError
from sqldeploy.utils.logging import get_logger

logger = get_logger("sqldeploy.connections.duckdb")


class DuckDBConnection(BaseConnection):
    """DuckDB connection wrapper using ibis."""

    def __init__(self, name: str, config: dict[str, Any]):
        super().__init__(name, config)

    @property
    def connection(self) -> ibis.BaseBackend:
        """
        Get DuckDB connection via ibis (lazy initialization).

        Returns:
            ibis.BaseBackend: ibis DuckDB backend
        """
        if self._connection is None:
            path = self.config.get("path", ":memory:")

            if path == ":memory:":
                self._connection = ibis.duckdb.connect()
            else:
                # Ensure directory exists for file-based databases
                Path(path).parent.mkdir(parents=True, exist_ok=True)
                try:
                    self._connection = ibis.duckdb.connect(path, read_only=self.is_read_only)
                except Exception as e:
                    error_str = str(e)
                    if "lock" in error_str.lower() or "conflicting" in error_str.lower():
                        pid_match = re.search(r"PID\s+(\d+)", error_str)
                        pid = pid_match.group(1) if pid_match else None
                        pid_info = f" (PID: {pid})" if pid else ""
                        raise ConnectionLockError(
                            f"Cannot connect to DuckDB database '{path}': File is locked by another process{pid_info}.\n"
                            f"Please close any other processes accessing this database:\n"
                            f"  - DuckDB CLI sessions\n"
                            f"  - Other sqldeploy runs\n"
                            f"  - Database viewers or tools",
                            pid=pid,
                            path=path,
                        ) from e
                    raise ConnectionError_(
                        f"Cannot connect to DuckDB database '{path}': {error_str}\n"
                        f"Please verify:\n"
                        f"  - Database file exists and is accessible\n"
                        f"  - File permissions are correct\n"
                        f"  - Database file is not corrupted",
                        details={"path": path},
                    ) from e
            logger.debug(f"Opened DuckDB database '{path}' for connection '{self.name}'")

        return self._connection

    def _run(self, sql: str) -> None:
        # DuckDB cursors are separate connections with their own
        # transaction, so statements go to the main handle.
        self.dbapi.execute(sql)

    def _begin(self) -> None:
        self.dbapi.begin()
