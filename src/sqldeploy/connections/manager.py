"""
Connection manager.

Builds database connections from the ``connections`` section of the
configuration.
"""

from typing import Any

from sqldeploy.connections.base import BaseConnection
from sqldeploy.connections.duckdb import DuckDBConnection
from sqldeploy.connections.postgres import PostgresConnection
from sqldeploy.exceptions import ConfigurationError, ConnectionNotFoundError
from sqldeploy.utils.logging import get_logger

logger = get_logger("sqldeploy.connections.manager")

CONNECTION_TYPES: dict[str, type[BaseConnection]] = {
    "duckdb": DuckDBConnection,
    "postgres": PostgresConnection,
}


class ConnectionManager:
    """
    Manages the configured database connections.

    Connections are created lazily by their wrappers; the manager only
    maps names to wrapper objects and closes them together.
    """

    def __init__(self, config: dict[str, Any]):
        self.config = config
        self._connections: dict[str, BaseConnection] = {}
        self._load_connections()

    def _load_connections(self) -> None:
        """Load connections from configuration."""
        connections_config = self.config.get("connections") or {}
        if not isinstance(connections_config, dict):
            raise ConfigurationError(
                f"Configuration 'connections' must be a mapping, got {type(connections_config).__name__}"
            )

        for name, conn_config in connections_config.items():
            conn_type = (conn_config or {}).get("type")
            conn_class = CONNECTION_TYPES.get(conn_type)
            if conn_class is None:
                raise ConfigurationError(
                    f"Unknown connection type '{conn_type}' for connection '{name}'. "
                    f"Supported types: {', '.join(sorted(CONNECTION_TYPES))}",
                    details={"connection": name, "type": conn_type},
                )
            self._connections[name] = conn_class(name, conn_config)
            logger.debug(f"Registered {conn_type} connection '{name}'")

    def get(self, name: str) -> BaseConnection:
        """Get connection by name."""
        if name not in self._connections:
            raise ConnectionNotFoundError(name)
        return self._connections[name]

    def list(self) -> list[str]:
        """List all connection names."""
        return list(self._connections.keys())

    def close_all(self) -> None:
        """Close every connection, logging (not raising) individual failures."""
        for name, conn in self._connections.items():
            try:
                conn.close()
            except Exception as e:
                logger.warning(f"Error closing connection '{name}': {e}")

    def __enter__(self) -> "ConnectionManager":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close_all()
