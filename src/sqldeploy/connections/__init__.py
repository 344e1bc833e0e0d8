"""
Connection management.

Database connections (DuckDB, Postgres) and local filesystem access used by
the migration core.
"""

from sqldeploy.connections.base import BaseConnection, ReadOnlyConnectionError
from sqldeploy.connections.duckdb import DuckDBConnection
from sqldeploy.connections.filesystem import LocalFilesystem
from sqldeploy.connections.manager import ConnectionManager
from sqldeploy.connections.postgres import PostgresConnection
from sqldeploy.connections.schema import Column, TableSchema

__all__ = [
    "BaseConnection",
    "ReadOnlyConnectionError",
    "ConnectionManager",
    "DuckDBConnection",
    "PostgresConnection",
    "LocalFilesystem",
    "Column",
    "TableSchema",
]
