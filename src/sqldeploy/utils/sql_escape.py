"""
SQL identifier and value escaping utilities.

Changelog writes are rendered as plain SQL so they run on the same DB-API
handle as the migration itself; these helpers keep that rendering safe.
"""

from datetime import datetime
from typing import Any


def escape_identifier(identifier: str) -> str:
    """
    Escape SQL identifier (table name, column name).

    Wraps identifier in double quotes and escapes any double quotes within.
    This is safe for PostgreSQL, DuckDB, and most SQL databases.

    Example:
        >>> escape_identifier("changelog")
        '"changelog"'
        >>> escape_identifier('table"name')
        '"table""name"'
    """
    if not identifier:
        raise ValueError("Identifier cannot be empty")

    escaped = identifier.replace('"', '""')
    return f'"{escaped}"'


def escape_string(value: str) -> str:
    """Escape single quotes for SQL strings."""
    return value.replace("'", "''")


def sql_literal(value: Any) -> str:
    """Convert Python value to SQL literal representation."""
    if value is None:
        return "NULL"
    # bool before int: ``isinstance(True, int)`` is True
    elif isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    elif isinstance(value, (int, float)):
        return str(value)
    elif isinstance(value, datetime):
        return f"TIMESTAMP '{value.isoformat(sep=' ')}'"
    else:
        return f"'{escape_string(str(value))}'"
