"""
Table definitions for tables sqldeploy creates itself.
"""

from dataclasses import dataclass, field

from sqldeploy.utils.sql_escape import escape_identifier


@dataclass(frozen=True)
class Column:
    """A typed column of a table created through ``BaseConnection.create_table``."""

    name: str
    type: str
    length: int | None = None
    nullable: bool = True
    default: str | None = None  # raw SQL expression, e.g. CURRENT_TIMESTAMP

    def to_sql(self) -> str:
        type_sql = f"{self.type}({self.length})" if self.length else self.type
        parts = [escape_identifier(self.name), type_sql]
        if not self.nullable:
            parts.append("NOT NULL")
        if self.default is not None:
            parts.append(f"DEFAULT {self.default}")
        return " ".join(parts)


@dataclass(frozen=True)
class TableSchema:
    """Column list and primary key of a table."""

    name: str
    columns: tuple[Column, ...]
    primary_key: tuple[str, ...] = field(default_factory=tuple)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def to_sql(self) -> str:
        """Render the ``CREATE TABLE`` statement for this schema."""
        definitions = [column.to_sql() for column in self.columns]
        if self.primary_key:
            keys = ", ".join(escape_identifier(k) for k in self.primary_key)
            definitions.append(f"PRIMARY KEY ({keys})")
        body = ",\n    ".join(definitions)
        return f"CREATE TABLE {escape_identifier(self.name)} (\n    {body}\n)"
