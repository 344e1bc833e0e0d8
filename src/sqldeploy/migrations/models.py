"""
Migration records read from disk and from the changelog table.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class MigrationRecord:
    """A migration script found in the migrations directory."""

    revision: int
    sql: str
    path: Path
    description: str  # file base name, stored in the changelog
    applied_by: str  # captured when the directory is scanned

    def changelog_values(self) -> dict[str, Any]:
        """Column values of the changelog row recording this migration."""
        return {
            "change_number": self.revision,
            "description": self.description,
            "applied_by": self.applied_by,
        }


@dataclass(frozen=True)
class ChangelogRow:
    """A row of the changelog table."""

    revision: int
    change_number: int
    description: str
    applied_by: str | None = None
    complete_dt: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], revision: int) -> "ChangelogRow":
        complete_dt = row.get("complete_dt")
        if hasattr(complete_dt, "to_pydatetime"):
            complete_dt = complete_dt.to_pydatetime()
        return cls(
            revision=revision,
            change_number=int(row["change_number"]),
            description=row["description"],
            applied_by=row.get("applied_by"),
            complete_dt=complete_dt,
        )
