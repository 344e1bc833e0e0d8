"""
sqldeploy exception hierarchy.

All domain-specific exceptions inherit from SqlDeployError, so callers can
catch any failure with a single base class and still branch on the exact
kind when they need to (e.g. to pick a process exit code).

Hierarchy::

    SqlDeployError
    ├── ConfigurationError          - invalid migrations dir, config loading
    ├── ConnectionError_            - connection init, lock issues
    │   ├── ConnectionLockError     - database file locked by another process
    │   └── ConnectionNotFoundError - named connection not configured
    └── MigrationError              - migration set / changelog problems
        ├── MalformedNameError      - name does not follow "<n> - <text>"
        ├── DuplicateRevisionError  - two entries share a revision
        ├── UnsupportedFeatureError - legacy UNDO section found
        ├── InconsistentChangelogError - description and change_number differ
        └── OrphanedRevisionError   - applied revisions missing on disk

Errors raised by the database while a migration executes are not wrapped;
they propagate as the driver raised them.
"""

from __future__ import annotations


class SqlDeployError(Exception):
    """Base exception for all sqldeploy errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(SqlDeployError):
    """Raised when configuration or the migrations directory is invalid."""


# --- Connections -------------------------------------------------------------


class ConnectionError_(SqlDeployError):
    """Raised when a database connection cannot be established.

    Named with trailing underscore to avoid shadowing the builtin
    ``ConnectionError``; the public alias ``SqlDeployConnectionError``
    is preferred for external use.
    """


# Public alias so callers don't need the underscore
SqlDeployConnectionError = ConnectionError_


class ConnectionLockError(ConnectionError_):
    """Raised when a database file is locked by another process."""

    def __init__(self, message: str, *, pid: str | None = None, path: str | None = None) -> None:
        super().__init__(message, details={"pid": pid, "path": path})
        self.pid = pid
        self.path = path


class ConnectionNotFoundError(ConnectionError_):
    """Raised when a named connection is not configured."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Connection not found: {name}", details={"connection": name})
        self.connection_name = name


# --- Migrations --------------------------------------------------------------


class MigrationError(SqlDeployError):
    """Base class for problems with the migration set or the changelog."""


class MalformedNameError(MigrationError):
    """Raised when a file name or changelog description carries no revision."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No revision found in file '{name}'.", details={"name": name})
        self.name = name


class DuplicateRevisionError(MigrationError):
    """Raised when two migrations (or two changelog rows) share a revision."""

    def __init__(self, revision: int, sources: tuple[str, ...] = ()) -> None:
        message = f"Duplicate revision number '{revision}' is not allowed."
        if sources:
            message += f" Found in: {', '.join(sources)}"
        super().__init__(message, details={"revision": revision, "sources": list(sources)})
        self.revision = revision
        self.sources = sources


class UnsupportedFeatureError(MigrationError):
    """Raised when a migration uses a feature this tool does not implement."""

    def __init__(self, path: str, feature: str) -> None:
        super().__init__(
            f"No support for the \"{feature}\" feature (found in '{path}').",
            details={"path": path, "feature": feature},
        )
        self.path = path
        self.feature = feature


class InconsistentChangelogError(MigrationError):
    """Raised when a changelog row's description disagrees with its change_number."""

    def __init__(self, revision: int, change_number: int, description: str) -> None:
        super().__init__(
            f"Changelog row with change_number {change_number} has description "
            f"'{description}' which resolves to revision {revision}.",
            details={"revision": revision, "change_number": change_number, "description": description},
        )
        self.revision = revision
        self.change_number = change_number
        self.description = description


class OrphanedRevisionError(MigrationError):
    """Raised on request when applied revisions have no migration file."""

    def __init__(self, revisions: tuple[int, ...]) -> None:
        listed = ", ".join(str(r) for r in revisions)
        super().__init__(
            f"Applied revisions missing from the migrations directory: {listed}",
            details={"revisions": list(revisions)},
        )
        self.revisions = revisions
