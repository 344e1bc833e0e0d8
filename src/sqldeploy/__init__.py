"""
sqldeploy - Versioned SQL migrations tracked in a changelog table.

Applies ``<revision> - <description>.sql`` scripts in numeric order inside a
single transaction and records each one in the ``changelog`` table.
"""

__version__ = "0.1.0"

from sqldeploy.exceptions import (
    ConfigurationError,
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
from sqldeploy.migrations import (
    ChangelogReader,
    ChangelogRow,
    Deployer,
    MigrationApplier,
    MigrationRecord,
    MigrationRepository,
    MigrationStatus,
    compute_status,
)
from sqldeploy.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    # Migrations
    "Deployer",
    "MigrationRepository",
    "ChangelogReader",
    "MigrationApplier",
    "MigrationStatus",
    "compute_status",
    "MigrationRecord",
    "ChangelogRow",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Exceptions
    "SqlDeployError",
    "ConfigurationError",
    "SqlDeployConnectionError",
    "ConnectionLockError",
    "ConnectionNotFoundError",
    "MigrationError",
    "MalformedNameError",
    "DuplicateRevisionError",
    "UnsupportedFeatureError",
    "InconsistentChangelogError",
    "OrphanedRevisionError",
]
