"""
Migration repository scanner.

Reads the migrations directory and turns every ``*.sql`` file into a
MigrationRecord keyed by revision.
"""

from pathlib import Path
from typing import Any

from sqldeploy.connections.filesystem import LocalFilesystem
from sqldeploy.exceptions import ConfigurationError, DuplicateRevisionError, UnsupportedFeatureError
from sqldeploy.migrations.models import MigrationRecord
from sqldeploy.migrations.naming import UNDO_MARKER, parse_revision
from sqldeploy.utils.logging import get_logger

logger = get_logger("sqldeploy.migrations.repository")


class MigrationRepository:
    """
    Migration scripts in a directory.

    Args:
        directory: Directory holding ``<revision> - <description>.sql`` files
        filesystem: Object providing ``list_files`` / ``read_file``
            (default: LocalFilesystem)
        pattern: Glob selecting migration files inside ``directory``

    Raises:
        ConfigurationError: If ``directory`` is not an existing directory
    """

    def __init__(self, directory: str | Path, filesystem: Any | None = None, pattern: str = "*.sql"):
        self.filesystem = filesystem or LocalFilesystem()
        self.directory = Path(directory)
        self.pattern = pattern

        is_directory = getattr(self.filesystem, "is_directory", None)
        exists = is_directory(self.directory) if is_directory else self.directory.is_dir()
        if not exists:
            raise ConfigurationError(
                f'Migrations directory "{self.directory}" is not a valid directory.',
                details={"directory": str(self.directory)},
            )

    def scan(self, applied_by: str) -> dict[int, MigrationRecord]:
        """
        Load every migration in the directory.

        Args:
            applied_by: Identity stored with each migration once applied

        Returns:
            Mapping of revision -> MigrationRecord in ascending revision order

        Raises:
            MalformedNameError: A file name carries no revision
            DuplicateRevisionError: Two files share a revision
            UnsupportedFeatureError: A script contains an UNDO section
        """
        migrations: dict[int, MigrationRecord] = {}

        for path in self.filesystem.list_files(self.directory, self.pattern):
            path = Path(path)
            description = path.name
            revision = parse_revision(description)

            if revision in migrations:
                raise DuplicateRevisionError(revision, (migrations[revision].description, description))

            sql = self.filesystem.read_file(path)
            if UNDO_MARKER in sql:
                raise UnsupportedFeatureError(str(path), UNDO_MARKER)

            migrations[revision] = MigrationRecord(
                revision=revision,
                sql=sql,
                path=path,
                description=description,
                applied_by=applied_by,
            )

        logger.debug(f"Found {len(migrations)} migration(s) in {self.directory}")
        return dict(sorted(migrations.items()))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(directory='{self.directory}', pattern='{self.pattern}')"
