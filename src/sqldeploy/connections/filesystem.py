"""
Local filesystem access for migration scripts.
"""

from pathlib import Path


class LocalFilesystem:
    """
    Reads migration scripts from the local filesystem.

    Kept behind a small interface (``list_files`` / ``read_file``) so the
    scanner can be pointed at other sources or at test doubles.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def is_directory(self, directory: str | Path) -> bool:
        return Path(directory).is_dir()

    def list_files(self, directory: str | Path, pattern: str) -> list[Path]:
        """
        List files in ``directory`` whose names match a glob ``pattern``.

        Returns:
            Sorted file paths (directories and dotfiles are skipped)
        """
        return sorted(p for p in Path(directory).glob(pattern) if p.is_file() and not p.name.startswith("."))

    def read_file(self, path: str | Path) -> str:
        """Read a file's full text."""
        return Path(path).read_text(encoding=self.encoding)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(encoding='{self.encoding}')"
