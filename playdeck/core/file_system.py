# playdeck/core/file_system.py

"""Filesystem capability used by the discovery and metadata pipeline.

Every read, write and directory listing performed by the core goes through a
``FileSystem`` instance so that failures surface as a small, structured error
taxonomy: ``NotFoundError`` for paths that do not exist and ``FileSystemError``
for everything else (permissions, device errors, paths that are not
directories).
"""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass
from pathlib import Path

from playdeck.utils.open_path import open_path

logger = logging.getLogger("playdeck.file_system")

__all__ = ["DirEntry", "FileSystem", "FileSystemError", "NotFoundError"]


class FileSystemError(OSError):
    """A filesystem operation failed for a reason other than a missing path.

    Attributes:
        path: The path the failed operation was working on.
    """

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class NotFoundError(FileSystemError):
    """The requested file or directory does not exist."""


@dataclass(frozen=True)
class DirEntry:
    """A single directory listing entry.

    Attributes:
        name: Base name of the entry.
        is_directory: True for directories, False for everything else.
    """

    name: str
    is_directory: bool


def _translate(exc: OSError, action: str, path: str | Path) -> FileSystemError:
    """Maps a raw OSError onto the structured error taxonomy."""
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return NotFoundError(f"{action}: no such file or directory: {path}", path)
    return FileSystemError(f"{action} failed for {path}: {exc}", path)


class FileSystem:
    """Local disk implementation of the filesystem capability."""

    def list_directory(self, path: str | Path) -> list[DirEntry]:
        """Lists the entries of a directory, sorted case-insensitively by name.

        Args:
            path: Directory to list.

        Returns:
            One DirEntry per child entry.

        Raises:
            NotFoundError: If the directory does not exist.
            FileSystemError: If it cannot be read or is not a directory.
        """
        try:
            entries = [DirEntry(p.name, p.is_dir()) for p in Path(path).iterdir()]
        except OSError as exc:
            raise _translate(exc, "list directory", path) from exc
        entries.sort(key=lambda e: e.name.lower())
        return entries

    def read_text(self, path: str | Path) -> str:
        """Reads a UTF-8 text file.

        Raises:
            NotFoundError: If the file does not exist.
            FileSystemError: On any other read failure.
        """
        try:
            return Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise FileSystemError(f"read failed for {path}: {exc}", path) from exc
        except OSError as exc:
            raise _translate(exc, "read", path) from exc

    def read_bytes(self, path: str | Path) -> bytes:
        """Reads a binary file.

        Raises:
            NotFoundError: If the file does not exist.
            FileSystemError: On any other read failure.
        """
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise _translate(exc, "read", path) from exc

    def write_text(self, path: str | Path, contents: str) -> None:
        """Writes a UTF-8 text file, creating parent directories as needed.

        Raises:
            FileSystemError: If the directory or file cannot be written.
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(contents, encoding="utf-8")
        except OSError as exc:
            raise _translate(exc, "write", path) from exc

    def write_bytes(self, path: str | Path, data: bytes) -> None:
        """Writes a binary file, creating parent directories as needed.

        Raises:
            FileSystemError: If the directory or file cannot be written.
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise _translate(exc, "write", path) from exc

    def open_externally(self, path: str | Path) -> bool:
        """Opens a file with the operating system's default handler.

        Raises:
            NotFoundError: If the path does not exist.
        """
        if not Path(path).exists():
            raise NotFoundError(f"open: no such file or directory: {path}", path)
        return open_path(str(path))
