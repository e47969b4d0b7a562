# playdeck/core/file_finder.py

"""Directory walking and file classification for game discovery.

The walker lists a game directory (optionally recursively), skips hidden
entries, drops files matching any exclusion word and keeps files whose name
ends with one of the accepted extensions. Results are relative to the walk
root and always use ``/`` between the components the walker itself joined.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Union

from playdeck.core.file_system import FileSystem, FileSystemError

logger = logging.getLogger("playdeck.file_finder")

__all__ = ["FileFinder", "FilterInput", "join_path", "normalize_filter", "relative_to"]

# Settings accept either "a,b,c" or ["a", "b", "c"]
FilterInput = Union[str, Iterable[str], None]

HIDDEN_PREFIX = "."


def normalize_filter(value: FilterInput) -> list[str]:
    """Normalizes an extension or exclusion filter to a lowercase list.

    Args:
        value: Comma-separated string, iterable of strings, or None.

    Returns:
        Lowercased, trimmed entries with empty entries dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [item if isinstance(item, str) else str(item) for item in value]
    return [item.strip().lower() for item in items if item.strip()]


def join_path(directory: str, name: str) -> str:
    """Joins a directory and an entry name without doubling separators."""
    separator = "" if directory.endswith(("/", "\\")) else "/"
    return f"{directory}{separator}{name}"


def relative_to(path: str, base: str) -> str:
    """Strips ``base`` plus one separator (``/`` or ``\\``) from ``path``."""
    for separator in ("/", "\\"):
        prefix = base if base.endswith(separator) else base + separator
        if path.startswith(prefix):
            return path[len(prefix):]
    return path


class FileFinder:
    """Finds candidate game files below a directory.

    Args:
        file_system: Filesystem capability used for directory listings.
    """

    def __init__(self, file_system: FileSystem) -> None:
        self.file_system = file_system

    def find_files(
        self,
        path: str | Path,
        extensions: FilterInput,
        exclusions: FilterInput = None,
        recursive: bool = False,
    ) -> list[str]:
        """Returns files below ``path`` that match the filters.

        A directory that cannot be read is logged and contributes nothing;
        the rest of the walk continues.

        Args:
            path: Root directory of the walk.
            extensions: Accepted name suffixes such as ``".exe,.bat"``.
            exclusions: Words that disqualify a file when found in its
                relative path or name, case-insensitively.
            recursive: Descend into subdirectories when True.

        Returns:
            Matching paths relative to ``path``, in walk order.
        """
        if not path:
            return []

        normalized_extensions = normalize_filter(extensions)
        if not normalized_extensions:
            return []
        normalized_exclusions = normalize_filter(exclusions)

        base = str(path)
        found: list[str] = []
        self._search(base, base, tuple(normalized_extensions), normalized_exclusions, recursive, found)
        return found

    def list_subdirectories(self, path: str | Path) -> list[str]:
        """Returns the names of the non-hidden subdirectories of ``path``.

        A listing failure is logged and yields an empty list.
        """
        if not path:
            return []
        try:
            entries = self.file_system.list_directory(path)
        except FileSystemError as exc:
            logger.error("Error reading directory %s: %s", path, exc)
            return []
        return [e.name for e in entries if e.is_directory and not e.name.startswith(HIDDEN_PREFIX)]

    def _search(
        self,
        directory: str,
        base: str,
        extensions: tuple[str, ...],
        exclusions: list[str],
        recursive: bool,
        found: list[str],
    ) -> None:
        try:
            entries = self.file_system.list_directory(directory)
        except FileSystemError as exc:
            logger.error("Error reading directory %s: %s", directory, exc)
            return

        for entry in entries:
            if entry.name.startswith(HIDDEN_PREFIX):
                continue

            entry_path = join_path(directory, entry.name)

            if entry.is_directory:
                if recursive:
                    self._search(entry_path, base, extensions, exclusions, recursive, found)
                continue

            relative = relative_to(entry_path, base)
            if self._is_excluded(relative, entry.name, exclusions):
                continue

            if entry.name.lower().endswith(extensions):
                found.append(relative)

    @staticmethod
    def _is_excluded(relative_path: str, name: str, exclusions: list[str]) -> bool:
        if not exclusions:
            return False
        lower_path = relative_path.lower()
        lower_name = name.lower()
        return any(word in lower_path or word in lower_name for word in exclusions)
