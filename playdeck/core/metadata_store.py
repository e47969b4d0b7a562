# playdeck/core/metadata_store.py

"""Per-game metadata sidecar persistence.

Each game keeps its record in ``<game path>/Playdeck/metadata.json``. Loading
never fails: a missing sidecar means "not discovered yet" and any other
problem is logged and treated the same way, so one corrupt file cannot block a
library scan. Saving, on the other hand, raises so callers can tell whether an
edit actually reached the disk.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from playdeck.core.file_finder import join_path
from playdeck.core.file_system import FileSystem, FileSystemError, NotFoundError
from playdeck.core.game import METADATA_DIR_NAME, METADATA_FILE_NAME, Game

logger = logging.getLogger("playdeck.metadata_store")

__all__ = ["MetadataStore", "sidecar_path"]


def sidecar_path(game_path: str) -> str:
    """Returns the sidecar location for a game rooted at ``game_path``."""
    return join_path(join_path(game_path, METADATA_DIR_NAME), METADATA_FILE_NAME)


class MetadataStore:
    """Reads and writes ``metadata.json`` sidecars.

    Args:
        file_system: Filesystem capability used for all I/O.
    """

    def __init__(self, file_system: FileSystem) -> None:
        self.file_system = file_system

    def load(self, game_path: str) -> dict[str, Any]:
        """Loads the sidecar document for a game.

        Args:
            game_path: Root directory of the game.

        Returns:
            The parsed document, or an empty dict when the sidecar is missing,
            unreadable or malformed.
        """
        if not game_path:
            logger.error("Cannot load metadata: game path is required")
            return {}

        path = sidecar_path(game_path)
        try:
            contents = self.file_system.read_text(path)
        except NotFoundError:
            return {}
        except FileSystemError as exc:
            logger.error("Error reading metadata file %s: %s", path, exc)
            return {}

        try:
            data = json.loads(contents)
        except (ValueError, RecursionError) as exc:
            logger.error("Error parsing metadata file %s: %s", path, exc)
            return {}

        if not isinstance(data, dict):
            logger.error("Error parsing metadata file %s: expected an object, got %s", path, type(data).__name__)
            return {}

        return data

    def save(self, game: Game) -> None:
        """Writes the full game record to its sidecar.

        Args:
            game: Record to persist; ``game.path`` selects the location.

        Raises:
            ValueError: If the game has no path.
            FileSystemError: If the sidecar could not be written.
        """
        if not game or not game.path:
            raise ValueError("Game with a path is required to save metadata")

        path = sidecar_path(game.path)
        contents = json.dumps(game.to_dict(), indent=2, ensure_ascii=False)
        try:
            self.file_system.write_text(path, contents)
        except FileSystemError as exc:
            logger.error("Error saving metadata file %s: %s", path, exc)
            raise
