# playdeck/core/game_manager.py

"""Core game management logic for Playdeck.

This module provides the GameManager class, which discovers games below the
library root, synthesizes metadata for newly found games, saves edited
metadata (downloading remote images first) and launches game executables.

Discovery treats every subdirectory of the library root independently:

1. Load ``Playdeck/metadata.json``. A non-empty document is used as-is.
2. Otherwise list first-level candidate files. None means the directory is
   not a game and is skipped without writing anything.
3. Otherwise list all candidate files recursively, build a new record and
   persist it.

The per-directory units share no state, so they run on a thread pool and the
collection is swapped in only once every unit has finished.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from playdeck.core.file_finder import FileFinder, FilterInput, join_path
from playdeck.core.file_system import FileSystem, FileSystemError
from playdeck.core.game import Game, GameActions, new_game_id
from playdeck.core.metadata_store import MetadataStore
from playdeck.services.asset_service import AssetDownloadError, AssetService

logger = logging.getLogger("playdeck.game_manager")

__all__ = ["GameManager", "merge_candidates"]

ProgressCallback = Callable[[str, int, int], None]

DEFAULT_MAX_WORKERS = 8


def merge_candidates(shallow: list[str], deep: list[str]) -> list[str]:
    """Returns the deep matches followed by any shallow match not yet listed.

    Order is preserved and duplicates are dropped.
    """
    merged: list[str] = []
    seen: set[str] = set()
    for item in [*deep, *shallow]:
        if item not in seen:
            seen.add(item)
            merged.append(item)
    return merged


class GameManager:
    """Discovers, persists and launches the games of a library.

    Attributes:
        games: Games found by the last discovery pass. Replaced as a whole by
            ``load_games`` and updated per game by ``save_game_metadata``.
    """

    def __init__(
        self,
        games_path: str,
        extensions: FilterInput,
        exclusions: FilterInput,
        file_system: FileSystem,
        metadata_store: MetadataStore,
        asset_service: AssetService,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Initializes the GameManager.

        Args:
            games_path: Library root; each subdirectory is a candidate game.
            extensions: Accepted executable extensions.
            exclusions: Words that disqualify candidate files.
            file_system: Filesystem capability.
            metadata_store: Sidecar persistence.
            asset_service: Image downloader used when saving edits.
            max_workers: Upper bound on concurrent per-directory scans.
        """
        self.games_path = games_path
        self.extensions = extensions
        self.exclusions = exclusions
        self.file_system = file_system
        self.finder = FileFinder(file_system)
        self.metadata_store = metadata_store
        self.asset_service = asset_service
        self.max_workers = max(1, max_workers)

        self.games: list[Game] = []

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def load_games(self, progress_callback: ProgressCallback | None = None) -> list[Game]:
        """Scans the library root and rebuilds the game collection.

        Args:
            progress_callback: Optional ``(step, current, total)`` callback,
                invoked once per finished directory.

        Returns:
            The new collection, in no particular order.
        """
        if not self.games_path:
            logger.warning("No games folder configured, skipping discovery")
            self.games = []
            return self.games

        game_dirs = self.list_game_dirs()
        total = len(game_dirs)
        logger.info("Scanning %d directories in %s", total, self.games_path)

        results: list[Game | None] = []
        if game_dirs:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, total)) as executor:
                futures = [executor.submit(self._discover_safely, name) for name in game_dirs]
                for index, (name, future) in enumerate(zip(game_dirs, futures), start=1):
                    results.append(future.result())
                    if progress_callback:
                        progress_callback(name, index, total)

        self.games = [game for game in results if game is not None]
        logger.info("Discovered %d games", len(self.games))
        return self.games

    def list_game_dirs(self, root: str | None = None) -> list[str]:
        """Returns the candidate game directory names below ``root``.

        Args:
            root: Directory to list; the library root by default.
        """
        return self.finder.list_subdirectories(root if root is not None else self.games_path)

    def discover_game(self, dir_name: str) -> Game | None:
        """Loads or synthesizes the record for one library subdirectory.

        Args:
            dir_name: Name of the subdirectory below the library root.

        Returns:
            The game, or None if the directory holds no candidate files.

        Raises:
            FileSystemError: If a new record could not be persisted.
        """
        game_path = join_path(self.games_path, dir_name)

        metadata = self.metadata_store.load(game_path)
        if metadata:
            return Game.from_dict(metadata, name=dir_name, path=game_path)

        return self.create_metadata(dir_name, game_path)

    def create_metadata(self, name: str, game_path: str) -> Game | None:
        """Builds and saves a new record for a directory without a sidecar.

        Args:
            name: Display name for the game.
            game_path: Root directory of the game.

        Returns:
            The new game, or None if no first-level candidate file exists.

        Raises:
            FileSystemError: If the sidecar could not be written.
        """
        first_level = self.finder.find_files(game_path, self.extensions, self.exclusions, recursive=False)
        if not first_level:
            logger.debug("No candidate files in %s, skipping", game_path)
            return None

        all_files = self.finder.find_files(game_path, self.extensions, self.exclusions, recursive=True)

        game = Game(
            id=new_game_id(),
            name=name,
            path=game_path,
            actions=GameActions(
                default=first_level[0] if len(first_level) == 1 else None,
                others=merge_candidates(first_level, all_files),
            ),
        )
        self.metadata_store.save(game)
        logger.info("Created metadata for %s (%d candidate files)", name, len(game.actions.others))
        return game

    def _discover_safely(self, dir_name: str) -> Game | None:
        try:
            return self.discover_game(dir_name)
        except Exception as exc:
            logger.error("Skipping %s: %s", dir_name, exc)
            return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def games_sorted(self) -> list[Game]:
        """Returns the collection sorted case-insensitively by name."""
        return sorted(self.games, key=lambda g: g.name.casefold())

    def get_game(self, game_id: str) -> Game | None:
        """Returns the game with the given id, or None."""
        for game in self.games:
            if game.id == game_id:
                return game
        return None

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def save_game_metadata(self, game: Game) -> bool:
        """Downloads remote images of an edited game and persists it.

        Every image whose value is an ``http`` URL is downloaded in turn and
        replaced by the local file path (or ``""`` if the server answered
        404). The sidecar is written only after all downloads succeeded. The
        edit works on a copy, so on failure neither ``game`` nor the
        collection changes.

        Args:
            game: Edited game record.

        Returns:
            True if the metadata was saved and the collection updated.
        """
        if not game or not game.path:
            return False

        edited = game.copy()
        try:
            for key, value in (edited.images or {}).items():
                if value and value.startswith("http"):
                    full_path = self.asset_service.save_image(
                        url=value,
                        directory=edited.metadata_dir,
                        key=key.lower(),
                        game_id=str(edited.id),
                    )
                    edited.images[key] = full_path or ""

            self.metadata_store.save(edited)
        except (AssetDownloadError, FileSystemError, ValueError) as exc:
            logger.error("Error saving game metadata for %s: %s", game.name, exc)
            return False
        except Exception:
            logger.exception("Unexpected error saving game metadata for %s", game.name)
            return False

        index = next((i for i, g in enumerate(self.games) if g.id == edited.id), -1)
        if index == -1:
            logger.warning("Saved metadata for %s, but it is not in the game list", edited.name)
            return False

        self.games[index] = edited
        return True

    # ------------------------------------------------------------------
    # Launching
    # ------------------------------------------------------------------

    def launch(self, game: Game, action: str | None = None) -> bool:
        """Opens a game executable with the system's default handler.

        Args:
            game: Game to launch.
            action: Relative path of the executable; defaults to the game's
                default action.

        Returns:
            True if the handler was started.

        Raises:
            ValueError: If no action is given and the game has no default.
            NotFoundError: If the executable does not exist.
        """
        target = action or game.actions.default
        if not target:
            raise ValueError(f"No action to launch for {game.name}")

        full_path = join_path(game.path, target)
        logger.info("Launching %s: %s", game.name, full_path)
        return self.file_system.open_externally(full_path)
