"""
Worker thread for discovering games in the background.

This module contains the GameLoadWorker thread that runs library discovery
without blocking the UI.
"""
import logging
from typing import TYPE_CHECKING

from PyQt6.QtCore import QThread, pyqtSignal

if TYPE_CHECKING:
    from playdeck.core.game_manager import GameManager

logger = logging.getLogger("playdeck.game_load_worker")


class GameLoadWorker(QThread):
    """Background thread for scanning the library without blocking the UI.

    Attributes:
        game_manager: The GameManager instance to run discovery on.

    Signals:
        progress_update: Emitted per scanned directory with (name, current, total).
        finished: Emitted when discovery completes with success status.
    """

    progress_update = pyqtSignal(str, int, int)
    finished = pyqtSignal(bool)

    def __init__(self, game_manager: 'GameManager'):
        """Initializes the game load worker.

        Args:
            game_manager: The GameManager instance to run discovery on.
        """
        super().__init__()
        self.game_manager = game_manager

    def run(self) -> None:
        """Runs discovery, forwarding progress and emitting the result."""

        def progress_callback(step: str, current: int, total: int):
            self.progress_update.emit(step, current, total)

        try:
            self.game_manager.load_games(progress_callback)
        except Exception as e:
            logger.error("Game discovery failed: %s", e)
            self.finished.emit(False)
            return
        self.finished.emit(True)
