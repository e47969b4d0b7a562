"""
Worker thread for saving edited game metadata.

Saving downloads every remote image of the game first, which can take a
while, so the edit dialog runs it off the UI thread.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6.QtCore import QThread, pyqtSignal

if TYPE_CHECKING:
    from playdeck.core.game import Game
    from playdeck.core.game_manager import GameManager


class MetadataSaveWorker(QThread):
    """Background thread wrapping ``GameManager.save_game_metadata``.

    Signals:
        finished: Emitted with the success status of the save.
    """

    finished = pyqtSignal(bool)

    def __init__(self, game_manager: GameManager, game: Game) -> None:
        super().__init__()
        self.game_manager = game_manager
        self.game = game

    def run(self) -> None:
        self.finished.emit(self.game_manager.save_game_metadata(self.game))
