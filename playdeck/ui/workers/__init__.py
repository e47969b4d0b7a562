"""UI worker threads package.

Contains background worker threads the GUI uses to call the core without
blocking the event loop.
"""

from __future__ import annotations

from playdeck.ui.workers.game_load_worker import GameLoadWorker
from playdeck.ui.workers.metadata_save_worker import MetadataSaveWorker

__all__ = [
    "GameLoadWorker",
    "MetadataSaveWorker",
]
