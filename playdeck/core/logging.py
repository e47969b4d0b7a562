"""Logging setup for Playdeck.

Every module logs through a child of the ``playdeck`` logger
(``logging.getLogger("playdeck.<module>")``). Log records go to stderr so
that command output on stdout (``playdeck scan``) stays machine-readable; an
optional size-capped log file receives everything down to DEBUG.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

__all__ = ["LOG_FORMAT", "logger", "setup_logging"]

logger = logging.getLogger("playdeck")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3


def setup_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """Attach the console and file handlers to the ``playdeck`` logger.

    Calling it again only adjusts the console level; handlers are never
    attached twice.

    Args:
        level: Console logging level.
        log_file: Optional log file, rotated at about 1 MB with three backups.
    """
    logger.setLevel(min(level, logging.DEBUG) if log_file is not None else level)

    console = next((h for h in logger.handlers if getattr(h, "name", "") == "playdeck-console"), None)
    if console is not None:
        console.setLevel(level)
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.set_name("playdeck-console")
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
