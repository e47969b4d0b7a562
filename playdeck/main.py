#!/usr/bin/env python3
"""Playdeck - command-line entry point.

Runs library discovery or launches a game without the GUI::

    playdeck scan
    playdeck launch "Half-Life" [relative/path/to.exe]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from playdeck.app_context import AppContext
from playdeck.config import Settings
from playdeck.core.file_system import FileSystemError
from playdeck.core.logging import logger, setup_logging
from playdeck.version import __app_name__, __version__

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    """Builds the command-line parser."""
    parser = argparse.ArgumentParser(prog="playdeck", description=f"{__app_name__} game library launcher")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", type=Path, help="Directory holding settings.json and logs")
    parser.add_argument("--games-path", help="Library root (overrides settings)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("scan", help="Discover games and list them")

    launch = sub.add_parser("launch", help="Launch a game by name or id")
    launch.add_argument("game", help="Game name or id")
    launch.add_argument("action", nargs="?", help="Executable relative to the game folder")
    return parser


def _find_game(context: AppContext, key: str):
    manager = context.game_manager
    game = manager.get_game(key)
    if game:
        return game
    for candidate in manager.games:
        if candidate.name.casefold() == key.casefold():
            return candidate
    return None


def main(argv: list[str] | None = None) -> int:
    """Main command-line flow.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    settings = Settings.load(args.data_dir)
    if args.games_path:
        settings.games_path = args.games_path

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=settings.data_dir / "logs" / "playdeck.log",
    )

    if not settings.games_path:
        logger.error("No games folder configured. Set games_path in %s or pass --games-path.", settings.settings_file)
        return 1

    context = AppContext.create(settings)
    games = context.game_manager.load_games()

    if args.command == "scan":
        for game in context.game_manager.games_sorted():
            default = game.actions.default or "-"
            print(f"{game.id}\t{game.name}\t{default}")
        logger.info("%d games found", len(games))
        return 0

    game = _find_game(context, args.game)
    if game is None:
        logger.error("Game not found: %s", args.game)
        return 1

    try:
        ok = context.game_manager.launch(game, args.action)
    except (ValueError, FileSystemError) as e:
        logger.error("Cannot launch %s: %s", game.name, e)
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
