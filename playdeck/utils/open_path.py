# playdeck/utils/open_path.py

"""Cross-platform "open with default application" helper.

Handles PyInstaller/AppImage environments where modified LD_LIBRARY_PATH
prevents xdg-open from working correctly.
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
import sys

logger = logging.getLogger("playdeck.open_path")

__all__ = ["open_path"]


def open_path(path: str) -> bool:
    """Opens a file or URL with the system's default handler.

    Args:
        path: Local path (e.g. a game executable) or URL.

    Returns:
        True if the handler was launched, False otherwise.
    """
    system = platform.system()

    if system == "Windows":
        try:
            os.startfile(path)  # type: ignore[attr-defined]
            return True
        except OSError as e:
            logger.error("Failed to open %s: %s", path, e)
            return False

    if system == "Darwin":
        return _spawn(["open", path], os.environ.copy())

    return _spawn(["xdg-open", path], _clean_env())


def _clean_env() -> dict[str, str]:
    """Returns the environment with the original LD_LIBRARY_PATH restored.

    PyInstaller saves the originals as *_ORIG before modifying them.
    """
    env = os.environ.copy()
    if not (getattr(sys, "frozen", False) or env.get("APPIMAGE")):
        return env

    for key in ("LD_LIBRARY_PATH", "LD_PRELOAD"):
        orig_key = f"{key}_ORIG"
        if orig_key in env:
            env[key] = env[orig_key]
        elif key in env:
            del env[key]
    return env


def _spawn(command: list[str], env: dict[str, str]) -> bool:
    try:
        subprocess.Popen(
            command,
            env=env,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return True
    except FileNotFoundError:
        logger.warning("%s not found, cannot open %s", command[0], command[-1])
    except OSError as e:
        logger.error("Failed to open %s: %s", command[-1], e)
    return False
