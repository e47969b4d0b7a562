"""JSON helpers for application-level files such as ``settings.json``.

A missing or unreadable file means "use the defaults", so loading never
raises. Saving goes through a temporary file in the same directory and an
atomic rename, so a crash mid-write cannot leave a truncated settings file.
Game sidecars do not use these helpers; see ``playdeck.core.metadata_store``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

__all__ = ["load_json_object", "save_json"]

logger = logging.getLogger("playdeck.json_utils")


def load_json_object(path: Path) -> dict[str, Any]:
    """Reads a JSON file whose top level must be an object.

    Args:
        path: File to read.

    Returns:
        The parsed object; an empty dict if the file is missing, unreadable,
        malformed or holds anything other than an object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable JSON file %s: %s", path, exc)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object, got %s", path, type(data).__name__)
        return {}
    return data


def save_json(path: Path, data: Any) -> bool:
    """Writes ``data`` as indented JSON, replacing ``path`` atomically.

    Parent directories are created as needed.

    Returns:
        True on success, False if the file could not be written.
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as tmp:
            tmp_name = tmp.name
            json.dump(data, tmp, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
        return True
    except OSError as exc:
        logger.error("Failed to save JSON to %s: %s", path, exc)
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        return False
