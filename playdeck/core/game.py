# playdeck/core/game.py

"""Game record dataclasses for Playdeck.

A ``Game`` is the in-memory form of a game's ``Playdeck/metadata.json``
sidecar. Only ``id``, ``name``, ``path``, ``actions`` and ``images`` are
modelled explicitly; every other key found in a sidecar (descriptions, release
date, developers, tags, ...) is carried in ``extra`` and written back
unchanged.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any

from playdeck.core.file_finder import join_path

__all__ = [
    "IMAGE_ROLES",
    "METADATA_DIR_NAME",
    "METADATA_FILE_NAME",
    "Game",
    "GameActions",
    "new_game_id",
]

METADATA_DIR_NAME = "Playdeck"
METADATA_FILE_NAME = "metadata.json"

IMAGE_ROLES: tuple[str, ...] = (
    "icon",
    "logo",
    "header",
    "capsule",
    "background",
    "library_hero",
    "vertical_cover",
)

_CORE_KEYS = frozenset({"id", "name", "path", "actions", "images"})


def new_game_id() -> str:
    """Returns a fresh opaque game identifier."""
    return uuid.uuid4().hex[:12]


@dataclass
class GameActions:
    """Launchable entry points of a game.

    Attributes:
        default: Relative path of the default executable, or None.
        others: Relative paths of every candidate executable.
    """

    default: str | None = None
    others: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"default": self.default, "others": list(self.others)}

    @classmethod
    def from_dict(cls, data: Any) -> GameActions:
        if not isinstance(data, dict):
            return cls()
        default = data.get("default")
        others = data.get("others")
        return cls(
            default=default if isinstance(default, str) and default else None,
            others=[o for o in others if isinstance(o, str)] if isinstance(others, list) else [],
        )


@dataclass
class Game:
    """A discovered game and its persisted metadata.

    Attributes:
        id: Stable identifier assigned when the record was first synthesized.
        name: Display name (the directory name unless edited).
        path: Absolute path of the game's root directory.
        actions: Launchable entry points.
        images: Image role -> remote URL, local asset path or empty string.
            None until the record has been edited.
        extra: Any further descriptive fields, kept verbatim.
    """

    id: str
    name: str
    path: str
    actions: GameActions = field(default_factory=GameActions)
    images: dict[str, str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def metadata_dir(self) -> str:
        """Directory holding the sidecar and downloaded assets."""
        return join_path(self.path, METADATA_DIR_NAME)

    @property
    def metadata_path(self) -> str:
        """Location of the ``metadata.json`` sidecar."""
        return join_path(self.metadata_dir, METADATA_FILE_NAME)

    def copy(self) -> Game:
        """Returns a deep copy that can be edited independently."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serializes the full record, including pass-through fields."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "actions": self.actions.to_dict(),
        }
        for key, value in self.extra.items():
            if key not in _CORE_KEYS:
                data[key] = value
        if self.images is not None:
            data["images"] = dict(self.images)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: str = "", path: str = "") -> Game:
        """Builds a Game from a sidecar document.

        Args:
            data: Parsed ``metadata.json`` contents.
            name: Fallback name when the document has none.
            path: Fallback root path when the document has none.
        """
        raw_images = data.get("images")
        images = None
        if isinstance(raw_images, dict):
            images = {str(k): (v if isinstance(v, str) else "") for k, v in raw_images.items()}

        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or name),
            path=str(data.get("path") or path),
            actions=GameActions.from_dict(data.get("actions")),
            images=images,
            extra={k: v for k, v in data.items() if k not in _CORE_KEYS},
        )
