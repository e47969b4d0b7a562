"""Playdeck: a game library launcher core."""

from __future__ import annotations

from playdeck.version import __version__

__all__ = ["__version__"]
