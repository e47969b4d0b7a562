"""
Metadata Service for Playdeck.

This service reconciles a game record with metadata fetched from the Steam
Store:
- Searching the store for a game
- Fetching store details (and scraped tags when the details carry none)
- Applying store details onto a game without touching its identity

The result is an edited copy that the caller hands to
``GameManager.save_game_metadata``, which downloads the image URLs and
persists the record.
"""

from __future__ import annotations

import logging
from typing import Any

from playdeck.core.game import IMAGE_ROLES, Game
from playdeck.integrations.steam_store import SteamStoreClient, StoreSearchResult, steam_language

logger = logging.getLogger("playdeck.metadata_service")

__all__ = ["DESCRIPTIVE_FIELDS", "MetadataService"]

DESCRIPTIVE_FIELDS: tuple[str, ...] = (
    "description",
    "description_detailed",
    "release",
    "platforms",
    "developers",
    "publishers",
    "tags",
    "genres",
    "categories",
)


class MetadataService:
    """Service for store metadata lookups and merges."""

    def __init__(self, store_client: SteamStoreClient, language: str = "en", country_code: str = "US"):
        """
        Initialize the MetadataService.

        Args:
            store_client: Client for the Steam Store API.
            language: ISO language code for store texts.
            country_code: Two-letter store region.
        """
        self.store_client = store_client
        self.language = steam_language(language)
        self.country_code = country_code or "US"

    def search(self, query: str) -> list[StoreSearchResult]:
        """Search the store with the configured language and region."""
        return self.store_client.search(query, lang=self.language, country_code=self.country_code)

    def enrich_from_store(self, game: Game, app_id: str | int) -> Game:
        """
        Fetch store details for ``app_id`` and apply them to a copy of ``game``.

        Args:
            game: Game to enrich.
            app_id: Steam app ID chosen by the user.

        Returns:
            The enriched copy.

        Raises:
            StoreNotFoundError: If the store has no data for the app.
            StoreError: If the request failed.
        """
        details = self.store_client.fetch_details(app_id, lang=self.language, country_code=self.country_code)
        if not details.get("tags"):
            details["tags"] = self.store_client.fetch_tags(app_id, lang=self.language)
        logger.info("Fetched store metadata for %s (app %s)", game.name, app_id)
        return self.apply_store_details(game, details)

    @staticmethod
    def apply_store_details(game: Game, details: dict[str, Any]) -> Game:
        """
        Merge a store details document into a copy of ``game``.

        ``id``, ``path`` and ``actions`` always stay as they are; the store's
        own identifier is kept as ``store_id``. Empty store values do not
        overwrite existing data.

        Args:
            game: Game to update.
            details: Document as returned by ``SteamStoreClient.fetch_details``.

        Returns:
            The updated copy.
        """
        updated = game.copy()

        if details.get("name"):
            updated.name = details["name"]
        if details.get("id"):
            updated.extra["store_id"] = str(details["id"])

        for key in DESCRIPTIVE_FIELDS:
            value = details.get(key)
            if value:
                updated.extra[key] = value

        images = dict(updated.images or {})
        store_images = details.get("images") or {}
        for role in IMAGE_ROLES:
            url = store_images.get(role)
            if url:
                images[role] = url
            else:
                images.setdefault(role, "")
        updated.images = images

        return updated
