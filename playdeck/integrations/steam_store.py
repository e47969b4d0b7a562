# playdeck/integrations/steam_store.py

"""
Steam Store integration for searching games and fetching their metadata.

Uses the public store endpoints (``/api/storesearch`` and ``/api/appdetails``)
and maps their responses onto the Playdeck metadata layout. User tags are not
part of ``appdetails``; they are scraped from the store page instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger("playdeck.steam_store")

__all__ = [
    "STEAM_LANGUAGES",
    "SteamStoreClient",
    "StoreError",
    "StoreNotFoundError",
    "StoreSearchResult",
    "steam_language",
]

STORE_SEARCH_URL = "https://store.steampowered.com/api/storesearch"
APP_DETAILS_URL = "https://store.steampowered.com/api/appdetails"
STORE_PAGE_URL = "https://store.steampowered.com/app/{app_id}/"
CDN_URL = "https://cdn.akamai.steamstatic.com/steam/apps"

MAX_SEARCH_RESULTS = 10

# Language mapping (ISO Code -> Steam Internal Name)
STEAM_LANGUAGES = {
    "en": "english",
    "de": "german",
    "fr": "french",
    "es": "spanish",
    "it": "italian",
    "pt": "portuguese",
    "ru": "russian",
    "zh": "schinese",
    "ja": "japanese",
    "ko": "koreana",
    "ar": "arabic",
}


def steam_language(code: str | None) -> str:
    """Maps an ISO language code to Steam's language name (default english)."""
    if not code:
        return "english"
    code = code.lower()
    if code in STEAM_LANGUAGES.values():
        return code
    return STEAM_LANGUAGES.get(code, "english")


class StoreError(Exception):
    """A Steam Store request failed or returned an unusable response.

    Attributes:
        status_code: HTTP status of the failed response, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreNotFoundError(StoreError):
    """The store has no data for the requested app."""


@dataclass(frozen=True)
class StoreSearchResult:
    """A single store search hit.

    Attributes:
        id: Steam app ID as a string.
        name: Store name of the app.
        thumbnail: Small capsule image URL, or None.
    """

    id: str
    name: str
    thumbnail: str | None = None


class SteamStoreClient:
    """Client for the public Steam Store API.

    Args:
        session: Optional preconfigured requests session.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, session: requests.Session | None = None, timeout: float = 10) -> None:
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "Playdeck/1.0"})
        self.timeout = timeout

    def search(self, query: str, lang: str = "english", country_code: str = "US") -> list[StoreSearchResult]:
        """Searches the store for apps matching ``query``.

        Args:
            query: Game name to search for.
            lang: Steam language name.
            country_code: Two-letter store region.

        Returns:
            Up to ten app results in store order.

        Raises:
            ValueError: If the query is empty.
            StoreError: On HTTP failure or an unexpected response shape.
        """
        if not query or not query.strip():
            raise ValueError("Query is required and cannot be empty")

        params = {"term": query.strip(), "l": lang or "english", "cc": country_code or "US"}
        data = self._get_json(STORE_SEARCH_URL, params)

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise StoreError("Invalid response format from Steam store search")

        apps = [item for item in items if isinstance(item, dict) and item.get("type") == "app"]
        return [
            StoreSearchResult(
                id=str(item.get("id", "")),
                name=item.get("name") or "",
                thumbnail=item.get("tiny_image") or None,
            )
            for item in apps[:MAX_SEARCH_RESULTS]
        ]

    def fetch_details(self, app_id: str | int, lang: str = "english", country_code: str = "US") -> dict[str, Any]:
        """Fetches and maps the store details of an app.

        Args:
            app_id: Steam app ID.
            lang: Steam language name.
            country_code: Two-letter store region.

        Returns:
            Metadata document in the Playdeck layout (see ``map_app_details``).

        Raises:
            ValueError: If ``app_id`` is empty.
            StoreNotFoundError: If the store has no data for the app.
            StoreError: On HTTP failure.
        """
        if not app_id:
            raise ValueError("app_id is required")

        key = str(app_id)
        params = {"appids": key, "l": lang or "english", "cc": country_code or "US"}
        data = self._get_json(APP_DETAILS_URL, params)

        entry = data.get(key) if isinstance(data, dict) else None
        if not isinstance(entry, dict) or not entry.get("success") or not isinstance(entry.get("data"), dict):
            raise StoreNotFoundError(f"App {key} not found or invalid data")

        return map_app_details(key, entry["data"])

    def fetch_tags(self, app_id: str | int, lang: str = "english") -> list[str]:
        """Scrapes the user-defined tags from an app's store page.

        Args:
            app_id: Steam app ID.
            lang: Steam language name for the tag labels.

        Returns:
            Tag names in page order, or an empty list if fetching failed.
        """
        url = STORE_PAGE_URL.format(app_id=app_id)
        try:
            response = self._session.get(url, cookies={"Steam_Language": lang}, timeout=self.timeout)
            if response.status_code != 200:
                logger.warning("Steam store page for %s returned status %d", app_id, response.status_code)
                return []

            soup = BeautifulSoup(response.text, "html.parser")
            tags = []
            for tag_elem in soup.select(".app_tag"):
                tag_text = tag_elem.get_text().strip()
                if tag_text and tag_text != "+":
                    tags.append(tag_text)
            return tags

        except (requests.RequestException, AttributeError) as e:
            logger.error("Failed to fetch store tags for %s: %s", app_id, e)
            return []

    def _get_json(self, url: str, params: dict[str, str]) -> Any:
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise StoreError(f"Steam store request failed: {exc}") from exc

        if response.status_code == 429:
            logger.warning("Steam store rate limit reached for %s", url)
        if response.status_code != 200:
            raise StoreError(f"Steam store request failed with status {response.status_code}", response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(f"Steam store returned invalid JSON: {exc}") from exc


def _descriptions(items: Any) -> list[str]:
    if not isinstance(items, list):
        return []
    return [item["description"] for item in items if isinstance(item, dict) and item.get("description")]


def map_app_details(app_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Maps an ``appdetails`` payload onto the Playdeck metadata layout.

    Args:
        app_id: Steam app ID the payload belongs to.
        data: The ``data`` object of the response.

    Returns:
        Dict with descriptive fields and an ``images`` role -> URL mapping.
    """
    cdn = f"{CDN_URL}/{app_id}"
    platforms = data.get("platforms") or {}
    release = data.get("release_date") or {}

    return {
        "id": str(data.get("steam_appid") or app_id),
        "name": data.get("name") or "",
        "description": data.get("short_description") or "",
        "description_detailed": data.get("detailed_description") or "",
        "release": release.get("date", "") if isinstance(release, dict) else "",
        "platforms": [key for key, enabled in platforms.items() if enabled is True] if isinstance(platforms, dict) else [],
        "developers": list(data.get("developers") or []),
        "publishers": list(data.get("publishers") or []),
        "tags": _descriptions(data.get("tags")),
        "genres": _descriptions(data.get("genres")),
        "categories": _descriptions(data.get("categories")),
        "images": {
            # appdetails has no icon
            "icon": "",
            "logo": f"{cdn}/logo.png",
            "header": data.get("header_image") or f"{cdn}/header.jpg",
            "capsule": f"{cdn}/capsule_231x87.jpg",
            "background": data.get("background") or "",
            "library_hero": f"{cdn}/library_hero.jpg",
            "vertical_cover": f"{cdn}/library_600x900.jpg",
        },
    }
