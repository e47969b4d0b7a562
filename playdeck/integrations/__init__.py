from __future__ import annotations

__all__: list[str] = ["SteamStoreClient", "StoreError", "StoreNotFoundError", "StoreSearchResult"]

from playdeck.integrations.steam_store import SteamStoreClient, StoreError, StoreNotFoundError, StoreSearchResult
