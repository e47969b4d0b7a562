"""Application context: the explicitly wired set of services.

The application root builds one ``AppContext`` and hands it (or the parts it
needs) to the GUI and the command line. Nothing in the core reaches for a
module-level instance.
"""

from __future__ import annotations

from dataclasses import dataclass

from playdeck.config import Settings
from playdeck.core.file_system import FileSystem
from playdeck.core.game_manager import GameManager
from playdeck.core.metadata_store import MetadataStore
from playdeck.integrations.steam_store import SteamStoreClient
from playdeck.services.asset_service import AssetService
from playdeck.services.metadata_service import MetadataService

__all__ = ["AppContext"]


@dataclass
class AppContext:
    """Settings plus every service built from them."""

    settings: Settings
    file_system: FileSystem
    metadata_store: MetadataStore
    store_client: SteamStoreClient
    asset_service: AssetService
    metadata_service: MetadataService
    game_manager: GameManager

    @classmethod
    def create(cls, settings: Settings, file_system: FileSystem | None = None) -> AppContext:
        """Wires the default services for ``settings``.

        Args:
            settings: Loaded user settings.
            file_system: Filesystem capability; the local disk by default.
        """
        fs = file_system or FileSystem()
        metadata_store = MetadataStore(fs)
        store_client = SteamStoreClient()
        asset_service = AssetService(fs)
        metadata_service = MetadataService(store_client, settings.store_language, settings.store_country)
        game_manager = GameManager(
            games_path=settings.games_path,
            extensions=settings.extensions,
            exclusions=settings.exclusions,
            file_system=fs,
            metadata_store=metadata_store,
            asset_service=asset_service,
        )
        return cls(
            settings=settings,
            file_system=fs,
            metadata_store=metadata_store,
            store_client=store_client,
            asset_service=asset_service,
            metadata_service=metadata_service,
            game_manager=game_manager,
        )
