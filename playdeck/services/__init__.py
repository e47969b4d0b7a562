from __future__ import annotations

from playdeck.services.asset_service import AssetDownloadError, AssetService
from playdeck.services.metadata_service import MetadataService

__all__: list[str] = [
    "AssetDownloadError",
    "AssetService",
    "MetadataService",
]
