"""Service for downloading game image assets.

This module provides the AssetService class which downloads remote images
(icons, logos, headers, ...) into a game's ``Playdeck`` directory under a
content-derived filename, so repeated downloads of the same role for the same
game overwrite a single file instead of piling up copies.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from playdeck.core.file_finder import join_path
from playdeck.core.file_system import FileSystem
from playdeck.core.image_filename import generate_image_filename

logger = logging.getLogger("playdeck.asset_service")

__all__ = ["AssetDownloadError", "AssetService"]


class AssetDownloadError(Exception):
    """An image could not be downloaded.

    Attributes:
        url: The URL that failed.
        status_code: HTTP status of the response, or None for network errors.
    """

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class AssetService:
    """Downloads and stores game image assets.

    Attributes:
        file_system: Filesystem capability used to write the images.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        file_system: FileSystem,
        session: requests.Session | None = None,
        timeout: float = 10,
    ) -> None:
        """Initializes the AssetService.

        Args:
            file_system: Filesystem capability used to write the images.
            session: Optional preconfigured requests session.
            timeout: Per-request timeout in seconds.
        """
        self.file_system = file_system
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "Playdeck/1.0"})

    def save_image(self, url: str, directory: str | Path, key: str, game_id: str) -> str | None:
        """Downloads an image and saves it under a deterministic name.

        The filename is derived from ``key + game_id`` and the detected image
        format, see ``generate_image_filename``.

        Args:
            url: Remote image URL.
            directory: Destination directory, created if missing.
            key: Image role, e.g. ``"icon"``.
            game_id: Identifier of the owning game.

        Returns:
            Full path of the saved image, or None if the server answered 404.

        Raises:
            ValueError: If any argument is missing.
            AssetDownloadError: On any other HTTP failure or network error.
            FileSystemError: If the image could not be written.
        """
        if not url:
            raise ValueError("URL is required to save image")
        if not directory:
            raise ValueError("Path is required to save image")
        if not key:
            raise ValueError("Key is required to save image")
        if not game_id:
            raise ValueError("ID is required to save image")

        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Error saving image from %s to %s: %s", url, directory, exc)
            raise AssetDownloadError(f"Failed to fetch image: {exc}", url) from exc

        if response.status_code == 404:
            logger.debug("Image not found (404): %s", url)
            return None

        if not response.ok:
            logger.error("Error saving image from %s to %s: status %d", url, directory, response.status_code)
            raise AssetDownloadError(
                f"Failed to fetch image: status {response.status_code}", url, response.status_code
            )

        data = response.content
        filename = generate_image_filename(f"{key}{game_id}", data)
        full_path = join_path(str(directory), filename)

        self.file_system.write_bytes(full_path, data)
        logger.debug("Saved %s image for game %s to %s (%d bytes)", key, game_id, full_path, len(data))
        return full_path
