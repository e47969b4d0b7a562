# playdeck/core/image_filename.py

"""Deterministic filenames for downloaded image assets.

A filename is ``<hash>.<ext>`` where ``hash`` is 32 hex characters derived only
from a seed string (the image role followed by the game id) and ``ext`` is
picked from the leading bytes of the image data. Downloading the same role for
the same game therefore always lands on the same file as long as the image
format does not change.
"""

from __future__ import annotations

__all__ = ["detect_image_extension", "generate_hash", "generate_image_filename"]

_MASK32 = 0xFFFFFFFF
_FNV_PRIME = 16777619

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_JPEG_SIGNATURE = b"\xff\xd8\xff"
_GIF_SIGNATURES = (b"GIF87a", b"GIF89a")
_ICO_SIGNATURES = (b"\x00\x00\x01\x00", b"\x00\x00\x02\x00")

DEFAULT_EXTENSION = "jpg"


def generate_hash(seed: str) -> str:
    """Mixes the characters of ``seed`` into a 32-character hex digest.

    Four independent 32-bit accumulators (djb2, sdbm, FNV-1a and a
    multiply-by-31 hash) each contribute 8 hex characters. This is not a
    cryptographic hash; it only has to be stable across runs and platforms.

    Args:
        seed: Input string.

    Returns:
        32 lowercase hex characters.
    """
    djb2 = 0
    sdbm = 0
    fnv = 0
    poly = 0

    for ch in str(seed):
        code = ord(ch)
        djb2 = ((djb2 << 5) + djb2 + code) & _MASK32
        sdbm = (code + (sdbm << 6) + (sdbm << 16) - sdbm) & _MASK32
        fnv = ((fnv ^ code) * _FNV_PRIME) & _MASK32
        poly = (poly * 31 + code) & _MASK32

    return f"{djb2:08x}{sdbm:08x}{fnv:08x}{poly:08x}"


def detect_image_extension(data: bytes) -> str:
    """Detects an image file extension from magic bytes.

    Recognizes PNG, JPEG, GIF (87a/89a), WebP and ICO/CUR. Anything else,
    including empty data or data shorter than four bytes, falls back to
    ``jpg``.

    Args:
        data: Raw image bytes.

    Returns:
        Extension without the leading dot.
    """
    head = bytes(data[:12])
    if len(head) < 4:
        return DEFAULT_EXTENSION

    if head.startswith(_PNG_SIGNATURE):
        return "png"
    if head.startswith(_JPEG_SIGNATURE):
        return "jpg"
    if head.startswith(_GIF_SIGNATURES):
        return "gif"
    if len(head) >= 12 and head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "webp"
    if head.startswith(_ICO_SIGNATURES):
        return "ico"

    return DEFAULT_EXTENSION


def generate_image_filename(seed: str, data: bytes) -> str:
    """Builds the content-derived filename for an image asset.

    Args:
        seed: Stable identifying string, e.g. ``"icon" + game_id``.
        data: Downloaded image bytes; only used to choose the extension.

    Returns:
        Filename of the form ``<32 hex>.<ext>``.

    Raises:
        ValueError: If ``seed`` is empty or ``data`` is None.
    """
    if not seed:
        raise ValueError("Seed is required to generate image filename")
    if data is None:
        raise ValueError("Image data is required to generate image filename")

    return f"{generate_hash(seed)}.{detect_image_extension(data)}"
