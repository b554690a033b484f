"""Uploaded image handling: reading files and data-URL previews.

Images are never decoded or re-encoded here; the uploaded bytes travel
unchanged into the preview and the export archive.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
from pathlib import Path

from loguru import logger

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".avif", ".svg"}
DEFAULT_MIME = "application/octet-stream"


def guess_mime(filename: str) -> str:
    """MIME type for `filename` based on its extension."""
    mime, _ = mimetypes.guess_type(filename)
    return mime or DEFAULT_MIME


def is_image_file(path: str) -> bool:
    """True if `path` names an image by extension or guessed MIME type."""
    if Path(path).suffix.lower() in IMAGE_EXTENSIONS:
        return True
    return guess_mime(path).startswith("image/")


def encode_preview(filename: str, data: bytes) -> str:
    """Self-contained `data:` URL for `data`, suitable for the draft store."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{guess_mime(filename)};base64,{encoded}"


def decode_preview(preview: str | None) -> bytes | None:
    """Raw bytes behind a base64 `data:` URL; None if absent or unreadable."""
    if not preview or not preview.startswith("data:"):
        return None
    header, sep, payload = preview.partition(",")
    if not sep or not header.endswith(";base64"):
        logger.debug("Unsupported preview encoding: {}", header[:40])
        return None
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as ex:
        logger.warning("Preview data is not valid base64: {}", ex)
        return None


class ImageService:
    """Reads uploaded image files from disk."""

    def read_upload(self, path: str) -> tuple[str, bytes]:
        """Return `(filename, bytes)` for the image at `path`.

        Raises `OSError` when the file cannot be read and `ValueError` when
        it is not an image.
        """
        p = Path(path)
        if not is_image_file(p.name):
            raise ValueError(f"Not an image file: {p.name}")
        data = p.read_bytes()
        logger.info("Read upload {} ({} bytes)", p.name, len(data))
        return p.name, data
