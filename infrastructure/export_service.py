"""Export of the tile board as featured.json plus an image archive.

Provides document serialization, selection of the tiles whose uploaded bytes
must be shipped, and ZIP construction, and writes both artifacts into an
export directory.
"""

from __future__ import annotations

from collections.abc import Iterable
import io
from pathlib import Path
import zipfile

from loguru import logger

from core.errors import ExportError
from core.models import LOCAL_IMAGE_DIR, Tile, TileMode
from core.services.document_codec import build_document, serialize_document
from core.services.interfaces import ExportResult

DOCUMENT_FILENAME = "featured.json"
ARCHIVE_FILENAME = "featured-images.zip"


def collect_uploads(tiles: Iterable[Tile]) -> list[Tile]:
    """Tiles in local mode that carry uploaded bytes from this session.

    A preview restored from the draft store does not count.
    """
    return [t for t in tiles if t.mode == TileMode.LOCAL and t.attached_image is not None]


def archive_member_name(tile: Tile) -> str:
    """Path of `tile`'s image inside the archive.

    Raises `ExportError` when the tile carries no uploaded bytes.
    """
    if tile.attached_image is None:
        raise ExportError(f"Tile {tile.id} has no uploaded image to archive")
    return f"{LOCAL_IMAGE_DIR}/{tile.id}.{tile.attached_image.extension}"


def build_archive(uploads: Iterable[Tile]) -> bytes:
    """ZIP bytes holding each uploaded image under images/featured/{id}.{ext}."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for tile in uploads:
            if tile.attached_image is None:
                continue
            zf.writestr(archive_member_name(tile), tile.attached_image.data)
    return buf.getvalue()


class ExportService:
    """Writes the export artifacts for a snapshot of tiles."""

    def build_document_text(self, tiles: Iterable[Tile]) -> str:
        """featured.json content for `tiles` with a fresh `updatedAt`."""
        return serialize_document(build_document(tiles))

    def export(self, tiles: list[Tile], out_dir: str | Path) -> ExportResult:
        """Write featured.json and, when uploads exist, featured-images.zip.

        Any failure raises `ExportError`. featured.json may already be on
        disk when building or writing the archive fails.
        """
        target = Path(out_dir)
        try:
            target.mkdir(parents=True, exist_ok=True)
            doc_path = target / DOCUMENT_FILENAME
            doc_path.write_text(self.build_document_text(tiles), encoding="utf-8")
            logger.info("Exported document: {}", doc_path)

            uploads = collect_uploads(tiles)
            if not uploads:
                return ExportResult(document_path=str(doc_path))

            archive_path = target / ARCHIVE_FILENAME
            archive_path.write_bytes(build_archive(uploads))
            logger.info("Exported archive: {} ({} images)", archive_path, len(uploads))
            return ExportResult(
                document_path=str(doc_path),
                archive_path=str(archive_path),
                image_count=len(uploads),
            )
        except (OSError, ValueError, TypeError, zipfile.BadZipFile) as ex:
            logger.exception("Export failed: {}", ex)
            raise ExportError(str(ex)) from ex
