"""Import, reset and clear operations against the tile board."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from core.errors import MissingReferenceError
from core.models import CanonicalDocument, local_image_path
from core.services.document_codec import parse_document
from core.services.tile_board import TileBoard


class MergeService:
    """Merges canonical documents into a `TileBoard`.

    The last successfully imported document is kept unmodified so `reset()`
    can re-apply it after arbitrary edits.
    """

    def __init__(self, board: TileBoard, erase_store: Callable[[], None] | None = None) -> None:
        """Create a MergeService.

        Args:
            board: The tile board to merge into.
            erase_store: Called by `clear_draft()` to drop the persisted draft.
        """
        self._board = board
        self._erase_store = erase_store
        self._imported: CanonicalDocument | None = None

    @property
    def imported_document(self) -> CanonicalDocument | None:
        """The retained imported original, if any import succeeded."""
        return self._imported

    @property
    def has_imported(self) -> bool:
        return self._imported is not None

    def import_document(self, raw: bytes | str) -> list[str]:
        """Parse `raw`, apply it, and retain it for reset.

        Raises `DocumentParseError` before touching the board if `raw` is malformed.
        """
        doc = parse_document(raw)
        applied = self.apply_document(doc)
        self._imported = doc
        logger.info("Imported document: {} entries, applied to {}", len(doc.tiles), applied)
        return applied

    def apply_document(self, doc: CanonicalDocument) -> list[str]:
        """Overwrite the public fields of every tile named in `doc`.

        Entries with ids outside T1..T9 are skipped. Uploaded bytes and previews
        stay; a tile holding bytes keeps the local path of their extension so
        featured.json names the file the archive ships. Returns the applied ids.
        """
        applied: list[str] = []
        with self._board.batch():
            for entry in doc.tiles:
                if entry.id not in self._board:
                    logger.debug("Skipping unknown tile id in document: {}", entry.id)
                    continue
                current = self._board.get(entry.id)
                local_path = entry.local_image
                if current.attached_image is not None:
                    local_path = local_image_path(entry.id, current.attached_image.extension)
                merged = replace(
                    current,
                    title=entry.title,
                    price=entry.price,
                    url=entry.url,
                    mode=entry.mode,
                    local_image_path=local_path,
                    remote_image_url=entry.remote_image,
                )
                self._board.replace_tile(merged)
                applied.append(entry.id)
        return applied

    def reset(self) -> list[str]:
        """Re-apply the retained imported document.

        Raises `MissingReferenceError` if nothing was imported in this session.
        """
        if self._imported is None:
            raise MissingReferenceError("No imported data to reset to")
        return self.apply_document(self._imported)

    def clear_draft(self) -> None:
        """Return all tiles to creation defaults and erase the stored draft.

        The retained imported document is left as it is.
        """
        with self._board.batch(notify=False):
            self._board.reset_all()
        if self._erase_store is not None:
            self._erase_store()
