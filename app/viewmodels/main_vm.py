"""ViewModel orchestrating tile edits, draft persistence, import and export."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from loguru import logger

from app.viewmodels.tile_vm import TileVM
from core.errors import DocumentParseError, ExportError, FeaturedError, MissingReferenceError
from core.models import TILE_IDS, Severity, Tile, TileMode
from core.services.interfaces import DraftLoadStatus, ExportResult, StatusReporter
from core.services.merge_service import MergeService
from core.services.tile_board import TileBoard
from infrastructure.draft_store import DraftRepository
from infrastructure.export_service import ExportService
from infrastructure.image_service import encode_preview

READY_MESSAGE = "Manager ready. Import featured.json or start editing."


class _LogReporter:
    """Fallback reporter used until a view provides one."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        logger.info("[{}] {}", severity.value, message)


class FeaturedVM:
    """Main application view-model.

    Owns the tile board for the lifetime of the window. Every board mutation
    is written to the draft store and forwarded to `on_tiles_changed` so the
    view can refresh the affected editors. Each public operation catches
    failures at its own boundary and reports them through the status reporter.
    """

    def __init__(
        self,
        board: TileBoard,
        drafts: DraftRepository,
        exporter: ExportService | None = None,
        reporter: StatusReporter | None = None,
    ) -> None:
        """Create a FeaturedVM.

        Args:
            board: The tile board to edit.
            drafts: Repository persisting the draft after each mutation.
            exporter: Export service (defaults to `ExportService`).
            reporter: Status reporter; notifications are only logged until set.
        """
        self._board = board
        self._drafts = drafts
        self._exporter = exporter or ExportService()
        self._merger = MergeService(board, erase_store=drafts.clear)
        self.reporter: StatusReporter = reporter or _LogReporter()
        self.on_tiles_changed: Callable[[list[str]], None] | None = None
        self._board.add_listener(self._on_board_changed)

    # Accessors

    @property
    def board(self) -> TileBoard:
        return self._board

    @property
    def exporter(self) -> ExportService:
        return self._exporter

    @property
    def has_imported(self) -> bool:
        return self._merger.has_imported

    def tile_vm(self, tile_id: str) -> TileVM:
        return TileVM.from_tile(self._board.get(tile_id))

    def tile_vms(self) -> list[TileVM]:
        return [TileVM.from_tile(t) for t in self._board]

    def snapshot(self) -> list[Tile]:
        """Copy of all tiles for an export running off the UI thread."""
        return self._board.snapshot()

    # Lifecycle

    def start(self) -> None:
        """Restore the stored draft, if any, and greet the user."""
        result = self._drafts.load(self._board)
        if result.status == DraftLoadStatus.LOADED:
            self._refresh(result.restored_ids)
            self._notify("Draft loaded from storage", Severity.INFO)
        elif result.status == DraftLoadStatus.CORRUPT:
            self._notify(f"Error loading draft: {result.message}", Severity.ERROR)
        else:
            self._notify(READY_MESSAGE, Severity.INFO)

    # Field edits

    def set_title(self, tile_id: str, value: str) -> None:
        self._edit(self._board.set_title, tile_id, value)

    def set_price(self, tile_id: str, value: str) -> None:
        self._edit(self._board.set_price, tile_id, value)

    def set_url(self, tile_id: str, value: str) -> None:
        self._edit(self._board.set_url, tile_id, value)

    def set_remote_image_url(self, tile_id: str, value: str) -> None:
        self._edit(self._board.set_remote_image_url, tile_id, value)

    def set_mode(self, tile_id: str, mode: TileMode | str) -> None:
        self._edit(self._board.set_mode, tile_id, mode)

    def attach_image(self, tile_id: str, filename: str, data: bytes) -> None:
        """Attach uploaded bytes to a tile and store their preview."""
        try:
            self._board.attach_image(tile_id, filename, data, encode_preview(filename, data))
        except (FeaturedError, ValueError) as ex:
            logger.error("Attach image to {} failed: {}", tile_id, ex)
            self._notify(f"Could not attach image: {ex}", Severity.ERROR)

    def clear_image(self, tile_id: str) -> None:
        self._edit(self._board.clear_image, tile_id)

    # Import / reset / clear

    def import_bytes(self, raw: bytes | str) -> bool:
        """Import a featured.json document; the board is untouched on failure."""
        try:
            applied = self._merger.import_document(raw)
        except DocumentParseError as ex:
            logger.error("Import failed: {}", ex)
            self._notify(f"Error importing JSON: {ex}", Severity.ERROR)
            return False
        logger.info("Import applied to tiles: {}", applied)
        self._notify("Imported successfully!", Severity.SUCCESS)
        return True

    def reset_to_imported(self) -> bool:
        """Re-apply the last imported document over the current edits."""
        try:
            self._merger.reset()
        except MissingReferenceError as ex:
            self._notify(str(ex), Severity.ERROR)
            return False
        self._notify("Reset to imported data", Severity.SUCCESS)
        return True

    def clear_draft(self) -> None:
        """Reset every tile to defaults and erase the stored draft.

        Callers are expected to have confirmed with the user.
        """
        self._merger.clear_draft()
        self._refresh(list(TILE_IDS))
        logger.info("Draft cleared")
        self._notify("Draft cleared", Severity.SUCCESS)

    # Export

    def export_to(self, out_dir: str | Path) -> ExportResult | None:
        """Export the current tiles into `out_dir` on the calling thread."""
        try:
            result = self._exporter.export(self.snapshot(), out_dir)
        except ExportError as ex:
            self.report_export_failure(ex)
            return None
        self.report_export(result)
        return result

    def report_export(self, result: ExportResult) -> None:
        if result.archive_path:
            self._notify(
                f"Exported JSON + ZIP with {result.image_count} images", Severity.SUCCESS
            )
        else:
            self._notify("Exported JSON (no local images to zip)", Severity.SUCCESS)

    def report_export_failure(self, ex: Exception) -> None:
        self._notify(f"Export error: {ex}", Severity.ERROR)

    # Internals

    def _edit(self, mutate: Callable[..., None], tile_id: str, *args) -> None:
        try:
            mutate(tile_id, *args)
        except (FeaturedError, ValueError) as ex:
            logger.error("Edit of {} rejected: {}", tile_id, ex)
            self._notify(str(ex), Severity.ERROR)

    def _on_board_changed(self, changed: list[str]) -> None:
        self._drafts.save(self._board)
        self._refresh(changed)

    def _refresh(self, tile_ids: list[str]) -> None:
        if self.on_tiles_changed is not None and tile_ids:
            self.on_tiles_changed(tile_ids)

    def _notify(self, message: str, severity: Severity) -> None:
        self.reporter.notify(message, severity)
