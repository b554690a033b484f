"""FileOperationsHandler: Handles import, reset, clear, export and image uploads."""

from __future__ import annotations

from typing import Any

from PySide6.QtWidgets import QFileDialog, QMessageBox, QWidget
from loguru import logger

from app.views.constants import CLEAR_CONFIRM_TEXT, IMPORT_FILTER
from app.views.io_tasks import IoTaskRunner
from core.models import Severity
from core.services.interfaces import ExportResult


class FileOperationsHandler:
    """Handles file-related operations of the featured manager.

    This class encapsulates all file operation workflows including:
    - featured.json import with error handling
    - Reset to the imported document
    - Clearing the draft after confirmation
    - Export of featured.json and featured-images.zip
    - Reading uploaded images for a tile
    """

    def __init__(
        self,
        vm: Any,
        runner: IoTaskRunner,
        settings: Any,
        parent_widget: QWidget,
    ) -> None:
        """Initialize with required services.

        Args:
            vm: FeaturedVM instance for data operations
            runner: Background task runner for file IO
            settings: Settings instance for configuration
            parent_widget: Parent widget for dialogs
        """
        self.vm = vm
        self.runner = runner
        self.settings = settings
        self.parent = parent_widget
        self._last_export_dir: str = ""
        if self.settings is not None:
            self._last_export_dir = str(self.settings.get("export.default_dir", "") or "")

    # Import / reset / clear

    def import_document(self) -> None:
        """Ask for a featured.json file and read it in the background."""
        path, _ = QFileDialog.getOpenFileName(
            self.parent, "Import featured.json", "", IMPORT_FILTER
        )
        if not path:
            return
        if self.runner.request_import(path) is None:
            self.vm.reporter.notify("An import is already in progress", Severity.INFO)

    def on_document_read(self, token: str, path: str, outcome: object) -> None:
        """Apply the bytes read for an import, or report the read failure."""
        self.runner.finish(token)
        if isinstance(outcome, Exception):
            logger.error("Reading import file {} failed: {}", path, outcome)
            self.vm.reporter.notify(f"Error importing JSON: {outcome}", Severity.ERROR)
            return
        if self.vm.import_bytes(outcome):
            logger.info("Imported featured document: {}", path)

    def reset_to_imported(self) -> None:
        self.vm.reset_to_imported()

    def clear_draft(self) -> None:
        """Clear the draft after the user confirms."""
        reply = QMessageBox.question(
            self.parent,
            "Clear Draft",
            CLEAR_CONFIRM_TEXT,
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if reply != QMessageBox.Yes:
            return
        self.vm.clear_draft()

    # Export

    def export(self) -> None:
        """Ask for a target directory and export a snapshot of the tiles there."""
        out_dir = QFileDialog.getExistingDirectory(
            self.parent, "Export featured.json", self._last_export_dir
        )
        if not out_dir:
            return
        self._last_export_dir = out_dir
        if self.runner.request_export(self.vm.snapshot(), out_dir) is None:
            self.vm.reporter.notify("An export is already in progress", Severity.INFO)

    def on_export_finished(self, token: str, out_dir: str, outcome: object) -> None:
        self.runner.finish(token)
        if isinstance(outcome, ExportResult):
            self.vm.report_export(outcome)
        elif isinstance(outcome, Exception):
            self.vm.report_export_failure(outcome)
        else:
            logger.error("Export into {} returned unexpected result: {!r}", out_dir, outcome)

    # Uploads

    def upload_image(self, tile_id: str, path: str) -> None:
        """Read image `path` for `tile_id` in the background."""
        if self.runner.request_upload(tile_id, path) is None:
            self.vm.reporter.notify(
                f"An image for {tile_id} is still being read", Severity.INFO
            )

    def on_upload_read(self, token: str, tile_id: str, outcome: object) -> None:
        self.runner.finish(token)
        if isinstance(outcome, Exception):
            self.vm.reporter.notify(f"Could not read image: {outcome}", Severity.ERROR)
            return
        filename, data = outcome  # type: ignore[misc]
        self.vm.attach_image(tile_id, filename, data)
