"""MainWindow of the featured manager.

Hosts the nine tile editors, wires their signals to the view-model and
keeps them in sync with the tile board through `refresh_tiles`.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QMainWindow
from loguru import logger

from app.views.components.menu_controller import MenuController
from app.views.constants import DEFAULT_STATUS_TIMEOUT_MS
from app.views.handlers.file_operations import FileOperationsHandler
from app.views.io_tasks import IoTaskRunner
from app.views.layout.layout_manager import LayoutManager
from app.views.status_reporter import StatusBarReporter
from app.views.widgets.tile_editor import TileEditor
from core.models import TILE_IDS
from infrastructure.logging import open_latest_log, open_log_directory


class MainWindow(QMainWindow):
    """Main application window with the tile editor grid."""

    # Completion signals for IoTaskRunner: token, key, outcome
    uploadRead = Signal(str, str, object)
    documentRead = Signal(str, str, object)
    exportFinished = Signal(str, str, object)

    def __init__(
        self,
        vm: Any,
        image_service: Any,
        settings: Any | None = None,
    ) -> None:
        """Initialize MainWindow with all services and components.

        Args:
            vm: FeaturedVM instance owning the tile board
            image_service: Image service for reading uploads
            settings: Settings instance for configuration
        """
        super().__init__()
        self._vm = vm
        self._img = image_service
        self._settings = settings

        self._setup_components()
        self._setup_ui()
        self._connect_signals()

    def _setup_components(self) -> None:
        """Setup all controllers and handlers."""
        timeout = DEFAULT_STATUS_TIMEOUT_MS
        if self._settings is not None:
            timeout = self._settings.get_int("status.timeout_ms", DEFAULT_STATUS_TIMEOUT_MS)

        self.menu_controller = MenuController(self)
        self.layout_manager = LayoutManager(self)
        self.status_reporter = StatusBarReporter(self, timeout_ms=timeout)
        self._vm.reporter = self.status_reporter

        self._runner = IoTaskRunner(
            image_service=self._img, exporter=self._vm.exporter, receiver=self
        )
        self.file_operations = FileOperationsHandler(
            vm=self._vm,
            runner=self._runner,
            settings=self._settings,
            parent_widget=self,
        )
        self.editors: dict[str, TileEditor] = {tid: TileEditor(tid) for tid in TILE_IDS}

    def _setup_ui(self) -> None:
        """Setup the main UI components and layout."""
        self.setWindowTitle("Featured Tiles Manager")
        self.setCentralWidget(self.layout_manager.setup_tile_grid(self.editors.values()))
        self.layout_manager.setup_initial_window_size()
        self.menu_controller.setup_menus()

    def _connect_signals(self) -> None:
        """Connect all signal/slot relationships."""
        ops = self.file_operations
        handlers = {
            "import": ops.import_document,
            "export": ops.export,
            "reset": ops.reset_to_imported,
            "clear": ops.clear_draft,
            "open_latest_log": self._open_latest_log,
            "open_log_directory": open_log_directory,
            "exit": self.close,
        }
        self.menu_controller.connect_actions(handlers)

        for editor in self.editors.values():
            editor.titleEdited.connect(self._vm.set_title)
            editor.priceEdited.connect(self._vm.set_price)
            editor.urlEdited.connect(self._vm.set_url)
            editor.remoteImageEdited.connect(self._vm.set_remote_image_url)
            editor.modeSelected.connect(self._vm.set_mode)
            editor.imageFileChosen.connect(ops.upload_image)
            editor.clearImageRequested.connect(self._vm.clear_image)

        self.uploadRead.connect(ops.on_upload_read)
        self.documentRead.connect(ops.on_document_read)
        self.exportFinished.connect(ops.on_export_finished)

        self._vm.on_tiles_changed = self.refresh_tiles

    def refresh_tiles(self, tile_ids: list[str]) -> None:
        """Write the current state of `tile_ids` into their editors."""
        for tid in tile_ids:
            editor = self.editors.get(tid)
            if editor is None:
                logger.warning("No editor for tile {}", tid)
                continue
            editor.refresh(self._vm.tile_vm(tid))

    def refresh_all(self) -> None:
        self.refresh_tiles(list(TILE_IDS))

    def _open_latest_log(self) -> None:
        if not open_latest_log():
            self.status_reporter.notify("No log file found")
