from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import FeaturedVM
from app.views.main_window import MainWindow
from core.services.tile_board import TileBoard
from infrastructure.draft_store import DEFAULT_STORAGE_KEY, DraftRepository, JsonKeyValueStore
from infrastructure.export_service import ExportService
from infrastructure.image_service import ImageService
from infrastructure.logging import DEFAULT_LOG_LEVEL, init_logging
from infrastructure.settings import APP_DATA_DIR, JsonSettings

BASE_DIR = Path(__file__).parent


def build_vm(settings: JsonSettings) -> FeaturedVM:
    """Create the tile board and the services around it."""
    store = JsonKeyValueStore(settings.get_path("store.path", APP_DATA_DIR / "draft_store.json"))
    drafts = DraftRepository(store, key=str(settings.get("store.key", DEFAULT_STORAGE_KEY)))
    logger.info("Draft store: {} [{}]", store.path, drafts.key)
    return FeaturedVM(TileBoard(), drafts, exporter=ExportService())


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    init_logging(
        settings.get("logging.dir") or None,
        level=str(settings.get("logging.level", DEFAULT_LOG_LEVEL)),
    )

    app = QApplication(sys.argv)

    vm = build_vm(settings)
    win = MainWindow(vm=vm, image_service=ImageService(), settings=settings)
    win.refresh_all()
    vm.start()
    win.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
