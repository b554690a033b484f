"""LayoutManager: Manages main window layout of the tile editor grid."""

from __future__ import annotations

from collections.abc import Iterable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QGridLayout,
    QMainWindow,
    QScrollArea,
    QWidget,
)

from app.views.constants import GRID_COLUMNS, GRID_SPACING_PX


class LayoutManager:
    """Manages main window layout.

    This class encapsulates all layout-related functionality including:
    - The scrollable grid holding the tile editors
    - Window sizing and positioning
    """

    WINDOW_SIZE_RATIO = 0.75

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to manage layout for
        """
        self.window = main_window
        self.grid: QGridLayout | None = None

    def setup_tile_grid(self, editors: Iterable[QWidget]) -> QWidget:
        """Place `editors` row by row in a scrollable grid.

        Args:
            editors: Tile editor widgets in T1..T9 order

        Returns:
            Central widget configured with the layout
        """
        container = QWidget()
        self.grid = QGridLayout(container)
        self.grid.setSpacing(GRID_SPACING_PX)
        for index, editor in enumerate(editors):
            row, col = divmod(index, GRID_COLUMNS)
            self.grid.addWidget(editor, row, col, Qt.AlignTop)

        scroll = QScrollArea(self.window)
        scroll.setWidgetResizable(True)
        scroll.setWidget(container)
        return scroll

    def setup_initial_window_size(self) -> None:
        """Setup initial window size based on screen dimensions."""
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        rect = screen.availableGeometry()
        width = int(rect.width() * self.WINDOW_SIZE_RATIO)
        height = int(rect.height() * self.WINDOW_SIZE_RATIO)
        self.window.resize(width, height)
