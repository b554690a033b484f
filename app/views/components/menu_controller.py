"""MenuController: Manages menu, toolbar creation and action connections."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QMenuBar, QToolBar

TOOLBAR_ACTIONS = ("import", "reset", "clear", "export")


class MenuController:
    """Manages main window menus, the toolbar and action connections.

    This class encapsulates all menu-related functionality including:
    - Menu structure creation
    - Toolbar mirroring the main draft actions
    - Action-to-handler connection management
    """

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to create menus for
        """
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Create all menus and the toolbar and return action references.

        Returns:
            Dictionary mapping action names to QAction instances
        """
        menubar = QMenuBar(self.window)

        # File Menu
        file_menu = menubar.addMenu("File")
        self.actions["import"] = file_menu.addAction("Import featured.json…")
        self.actions["export"] = file_menu.addAction("Export…")
        file_menu.addSeparator()
        self.actions["exit"] = file_menu.addAction("Exit")

        # Draft Menu
        draft_menu = menubar.addMenu("Draft")
        self.actions["reset"] = draft_menu.addAction("Reset to Imported")
        self.actions["clear"] = draft_menu.addAction("Clear Draft…")

        # Log Menu
        log_menu = menubar.addMenu("Log")
        self.actions["open_latest_log"] = log_menu.addAction("Open Latest Log")
        self.actions["open_log_directory"] = log_menu.addAction("Open Log Directory")

        self.window.setMenuBar(menubar)

        toolbar = QToolBar("Draft", self.window)
        toolbar.setMovable(False)
        for name in TOOLBAR_ACTIONS:
            toolbar.addAction(self.actions[name])
        self.window.addToolBar(toolbar)

        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Connect actions to their handler methods.

        Args:
            handlers: Dictionary mapping action names to handler callables
        """
        for name, action in self.actions.items():
            handler = handlers.get(name)
            if handler is not None:
                action.triggered.connect(lambda *_, h=handler: h())
            elif name == "exit":
                # Default exit behavior
                action.triggered.connect(self.window.close)

