"""Status bar implementation of the `StatusReporter` protocol."""

from __future__ import annotations

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QLabel, QMainWindow
from loguru import logger

from app.views.constants import DEFAULT_STATUS_TIMEOUT_MS, STATUS_STYLES
from core.models import Severity


class StatusBarReporter:
    """Shows one transient, severity-styled message in the window status bar.

    A new message replaces the current one and restarts the hide timer.
    """

    def __init__(self, main_window: QMainWindow, timeout_ms: int = DEFAULT_STATUS_TIMEOUT_MS):
        self.window = main_window
        self._timeout_ms = timeout_ms
        self._label = QLabel()
        self._label.setVisible(False)
        self.window.statusBar().addWidget(self._label, 1)

        self._timer = QTimer(self._label)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._hide)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Display `message` immediately and hide it after the timeout."""
        if severity == Severity.ERROR:
            logger.warning("Status: {}", message)
        else:
            logger.info("Status: {}", message)
        self._label.setText(message)
        self._label.setStyleSheet(STATUS_STYLES.get(severity.value, ""))
        self._label.setVisible(True)
        self._timer.start(self._timeout_ms)

    def _hide(self) -> None:
        self._label.clear()
        self._label.setVisible(False)
