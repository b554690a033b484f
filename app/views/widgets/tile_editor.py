"""Editor widget for a single featured tile.

The widget never holds authoritative state. User input is forwarded through
signals to the view-model, and `refresh()` writes a `TileVM` back into the
controls.
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QDragEnterEvent, QDropEvent, QMouseEvent, QPixmap
from PySide6.QtWidgets import (
    QButtonGroup,
    QFileDialog,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.tile_vm import TileVM
from app.views.constants import (
    EDITOR_MIN_WIDTH_PX,
    IMAGE_FILTER,
    PREVIEW_MAX_SIDE_PX,
    PRICE_PLACEHOLDER,
    REMOTE_PLACEHOLDER,
    TITLE_PLACEHOLDER,
    URL_PLACEHOLDER,
)
from core.models import TileMode
from infrastructure.image_service import is_image_file


class _UploadArea(QFrame):
    """Click-or-drop target for an image file."""

    clicked = Signal()
    fileDropped = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setFrameShape(QFrame.StyledPanel)
        self.setCursor(Qt.PointingHandCursor)
        lay = QVBoxLayout(self)
        text = QLabel("Click or drag image here")
        text.setAlignment(Qt.AlignCenter)
        sub = QLabel("JPG, PNG (recommended: 600x600px)")
        sub.setAlignment(Qt.AlignCenter)
        sub.setStyleSheet("color: #777;")
        lay.addWidget(text)
        lay.addWidget(sub)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(event)

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if self._first_image_path(event) is not None:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        path = self._first_image_path(event)
        if path is None:
            event.ignore()
            return
        event.acceptProposedAction()
        self.fileDropped.emit(path)

    @staticmethod
    def _first_image_path(event) -> str | None:
        mime = event.mimeData()
        if mime is None or not mime.hasUrls():
            return None
        urls = mime.urls()
        if not urls or not urls[0].isLocalFile():
            return None
        path = urls[0].toLocalFile()
        return path if is_image_file(path) else None


class TileEditor(QFrame):
    """Form for the title, price, link and image of one tile."""

    titleEdited = Signal(str, str)  # tile_id, text
    priceEdited = Signal(str, str)
    urlEdited = Signal(str, str)
    remoteImageEdited = Signal(str, str)
    modeSelected = Signal(str, str)  # tile_id, "local" | "remote"
    imageFileChosen = Signal(str, str)  # tile_id, path
    clearImageRequested = Signal(str)

    def __init__(self, tile_id: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.tile_id = tile_id
        self.setFrameShape(QFrame.StyledPanel)
        self.setMinimumWidth(EDITOR_MIN_WIDTH_PX)

        root = QVBoxLayout(self)
        header = QLabel(tile_id)
        header.setStyleSheet("font-weight: bold;")
        root.addWidget(header)

        form = QFormLayout()
        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText(TITLE_PLACEHOLDER)
        self.price_edit = QLineEdit()
        self.price_edit.setPlaceholderText(PRICE_PLACEHOLDER)
        self.url_edit = QLineEdit()
        self.url_edit.setPlaceholderText(URL_PLACEHOLDER)
        form.addRow("Title", self.title_edit)
        form.addRow("Price", self.price_edit)
        form.addRow("eBay URL", self.url_edit)
        root.addLayout(form)

        mode_row = QHBoxLayout()
        self.local_btn = QPushButton("Local")
        self.remote_btn = QPushButton("Remote")
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        for btn in (self.local_btn, self.remote_btn):
            btn.setCheckable(True)
            self._mode_group.addButton(btn)
            mode_row.addWidget(btn)
        root.addWidget(QLabel("Image Mode"))
        root.addLayout(mode_row)

        # Local image section
        self.local_section = QWidget()
        local_lay = QVBoxLayout(self.local_section)
        local_lay.setContentsMargins(0, 0, 0, 0)
        self.upload_area = _UploadArea()
        self.preview_label = QLabel()
        self.preview_label.setAlignment(Qt.AlignCenter)
        self.preview_filename = QLabel()
        self.preview_filename.setAlignment(Qt.AlignCenter)
        self.clear_image_btn = QPushButton("Clear Image")
        self.preview_box = QWidget()
        preview_lay = QVBoxLayout(self.preview_box)
        preview_lay.setContentsMargins(0, 0, 0, 0)
        preview_lay.addWidget(self.preview_label)
        preview_lay.addWidget(self.preview_filename)
        preview_lay.addWidget(self.clear_image_btn)
        local_lay.addWidget(self.upload_area)
        local_lay.addWidget(self.preview_box)
        root.addWidget(self.local_section)

        # Remote image section
        self.remote_section = QWidget()
        remote_form = QFormLayout(self.remote_section)
        remote_form.setContentsMargins(0, 0, 0, 0)
        self.remote_edit = QLineEdit()
        self.remote_edit.setPlaceholderText(REMOTE_PLACEHOLDER)
        remote_form.addRow("Remote Image URL", self.remote_edit)
        root.addWidget(self.remote_section)
        root.addStretch(1)

        self._connect_inputs()

    def _connect_inputs(self) -> None:
        # textEdited fires for user input only, never for setText()
        tid = self.tile_id
        self.title_edit.textEdited.connect(lambda text: self.titleEdited.emit(tid, text))
        self.price_edit.textEdited.connect(lambda text: self.priceEdited.emit(tid, text))
        self.url_edit.textEdited.connect(lambda text: self.urlEdited.emit(tid, text))
        self.remote_edit.textEdited.connect(lambda text: self.remoteImageEdited.emit(tid, text))
        local, remote = TileMode.LOCAL.value, TileMode.REMOTE.value
        self.local_btn.clicked.connect(lambda *_: self.modeSelected.emit(tid, local))
        self.remote_btn.clicked.connect(lambda *_: self.modeSelected.emit(tid, remote))
        self.upload_area.clicked.connect(self._choose_file)
        self.upload_area.fileDropped.connect(lambda path: self.imageFileChosen.emit(tid, path))
        self.clear_image_btn.clicked.connect(lambda *_: self.clearImageRequested.emit(tid))

    def _choose_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, f"Image for {self.tile_id}", "", IMAGE_FILTER)
        if path:
            self.imageFileChosen.emit(self.tile_id, path)

    def refresh(self, vm: TileVM) -> None:
        """Write `vm` into the controls. Safe to call any number of times."""
        self._set_text(self.title_edit, vm.title)
        self._set_text(self.price_edit, vm.price)
        self._set_text(self.url_edit, vm.url)
        self._set_text(self.remote_edit, vm.remote_image_url)

        for btn, checked in (
            (self.local_btn, vm.show_local_section),
            (self.remote_btn, vm.show_remote_section),
        ):
            btn.blockSignals(True)
            btn.setChecked(checked)
            btn.blockSignals(False)
        self.local_section.setVisible(vm.show_local_section)
        self.remote_section.setVisible(vm.show_remote_section)

        self._show_preview(vm)

    @staticmethod
    def _set_text(edit: QLineEdit, value: str) -> None:
        # Keep the caret where the user is typing when nothing changed
        if edit.text() != value:
            edit.setText(value)

    def _show_preview(self, vm: TileVM) -> None:
        if not vm.has_preview:
            self.preview_label.clear()
            self.preview_filename.clear()
            self.preview_box.setVisible(False)
            return
        pm = QPixmap()
        if not pm.loadFromData(vm.preview_bytes or b""):
            logger.debug("Preview for {} could not be decoded by Qt", vm.tile_id)
            self.preview_label.setText("(preview unavailable)")
        else:
            self.preview_label.setPixmap(
                pm.scaled(
                    PREVIEW_MAX_SIDE_PX,
                    PREVIEW_MAX_SIDE_PX,
                    Qt.KeepAspectRatio,
                    Qt.SmoothTransformation,
                )
            )
        self.preview_filename.setText(vm.preview_label)
        self.preview_box.setVisible(True)
