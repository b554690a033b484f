from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger


class _IoTask(QRunnable):
    """QRunnable running one blocking file operation off the UI thread.

    Emits `signal(token, key, outcome)` upon completion, where `outcome` is
    the work's return value or the exception it raised. The signal belongs
    to the receiver, so delivery is queued back onto the UI thread.
    """

    def __init__(self, *, work: Callable[[], Any], signal: Any, token: str, key: str) -> None:
        super().__init__()
        self._work = work
        self._signal = signal
        self._token = token
        self._key = key

    def run(self) -> None:  # type: ignore[override]
        try:
            outcome: Any = self._work()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("IO task {} failed: {}", self._token, ex)
            outcome = ex
        try:
            self._signal.emit(self._token, self._key, outcome)
        except RuntimeError as ex:  # pragma: no cover - receiver destroyed during shutdown
            logger.warning("IO task {} result dropped: {}", self._token, ex)


class IoTaskRunner:
    """Dispatches file reads and exports to the global thread pool.

    At most one task per token is in flight; a second request for the same
    token is rejected until `finish(token)` is called from the result slot.

    Tokens:
    - Upload for a tile: "upload|{tile_id}"
    - Import: "import"
    - Export: "export"

    The receiver must own Qt signals `uploadRead`, `documentRead` and
    `exportFinished`, each `Signal(str, str, object)`.
    """

    def __init__(self, *, image_service: Any, exporter: Any, receiver: QObject) -> None:
        self._images = image_service
        self._exporter = exporter
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()
        self._in_flight: set[str] = set()

    def finish(self, token: str) -> None:
        """Release `token` so the same operation can be requested again."""
        self._in_flight.discard(token)

    def _start(self, token: str, key: str, work: Callable[[], Any], signal: Any) -> str | None:
        if token in self._in_flight:
            logger.info("Rejected {}: already in progress", token)
            return None
        self._in_flight.add(token)
        self._pool.start(_IoTask(work=work, signal=signal, token=token, key=key))
        return token

    def request_upload(self, tile_id: str, path: str) -> str | None:
        """Read image `path` for `tile_id`. Returns the token, or None if busy."""
        return self._start(
            f"upload|{tile_id}",
            tile_id,
            lambda: self._images.read_upload(path),
            self._receiver.uploadRead,  # type: ignore[attr-defined]
        )

    def request_import(self, path: str) -> str | None:
        """Read the raw bytes of import file `path`. Returns the token, or None if busy."""
        return self._start(
            "import",
            path,
            lambda: Path(path).read_bytes(),
            self._receiver.documentRead,  # type: ignore[attr-defined]
        )

    def request_export(self, tiles: list, out_dir: str) -> str | None:
        """Export a tile snapshot into `out_dir`. Returns the token, or None if busy."""
        return self._start(
            "export",
            out_dir,
            lambda: self._exporter.export(tiles, out_dir),
            self._receiver.exportFinished,  # type: ignore[attr-defined]
        )
