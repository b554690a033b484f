"""Durable draft persistence.

`JsonKeyValueStore` is a tiny string key-value store kept in a single JSON
file, written atomically. `DraftRepository` stores the nine-tile draft under
one fixed key in it. Saving never raises; a corrupt draft is reported back to
the caller without applying any part of it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
import json
import os
from pathlib import Path
import tempfile
from typing import Any

from loguru import logger

from core.errors import DocumentParseError
from core.models import TileMode
from core.services.document_codec import (
    decode_json,
    mode_field,
    text_field,
    tile_list,
    utc_timestamp,
)
from core.services.interfaces import DraftLoadResult, DraftLoadStatus
from core.services.tile_board import TileBoard

DEFAULT_STORAGE_KEY = "featured_manager_draft"


class JsonKeyValueStore:
    """String key-value store persisted as one JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as ex:
                logger.warning(
                    "Store file {} is not valid UTF-8 JSON, treating as empty: {}", self._path, ex
                )
                return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".store_", suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self._path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def get_item(self, key: str) -> str | None:
        """Return the value stored under `key`, or None."""
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


@dataclass(frozen=True)
class _DraftTile:
    """Validated persistable fields of one tile from a stored draft."""

    id: str
    title: str
    price: str
    url: str
    mode: TileMode
    local_image: str | None
    remote_image: str
    image_preview: str | None


def _parse_draft_tile(item: Mapping[str, Any]) -> _DraftTile:
    preview = item.get("imagePreview")
    if preview is not None and not isinstance(preview, str):
        raise DocumentParseError("Field 'imagePreview' must be a string")
    return _DraftTile(
        id=item["id"],
        title=text_field(item, "title"),
        price=text_field(item, "price"),
        url=text_field(item, "url"),
        mode=mode_field(item),
        local_image=text_field(item, "localImage") or None,
        remote_image=text_field(item, "remoteImage"),
        image_preview=preview or None,
    )


def serialize_draft(board: TileBoard) -> str:
    """JSON text of the persistable state of every tile."""
    draft = {
        "updatedAt": utc_timestamp(),
        "tiles": [
            {
                "id": t.id,
                "title": t.title,
                "price": t.price,
                "url": t.url,
                "mode": t.mode.value,
                "localImage": t.local_image_path,
                "remoteImage": t.remote_image_url,
                "imagePreview": t.image_preview,
            }
            for t in board
        ],
    }
    return json.dumps(draft, ensure_ascii=False)


class DraftRepository:
    """Save and restore the tile board through a key-value store."""

    def __init__(self, store: JsonKeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, board: TileBoard) -> bool:
        """Write the current draft, overwriting any previous one.

        Failures are logged and reported through the return value only.
        """
        try:
            payload = serialize_draft(board)
            self._store.set_item(self._key, payload)
            return True
        except (OSError, TypeError, ValueError) as ex:
            logger.error("Saving draft failed: {}", ex)
            return False

    def load(self, board: TileBoard) -> DraftLoadResult:
        """Copy the stored draft into `board`.

        The draft is validated in full before any tile is touched.
        """
        try:
            raw = self._store.get_item(self._key)
        except (OSError, ValueError) as ex:
            logger.error("Reading draft store failed: {}", ex)
            return DraftLoadResult(DraftLoadStatus.STORAGE_ERROR, message=str(ex))
        if not raw:
            return DraftLoadResult(DraftLoadStatus.EMPTY)

        try:
            records = [_parse_draft_tile(item) for item in tile_list(decode_json(raw))]
        except DocumentParseError as ex:
            logger.error("Stored draft is corrupt: {}", ex)
            return DraftLoadResult(DraftLoadStatus.CORRUPT, message=str(ex))

        restored: list[str] = []
        # Restoring mirrors the store into memory; nothing to write back
        with board.batch(notify=False):
            for rec in records:
                if rec.id not in board:
                    continue
                current = board.get(rec.id)
                board.replace_tile(
                    replace(
                        current,
                        title=rec.title,
                        price=rec.price,
                        url=rec.url,
                        mode=rec.mode,
                        local_image_path=rec.local_image or current.local_image_path,
                        remote_image_url=rec.remote_image,
                        image_preview=rec.image_preview,
                    )
                )
                restored.append(rec.id)
        logger.info("Draft loaded: {} tiles restored", len(restored))
        return DraftLoadResult(DraftLoadStatus.LOADED, restored_ids=restored)

    def clear(self) -> None:
        """Erase the stored draft entry."""
        try:
            self._store.remove_item(self._key)
        except OSError as ex:
            logger.error("Removing draft failed: {}", ex)
