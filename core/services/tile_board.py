"""The fixed nine-tile collection edited by the featured manager.

`TileBoard` owns every `Tile` and is the only place tile fields change. Each
mutation notifies the registered listeners synchronously; the view-model
registers the draft persistence write as one of them. Bulk operations wrap
their mutations in `batch()` so listeners fire once per operation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import copy
from dataclasses import replace

from core.errors import UnknownTileError
from core.models import TILE_IDS, AttachedImage, Tile, TileMode, local_image_path

ChangeListener = Callable[[list[str]], None]


class TileBoard:
    """Ordered aggregate of the nine featured tiles."""

    def __init__(self) -> None:
        self._tiles: dict[str, Tile] = {tid: Tile.create(tid) for tid in TILE_IDS}
        self._listeners: list[ChangeListener] = []
        self._batch_depth = 0
        self._batch_notify = True
        self._pending: list[str] = []

    # Access

    @property
    def tiles(self) -> list[Tile]:
        """Tiles in T1..T9 order."""
        return [self._tiles[tid] for tid in TILE_IDS]

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._tiles

    def get(self, tile_id: str) -> Tile:
        """Return the tile for `tile_id` or raise `UnknownTileError`."""
        try:
            return self._tiles[tile_id]
        except KeyError:
            raise UnknownTileError(f"Unknown tile id: {tile_id}") from None

    def snapshot(self) -> list[Tile]:
        """Deep copies of all tiles, safe to hand to a worker thread."""
        return [copy.deepcopy(t) for t in self.tiles]

    # Listeners

    def add_listener(self, listener: ChangeListener) -> None:
        """Register `listener(changed_ids)` to run after every mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @contextmanager
    def batch(self, notify: bool = True) -> Iterator[TileBoard]:
        """Group mutations so listeners fire once when the outermost batch exits.

        With `notify=False` the changes inside the batch are applied silently.
        """
        if self._batch_depth == 0:
            self._batch_notify = notify
            self._pending = []
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                changed = list(dict.fromkeys(self._pending))
                self._pending = []
                if changed and self._batch_notify:
                    self._emit(changed)

    def _changed(self, tile_id: str) -> None:
        if self._batch_depth:
            self._pending.append(tile_id)
        else:
            self._emit([tile_id])

    def _emit(self, changed: list[str]) -> None:
        for listener in list(self._listeners):
            listener(changed)

    # Field mutation

    def set_title(self, tile_id: str, value: str) -> None:
        self.get(tile_id).title = value
        self._changed(tile_id)

    def set_price(self, tile_id: str, value: str) -> None:
        self.get(tile_id).price = value
        self._changed(tile_id)

    def set_url(self, tile_id: str, value: str) -> None:
        self.get(tile_id).url = value
        self._changed(tile_id)

    def set_remote_image_url(self, tile_id: str, value: str) -> None:
        self.get(tile_id).remote_image_url = value
        self._changed(tile_id)

    def set_mode(self, tile_id: str, mode: TileMode | str) -> None:
        """Switch the image mode; raises `ValueError` for anything but local/remote."""
        tile = self.get(tile_id)
        tile.mode = TileMode(mode)
        self._changed(tile_id)

    def attach_image(self, tile_id: str, filename: str, data: bytes, preview: str | None) -> None:
        """Attach uploaded bytes and point the local image path at their extension."""
        tile = self.get(tile_id)
        image = AttachedImage(filename=filename, data=data)
        tile.attached_image = image
        tile.image_preview = preview
        tile.local_image_path = local_image_path(tile_id, image.extension)
        self._changed(tile_id)

    def clear_image(self, tile_id: str) -> None:
        tile = self.get(tile_id)
        tile.attached_image = None
        tile.image_preview = None
        self._changed(tile_id)

    # Whole-tile replacement

    def replace_tile(self, tile: Tile) -> None:
        """Replace the stored tile with the same id by a copy of `tile`."""
        self.get(tile.id)
        self._tiles[tile.id] = replace(tile)
        self._changed(tile.id)

    def reset_all(self) -> None:
        """Put every tile back into its creation-default state."""
        with self.batch():
            for tid in TILE_IDS:
                self.replace_tile(Tile.create(tid))
