"""Lightweight view model projecting a `Tile` onto its editor widgets."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import Tile, TileMode
from infrastructure.image_service import decode_preview

RESTORED_PREVIEW_LABEL = "(restored preview, re-attach to export)"


@dataclass(frozen=True)
class TileVM:
    """Display values for one tile editor."""

    tile_id: str
    title: str
    price: str
    url: str
    mode: TileMode
    remote_image_url: str
    local_image_path: str
    preview_bytes: bytes | None
    preview_label: str

    @classmethod
    def from_tile(cls, tile: Tile) -> TileVM:
        if tile.attached_image is not None:
            label = tile.attached_image.filename
        elif tile.image_preview:
            label = RESTORED_PREVIEW_LABEL
        else:
            label = ""
        return cls(
            tile_id=tile.id,
            title=tile.title,
            price=tile.price,
            url=tile.url,
            mode=tile.mode,
            remote_image_url=tile.remote_image_url,
            local_image_path=tile.local_image_path,
            preview_bytes=decode_preview(tile.image_preview),
            preview_label=label,
        )

    @property
    def show_local_section(self) -> bool:
        """True if the upload controls should be visible."""
        return self.mode == TileMode.LOCAL

    @property
    def show_remote_section(self) -> bool:
        """True if the remote URL field should be visible."""
        return self.mode == TileMode.REMOTE

    @property
    def has_preview(self) -> bool:
        return self.preview_bytes is not None
