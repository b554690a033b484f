"""Core domain models for featured tiles and the canonical document."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath

TILE_IDS: tuple[str, ...] = tuple(f"T{i}" for i in range(1, 10))
LOCAL_IMAGE_DIR = "images/featured"
DEFAULT_IMAGE_EXT = "jpg"


class TileMode(str, Enum):
    """Image source strategy for a tile."""

    LOCAL = "local"
    REMOTE = "remote"


class Severity(str, Enum):
    """Severity of a user-facing status notification."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def image_extension(filename: str) -> str:
    """Return the lower-cased extension of `filename` without the dot.

    Falls back to `DEFAULT_IMAGE_EXT` when the name has no extension.
    """
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix
    return suffix[1:].lower() if len(suffix) > 1 else DEFAULT_IMAGE_EXT


def local_image_path(tile_id: str, ext: str = DEFAULT_IMAGE_EXT) -> str:
    """Conventional on-site path of a tile's uploaded image."""
    return f"{LOCAL_IMAGE_DIR}/{tile_id}.{ext}"


@dataclass(frozen=True)
class AttachedImage:
    """Raw bytes of an uploaded image plus the name it was uploaded under."""

    filename: str
    data: bytes

    @property
    def extension(self) -> str:
        return image_extension(self.filename)


@dataclass
class Tile:
    """One of the nine editable featured records."""

    id: str
    title: str = ""
    price: str = ""
    url: str = ""
    mode: TileMode = TileMode.LOCAL
    local_image_path: str = ""
    remote_image_url: str = ""
    # Session only; never written to the draft store
    attached_image: AttachedImage | None = None
    image_preview: str | None = None

    def __post_init__(self) -> None:
        if not self.local_image_path:
            self.local_image_path = local_image_path(self.id)

    @classmethod
    def create(cls, tile_id: str) -> Tile:
        """Build a tile in its creation-default state."""
        return cls(id=tile_id)

    @property
    def has_upload(self) -> bool:
        """True if image bytes were attached in this session."""
        return self.attached_image is not None


@dataclass(frozen=True)
class TileEntry:
    """Public fields of one tile as they travel in the canonical document."""

    id: str
    title: str = ""
    price: str = ""
    url: str = ""
    mode: TileMode = TileMode.LOCAL
    local_image: str = ""
    remote_image: str = ""

    @classmethod
    def from_tile(cls, tile: Tile) -> TileEntry:
        return cls(
            id=tile.id,
            title=tile.title,
            price=tile.price,
            url=tile.url,
            mode=tile.mode,
            local_image=tile.local_image_path,
            remote_image=tile.remote_image_url,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "url": self.url,
            "mode": self.mode.value,
            "localImage": self.local_image,
            "remoteImage": self.remote_image,
        }


@dataclass(frozen=True)
class CanonicalDocument:
    """The featured.json interchange document."""

    updated_at: str
    tiles: tuple[TileEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "updatedAt": self.updated_at,
            "tiles": [entry.to_dict() for entry in self.tiles],
        }
