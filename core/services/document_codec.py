"""Parsing and serialization of the featured.json canonical document.

Parsing is all-or-nothing for the nine known tiles: `parse_document` either
returns a fully validated `CanonicalDocument` or raises `DocumentParseError`. Absent, null or empty
fields are filled with their defaults here so callers never deal with holes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
import json
from typing import Any

from loguru import logger

from core.errors import DocumentParseError
from core.models import (
    TILE_IDS,
    CanonicalDocument,
    Tile,
    TileEntry,
    TileMode,
    local_image_path,
)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T10:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def decode_json(raw: bytes | str) -> Any:
    """Decode UTF-8 (BOM tolerated) and parse JSON, raising `DocumentParseError`."""
    try:
        text = raw.decode("utf-8-sig") if isinstance(raw, (bytes, bytearray)) else raw
        return json.loads(text)
    except UnicodeDecodeError as ex:
        raise DocumentParseError(f"File is not UTF-8 text: {ex}") from ex
    except json.JSONDecodeError as ex:
        raise DocumentParseError(f"Invalid JSON: {ex}") from ex


def text_field(data: Mapping[str, Any], key: str, default: str = "") -> str:
    """Return `data[key]` as text, or `default` when missing, null or empty.

    Numbers are accepted and converted; other types are rejected.
    """
    value = data.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise DocumentParseError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return str(value)


def mode_field(data: Mapping[str, Any], key: str = "mode") -> TileMode:
    raw = text_field(data, key, TileMode.LOCAL.value)
    try:
        return TileMode(raw)
    except ValueError:
        raise DocumentParseError(
            f"Field '{key}' must be 'local' or 'remote', got '{raw}'"
        ) from None


def tile_list(data: Any) -> list[Mapping[str, Any]]:
    """Validate the top-level shape and return the entries for known tiles.

    Entries that are not objects, lack a string `id`, or name a tile outside
    T1..T9 are skipped without validating their fields.
    """
    if not isinstance(data, Mapping):
        raise DocumentParseError("Document must be a JSON object")
    tiles = data.get("tiles")
    if not isinstance(tiles, list):
        raise DocumentParseError("Document is missing a 'tiles' list")
    entries: list[Mapping[str, Any]] = []
    for index, item in enumerate(tiles):
        if not isinstance(item, Mapping):
            logger.debug("Skipping tile entry #{}: not an object", index)
            continue
        tile_id = item.get("id")
        if not isinstance(tile_id, str) or tile_id not in TILE_IDS:
            logger.debug("Skipping tile entry #{}: unknown id {!r}", index, tile_id)
            continue
        entries.append(item)
    return entries


def parse_entry(item: Mapping[str, Any]) -> TileEntry:
    tile_id = item["id"]
    return TileEntry(
        id=tile_id,
        title=text_field(item, "title"),
        price=text_field(item, "price"),
        url=text_field(item, "url"),
        mode=mode_field(item),
        local_image=text_field(item, "localImage", local_image_path(tile_id)),
        remote_image=text_field(item, "remoteImage"),
    )


def parse_document(raw: bytes | str) -> CanonicalDocument:
    """Parse featured.json content into a `CanonicalDocument`.

    Only entries for T1..T9 are validated and kept; anything else is dropped.
    """
    data = decode_json(raw)
    entries = tuple(parse_entry(item) for item in tile_list(data))
    updated_at = data.get("updatedAt")
    return CanonicalDocument(
        updated_at=updated_at if isinstance(updated_at, str) else "",
        tiles=entries,
    )


def build_document(tiles: Iterable[Tile], updated_at: str | None = None) -> CanonicalDocument:
    """Canonical document for `tiles` with a fresh timestamp unless given."""
    return CanonicalDocument(
        updated_at=updated_at or utc_timestamp(),
        tiles=tuple(TileEntry.from_tile(t) for t in tiles),
    )


def serialize_document(doc: CanonicalDocument) -> str:
    """JSON text of `doc`, indented the way featured.json is published."""
    return json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)
