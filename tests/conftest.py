"""Shared fixtures for featured manager tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from app.viewmodels.main_vm import FeaturedVM
from core.models import TILE_IDS, Severity
from core.services.tile_board import TileBoard
from infrastructure.draft_store import DraftRepository, JsonKeyValueStore
from infrastructure.export_service import ExportService

# Widgets under test never need a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

STORE_KEY = "test_featured_draft"


class RecordingReporter:
    """StatusReporter that remembers every notification."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, Severity]] = []

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.messages.append((message, severity))

    @property
    def last(self) -> tuple[str, Severity]:
        return self.messages[-1]


def make_document(**overrides: dict) -> dict:
    """A full nine-tile featured.json payload; `overrides` maps tile id to fields."""
    tiles = []
    for tid in TILE_IDS:
        entry = {
            "id": tid,
            "title": f"Item {tid}",
            "price": f"${tid[1:]}00",
            "url": f"https://www.ebay.com/itm/{tid}",
            "mode": "local",
            "localImage": f"images/featured/{tid}.jpg",
            "remoteImage": "",
        }
        entry.update(overrides.get(tid, {}))
        tiles.append(entry)
    return {"updatedAt": "2024-05-01T12:00:00.000Z", "tiles": tiles}


def encode(doc: dict) -> bytes:
    return json.dumps(doc).encode("utf-8")


@pytest.fixture
def board() -> TileBoard:
    return TileBoard()


@pytest.fixture
def store(tmp_path: Path) -> JsonKeyValueStore:
    return JsonKeyValueStore(tmp_path / "store" / "draft_store.json")


@pytest.fixture
def drafts(store: JsonKeyValueStore) -> DraftRepository:
    return DraftRepository(store, key=STORE_KEY)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def vm(board: TileBoard, drafts: DraftRepository, reporter: RecordingReporter) -> FeaturedVM:
    return FeaturedVM(board, drafts, exporter=ExportService(), reporter=reporter)


def stored_draft(store: JsonKeyValueStore) -> dict | None:
    raw = store.get_item(STORE_KEY)
    return json.loads(raw) if raw else None
