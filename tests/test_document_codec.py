"""Tests for featured.json parsing and serialization."""

import json

import pytest

from conftest import encode, make_document
from core.errors import DocumentParseError
from core.models import Tile, TileMode
from core.services.document_codec import (
    build_document,
    parse_document,
    serialize_document,
    utc_timestamp,
)


class TestParseDocument:
    """Validated parse with explicit defaults."""

    def test_full_document(self):
        doc = parse_document(encode(make_document()))
        assert doc.updated_at == "2024-05-01T12:00:00.000Z"
        assert [e.id for e in doc.tiles] == [f"T{i}" for i in range(1, 10)]
        assert doc.tiles[0].title == "Item T1"
        assert doc.tiles[0].mode is TileMode.LOCAL

    def test_missing_fields_get_defaults(self):
        doc = parse_document('{"tiles": [{"id": "T3"}]}')
        entry = doc.tiles[0]
        assert entry.title == entry.price == entry.url == entry.remote_image == ""
        assert entry.mode is TileMode.LOCAL
        assert entry.local_image == "images/featured/T3.jpg"
        assert doc.updated_at == ""

    def test_null_and_empty_values_get_defaults(self):
        raw = {"tiles": [{"id": "T1", "title": None, "mode": "", "localImage": ""}]}
        entry = parse_document(json.dumps(raw)).tiles[0]
        assert entry.title == ""
        assert entry.mode is TileMode.LOCAL
        assert entry.local_image == "images/featured/T1.jpg"

    def test_numeric_price_kept_as_text(self):
        entry = parse_document('{"tiles": [{"id": "T1", "price": 200}]}').tiles[0]
        assert entry.price == "200"

    def test_entries_outside_known_tiles_are_skipped(self):
        doc = make_document()
        doc["tiles"] += [
            {"id": "T10", "mode": "gallery"},
            {"title": "orphan"},
            {"id": 7, "title": ["x"]},
            42,
        ]
        parsed = parse_document(encode(doc))
        assert [e.id for e in parsed.tiles] == [f"T{i}" for i in range(1, 10)]

    def test_utf8_bom_accepted(self):
        raw = "\ufeff" + json.dumps(make_document())
        assert len(parse_document(raw.encode("utf-8")).tiles) == 9

    @pytest.mark.parametrize(
        "raw",
        [
            b"{not json",
            b"\xff\xfe\x00garbage",
            b"[]",
            b'{"updatedAt": "x"}',
            b'{"tiles": "T1"}',
            b'{"tiles": [{"id": "T1", "mode": "hybrid"}]}',
            b'{"tiles": [{"id": "T1", "title": ["list"]}]}',
            b'{"tiles": [{"id": "T1", "url": true}]}',
        ],
    )
    def test_malformed_documents_raise(self, raw):
        with pytest.raises(DocumentParseError):
            parse_document(raw)


class TestSerializeDocument:
    """Document construction from tiles."""

    def test_build_document_uses_public_fields_only(self):
        tile = Tile(id="T1", title="Silver Bowl", price="$200", image_preview="data:...")
        text = serialize_document(build_document([tile], updated_at="2024-01-01T00:00:00.000Z"))
        data = json.loads(text)
        assert data == {
            "updatedAt": "2024-01-01T00:00:00.000Z",
            "tiles": [
                {
                    "id": "T1",
                    "title": "Silver Bowl",
                    "price": "$200",
                    "url": "",
                    "mode": "local",
                    "localImage": "images/featured/T1.jpg",
                    "remoteImage": "",
                }
            ],
        }
        assert "  " in text  # indented for humans

    def test_fresh_timestamp_format(self):
        stamp = utc_timestamp()
        assert stamp.endswith("Z")
        assert "T" in stamp
        assert build_document([]).updated_at.endswith("Z")
