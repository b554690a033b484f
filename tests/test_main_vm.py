"""End-to-end behavior of the FeaturedVM against a real store and exporter."""

import json
from pathlib import Path
import zipfile

from conftest import STORE_KEY, RecordingReporter, encode, make_document, stored_draft
from app.viewmodels.main_vm import READY_MESSAGE, FeaturedVM
from app.viewmodels.tile_vm import RESTORED_PREVIEW_LABEL, TileVM
from core.models import TILE_IDS, Severity, Tile, TileMode
from core.services.tile_board import TileBoard
from infrastructure.draft_store import DraftRepository, JsonKeyValueStore
from infrastructure.export_service import ARCHIVE_FILENAME, DOCUMENT_FILENAME

PERSISTED_KEYS = ("title", "price", "url", "mode", "localImage", "remoteImage", "imagePreview")


def _persisted(tile: Tile) -> dict:
    return {
        "title": tile.title,
        "price": tile.price,
        "url": tile.url,
        "mode": tile.mode.value,
        "localImage": tile.local_image_path,
        "remoteImage": tile.remote_image_url,
        "imagePreview": tile.image_preview,
    }


class TestEditing:
    """Every edit is persisted and forwarded to the view."""

    def test_store_mirrors_board_after_each_edit(
        self, vm: FeaturedVM, board: TileBoard, store: JsonKeyValueStore
    ):
        edits = [
            lambda: vm.set_title("T1", "Silver Bowl"),
            lambda: vm.set_price("T1", "$200"),
            lambda: vm.set_url("T4", "https://www.ebay.com/itm/1"),
            lambda: vm.set_mode("T2", "remote"),
            lambda: vm.set_remote_image_url("T2", "https://x/y.jpg"),
            lambda: vm.attach_image("T3", "bowl.png", b"png-bytes"),
            lambda: vm.set_title("T1", ""),
            lambda: vm.clear_image("T3"),
        ]
        for edit in edits:
            edit()
            draft = stored_draft(store)
            assert draft is not None
            stored = {t["id"]: {k: t[k] for k in PERSISTED_KEYS} for t in draft["tiles"]}
            assert stored == {t.id: _persisted(t) for t in board}

    def test_view_callback_receives_changed_ids(self, vm: FeaturedVM):
        refreshed: list[list[str]] = []
        vm.on_tiles_changed = refreshed.append
        vm.set_title("T7", "Clock")
        assert refreshed == [["T7"]]

    def test_invalid_edit_is_reported(self, vm: FeaturedVM, reporter: RecordingReporter):
        vm.set_mode("T1", "sideways")
        vm.set_title("T10", "x")
        assert [s for _, s in reporter.messages] == [Severity.ERROR, Severity.ERROR]

    def test_attach_image_builds_preview(self, vm: FeaturedVM, board: TileBoard):
        vm.attach_image("T1", "bowl.png", b"abc")
        tile = board.get("T1")
        assert tile.image_preview == "data:image/png;base64,YWJj"
        assert tile.local_image_path == "images/featured/T1.png"
        assert vm.tile_vm("T1").preview_bytes == b"abc"
        assert vm.tile_vm("T1").preview_label == "bowl.png"


class TestStartup:
    """Draft restore on launch."""

    def test_fresh_start(self, vm: FeaturedVM, reporter: RecordingReporter):
        vm.start()
        assert reporter.last == (READY_MESSAGE, Severity.INFO)

    def test_restores_draft_and_refreshes(
        self, drafts: DraftRepository, reporter: RecordingReporter
    ):
        first = FeaturedVM(TileBoard(), drafts)
        first.set_title("T2", "Teapot")
        first.attach_image("T1", "bowl.png", b"abc")

        board = TileBoard()
        second = FeaturedVM(board, drafts, reporter=reporter)
        refreshed: list[list[str]] = []
        second.on_tiles_changed = refreshed.append
        second.start()

        assert board.get("T2").title == "Teapot"
        assert refreshed == [list(TILE_IDS)]
        assert reporter.last[1] is Severity.INFO
        restored = second.tile_vm("T1")
        assert restored.preview_bytes == b"abc"
        assert restored.preview_label == RESTORED_PREVIEW_LABEL
        assert board.get("T1").attached_image is None

    def test_corrupt_draft_reported(
        self, vm: FeaturedVM, board: TileBoard, store: JsonKeyValueStore, reporter
    ):
        store.set_item(STORE_KEY, '{"tiles": [')
        vm.start()
        assert reporter.last[1] is Severity.ERROR
        assert board.tiles == [Tile.create(tid) for tid in TILE_IDS]


    def test_undecodable_store_file_does_not_stop_startup(
        self, vm: FeaturedVM, board: TileBoard, store: JsonKeyValueStore, reporter
    ):
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b"\xff\xfe garbage")

        vm.start()
        assert reporter.last == (READY_MESSAGE, Severity.INFO)

        vm.set_title("T1", "x")
        draft = stored_draft(store)
        assert draft is not None and draft["tiles"][0]["title"] == "x"


class TestImportResetClear:
    """Import, reset and clear as seen by the user."""

    def test_remote_tile_import_scenario(self, vm: FeaturedVM, reporter, tmp_path: Path):
        doc = make_document(T2={"mode": "remote", "remoteImage": "https://x/y.jpg"})
        assert vm.import_bytes(encode(doc))
        assert reporter.last[1] is Severity.SUCCESS

        t2: TileVM = vm.tile_vm("T2")
        assert t2.show_remote_section and not t2.show_local_section
        assert t2.remote_image_url == "https://x/y.jpg"

        vm.export_to(tmp_path)
        exported = json.loads((tmp_path / DOCUMENT_FILENAME).read_text(encoding="utf-8"))
        assert exported["tiles"][1]["remoteImage"] == "https://x/y.jpg"

    def test_import_export_roundtrip(self, vm: FeaturedVM, tmp_path: Path):
        doc = make_document(
            T4={"mode": "remote", "remoteImage": "https://i.ebayimg.com/4.jpg"},
            T6={"localImage": "images/featured/T6.png", "price": ""},
        )
        vm.import_bytes(encode(doc))
        vm.export_to(tmp_path)

        exported = json.loads((tmp_path / DOCUMENT_FILENAME).read_text(encoding="utf-8"))
        assert exported["tiles"] == doc["tiles"]
        assert exported["updatedAt"] != doc["updatedAt"]

    def test_malformed_import_scenario(
        self, vm: FeaturedVM, board: TileBoard, reporter: RecordingReporter
    ):
        vm.set_title("T1", "Existing")
        before = board.snapshot()

        assert not vm.import_bytes(b'{"tiles": {"id": "T1"}}')

        message, severity = reporter.last
        assert severity is Severity.ERROR
        assert message.startswith("Error importing JSON:")
        assert board.tiles == before

    def test_unknown_id_import(self, vm: FeaturedVM, board: TileBoard, reporter):
        before = board.snapshot()
        assert vm.import_bytes(encode({"tiles": [{"id": "T10", "title": "Extra"}]}))
        assert reporter.last[1] is Severity.SUCCESS
        assert board.tiles == before

    def test_invalid_unknown_entries_do_not_fail_import(
        self, vm: FeaturedVM, board: TileBoard, reporter
    ):
        doc = make_document()
        doc["tiles"] += [{"id": "T10", "mode": "gallery"}, {"title": "orphan"}]

        assert vm.import_bytes(encode(doc))

        assert reporter.last == ("Imported successfully!", Severity.SUCCESS)
        assert board.get("T9").title == "Item T9"

    def test_reset_before_import(self, vm: FeaturedVM, board: TileBoard, reporter):
        vm.set_title("T1", "Edited")
        before = board.snapshot()
        assert not vm.reset_to_imported()
        assert reporter.last == ("No imported data to reset to", Severity.ERROR)
        assert board.tiles == before

    def test_reset_after_edits(self, vm: FeaturedVM, board: TileBoard, store):
        vm.import_bytes(encode(make_document()))
        vm.set_title("T1", "Edited")
        vm.set_mode("T5", "remote")

        assert vm.reset_to_imported()

        assert board.get("T1").title == "Item T1"
        assert board.get("T5").mode is TileMode.LOCAL
        draft = stored_draft(store)
        assert draft is not None and draft["tiles"][0]["title"] == "Item T1"

    def test_clear_draft(self, vm: FeaturedVM, board: TileBoard, store, reporter):
        refreshed: list[list[str]] = []
        vm.on_tiles_changed = refreshed.append
        vm.import_bytes(encode(make_document()))
        vm.attach_image("T1", "bowl.png", b"abc")

        vm.clear_draft()

        assert board.tiles == [Tile.create(tid) for tid in TILE_IDS]
        assert store.get_item(STORE_KEY) is None
        assert refreshed[-1] == list(TILE_IDS)
        assert reporter.last == ("Draft cleared", Severity.SUCCESS)
        assert vm.has_imported


class TestExport:
    """Export scenarios."""

    def test_silver_bowl_scenario(self, vm: FeaturedVM, reporter, tmp_path: Path):
        vm.set_title("T1", "Silver Bowl")
        vm.set_price("T1", "$200")
        vm.set_mode("T1", "local")
        vm.attach_image("T1", "bowl.png", b"\x89PNG bowl")

        result = vm.export_to(tmp_path)

        assert result is not None
        data = json.loads((tmp_path / DOCUMENT_FILENAME).read_text(encoding="utf-8"))
        t1 = data["tiles"][0]
        assert (t1["title"], t1["price"], t1["mode"]) == ("Silver Bowl", "$200", "local")
        assert t1["localImage"] == "images/featured/T1.png"
        with zipfile.ZipFile(tmp_path / ARCHIVE_FILENAME) as zf:
            assert zf.namelist() == ["images/featured/T1.png"]
            assert zf.read("images/featured/T1.png") == b"\x89PNG bowl"
        assert reporter.last == ("Exported JSON + ZIP with 1 images", Severity.SUCCESS)

    def test_import_after_upload_keeps_document_and_archive_in_step(
        self, vm: FeaturedVM, tmp_path: Path
    ):
        vm.attach_image("T1", "bowl.png", b"\x89PNG bowl")
        vm.import_bytes(encode(make_document()))
        vm.set_title("T1", "Edited")
        vm.reset_to_imported()

        vm.export_to(tmp_path)

        data = json.loads((tmp_path / DOCUMENT_FILENAME).read_text(encoding="utf-8"))
        assert data["tiles"][0]["localImage"] == "images/featured/T1.png"
        with zipfile.ZipFile(tmp_path / ARCHIVE_FILENAME) as zf:
            assert zf.namelist() == ["images/featured/T1.png"]

    def test_restored_preview_is_not_exported(
        self, drafts: DraftRepository, reporter: RecordingReporter, tmp_path: Path
    ):
        FeaturedVM(TileBoard(), drafts).attach_image("T1", "bowl.png", b"abc")
        vm = FeaturedVM(TileBoard(), drafts, reporter=reporter)
        vm.start()

        result = vm.export_to(tmp_path)

        assert result is not None and result.archive_path is None
        assert not (tmp_path / ARCHIVE_FILENAME).exists()
        assert reporter.last == ("Exported JSON (no local images to zip)", Severity.SUCCESS)

    def test_remote_mode_upload_not_packaged(self, vm: FeaturedVM, tmp_path: Path):
        vm.attach_image("T1", "bowl.png", b"abc")
        vm.set_mode("T1", "remote")
        result = vm.export_to(tmp_path)
        assert result is not None and result.archive_path is None

    def test_export_failure_reported(self, vm: FeaturedVM, reporter, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        assert vm.export_to(blocker) is None
        message, severity = reporter.last
        assert severity is Severity.ERROR
        assert message.startswith("Export error:")
