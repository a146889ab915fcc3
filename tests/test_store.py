"""
Tests for the CategoryStore module
"""

import json
import os
import stat

import pytest

from filesorter.store import CategoryStore, CategoryStoreError, CategoryRule, normalize_extension


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "categories.json"


class TestNormalizeExtension:

    def test_normalize(self):
        assert normalize_extension(".TXT") == "txt"
        assert normalize_extension("  Md ") == "md"
        assert normalize_extension("..gz") == "gz"
        assert normalize_extension(".") == ""


class TestLoad:
    """Test cases for loading the store"""

    def test_missing_file_is_empty(self, store_path):
        store = CategoryStore.load(store_path)

        assert len(store) == 0
        assert store.load_error is None

    def test_load_existing(self, store_path):
        store_path.write_text(json.dumps([
            {"extension": "txt", "folder": "Notes"},
            {"extension": ".MD", "folder": "Notes"},
        ]))

        store = CategoryStore.load(store_path)

        assert dict(store) == {"txt": "Notes", "md": "Notes"}
        assert store.load_error is None

    def test_malformed_json(self, store_path):
        store_path.write_text("[{not json")

        store = CategoryStore.load(store_path)

        assert len(store) == 0
        assert store.load_error.startswith("Error loading categories")

    def test_wrong_shape(self, store_path):
        store_path.write_text(json.dumps({"txt": "Notes"}))

        store = CategoryStore.load(store_path)

        assert len(store) == 0
        assert store.load_error is not None

    def test_missing_fields(self, store_path):
        store_path.write_text(json.dumps([{"extension": "txt"}]))

        store = CategoryStore.load(store_path)

        assert len(store) == 0
        assert store.load_error is not None

    def test_empty_entries_skipped(self, store_path):
        store_path.write_text(json.dumps([
            {"extension": "", "folder": "Nowhere"},
            {"extension": "txt", "folder": "Notes"},
        ]))

        store = CategoryStore.load(store_path)

        assert dict(store) == {"txt": "Notes"}


class TestMutation:
    """Test cases for add, edit and remove"""

    def test_add_normalizes_and_persists(self, store_path):
        store = CategoryStore.load(store_path)
        store.add(".TXT", "Notes")

        assert store["txt"] == "Notes"
        assert json.loads(store_path.read_text()) == [{"extension": "txt", "folder": "Notes"}]

    def test_add_overwrites(self, store_path):
        store = CategoryStore.load(store_path)
        store.add("txt", "Notes")
        store.add("txt", "Text")

        assert dict(store) == {"txt": "Text"}

    def test_add_rejects_empty(self, store_path):
        store = CategoryStore.load(store_path)

        with pytest.raises(ValueError):
            store.add("", "Notes")
        with pytest.raises(ValueError):
            store.add(".", "Notes")
        with pytest.raises(ValueError):
            store.add("txt", "  ")
        assert not store_path.exists()

    def test_edit_existing(self, store_path):
        store = CategoryStore.load(store_path)
        store.add("txt", "Notes")

        assert store.edit("TXT", "Text") is True
        assert CategoryStore.load(store_path)["txt"] == "Text"

    def test_edit_missing(self, store_path):
        store = CategoryStore.load(store_path)

        assert store.edit("txt", "Text") is False
        assert "txt" not in store
        assert not store_path.exists()

    def test_remove(self, store_path):
        store = CategoryStore.load(store_path)
        store.add("txt", "Notes")
        store.add("md", "Notes")

        assert store.remove(".txt") is True
        assert dict(CategoryStore.load(store_path)) == {"md": "Notes"}

    def test_remove_missing_is_noop(self, store_path):
        store = CategoryStore.load(store_path)

        assert store.remove("txt") is False

    def test_store_is_read_only_mapping(self, store_path):
        store = CategoryStore.load(store_path)

        with pytest.raises(TypeError):
            store["txt"] = "Notes"


class TestPersist:
    """Test cases for writing the store"""

    def test_round_trip(self, store_path):
        store = CategoryStore(store_path)
        store.add("txt", "Notes")
        store.add("stl", "3D Models")
        store.add("heic", "Images")

        assert CategoryStore.load(store_path) == store

    def test_output_is_indented(self, store_path):
        store = CategoryStore(store_path)
        store.add("txt", "Notes")

        assert '\n  {' in store_path.read_text()

    def test_rules(self, store_path):
        store = CategoryStore(store_path)
        store.add("txt", "Notes")

        assert store.rules() == [CategoryRule("txt", "Notes")]

    def test_no_temp_files_left(self, store_path):
        store = CategoryStore(store_path)
        store.add("txt", "Notes")

        assert os.listdir(store_path.parent) == ["categories.json"]

    def test_unwritable_location(self, tmp_path):
        store = CategoryStore(tmp_path / "missing" / "categories.json")

        with pytest.raises(CategoryStoreError):
            store.persist()

    def test_failed_write_rolls_back(self, store_path, monkeypatch):
        store = CategoryStore(store_path)
        store.add("txt", "Notes")
        before = store_path.read_text()

        def fail(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("filesorter.store.os.replace", fail)

        with pytest.raises(CategoryStoreError):
            store.add("md", "Markdown")
        with pytest.raises(CategoryStoreError):
            store.remove("txt")

        assert dict(store) == {"txt": "Notes"}
        assert store_path.read_text() == before
        assert os.listdir(store_path.parent) == ["categories.json"]


class TestFolderNames:
    """Folders must stay inside the directory being sorted"""

    @pytest.mark.parametrize("folder", [
        os.path.abspath("outside"), "/Notes", "../Notes", "Notes/../../x", ".", "./",
    ])
    def test_add_rejects_escaping_folder(self, store_path, folder):
        store = CategoryStore(store_path)

        with pytest.raises(ValueError):
            store.add("txt", folder)
        assert "txt" not in store
        assert not store_path.exists()

    def test_edit_rejects_escaping_folder(self, store_path):
        store = CategoryStore(store_path)
        store.add("txt", "Notes")

        with pytest.raises(ValueError):
            store.edit("txt", "/tmp/elsewhere")
        assert store["txt"] == "Notes"

    def test_nested_relative_folder_allowed(self, store_path):
        store = CategoryStore(store_path)
        store.add("txt", os.path.join("Work", "Notes"))

        assert store["txt"] == os.path.join("Work", "Notes")

    def test_load_skips_escaping_folder(self, store_path):
        store_path.write_text(json.dumps([
            {"extension": "txt", "folder": "/x"},
            {"extension": "md", "folder": "../up"},
            {"extension": "pdf", "folder": "Papers"},
        ]))

        store = CategoryStore.load(store_path)

        assert dict(store) == {"pdf": "Papers"}
        assert store.load_error is None


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
class TestFileMode:
    """The rules document gets normal file permissions"""

    def test_new_file_follows_umask(self, store_path):
        old = os.umask(0o022)
        try:
            CategoryStore(store_path).add("txt", "Notes")
        finally:
            os.umask(old)

        assert stat.S_IMODE(os.stat(store_path).st_mode) == 0o644

    def test_existing_mode_kept(self, store_path):
        store_path.write_text("[]")
        os.chmod(store_path, 0o640)

        CategoryStore(store_path).add("txt", "Notes")

        assert stat.S_IMODE(os.stat(store_path).st_mode) == 0o640
