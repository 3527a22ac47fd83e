"""Unit tests for the JSON persistence backends."""

import json

import pytest

from utils.storage import JsonFileStorage, MemoryStorage


class TestJsonFileStorage:
    def test_missing_file_reads_as_empty(self, tmp_path):
        storage = JsonFileStorage(str(tmp_path / "nope.json"))

        assert storage.read_all() == []

    def test_ensure_exists_creates_empty_array(self, tmp_path):
        path = tmp_path / "sub" / "log.json"
        storage = JsonFileStorage(str(path))

        storage.ensure_exists()

        assert json.loads(path.read_text()) == []

    def test_ensure_exists_keeps_existing_content(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_text('[{"a": 1}]')

        JsonFileStorage(str(path)).ensure_exists()

        assert json.loads(path.read_text()) == [{"a": 1}]

    def test_pretty_printed_when_indent_given(self, tmp_path):
        path = tmp_path / "data.json"
        JsonFileStorage(str(path), indent=2).write_all([{"id": 1, "name": "Robin"}])

        text = path.read_text()
        assert text.startswith("[\n  {\n")
        assert json.loads(text) == [{"id": 1, "name": "Robin"}]

    def test_compact_by_default(self, tmp_path):
        path = tmp_path / "ops.json"
        JsonFileStorage(str(path)).write_all([{"ip": "1.2.3.4"}])

        assert "\n" not in path.read_text()

    def test_non_ascii_round_trip(self, tmp_path):
        storage = JsonFileStorage(str(tmp_path / "data.json"), indent=2)
        storage.write_all([{"name": "白鹭"}])

        assert storage.read_all() == [{"name": "白鹭"}]

    def test_invalid_json_raises_value_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{")

        with pytest.raises(ValueError):
            JsonFileStorage(str(path)).read_all()

    def test_non_array_raises_value_error(self, tmp_path):
        path = tmp_path / "object.json"
        path.write_text('{"birds": []}')

        with pytest.raises(ValueError, match="JSON array"):
            JsonFileStorage(str(path)).read_all()


class TestMemoryStorage:
    def test_reads_back_written_items(self):
        storage = MemoryStorage()
        storage.write_all([{"id": 1}])

        assert storage.read_all() == [{"id": 1}]
        assert storage.writes == 1

    def test_returns_copies(self):
        storage = MemoryStorage([{"id": 1}])
        items = storage.read_all()
        items[0]["id"] = 99

        assert storage.read_all() == [{"id": 1}]
