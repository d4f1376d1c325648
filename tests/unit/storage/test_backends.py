"""Tests for storage backends and backend selection."""

import json
import logging

import pytest

from touchtrail.core.config import StorageConfig, StorageKind
from touchtrail.core.exceptions import StorageCorruptError, StorageUnavailableError
from touchtrail.storage import open_storage
from touchtrail.storage.file import FileStorage
from touchtrail.storage.memory import MemoryStorage


class TestMemoryStorage:
    def test_get_missing(self):
        assert MemoryStorage().get("missing") is None

    def test_set_and_get(self):
        storage = MemoryStorage()
        storage.set("k", "v")
        assert storage.get("k") == "v"

    def test_initial_values(self):
        assert MemoryStorage({"k": "v"}).get("k") == "v"

    def test_is_ephemeral(self):
        storage = MemoryStorage()
        assert storage.kind == StorageKind.EPHEMERAL
        assert storage.is_durable is False


class TestFileStorage:
    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "storage.json"
        FileStorage(path).set("k", "v")

        assert path.exists()
        assert json.loads(path.read_text()) == {"k": "v"}

    def test_survives_reopen(self, tmp_path):
        path = tmp_path / "storage.json"
        FileStorage(path).set("k", "v")

        assert FileStorage(path).get("k") == "v"

    def test_keys_are_independent(self, tmp_path):
        storage = FileStorage(tmp_path / "storage.json")
        storage.set("a", "1")
        storage.set("b", "2")

        assert storage.get("a") == "1"
        assert storage.get("b") == "2"

    def test_missing_file_reads_as_empty(self, tmp_path):
        assert FileStorage(tmp_path / "storage.json").get("k") is None

    def test_is_durable(self, tmp_path):
        assert FileStorage(tmp_path / "s.json").is_durable is True

    def test_corrupt_file_raises_on_get(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{broken")

        with pytest.raises(StorageCorruptError):
            FileStorage(path).get("k")

    def test_corrupt_file_is_replaced_on_set(self, tmp_path, caplog):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2, 3]")

        with caplog.at_level(logging.WARNING):
            FileStorage(path).set("k", "v")

        assert json.loads(path.read_text()) == {"k": "v"}
        assert "Replacing unreadable storage file" in caplog.text

    def test_unusable_directory_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(StorageUnavailableError):
            FileStorage(blocker / "storage.json")

    def test_directory_as_file_raises(self, tmp_path):
        (tmp_path / "storage.json").mkdir()

        with pytest.raises(StorageUnavailableError, match="not a regular file"):
            FileStorage(tmp_path / "storage.json")

    def test_no_temp_files_left(self, tmp_path):
        storage = FileStorage(tmp_path / "storage.json")
        storage.set("k", "v")
        storage.set("k", "w")

        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


class TestOpenStorage:
    """Backend selection at startup."""

    def test_durable(self, tmp_path):
        storage = open_storage(StorageConfig(path=tmp_path / "s.json"))
        assert isinstance(storage, FileStorage)

    def test_ephemeral(self, tmp_path):
        storage = open_storage(
            StorageConfig(backend=StorageKind.EPHEMERAL, path=tmp_path / "s.json")
        )
        assert isinstance(storage, MemoryStorage)
        assert not (tmp_path / "s.json").exists()

    def test_falls_back_to_memory(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with caplog.at_level(logging.WARNING, logger="touchtrail.storage"):
            storage = open_storage(StorageConfig(path=blocker / "s.json"))

        assert isinstance(storage, MemoryStorage)
        assert "falling back to memory storage" in caplog.text
