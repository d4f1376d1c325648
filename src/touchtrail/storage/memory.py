"""Ephemeral in-memory storage backend."""

from touchtrail.core.config import StorageKind
from touchtrail.storage.base import StorageBackend


class MemoryStorage(StorageBackend):
    """Dictionary-backed storage; contents do not survive a restart."""

    kind = StorageKind.EPHEMERAL

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)
