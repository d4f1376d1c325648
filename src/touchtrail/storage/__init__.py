"""Storage backends, touch history and session persistence."""

import logging

from touchtrail.core.config import StorageConfig, StorageKind
from touchtrail.core.exceptions import StorageUnavailableError
from touchtrail.storage.base import StorageBackend
from touchtrail.storage.file import FileStorage
from touchtrail.storage.history import SCHEMA_VERSION, TouchHistoryStore
from touchtrail.storage.memory import MemoryStorage
from touchtrail.storage.session import SessionTracker, generate_session_id

logger = logging.getLogger(__name__)


def open_storage(config: StorageConfig | None = None) -> StorageBackend:
    """Select the storage backend once, at startup.

    A durable backend that cannot be opened falls back to in-memory storage:
    history then does not survive a restart, which is accepted.
    """
    config = config or StorageConfig()
    if config.backend == StorageKind.EPHEMERAL:
        return MemoryStorage()

    try:
        return FileStorage(config.path)
    except StorageUnavailableError as e:
        logger.warning(
            f"Durable storage not available, falling back to memory storage: {e}"
        )
        return MemoryStorage()


__all__ = [
    "FileStorage",
    "MemoryStorage",
    "SCHEMA_VERSION",
    "SessionTracker",
    "StorageBackend",
    "TouchHistoryStore",
    "generate_session_id",
    "open_storage",
]
