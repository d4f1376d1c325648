"""Durable file-backed storage backend."""

import json
import logging
import os
import tempfile
from pathlib import Path

from touchtrail.core.config import StorageKind
from touchtrail.core.exceptions import (
    StorageCorruptError,
    StorageError,
    StorageUnavailableError,
)
from touchtrail.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class FileStorage(StorageBackend):
    """Stores all keys as one JSON object in a single file.

    The file is re-read on every access and replaced atomically on every
    write. Concurrent writers are not coordinated: the last write wins.
    """

    kind = StorageKind.DURABLE

    def __init__(self, path: Path | str):
        """Open (or create the directory for) the storage file.

        Args:
            path: File holding the key-value JSON object

        Raises:
            StorageUnavailableError: If the file or its directory is not usable
        """
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot create storage directory {self.path.parent}: {e}"
            ) from e

        if self.path.exists():
            if not self.path.is_file():
                raise StorageUnavailableError(f"{self.path} is not a regular file")
            if not os.access(self.path, os.R_OK | os.W_OK):
                raise StorageUnavailableError(f"{self.path} is not readable and writable")
        elif not os.access(self.path.parent, os.W_OK):
            raise StorageUnavailableError(f"{self.path.parent} is not writable")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except StorageCorruptError as e:
            logger.warning(f"Replacing unreadable storage file {self.path}: {e}")
            data = {}
        data[key] = value
        self._write(data)

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptError(str(self.path), f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StorageCorruptError(str(self.path), "expected a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e
