"""Storage backend interface: a synchronous string key-value store."""

from abc import ABC, abstractmethod

from touchtrail.core.config import StorageKind


class StorageBackend(ABC):
    """Key-value capability the touch history and session live in.

    Backends are selected once at startup and never swapped afterwards.
    """

    kind: StorageKind

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None when absent.

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the backend cannot be written
        """
        pass

    @property
    def is_durable(self) -> bool:
        return self.kind == StorageKind.DURABLE
