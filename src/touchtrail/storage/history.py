"""Touch history store: the persisted, append-only sequence of touches."""

import json
import logging
from datetime import datetime
from typing import Callable, Sequence

from pydantic import ValidationError

from touchtrail.core.config import AttributionConfig
from touchtrail.core.exceptions import StorageCorruptError, StorageError
from touchtrail.models.base import as_aware, utc_now
from touchtrail.models.touch import Touch
from touchtrail.storage.base import StorageBackend

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class TouchHistoryStore:
    """Reads, merges and writes the touch history under one storage key.

    Touches are only ever appended; existing entries are never reordered or
    modified. The persisted layout is ``{"version": 1, "touches": [...]}``;
    an unversioned bare list is accepted on load.
    """

    def __init__(
        self,
        storage: StorageBackend,
        config: AttributionConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.storage = storage
        self.config = config or AttributionConfig()
        self.clock = clock

    @property
    def key(self) -> str:
        return self.config.storage_key

    def load(self) -> list[Touch]:
        """Read the persisted history.

        Never raises: an absent, corrupt or unreadable history loads as empty.
        When the attribution window is enforced, touches older than the window
        are dropped.
        """
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            logger.error(f"Error retrieving stored touches: {e}")
            return []

        if raw is None:
            return []

        try:
            touches = self.decode(raw)
        except StorageCorruptError as e:
            logger.warning(f"Discarding corrupt touch history: {e}")
            return []

        if self.config.enforce_attribution_window:
            touches = self.prune(touches, self.clock())
        return touches

    def append_if_significant(
        self, history: Sequence[Touch], touch: Touch
    ) -> list[Touch]:
        """Append ``touch`` when it changes the channel of the last touch.

        Returns a new list; ``history`` itself is not modified.
        """
        last = history[-1] if history else None
        if touch.is_significant_after(last):
            logger.debug(
                f"Recording new touch {touch.source}/{touch.medium} "
                f"(history length {len(history) + 1})"
            )
            return [*history, touch]
        return list(history)

    def save(self, history: Sequence[Touch]) -> None:
        """Persist the full history, overwriting prior content.

        Raises:
            StorageError: If the backend cannot be written
        """
        self.storage.set(self.key, self.encode(history))

    def prune(self, history: Sequence[Touch], now: datetime) -> list[Touch]:
        """Drop touches older than the attribution window."""
        cutoff = as_aware(now) - self.config.attribution_window
        kept = [touch for touch in history if as_aware(touch.timestamp) >= cutoff]
        if len(kept) != len(history):
            logger.info(
                f"Pruned {len(history) - len(kept)} touches outside the attribution window"
            )
        return kept

    @staticmethod
    def encode(history: Sequence[Touch]) -> str:
        return json.dumps(
            {
                "version": SCHEMA_VERSION,
                "touches": [touch.to_storage() for touch in history],
            }
        )

    def decode(self, raw: str) -> list[Touch]:
        """Parse a stored history.

        Raises:
            StorageCorruptError: If ``raw`` is not a valid serialized history
        """
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptError(self.key, f"invalid JSON: {e}") from e

        if isinstance(payload, list):
            records = payload
        elif isinstance(payload, dict):
            version = payload.get("version")
            if version != SCHEMA_VERSION:
                raise StorageCorruptError(
                    self.key, f"unsupported schema version {version!r}"
                )
            records = payload.get("touches")
            if not isinstance(records, list):
                raise StorageCorruptError(self.key, "'touches' is not a list")
        else:
            raise StorageCorruptError(
                self.key, f"unexpected {type(payload).__name__} payload"
            )

        try:
            return [Touch.model_validate(record) for record in records]
        except ValidationError as e:
            raise StorageCorruptError(self.key, f"invalid touch record: {e}") from e
