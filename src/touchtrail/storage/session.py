"""Session tracking: a session id that survives until the visitor goes idle."""

import logging
from datetime import datetime
from typing import Callable
from uuid import uuid4

from pydantic import ValidationError

from touchtrail.core.config import AttributionConfig
from touchtrail.core.exceptions import StorageError
from touchtrail.models.base import as_aware, utc_now
from touchtrail.models.snapshot import SessionData
from touchtrail.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return "sess_" + uuid4().hex[:9]


class SessionTracker:
    """Keeps the current session alongside the touch history.

    A stored session is resumed while its last activity is within the
    configured session duration; otherwise a new session id is issued. With
    ``persist_sessions`` disabled every call starts a fresh, unsaved session.
    """

    def __init__(
        self,
        storage: StorageBackend,
        config: AttributionConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_session_id,
    ):
        self.storage = storage
        self.config = config or AttributionConfig()
        self.clock = clock
        self.id_factory = id_factory

    def record_page_view(self, page_path: str) -> SessionData:
        """Resume or start the session and record ``page_path`` on it.

        Storage failures are logged; the session is still returned.
        """
        now = self.clock()
        if not self.config.persist_sessions:
            return self.new_session(now, page_path)

        session = self._load()
        idle = None
        if session is not None:
            idle = as_aware(now) - as_aware(session.last_activity)
        if idle is not None and idle <= self.config.session_duration:
            session = session.model_copy(
                update={
                    "pages_viewed": self._trim_pages(
                        [*session.pages_viewed, page_path]
                    ),
                    "last_activity": now,
                }
            )
        else:
            session = self.new_session(now, page_path)
            logger.debug(f"Started session {session.id}")

        try:
            self.storage.set(
                self.config.session_key, session.model_dump_json(by_alias=True)
            )
        except StorageError as e:
            logger.warning(f"Failed to persist session {session.id}: {e}")
        return session

    def new_session(self, now: datetime, page_path: str) -> SessionData:
        return SessionData(
            id=self.id_factory(),
            start_time=now,
            pages_viewed=[page_path],
            last_activity=now,
        )

    def _trim_pages(self, pages: list[str]) -> list[str]:
        """Keep only the most recent pages."""
        return pages[-self.config.max_session_pages :]

    def _load(self) -> SessionData | None:
        try:
            raw = self.storage.get(self.config.session_key)
        except StorageError as e:
            logger.warning(f"Failed to read session: {e}")
            return None
        if raw is None:
            return None
        try:
            return SessionData.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable session: {e}")
            return None
