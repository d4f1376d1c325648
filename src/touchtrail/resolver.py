"""Attribution resolver: classify the current visit, merge it into history, summarize."""

import logging
from datetime import datetime
from typing import Callable

from touchtrail.classification.classifier import TouchClassifier
from touchtrail.core.config import AttributionConfig, Settings
from touchtrail.core.exceptions import SnapshotBuildError, StorageError, TouchTrailError
from touchtrail.logging.context import LogContext
from touchtrail.models.base import utc_now
from touchtrail.models.context import PageContext
from touchtrail.models.snapshot import AttributionSnapshot, DeviceInfo, SessionData
from touchtrail.models.touch import Touch
from touchtrail.storage import open_storage
from touchtrail.storage.base import StorageBackend
from touchtrail.storage.history import TouchHistoryStore
from touchtrail.storage.session import SessionTracker

logger = logging.getLogger(__name__)


class AttributionResolver:
    """Builds the attribution snapshot for one page-load context.

    Construct one resolver per context and hand it to whatever triggers the
    page-ready callback. ``get_attribution_data`` never raises: every failure
    degrades to an empty snapshot.
    """

    def __init__(
        self,
        storage: StorageBackend,
        classifier: TouchClassifier | None = None,
        config: AttributionConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
        session_tracker: SessionTracker | None = None,
    ):
        """Initialize the resolver.

        Args:
            storage: Backend holding the touch history and session
            classifier: Touch classifier, defaults to the full configuration
            config: History and session options
            clock: Source of the current time
            session_tracker: Optional custom session tracker
        """
        self.storage = storage
        self.config = config or AttributionConfig()
        self.classifier = classifier or TouchClassifier()
        self.clock = clock
        self.history = TouchHistoryStore(storage, self.config, clock=clock)
        self.sessions = session_tracker or SessionTracker(
            storage, self.config, clock=clock
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AttributionResolver":
        """Create a resolver, selecting the storage backend once."""
        return cls(
            storage=open_storage(settings.storage),
            classifier=TouchClassifier(settings.classifier),
            config=settings.attribution,
        )

    def build_current_touch(self, context: PageContext) -> Touch:
        """Classify the current page load into a touch."""
        fields = self.classifier.classify(context.query_params, context.referrer)
        return Touch.from_classified(
            fields,
            timestamp=self.clock(),
            referrer=context.referrer,
            landing_page=context.url,
        )

    def merge_and_persist(self, touch: Touch) -> list[Touch]:
        """Merge ``touch`` into the stored history and save the result.

        Raises:
            SnapshotBuildError: If the merged history cannot be saved
        """
        stored = self.history.load()
        updated = self.history.append_if_significant(stored, touch)
        try:
            self.history.save(updated)
        except StorageError as e:
            raise SnapshotBuildError(f"Error storing touches: {e}") from e
        return updated

    def get_attribution_data(self, context: PageContext) -> AttributionSnapshot:
        """Classify, merge and summarize the current page load.

        Returns:
            AttributionSnapshot with first/last touch, all touches, device and
            session metadata; an empty snapshot when anything fails
        """
        device_info = self._device_info(context)
        session = self._session(context)

        with LogContext(session_id=session.id) as log_context:
            try:
                touch = self.build_current_touch(context)
                log_context.update(source=touch.source, medium=touch.medium)
                touches = self.merge_and_persist(touch)
                return AttributionSnapshot.from_history(touches, device_info, session)
            except TouchTrailError as e:
                logger.error(f"Error getting attribution data: {e}")
            except Exception as e:
                logger.error(f"Error getting attribution data: {e}", exc_info=True)
            return AttributionSnapshot.empty(device_info, session)

    def _device_info(self, context: PageContext) -> DeviceInfo:
        try:
            return context.device_info()
        except Exception as e:
            logger.warning(f"Error reading device info: {e}")
            return DeviceInfo()

    def _session(self, context: PageContext) -> SessionData:
        try:
            return self.sessions.record_page_view(context.path)
        except Exception as e:
            logger.warning(f"Error reading session data: {e}")
            return self.sessions.new_session(self._now(), "/")

    def _now(self) -> datetime:
        try:
            return self.clock()
        except Exception as e:
            logger.warning(f"Error reading clock: {e}")
            return utc_now()
