"""Attribution snapshot models returned to the caller on every page load."""

from datetime import datetime

from pydantic import Field, field_serializer

from touchtrail.models.base import TouchTrailModel
from touchtrail.models.touch import Touch, describe_touch


class DeviceInfo(TouchTrailModel):
    """Device metadata read from the page context. Not used for classification."""

    user_agent: str = ""
    language: str = ""
    platform: str = ""
    screen_resolution: str | None = None
    viewport_size: str | None = None
    timezone: str = "UTC"


class SessionData(TouchTrailModel):
    """Visitor session: id, start, pages viewed and last activity."""

    id: str
    start_time: datetime
    pages_viewed: list[str] = Field(default_factory=list)
    last_activity: datetime

    @field_serializer("start_time", "last_activity")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class AttributionSnapshot(TouchTrailModel):
    """Derived attribution summary; recomputed on every call, never stored."""

    first_touch: Touch | None = None
    last_touch: Touch | None = None
    all_touches: list[Touch] = Field(default_factory=list)
    touch_count: int = Field(default=0, ge=0)
    device_info: DeviceInfo = Field(default_factory=DeviceInfo)
    session_data: SessionData | None = None

    @classmethod
    def from_history(
        cls,
        touches: list[Touch],
        device_info: DeviceInfo,
        session_data: SessionData | None,
    ) -> "AttributionSnapshot":
        """Build the first/last-touch summary of a touch history."""
        return cls(
            first_touch=touches[0] if touches else None,
            last_touch=touches[-1] if touches else None,
            all_touches=list(touches),
            touch_count=len(touches),
            device_info=device_info,
            session_data=session_data,
        )

    @classmethod
    def empty(
        cls, device_info: DeviceInfo, session_data: SessionData | None
    ) -> "AttributionSnapshot":
        """Snapshot returned when the history could not be built."""
        return cls(device_info=device_info, session_data=session_data)

    @property
    def is_empty(self) -> bool:
        return self.touch_count == 0

    @property
    def first_touch_label(self) -> str:
        """Summary of the channel that brought the visitor."""
        return describe_touch(self.first_touch)

    @property
    def last_touch_label(self) -> str:
        """Summary of the most recent channel."""
        return describe_touch(self.last_touch)
