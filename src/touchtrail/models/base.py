"""Base model with common configuration."""

from datetime import datetime, timezone

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def as_aware(dt: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


class TouchTrailModel(PydanticBaseModel):
    """Base model for all TouchTrail records.

    Records are persisted with camelCase keys so stored histories stay
    readable by browser-side trackers sharing the same storage key.
    """

    model_config = ConfigDict(
        # Use enum values instead of names
        use_enum_values=True,
        # Allow population by field name as well as alias
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_storage(self) -> dict:
        """Dump to the JSON-compatible dict written to storage."""
        return self.model_dump(mode="json", by_alias=True)
