"""Page context: the read-only environment surface the resolver consumes."""

from typing import Mapping
from urllib.parse import parse_qsl, urlsplit

from pydantic import Field

from touchtrail.models.base import TouchTrailModel
from touchtrail.models.snapshot import DeviceInfo


def parse_query(query: str) -> dict[str, str]:
    """Parse a query string into a mapping, keeping the first value of repeated keys.

    A leading ``?`` is ignored and blank values are kept.
    """
    params: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        params.setdefault(key, value)
    return params


def _dimensions(width: int | None, height: int | None) -> str | None:
    if width is None or height is None:
        return None
    return f"{width}x{height}"


class PageContext(TouchTrailModel):
    """Current page URL, referrer and device metadata for one page load."""

    url: str = Field(..., description="Full URL of the current page")
    referrer: str = Field(default="", description="Referrer URL, empty when absent")
    user_agent: str = ""
    language: str = ""
    platform: str = ""
    screen_width: int | None = Field(default=None, ge=0)
    screen_height: int | None = Field(default=None, ge=0)
    viewport_width: int | None = Field(default=None, ge=0)
    viewport_height: int | None = Field(default=None, ge=0)
    timezone: str = "UTC"

    @property
    def query_string(self) -> str:
        return urlsplit(self.url).query

    @property
    def query_params(self) -> dict[str, str]:
        """Query parameters of the current URL, first value wins."""
        return parse_query(self.query_string)

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def hostname(self) -> str:
        return (urlsplit(self.url).hostname or "").lower()

    def device_info(self) -> DeviceInfo:
        """Device metadata as reported in the snapshot."""
        return DeviceInfo(
            user_agent=self.user_agent,
            language=self.language,
            platform=self.platform,
            screen_resolution=_dimensions(self.screen_width, self.screen_height),
            viewport_size=_dimensions(self.viewport_width, self.viewport_height),
            timezone=self.timezone,
        )

    @classmethod
    def from_request_headers(
        cls, url: str, headers: Mapping[str, str], **overrides
    ) -> "PageContext":
        """Build a context from HTTP request headers.

        Reads ``Referer``, ``User-Agent``, ``Accept-Language`` (first tag) and
        ``Sec-CH-UA-Platform``. Header names are matched case-insensitively.
        """
        lowered = {name.lower(): value for name, value in headers.items()}
        accept_language = lowered.get("accept-language", "")
        language = accept_language.split(",")[0].split(";")[0].strip()

        values = {
            "url": url,
            "referrer": lowered.get("referer", ""),
            "user_agent": lowered.get("user-agent", ""),
            "language": language,
            "platform": lowered.get("sec-ch-ua-platform", "").strip('"'),
        }
        values.update(overrides)
        return cls(**values)
