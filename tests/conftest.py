"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from touchtrail.classification.classifier import TouchClassifier
from touchtrail.core.config import AttributionConfig
from touchtrail.models.context import PageContext
from touchtrail.resolver import AttributionResolver
from touchtrail.storage.memory import MemoryStorage


class FakeClock:
    """Controllable clock for time-dependent behaviour."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def classifier() -> TouchClassifier:
    return TouchClassifier()


@pytest.fixture
def attribution_config() -> AttributionConfig:
    return AttributionConfig(storage_key="test_attribution")


@pytest.fixture
def resolver(storage, attribution_config, clock) -> AttributionResolver:
    return AttributionResolver(storage, config=attribution_config, clock=clock)


@pytest.fixture
def make_context():
    """Factory for page contexts with sensible device defaults."""

    def _make(
        query: str = "", referrer: str = "", path: str = "/landing", **kwargs
    ) -> PageContext:
        url = f"https://shop.example.com{path}"
        if query:
            url += "?" + query.lstrip("?")
        values = {
            "url": url,
            "referrer": referrer,
            "user_agent": "Mozilla/5.0 (X11; Linux x86_64)",
            "language": "en-US",
            "platform": "Linux x86_64",
            "screen_width": 1920,
            "screen_height": 1080,
            "viewport_width": 1280,
            "viewport_height": 720,
            "timezone": "Europe/Rome",
        }
        values.update(kwargs)
        return PageContext(**values)

    return _make
