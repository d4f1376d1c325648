"""Tests for the page-load entry point."""

import logging

from touchtrail import track_page_view
from touchtrail.bootstrap import create_resolver
from touchtrail.core.config import Settings, StorageConfig, StorageKind
from touchtrail.logging.context import add_context, get_context
from touchtrail.storage.file import FileStorage
from touchtrail.storage.memory import MemoryStorage


def _ephemeral_settings() -> Settings:
    return Settings(storage=StorageConfig(backend=StorageKind.EPHEMERAL))


class TestCreateResolver:
    def test_ephemeral(self):
        resolver = create_resolver(_ephemeral_settings())

        assert isinstance(resolver.storage, MemoryStorage)

    def test_durable(self, tmp_path):
        settings = Settings(storage=StorageConfig(path=tmp_path / "s.json"))

        resolver = create_resolver(settings)

        assert isinstance(resolver.storage, FileStorage)
        assert resolver.config is settings.attribution


class TestTrackPageView:
    """Page-ready callback behaviour."""

    def test_returns_snapshot_and_logs(self, make_context, caplog):
        with caplog.at_level(logging.INFO, logger="touchtrail.bootstrap"):
            snapshot = track_page_view(
                make_context(referrer="https://www.bing.com/search?q=hats"),
                settings=_ephemeral_settings(),
            )

        assert snapshot.first_touch.source == "bing"
        assert "first touch bing (organic | hats)" in caplog.text
        assert "1 touches" in caplog.text

    def test_reuses_resolver(self, resolver, make_context):
        track_page_view(make_context(query="gclid=1"), resolver=resolver)
        snapshot = track_page_view(
            make_context(referrer="https://www.facebook.com/"), resolver=resolver
        )

        assert snapshot.touch_count == 2
        assert snapshot.first_touch_label == "google (cpc | gclid)"
        assert snapshot.last_touch_label == "facebook (social)"

    def test_clears_log_context(self, resolver, make_context):
        add_context(session_id="sess_previous_page")

        track_page_view(make_context(), resolver=resolver)

        assert get_context() == {}
