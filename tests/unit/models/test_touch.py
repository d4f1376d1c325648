"""Tests for touch models."""

from datetime import datetime, timezone

import pytest

from touchtrail.models.touch import (
    ClassifiedFields,
    ContentTesting,
    Medium,
    Touch,
    UtmParameters,
    describe_touch,
)

TIMESTAMP = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _touch(**kwargs) -> Touch:
    kwargs.setdefault("timestamp", TIMESTAMP)
    return Touch(**kwargs)


class TestUtmParameters:
    """Test UTM parameter extraction."""

    def test_from_query(self):
        utm = UtmParameters.from_query(
            {"utm_source": " Google ", "utm_medium": "CPC", "other": "x"}
        )

        assert utm.source == "google"
        assert utm.medium == "cpc"
        assert utm.campaign is None
        assert utm.is_set is True

    def test_blank_values_are_absent(self):
        utm = UtmParameters.from_query({"utm_source": "  ", "utm_term": ""})

        assert utm.source is None
        assert utm.term is None
        assert utm.is_set is False

    def test_medium_without_source_is_not_set(self):
        assert UtmParameters.from_query({"utm_medium": "cpc"}).is_set is False


class TestTouch:
    """Test Touch model behaviour."""

    def test_from_classified(self):
        fields = ClassifiedFields(source="google", medium=Medium.ORGANIC, term="shoes")

        touch = Touch.from_classified(
            fields,
            timestamp=TIMESTAMP,
            referrer="https://www.google.com/",
            landing_page="https://shop.example.com/",
        )

        assert touch.source == "google"
        assert touch.medium == Medium.ORGANIC
        assert touch.term == "shoes"
        assert touch.timestamp == TIMESTAMP
        assert touch.landing_page == "https://shop.example.com/"

    def test_source_must_not_be_empty(self):
        with pytest.raises(ValueError):
            _touch(source="")

    def test_storage_uses_camel_case(self):
        data = _touch(source="google", medium="cpc", landing_page="/x").to_storage()

        assert data["landingPage"] == "/x"
        assert data["utmParameters"]["source"] is None
        assert data["customParameters"] == {}
        assert data["medium"] == "cpc"
        assert data["timestamp"] == "2025-03-01T12:00:00+00:00"

    def test_ab_test_alias(self):
        testing = ContentTesting(is_ab_test=True, variant="variant_a")

        assert testing.to_storage()["isABTest"] is True
        assert ContentTesting.model_validate({"isABTest": True, "variant": "a"}).is_ab_test

    def test_populate_by_alias(self):
        touch = Touch.model_validate(
            {"source": "bing", "medium": "organic", "timestamp": TIMESTAMP.isoformat(),
             "landingPage": "/home"}
        )

        assert touch.landing_page == "/home"


class TestSignificance:
    """Only a change of source or medium records a new touch."""

    def test_first_touch_is_significant(self):
        assert _touch(source="google", medium="organic").is_significant_after(None)

    def test_same_channel_is_not_significant(self):
        previous = _touch(source="google", medium="cpc", campaign="spring")
        current = _touch(source="google", medium="cpc", campaign="summer", term="x")

        assert current.is_significant_after(previous) is False

    def test_source_change_is_significant(self):
        previous = _touch(source="google", medium="organic")

        assert _touch(source="bing", medium="organic").is_significant_after(previous)

    def test_medium_change_is_significant(self):
        previous = _touch(source="google", medium="organic")

        assert _touch(source="google", medium="cpc").is_significant_after(previous)


class TestDescribeTouch:
    """Test human-readable touch summaries."""

    def test_none_is_direct(self):
        assert describe_touch(None) == "direct"

    def test_direct_source(self):
        assert describe_touch(_touch(source="direct", medium="none")) == "direct"

    def test_medium_only(self):
        assert describe_touch(_touch(source="facebook", medium="social")) == (
            "facebook (social)"
        )

    def test_with_campaign_and_term(self):
        touch = _touch(source="google", medium="cpc", campaign="brand", term="shoes")

        assert describe_touch(touch) == "google (cpc | brand | shoes)"

    def test_single_character_values_are_skipped(self):
        touch = _touch(source="google", medium="organic", campaign="x", term="y")

        assert describe_touch(touch) == "google (organic)"
