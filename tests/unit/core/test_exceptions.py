"""Tests for core exceptions module."""

import pytest

from touchtrail.core.exceptions import (
    ConfigurationError,
    ReferrerParseError,
    SnapshotBuildError,
    StorageCorruptError,
    StorageError,
    StorageUnavailableError,
    TouchTrailError,
)


class TestTouchTrailError:
    """Test base TouchTrailError exception."""

    def test_inheritance(self) -> None:
        assert issubclass(TouchTrailError, Exception)

    def test_instantiation(self) -> None:
        error = TouchTrailError("Test error")
        assert str(error) == "Test error"

    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            StorageError,
            StorageUnavailableError,
            SnapshotBuildError,
        ],
    )
    def test_subclasses_caught_by_base(self, exc_class) -> None:
        """Test every library error can be caught as TouchTrailError."""
        with pytest.raises(TouchTrailError):
            raise exc_class("boom")


class TestStorageErrors:
    """Test storage error hierarchy."""

    def test_unavailable_is_storage_error(self) -> None:
        assert issubclass(StorageUnavailableError, StorageError)

    def test_corrupt_error_attributes(self) -> None:
        error = StorageCorruptError("site_attribution", "invalid JSON")

        assert isinstance(error, StorageError)
        assert error.key == "site_attribution"
        assert error.reason == "invalid JSON"
        assert "site_attribution" in str(error)
        assert "invalid JSON" in str(error)


class TestReferrerParseError:
    """Test ReferrerParseError exception."""

    def test_with_reason(self) -> None:
        error = ReferrerParseError("bad", "missing scheme or host")

        assert error.referrer == "bad"
        assert str(error) == "Invalid referrer URL: 'bad' (missing scheme or host)"

    def test_without_reason(self) -> None:
        assert str(ReferrerParseError("bad")) == "Invalid referrer URL: 'bad'"
