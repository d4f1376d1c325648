"""Custom exceptions for TouchTrail."""


class TouchTrailError(Exception):
    """Base exception for all TouchTrail errors."""

    pass


class ConfigurationError(TouchTrailError):
    """Raised when configuration is invalid."""

    pass


class StorageError(TouchTrailError):
    """Raised when storage operations fail."""

    pass


class StorageUnavailableError(StorageError):
    """Raised when a durable storage backend cannot be opened."""

    pass


class StorageCorruptError(StorageError):
    """Raised when a stored value is not a valid serialized touch history."""

    def __init__(self, key: str, reason: str):
        """Initialize corrupt storage error.

        Args:
            key: Storage key holding the unreadable value
            reason: Why the value could not be decoded
        """
        self.key = key
        self.reason = reason
        super().__init__(f"Stored value under '{key}' is not a valid history: {reason}")


class ReferrerParseError(TouchTrailError):
    """Raised when a referrer string is not a valid absolute URL."""

    def __init__(self, referrer: str, reason: str | None = None):
        """Initialize referrer parse error.

        Args:
            referrer: The referrer string that failed to parse
            reason: Optional underlying parser message
        """
        self.referrer = referrer
        message = f"Invalid referrer URL: {referrer!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class SnapshotBuildError(TouchTrailError):
    """Raised when an attribution snapshot cannot be assembled."""

    pass
