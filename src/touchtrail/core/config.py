"""Configuration management for TouchTrail."""

import logging
from datetime import timedelta
from enum import Enum
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from touchtrail.core.exceptions import ConfigurationError
from touchtrail.logging.formatters import JSONFormatter
from touchtrail.models.touch import Medium

DEFAULT_PAID_MEDIUM_TOKENS = [
    "ppc",
    "cpc",
    "paid_social",
    "paid",
    "_ad",
    "display",
    "remarketing",
]
DEFAULT_ORGANIC_MEDIUM_TOKENS = [
    "organic",
    "social",
    "organic_social",
    "social_network",
    "social_media",
    "sm",
]


class StorageKind(str, Enum):
    """Storage backend variants.

    - DURABLE: survives a process restart (file backed)
    - EPHEMERAL: in-memory only, lost when the page context ends
    """

    DURABLE = "durable"
    EPHEMERAL = "ephemeral"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class ClassifierConfig(BaseModel):
    """Referrer and parameter classification configuration."""

    enable_ai_platforms: bool = Field(
        default=True, description="Check the AI platform registry before search engines"
    )
    enable_term_extraction: bool = Field(
        default=True,
        description="Extract the search term from search engine referrer URLs",
    )
    enable_campaign_analysis: bool = Field(
        default=True, description="Attach campaign, keyword and content analysis"
    )
    direct_medium: str = Field(
        default=Medium.NONE.value,
        description="Medium assigned when there is no UTM, click id or referrer",
    )
    missing_campaign: str | None = Field(
        default=None,
        description="Campaign value used when no campaign is known (None or a sentinel)",
    )
    paid_click_ids: dict[str, str] = Field(
        default_factory=lambda: {
            "gclid": "google",
            "wbraid": "google",
            "gbraid": "google",
        },
        description="Paid click identifier parameter -> source, checked in order",
    )
    paid_medium_tokens: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PAID_MEDIUM_TOKENS)
    )
    organic_medium_tokens: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ORGANIC_MEDIUM_TOKENS)
    )

    @field_validator("direct_medium")
    @classmethod
    def validate_direct_medium(cls, v: str) -> str:
        """Ensure the direct medium belongs to the medium vocabulary."""
        allowed = {medium.value for medium in Medium}
        if v not in allowed:
            raise ValueError(
                f"direct_medium must be one of {sorted(allowed)}, got '{v}'"
            )
        return v

    @classmethod
    def minimal(cls) -> "ClassifierConfig":
        """Reduced configuration matching the cookie-based tracker.

        No AI platform registry, no term extraction or campaign analysis, and
        ``"direct"`` as the campaign sentinel.
        """
        return cls(
            enable_ai_platforms=False,
            enable_term_extraction=False,
            enable_campaign_analysis=False,
            direct_medium=Medium.NONE.value,
            missing_campaign="direct",
        )


class AttributionConfig(BaseModel):
    """Touch history and session configuration."""

    storage_key: str = Field(
        default="site_attribution", min_length=1, description="History storage key"
    )
    session_duration: timedelta = Field(
        default=timedelta(minutes=30),
        description="Idle time after which a new session id is issued",
    )
    attribution_window: timedelta = Field(
        default=timedelta(days=30),
        description="Maximum touch age kept when window enforcement is enabled",
    )
    enforce_attribution_window: bool = Field(
        default=False, description="Prune touches older than the attribution window"
    )
    persist_sessions: bool = Field(
        default=True,
        description="Keep the session id across calls until it goes idle",
    )
    max_session_pages: int = Field(
        default=50, ge=1, description="Most recent page paths kept on the session"
    )

    @property
    def session_key(self) -> str:
        """Storage key holding the current session."""
        return f"{self.storage_key}:session"

    @model_validator(mode="after")
    def validate_durations(self) -> "AttributionConfig":
        """Durations must be positive."""
        if self.session_duration <= timedelta(0):
            raise ValueError("session_duration must be positive")
        if self.attribution_window <= timedelta(0):
            raise ValueError("attribution_window must be positive")
        return self


class StorageConfig(BaseModel):
    """Storage backend configuration."""

    backend: StorageKind = StorageKind.DURABLE
    path: Path = Field(
        default_factory=lambda: Path.home() / ".touchtrail" / "storage.json",
        description="File used by the durable backend",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: LogFormat = LogFormat.JSON
    log_file: Path | None = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names in any case."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level '{v}'")
        return level


class Settings(BaseSettings):
    """Application settings.

    Environment Variables:
        TOUCHTRAIL_DEBUG=false
        TOUCHTRAIL_ATTRIBUTION__STORAGE_KEY=site_attribution
        TOUCHTRAIL_ATTRIBUTION__SESSION_DURATION=PT30M    (ISO 8601 duration)
        TOUCHTRAIL_ATTRIBUTION__ATTRIBUTION_WINDOW=P30D    (ISO 8601 duration)
        TOUCHTRAIL_ATTRIBUTION__ENFORCE_ATTRIBUTION_WINDOW=false
        TOUCHTRAIL_CLASSIFIER__DIRECT_MEDIUM=none
        TOUCHTRAIL_STORAGE__BACKEND=durable|ephemeral
        TOUCHTRAIL_STORAGE__PATH=/var/lib/touchtrail/storage.json
        TOUCHTRAIL_LOGGING__LEVEL=INFO
        TOUCHTRAIL_LOGGING__FORMAT=json|text
    """

    model_config = SettingsConfigDict(
        env_prefix="TOUCHTRAIL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    attribution: AttributionConfig = Field(default_factory=AttributionConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "Settings":
        """Load settings from the environment, reading a .env file first."""
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        try:
            return cls()
        except ValidationError as e:
            raise ConfigurationError(f"Configuration errors: {e}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings.from_env()
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        raise


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level)

    if settings.logging.format == LogFormat.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.debug else log_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.logging.log_file:
        log_file = Path(settings.logging.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
