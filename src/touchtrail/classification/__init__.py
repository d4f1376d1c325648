"""Referrer and parameter classification."""

from touchtrail.classification.classifier import (
    DIRECT_SOURCE,
    INVALID_REFERRER_SOURCE,
    TouchClassifier,
    parse_referrer,
)
from touchtrail.classification.registry import (
    AI_PLATFORMS,
    SEARCH_ENGINES,
    SOCIAL_NETWORKS,
    PlatformMatcher,
    PlatformRegistry,
    default_registries,
    match_domain,
)

__all__ = [
    "AI_PLATFORMS",
    "DIRECT_SOURCE",
    "INVALID_REFERRER_SOURCE",
    "PlatformMatcher",
    "PlatformRegistry",
    "SEARCH_ENGINES",
    "SOCIAL_NETWORKS",
    "TouchClassifier",
    "default_registries",
    "match_domain",
    "parse_referrer",
]
