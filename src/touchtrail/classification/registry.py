"""Registries of known platforms used to classify referrer domains.

Each registry maps a channel name to a ``PlatformMatcher``. A domain matches
a platform when it contains one of the platform's domain substrings, or when
one of its patterns matches. Patterns are an additional match path, never a
stricter filter. Registries are evaluated in order and the first match wins:
AI platforms, then search engines, then social networks.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from touchtrail.models.touch import Medium


@dataclass(frozen=True)
class PlatformMatcher:
    """Domain matcher for one platform."""

    domain_substrings: frozenset[str]
    domain_patterns: tuple[re.Pattern, ...] = ()
    search_params: tuple[str, ...] = ()

    def matches(self, domain: str) -> bool:
        domain = domain.lower()
        if any(substring in domain for substring in self.domain_substrings):
            return True
        return any(pattern.search(domain) for pattern in self.domain_patterns)


def platform(
    substrings: Iterable[str],
    patterns: Iterable[str] = (),
    search_params: Iterable[str] = (),
) -> PlatformMatcher:
    """Build a matcher from substrings and regular expression sources."""
    return PlatformMatcher(
        domain_substrings=frozenset(s.lower() for s in substrings),
        domain_patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
        search_params=tuple(search_params),
    )


@dataclass(frozen=True)
class PlatformRegistry:
    """Ordered table of platforms sharing one medium."""

    name: str
    medium: Medium
    platforms: dict[str, PlatformMatcher] = field(default_factory=dict)

    def match(self, domain: str) -> str | None:
        """Return the first platform whose matcher accepts ``domain``."""
        for name, matcher in self.platforms.items():
            if matcher.matches(domain):
                return name
        return None


@dataclass(frozen=True)
class RegistryMatch:
    registry: PlatformRegistry
    platform: str

    @property
    def medium(self) -> Medium:
        return self.registry.medium

    @property
    def matcher(self) -> PlatformMatcher:
        return self.registry.platforms[self.platform]


AI_PLATFORMS = PlatformRegistry(
    name="ai_platform",
    medium=Medium.ORGANIC,
    platforms={
        "searchgpt": platform(
            ["search.openai.com", "chatgpt.com"], [r"openai\.", r"chatgpt\."]
        ),
        "perplexity": platform(["perplexity"], [r"perplexity\."]),
        "gemini": platform(["gemini.google.com"], [r"gemini\.google\."]),
        "copilot": platform(["copilot.microsoft.com"], [r"^copilot\.microsoft\."]),
        "claude": platform([], [r"(^|\.)claude\.ai$"]),
    },
)

SEARCH_ENGINES = PlatformRegistry(
    name="search_engine",
    medium=Medium.ORGANIC,
    platforms={
        "google": platform(["google."], [r"^www\.google\."], ["q", "query"]),
        "bing": platform(["bing."], [r"^www\.bing\."], ["q", "query"]),
        "duckduckgo": platform(["duckduckgo."], [r"^duckduckgo\."], ["q"]),
        "yahoo": platform(["yahoo."], [r"^search\.yahoo\."], ["p", "q"]),
        "baidu": platform(["baidu."], [], ["wd", "word"]),
        "yandex": platform(["yandex."], [], ["text"]),
        "ask": platform([], [r"(^|\.)ask\.com$"], ["q"]),
        "libero": platform(["libero.it"], [], ["qs"]),
        "virgilio": platform(["virgilio.it"], [], ["q"]),
    },
)

# Short hosts such as x.com or t.co only match as a full host suffix;
# as substrings they would also match unrelated domains (netflix.com).
SOCIAL_NETWORKS = PlatformRegistry(
    name="social_network",
    medium=Medium.SOCIAL,
    platforms={
        "facebook": platform(
            ["facebook.", "m.facebook.com"], [r"(^|\.)fb\.com$", r"(^|\.)fb\.me$"]
        ),
        "instagram": platform(["instagram."]),
        "youtube": platform(["youtube.", "youtu.be"], [r"^www\.youtube\."]),
        "yelp": platform(["yelp."]),
        "nextdoor": platform(["nextdoor."], [r"^nextdoor\."]),
        "twitter": platform(
            ["twitter."], [r"^twitter\.", r"(^|\.)x\.com$", r"(^|\.)t\.co$"]
        ),
        "linkedin": platform(["linkedin."], [r"(^|\.)lnkd\.in$"]),
        "spotify": platform(["spotify."], [r"^open\.spotify\."]),
        "pinterest": platform(["pinterest."], [r"^pin\.it$"]),
        "tiktok": platform(["tiktok."], [r"^vm\.tiktok\.", r"^www\.tiktok\."]),
        "flickr": platform(["flickr."]),
        "tumblr": platform(["tumblr."]),
        "vimeo": platform(["vimeo."]),
    },
)


def default_registries(include_ai_platforms: bool = True) -> list[PlatformRegistry]:
    """Registries in precedence order."""
    registries = [SEARCH_ENGINES, SOCIAL_NETWORKS]
    if include_ai_platforms:
        registries.insert(0, AI_PLATFORMS)
    return registries


def match_domain(
    domain: str, registries: Sequence[PlatformRegistry]
) -> RegistryMatch | None:
    """Find the first registry entry matching ``domain``."""
    domain = domain.lower()
    for registry in registries:
        name = registry.match(domain)
        if name is not None:
            return RegistryMatch(registry=registry, platform=name)
    return None
