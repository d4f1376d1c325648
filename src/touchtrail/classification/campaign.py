"""Medium normalization and secondary campaign analysis."""

import re
from typing import Sequence

from touchtrail.models.touch import (
    CampaignData,
    CampaignInfo,
    ContentTesting,
    ContentVariation,
    Medium,
    SearchTermsInfo,
)

# Checked in order; first substring found wins.
CAMPAIGN_TYPES = (
    ("email", "email_campaign"),
    ("social", "social_campaign"),
    ("search", "search_campaign"),
    ("display", "display_campaign"),
    ("retarget", "retargeting_campaign"),
)

CONTENT_CATEGORIES = (
    ("button", "cta_button"),
    ("image", "image"),
    ("video", "video"),
    ("copy", "text"),
)

AB_TEST_MARKERS = ("test", "variant")

_KEYWORD_SEPARATORS = re.compile(r"[\s+_]+")


def normalize_medium(
    raw_medium: str | None,
    paid_tokens: Sequence[str],
    organic_tokens: Sequence[str],
) -> Medium:
    """Collapse a raw ``utm_medium`` into ``paid`` or ``organic``.

    Paid tokens are checked first. Anything unrecognised, including a
    missing medium, is treated as organic.
    """
    if not raw_medium:
        return Medium.ORGANIC

    medium = raw_medium.lower()
    if any(token in medium for token in paid_tokens):
        return Medium.PAID
    if any(token in medium for token in organic_tokens):
        return Medium.ORGANIC
    return Medium.ORGANIC


def determine_campaign_type(campaign: str | None) -> str:
    if not campaign:
        return "unknown"
    campaign = campaign.lower()
    for marker, campaign_type in CAMPAIGN_TYPES:
        if marker in campaign:
            return campaign_type
    return "other_campaign"


def determine_content_category(content: str | None) -> str:
    if not content:
        return "unknown"
    content = content.lower()
    for marker, category in CONTENT_CATEGORIES:
        if marker in content:
            return category
    return "other"


def parse_content_testing(content: str | None) -> ContentTesting | None:
    """Detect A/B test variants from ``utm_content``."""
    if not content:
        return None
    lowered = content.lower()
    return ContentTesting(
        is_ab_test=any(marker in lowered for marker in AB_TEST_MARKERS),
        variant=content,
        category=determine_content_category(content),
    )


def split_keywords(term: str | None) -> list[str]:
    """Split a search term on whitespace, ``+`` and ``_``."""
    if not term:
        return []
    return [word for word in _KEYWORD_SEPARATORS.split(term) if word]


def analyze_campaign(
    campaign: str | None, term: str | None, content: str | None
) -> CampaignData:
    """Annotate campaign, search term and content with their inferred types."""
    return CampaignData(
        campaign=CampaignInfo(
            value=campaign or None,
            is_set=bool(campaign),
            type=determine_campaign_type(campaign),
        ),
        search_terms=SearchTermsInfo(
            value=term or None,
            is_set=bool(term),
            keywords=split_keywords(term),
        ),
        content_variation=ContentVariation(
            value=content or None,
            is_set=bool(content),
            testing_info=parse_content_testing(content),
        ),
    )
