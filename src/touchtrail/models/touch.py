"""Touch models: one classified visit attributed to a marketing channel."""

from datetime import datetime
from enum import Enum
from typing import Mapping

from pydantic import Field, field_serializer

from touchtrail.models.base import TouchTrailModel

UTM_FIELDS = ("source", "medium", "campaign", "term", "content")


class Medium(str, Enum):
    """Traffic categories a touch can be attributed to."""

    CPC = "cpc"
    ORGANIC = "organic"
    SOCIAL = "social"
    REFERRAL = "referral"
    NONE = "none"
    PAID = "paid"


class UtmParameters(TouchTrailModel):
    """Raw, lower-cased UTM parameters from the landing page query."""

    source: str | None = None
    medium: str | None = None
    campaign: str | None = None
    term: str | None = None
    content: str | None = None

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "UtmParameters":
        """Extract ``utm_*`` parameters; blank values count as absent."""
        values = {}
        for field in UTM_FIELDS:
            value = (query.get(f"utm_{field}") or "").strip().lower()
            values[field] = value or None
        return cls(**values)

    @property
    def is_set(self) -> bool:
        """Whether an explicit campaign source was supplied."""
        return bool(self.source)


class CampaignInfo(TouchTrailModel):
    value: str | None = None
    is_set: bool = False
    type: str = "unknown"


class SearchTermsInfo(TouchTrailModel):
    value: str | None = None
    is_set: bool = False
    keywords: list[str] = Field(default_factory=list)


class ContentTesting(TouchTrailModel):
    is_ab_test: bool = Field(default=False, alias="isABTest")
    variant: str
    category: str = "other"


class ContentVariation(TouchTrailModel):
    value: str | None = None
    is_set: bool = False
    testing_info: ContentTesting | None = None


class CampaignData(TouchTrailModel):
    """Secondary classification of campaign, term and content."""

    campaign: CampaignInfo = Field(default_factory=CampaignInfo)
    search_terms: SearchTermsInfo = Field(default_factory=SearchTermsInfo)
    content_variation: ContentVariation = Field(default_factory=ContentVariation)


class ClassifiedFields(TouchTrailModel):
    """Channel fields derived from a (query, referrer) pair.

    Contains nothing time dependent, so classifying the same pair twice
    always yields equal results.
    """

    source: str = Field(default="direct", min_length=1)
    medium: Medium = Medium.NONE
    campaign: str | None = None
    term: str | None = None
    content: str | None = None
    utm_parameters: UtmParameters = Field(default_factory=UtmParameters)
    campaign_data: CampaignData | None = None
    custom_parameters: dict[str, str] = Field(default_factory=dict)

    @property
    def campaign_type(self) -> str | None:
        """Inferred campaign type, when campaign analysis ran."""
        if self.campaign_data is None:
            return None
        return self.campaign_data.campaign.type

    @property
    def channel(self) -> tuple[str, str]:
        """(source, medium) pair used to decide touch significance."""
        return (self.source, self.medium)


class Touch(ClassifiedFields):
    """One classified visit event with its page-load context."""

    timestamp: datetime
    referrer: str = ""
    landing_page: str = ""

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime) -> str:
        """Serialize timestamp to ISO format."""
        return dt.isoformat()

    @classmethod
    def from_classified(
        cls,
        fields: ClassifiedFields,
        timestamp: datetime,
        referrer: str = "",
        landing_page: str = "",
    ) -> "Touch":
        """Attach page-load context to classified fields."""
        return cls(
            **fields.model_dump(),
            timestamp=timestamp,
            referrer=referrer,
            landing_page=landing_page,
        )

    def is_significant_after(self, previous: "Touch | None") -> bool:
        """Whether this touch warrants a new history entry after ``previous``.

        Only a change of source or medium counts. Campaign, term and content
        changes do not.
        """
        if previous is None:
            return True
        return self.channel != previous.channel


def describe_touch(touch: ClassifiedFields | None) -> str:
    """Human summary: ``"direct"`` or ``"source (medium | campaign | term)"``."""
    if touch is None:
        return "direct"
    if touch.source == "direct":
        return "direct"

    parts = [touch.medium]
    if touch.campaign and len(touch.campaign) > 1:
        parts.append(touch.campaign)
    if touch.term and len(touch.term) > 1:
        parts.append(touch.term)
    return f"{touch.source} ({' | '.join(parts)})"
