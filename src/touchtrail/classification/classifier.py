"""Referrer and parameter classifier.

Turns the landing page query and the referrer into channel fields, in strict
precedence order:

1. explicit ``utm_source``: UTM fields are used as given (lower-cased),
   with the medium normalized to ``paid`` or ``organic``;
2. a paid click identifier (``gclid`` by default): ``google`` / ``cpc``;
3. a referrer: registry lookup (AI platforms, search engines, social
   networks), falling back to the referrer hostname as a ``referral``;
4. nothing at all: ``direct`` with the configured direct medium.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence
from urllib.parse import urlsplit

from touchtrail.classification.campaign import analyze_campaign, normalize_medium
from touchtrail.classification.registry import (
    PlatformRegistry,
    default_registries,
    match_domain,
)
from touchtrail.core.config import ClassifierConfig
from touchtrail.core.exceptions import ReferrerParseError
from touchtrail.models.context import parse_query
from touchtrail.models.touch import ClassifiedFields, Medium, UtmParameters

logger = logging.getLogger(__name__)

DIRECT_SOURCE = "direct"
INVALID_REFERRER_SOURCE = "invalid_referrer"


@dataclass(frozen=True)
class ReferrerClassification:
    source: str
    medium: Medium
    term: str | None = None


def parse_referrer(referrer: str) -> tuple[str, str]:
    """Split a referrer URL into (lower-cased hostname, query string).

    Raises:
        ReferrerParseError: If the referrer is not an absolute URL with a host
    """
    try:
        parts = urlsplit(referrer.strip())
        hostname = parts.hostname
    except ValueError as e:
        raise ReferrerParseError(referrer, str(e)) from e

    if not parts.scheme or not hostname:
        raise ReferrerParseError(referrer, "missing scheme or host")
    return hostname.lower(), parts.query


class TouchClassifier:
    """Classifies a (query, referrer) pair into source, medium and campaign.

    Classification is pure: no state, no clock, no randomness.
    """

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        registries: Sequence[PlatformRegistry] | None = None,
    ):
        """Initialize the classifier.

        Args:
            config: Classification options, defaults to the full configuration
            registries: Platform registries in precedence order; defaults to the
                built-in registries, without AI platforms when the config
                disables them
        """
        self.config = config or ClassifierConfig()
        if registries is None:
            registries = default_registries(
                include_ai_platforms=self.config.enable_ai_platforms
            )
        self.registries = list(registries)

    def classify(
        self, query: Mapping[str, str] | str, referrer: str | None
    ) -> ClassifiedFields:
        """Classify the landing page query and referrer.

        Args:
            query: Parsed query parameters, or a raw query string
            referrer: Referrer URL; empty or None when absent

        Returns:
            ClassifiedFields with source, medium and campaign metadata
        """
        if isinstance(query, str):
            query = parse_query(query)

        utm = UtmParameters.from_query(query)
        custom_parameters = {
            key: value for key, value in query.items() if not key.startswith("utm_")
        }
        campaign = term = content = None

        click_id = self._find_click_id(query)
        if utm.is_set:
            source = utm.source
            medium = self.normalize_medium(utm.medium)
            campaign, term, content = utm.campaign, utm.term, utm.content
        elif click_id is not None:
            source = self.config.paid_click_ids[click_id]
            medium = Medium.CPC
            campaign = click_id
        elif referrer:
            result = self.classify_referrer(referrer)
            source, medium, term = result.source, result.medium, result.term
        else:
            source = DIRECT_SOURCE
            medium = Medium(self.config.direct_medium)

        if medium == Medium.REFERRAL:
            campaign = None
        elif campaign is None:
            campaign = self.config.missing_campaign

        campaign_data = None
        if self.config.enable_campaign_analysis:
            campaign_data = analyze_campaign(utm.campaign, term, utm.content)

        logger.debug(f"Classified visit as {source}/{medium.value}")
        return ClassifiedFields(
            source=source,
            medium=medium,
            campaign=campaign,
            term=term,
            content=content,
            utm_parameters=utm,
            campaign_data=campaign_data,
            custom_parameters=custom_parameters,
        )

    def classify_referrer(self, referrer: str) -> ReferrerClassification:
        """Classify a referrer URL against the registries.

        Unparseable referrers degrade to the ``invalid_referrer`` source
        instead of raising.
        """
        try:
            domain, referrer_query = parse_referrer(referrer)
        except ReferrerParseError as e:
            logger.warning(f"Error parsing referrer: {e}")
            return ReferrerClassification(
                source=INVALID_REFERRER_SOURCE, medium=Medium.REFERRAL
            )

        match = match_domain(domain, self.registries)
        if match is None:
            return ReferrerClassification(source=domain, medium=Medium.REFERRAL)

        term = None
        if self.config.enable_term_extraction and match.matcher.search_params:
            term = self._extract_term(referrer_query, match.matcher.search_params)
        return ReferrerClassification(
            source=match.platform, medium=match.medium, term=term
        )

    def normalize_medium(self, raw_medium: str | None) -> Medium:
        return normalize_medium(
            raw_medium,
            self.config.paid_medium_tokens,
            self.config.organic_medium_tokens,
        )

    def _find_click_id(self, query: Mapping[str, str]) -> str | None:
        for param in self.config.paid_click_ids:
            if query.get(param):
                return param
        return None

    @staticmethod
    def _extract_term(referrer_query: str, search_params: Sequence[str]) -> str | None:
        params = parse_query(referrer_query)
        for name in search_params:
            value = params.get(name, "").strip()
            if value:
                return value
        return None
