"""TouchTrail.

Attributes page views to marketing channels (source, medium, campaign) and
keeps a first-touch / last-touch history across visits.
"""

__version__ = "1.0.0"

from touchtrail.bootstrap import create_resolver, track_page_view
from touchtrail.classification.classifier import TouchClassifier
from touchtrail.core.config import ClassifierConfig, Settings
from touchtrail.models.context import PageContext
from touchtrail.models.snapshot import AttributionSnapshot
from touchtrail.models.touch import Medium, Touch, describe_touch
from touchtrail.resolver import AttributionResolver

__all__ = [
    "AttributionResolver",
    "AttributionSnapshot",
    "ClassifierConfig",
    "Medium",
    "PageContext",
    "Settings",
    "Touch",
    "TouchClassifier",
    "create_resolver",
    "describe_touch",
    "track_page_view",
]
