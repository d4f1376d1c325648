"""Page-load entry point."""

import logging

from touchtrail.core.config import Settings, get_settings
from touchtrail.logging.context import clear_context
from touchtrail.models.context import PageContext
from touchtrail.models.snapshot import AttributionSnapshot
from touchtrail.resolver import AttributionResolver

logger = logging.getLogger(__name__)


def create_resolver(settings: Settings | None = None) -> AttributionResolver:
    """Create the resolver for one page-load context."""
    return AttributionResolver.from_settings(settings or get_settings())


def track_page_view(
    context: PageContext,
    resolver: AttributionResolver | None = None,
    settings: Settings | None = None,
) -> AttributionSnapshot:
    """Update attribution for a page that just became ready.

    Args:
        context: The page URL, referrer and device metadata
        resolver: Resolver to reuse; one is created from settings when omitted
        settings: Settings used to create the resolver

    Returns:
        The attribution snapshot for this page load
    """
    clear_context()
    resolver = resolver or create_resolver(settings)
    snapshot = resolver.get_attribution_data(context)
    logger.info(
        f"Attribution data updated: first touch {snapshot.first_touch_label}, "
        f"last touch {snapshot.last_touch_label}, {snapshot.touch_count} touches"
    )
    return snapshot
