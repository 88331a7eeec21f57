"""
Maps Ecwid webhook events to cache-tag revalidation.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from storefront.adapters.base import CommerceAdapter
from storefront.constants import TAGS
from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

EVENT_TAGS = {
    'category.created': TAGS.collections,
    'category.deleted': TAGS.collections,
    'category.updated': TAGS.collections,
    'product.created': TAGS.products,
    'product.deleted': TAGS.products,
    'product.updated': TAGS.products,
    'profile.updated': TAGS.profile,
}


@dataclass
class RevalidationResult:
    revalidated: bool
    tags: List[str] = field(default_factory=list)
    reason: Optional[str] = None


def revalidate_event(
    adapter: CommerceAdapter,
    event_type: Optional[str],
    secret_valid: bool
) -> RevalidationResult:
    """
    Revalidate the cache tag an Ecwid event affects.

    Args:
        adapter: Adapter owning the cache
        event_type: Webhook "eventType"
        secret_valid: Whether the webhook secret header matched

    Returns:
        RevalidationResult; revalidated is False for a bad secret or an
        event that affects no cached data
    """
    if not secret_valid:
        log_with_context(
            logger, "ERROR",
            "Invalid revalidation secret",
            event_type=event_type
        )
        return RevalidationResult(revalidated=False, reason="invalid secret")

    tag = EVENT_TAGS.get(event_type or '')
    if not tag:
        log_with_context(
            logger, "INFO",
            "Ignoring webhook event",
            event_type=event_type
        )
        return RevalidationResult(revalidated=False, reason="ignored event")

    adapter.revalidate_tag(tag)

    log_with_context(
        logger, "INFO",
        "Revalidated after webhook",
        event_type=event_type,
        tag=tag
    )

    if tag == TAGS.profile:
        adapter.load_currency_code()

    return RevalidationResult(revalidated=True, tags=[tag])
