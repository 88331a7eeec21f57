"""
Storefront constants shared by the adapter, reshapers and HTTP layer.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SortFilterItem:
    """Sort option offered by product listings."""

    title: str
    slug: Optional[str]
    sort_key: str  # relevance, added_time or price
    reverse: bool


DEFAULT_SORT = SortFilterItem(title='Relevance', slug=None, sort_key='relevance', reverse=False)

SORTING = [
    DEFAULT_SORT,
    SortFilterItem(title='Latest arrivals', slug='latest-desc', sort_key='added_time', reverse=True),
    SortFilterItem(title='Price: Low to high', slug='price-asc', sort_key='price', reverse=False),
    SortFilterItem(title='Price: High to low', slug='price-desc', sort_key='price', reverse=True),
]


def get_sort(slug: Optional[str]) -> SortFilterItem:
    """Resolve a sort slug from the query string, falling back to relevance."""
    for item in SORTING:
        if item.slug == slug:
            return item
    return DEFAULT_SORT


# Cache tags used to group revalidation of derived data
class TAGS:
    collections = 'collections'
    products = 'products'
    pages = 'pages'
    cart = 'cart'
    profile = 'profile'


DEFAULT_OPTION = 'Default'

DEFAULT_CURRENCY_CODE = 'USD'

ECWID_API_URL = 'https://app.ecwid.com/api/v3/'
ECWID_STOREFRONT_API_URL = 'https://app.ecwid.com/storefront/api/v1/'

# Collections that list every enabled product instead of one category
HOMEPAGE_COLLECTIONS = ('hidden-homepage-carousel', 'hidden-homepage-featured-items')
FOOTER_MENU_HANDLE = 'next-js-frontend-footer-menu'

CART_ID_COOKIE = 'cartId'


def session_cookie_name(store_id: str) -> str:
    """Cookie holding the storefront session token for a store."""
    return f"ec-{store_id}-session"

# Shown when a product has no image of its own
DEFAULT_IMAGE_URL = '/placeholder.png'
DEFAULT_IMAGE_SIZE = 1000
