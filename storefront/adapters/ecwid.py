"""
Ecwid adapter: catalog reads and checkout-session cart operations.

NOTE: Cart operations mutate exactly one line per call. Ecwid's storefront
      checkout API is driven one item at a time and the storefront never
      batches, so any further lines passed in are ignored.
"""

from typing import Dict, List, Optional

from storefront.adapters.base import (
    Cart, CartCost, CartLineInput, Collection, CommerceAdapter, Menu, Money,
    Product, SEO
)
from storefront.adapters.reshape import (
    reshape_collection, reshape_collections, reshape_order, reshape_product,
    reshape_products
)
from storefront.clients.ecwid_client import EcwidAPIError, EcwidClient, EcwidResponse
from storefront.constants import (
    DEFAULT_CURRENCY_CODE, FOOTER_MENU_HANDLE, HOMEPAGE_COLLECTIONS, TAGS
)
from storefront.services.variants import decode_variant_id
from storefront.utils.logger import get_logger, log_with_context, mask_token

logger = get_logger(__name__)

SEARCH_PATH = '/search'
LANG = 'en'

# Store currency, loaded once from the profile endpoint and shared by every
# request in the process. Goes stale if the store currency changes.
_currency_code = DEFAULT_CURRENCY_CODE


def get_currency_code() -> str:
    return _currency_code


def set_currency_code(code: str) -> None:
    global _currency_code
    _currency_code = code or DEFAULT_CURRENCY_CODE


def _product_id_from_handle(handle: str) -> str:
    """"blue-shoes-p123" -> "123"; bare ids pass through."""
    return handle.rsplit('-p', 1)[-1]


def _category_id_from_handle(handle: str) -> str:
    """"shoes-c42" -> "42"; bare ids pass through."""
    return handle.rsplit('-c', 1)[-1]


def _sort_by(sort_key: Optional[str], reverse: bool) -> Optional[str]:
    if not sort_key or sort_key == 'relevance':
        return None
    return f"{sort_key}_{'desc' if reverse else 'asc'}".upper()


def _provider_product_id(product_id: str):
    return int(product_id) if product_id.isdigit() else product_id


class EcwidAdapter(CommerceAdapter):
    """Ecwid implementation of the storefront adapter."""

    def __init__(self, client: EcwidClient):
        """
        Initialize Ecwid adapter.

        Args:
            client: Ecwid API client for the store
        """
        self.client = client

    # Store profile

    def get_store_currency_code(self) -> str:
        """
        Fetch the store currency from the profile endpoint.

        GET /profile?responseFields=formatsAndUnits(currency)

        Returns:
            Currency code, or the default when the profile has none
        """
        res = self.client.fetch(
            'GET',
            '/profile',
            query={'responseFields': 'formatsAndUnits(currency)'},
            tags=[TAGS.profile]
        )

        if not res.body:
            return DEFAULT_CURRENCY_CODE

        return (res.body.get('formatsAndUnits') or {}).get('currency') or DEFAULT_CURRENCY_CODE

    def load_currency_code(self) -> str:
        """
        Initialize the process-wide currency code.

        Failures keep the current code; only display formatting depends on it.
        """
        try:
            set_currency_code(self.get_store_currency_code())
            log_with_context(
                logger, "INFO",
                "Store currency loaded",
                currency_code=get_currency_code()
            )
        except EcwidAPIError as e:
            log_with_context(
                logger, "WARNING",
                "Could not load store currency, keeping current",
                currency_code=get_currency_code(),
                error=str(e)
            )
        return get_currency_code()

    # Catalog

    def get_product(self, handle: str) -> Optional[Product]:
        """
        GET /products/{id}

        Args:
            handle: Product handle ("slug-p123") or bare product id

        Returns:
            Product or None if missing or disabled
        """
        product_id = _product_id_from_handle(handle)

        res = self.client.fetch(
            'GET',
            f"/products/{product_id}",
            tags=[TAGS.products]
        )

        if res.status == 404:
            return None

        return reshape_product(res.body, get_currency_code())

    def get_products(
        self,
        query: Optional[str] = None,
        reverse: bool = False,
        sort_key: Optional[str] = None
    ) -> List[Product]:
        """
        GET /products?keyword=...&sortBy=...

        Args:
            query: Search keyword
            reverse: Descending sort
            sort_key: relevance, added_time or price

        Returns:
            Visible products
        """
        params = {
            'cleanUrls': 'true',
            'baseUrl': '/'
        }

        if query:
            params['keyword'] = query

        sort_by = _sort_by(sort_key, reverse)
        if sort_by:
            params['sortBy'] = sort_by

        res = self.client.fetch(
            'GET',
            '/products',
            query=params,
            tags=[TAGS.products]
        )

        return reshape_products((res.body or {}).get('items'), get_currency_code())

    def get_collections(self) -> List[Collection]:
        """All top-level categories preceded by the "All" collection."""
        res = self.client.fetch(
            'GET',
            '/categories',
            query={
                'cleanUrls': 'true',
                'baseUrl': SEARCH_PATH
            },
            tags=[TAGS.collections]
        )

        everything = Collection(
            handle='',
            title='All',
            description='All products',
            seo=SEO(title='All', description='All products'),
            path=SEARCH_PATH,
            updated_at=''
        )

        return [everything] + reshape_collections((res.body or {}).get('items'))

    def get_collection(self, handle: str) -> Optional[Collection]:
        category_id = _category_id_from_handle(handle)

        res = self.client.fetch(
            'GET',
            f"/categories/{category_id}",
            tags=[TAGS.collections]
        )

        if res.status == 404:
            return None

        return reshape_collection(res.body)

    def get_collection_products(
        self,
        collection: str,
        reverse: bool = False,
        sort_key: Optional[str] = None
    ) -> List[Product]:
        """
        Products of a category.

        The homepage collections list every enabled product.
        """
        params = {
            'enabled': 'true',
            'cleanUrls': 'true',
            'baseUrl': '/'
        }

        category_id = _category_id_from_handle(collection)

        if collection not in HOMEPAGE_COLLECTIONS:
            params['categories'] = category_id

        sort_by = _sort_by(sort_key, reverse)
        if sort_by:
            params['sortBy'] = sort_by

        res = self.client.fetch(
            'GET',
            '/products',
            query=params,
            tags=[TAGS.products]
        )

        items = (res.body or {}).get('items')
        if not items:
            log_with_context(
                logger, "INFO",
                "No products found for collection",
                collection=collection,
                category_id=category_id
            )
            return []

        return reshape_products(items, get_currency_code())

    def get_product_recommendations(self, product_id: str) -> List[Product]:
        """
        Related products configured for a product.

        Combines the explicit related product ids and the related category.
        The product itself is never recommended.
        """
        res = self.client.fetch(
            'GET',
            f"/products/{product_id}",
            tags=[TAGS.products]
        )

        related = (res.body or {}).get('relatedProducts') or {}
        params: Dict[str, str] = {}

        related_ids = related.get('productIds') or []
        if related_ids:
            params['productId'] = ','.join(str(i) for i in related_ids)

        related_category = related.get('relatedCategory') or {}
        if related_category.get('enabled'):
            params['categories'] = str(related_category.get('categoryId', 0))
            params['includeProductsFromSubcategories'] = 'true'
            params['limit'] = str(related_category.get('productCount', 0))

        if not params:
            return []

        params['cleanUrls'] = 'true'
        params['baseUrl'] = '/'

        res = self.client.fetch(
            'GET',
            '/products',
            query=params,
            tags=[TAGS.products]
        )

        items = [
            item for item in (res.body or {}).get('items') or []
            if str(item.get('id')) != str(product_id)
        ]
        return reshape_products(items, get_currency_code())

    def get_menu(self, handle: str) -> List[Menu]:
        if handle == FOOTER_MENU_HANDLE:
            return []

        res = self.client.fetch(
            'GET',
            '/categories',
            query={
                'parent': '0',
                'limit': '2',
                'cleanUrls': 'true',
                'baseUrl': SEARCH_PATH
            },
            tags=[TAGS.collections]
        )

        menu = [
            Menu(title=item.get('name') or '', path=item.get('url') or '')
            for item in (res.body or {}).get('items') or []
        ]

        return [Menu(title='All', path=SEARCH_PATH)] + menu

    # Cart

    def create_cart(self) -> Cart:
        """
        POST /checkout/create (storefront API)

        Returns:
            Empty cart with the new checkout id and session token
        """
        res = self._checkout_request('/checkout/create', payload={'lang': LANG})

        body = res.body or {}
        if not body.get('checkoutId') or not body.get('sessionToken'):
            raise EcwidAPIError("Checkout was not created", status=res.status or 500)

        empty = Money(amount='', currency_code='')

        log_with_context(
            logger, "INFO",
            "Checkout created",
            cart_hash=mask_token(body['checkoutId'])
        )

        return Cart(
            id=str(body['checkoutId']),
            session_token=body['sessionToken'],
            checkout_url='',
            cost=CartCost(subtotal_amount=empty, total_amount=empty, total_tax_amount=empty),
            lines=[],
            total_quantity=0
        )

    def get_cart(self, cart_id: str, session_token: Optional[str]) -> Optional[Cart]:
        """
        POST /checkout (storefront API)

        Returns:
            Cart, or None without a session token or checkout
        """
        if not session_token:
            return None

        res = self._checkout_request('/checkout', payload={'lang': LANG}, session_token=session_token)

        if not res.body or not res.body.get('checkout'):
            return None

        return reshape_order(res.body['checkout'], get_currency_code())

    def add_to_cart(
        self,
        cart_id: str,
        lines: List[CartLineInput],
        session_token: Optional[str]
    ) -> Cart:
        """
        POST /checkout/add-cart-item (storefront API)

        Args:
            cart_id: Checkout id
            lines: Lines to add; only the first is used
            session_token: Checkout session token

        Returns:
            Updated cart
        """
        line = self._first_line(lines)
        product_id, selected_options = self._cart_item_identifier(line.merchandise_id)

        res = self._checkout_request(
            '/checkout/add-cart-item',
            payload={
                'lang': LANG,
                'newCartItem': {
                    'identifier': {
                        'productId': _provider_product_id(product_id),
                        'selectedOptions': selected_options or {}
                    },
                    'quantity': line.quantity,
                    'categoryId': 0,
                    'isPreorder': False
                }
            },
            session_token=session_token
        )

        return self._reshape_checkout(res)

    def remove_from_cart(
        self,
        cart_id: str,
        line_ids: List[str],
        session_token: Optional[str]
    ) -> Cart:
        """
        POST /checkout/remove-cart-item (storefront API)

        Args:
            cart_id: Checkout id
            line_ids: Composite line ids; only the first is used
            session_token: Checkout session token

        Returns:
            Updated cart
        """
        if not line_ids:
            raise ValueError("No cart line given")

        product_id, selected_options = self._cart_item_identifier(line_ids[0])

        res = self._checkout_request(
            '/checkout/remove-cart-item',
            payload={
                'lang': LANG,
                'cartItemIdentifier': {
                    'productId': _provider_product_id(product_id),
                    'selectedOptions': selected_options
                }
            },
            session_token=session_token
        )

        return self._reshape_checkout(res)

    def update_cart(
        self,
        cart_id: str,
        lines: List[CartLineInput],
        session_token: Optional[str]
    ) -> Cart:
        """
        Set the quantity of a cart line.

        Ecwid has no quantity update, so the line is removed and added again
        with the new quantity. This is not atomic: if the add fails the line
        stays removed. A quantity of zero only removes.
        """
        line = self._first_line(lines)

        cart = self.remove_from_cart(cart_id, [line.merchandise_id], session_token)
        if line.quantity <= 0:
            return cart

        try:
            return self.add_to_cart(cart_id, [line], session_token)
        except EcwidAPIError as e:
            log_with_context(
                logger, "ERROR",
                "Cart line removed but could not be added back",
                cart_hash=mask_token(cart_id),
                line_id=line.merchandise_id,
                quantity=line.quantity,
                error=str(e)
            )
            raise

    def revalidate_tag(self, tag: str) -> None:
        self.client.revalidate_tag(tag)

    # Helpers

    def _checkout_request(
        self,
        path: str,
        payload: dict,
        session_token: Optional[str] = None
    ) -> EcwidResponse:
        headers = {'Authorization': f"Bearer {session_token}"} if session_token else None
        return self.client.fetch(
            'POST',
            path,
            storefront=True,
            payload=payload,
            headers=headers,
            tags=[TAGS.cart],
            cache=False
        )

    def _reshape_checkout(self, res: EcwidResponse) -> Cart:
        if not res.body or not res.body.get('checkout'):
            raise EcwidAPIError("Checkout missing from response", status=res.status or 500)
        return reshape_order(res.body['checkout'], get_currency_code())

    @staticmethod
    def _first_line(lines: List[CartLineInput]) -> CartLineInput:
        if not lines:
            raise ValueError("No cart line given")
        return lines[0]

    def _cart_item_identifier(self, variant_id: str):
        """
        Rebuild Ecwid's cart item identifier from a composite variant id.

        Option names are looked up in the product's declared options to
        recover their types; unknown names are dropped.

        Returns:
            (product_id, selectedOptions dict or None without options)
        """
        product_id, pairs = decode_variant_id(variant_id)
        if not pairs:
            return product_id, None

        # Disabled products can still sit in a cart.
        res = self.client.fetch(
            'GET',
            f"/products/{product_id}",
            tags=[TAGS.products]
        )
        if res.status == 404:
            return product_id, None

        product = reshape_product(res.body, get_currency_code(), filter_hidden_products=False)
        if not product:
            return product_id, None

        types = {option.name: option.type for option in product.options}
        selected = {}
        for name, value in pairs:
            if types.get(name):
                selected[name] = {'type': types[name], 'choice': value}

        return product_id, selected or None
