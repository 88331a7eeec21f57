"""
Cart actions behind the storefront UI.

Each action returns None on success or a user-facing error message. Cart
state lives at the provider; the storefront only keeps the cart id and the
checkout session token in cookies.
"""

from typing import MutableMapping, Optional

from storefront.adapters.base import Cart, CartLineInput, CommerceAdapter, CommerceAPIError
from storefront.constants import CART_ID_COOKIE, TAGS, session_cookie_name
from storefront.utils.logger import get_logger, log_with_context, mask_token

logger = get_logger(__name__)

Cookies = MutableMapping[str, str]


class StorefrontService:
    """
    Cart actions on top of a commerce adapter.

    Cookies are passed in as a mutable mapping: the request cookies on the
    way in, with any cookie the action sets written back into it.
    """

    def __init__(self, adapter: CommerceAdapter, store_id: str):
        """
        Initialize service.

        Args:
            adapter: Commerce platform adapter
            store_id: Store ID, part of the session cookie name
        """
        self.adapter = adapter
        self.store_id = store_id
        self.session_cookie = session_cookie_name(store_id)

    def get_cart(self, cookies: Cookies) -> Optional[Cart]:
        """
        Current cart from cookies.

        Returns:
            Cart or None when there is no cart yet
        """
        cart_id = cookies.get(CART_ID_COOKIE)
        if not cart_id:
            return None

        return self.adapter.get_cart(cart_id, cookies.get(self.session_cookie))

    def add_item(self, cookies: Cookies, variant_id: Optional[str]) -> Optional[str]:
        """
        Add one unit of a variant, creating a cart if needed.

        Args:
            cookies: Request cookies; cart cookies are written back
            variant_id: Composite variant id

        Returns:
            None on success, error message otherwise
        """
        if not variant_id:
            return 'Missing product variant ID'

        try:
            cart_id = self._ensure_cart(cookies)
            self.adapter.add_to_cart(
                cart_id,
                [CartLineInput(merchandise_id=variant_id, quantity=1)],
                cookies.get(self.session_cookie)
            )
            self.adapter.revalidate_tag(TAGS.cart)
        except (CommerceAPIError, ValueError) as e:
            log_with_context(
                logger, "ERROR",
                "Error adding item to cart",
                cart_hash=mask_token(cookies.get(CART_ID_COOKIE)),
                variant_id=variant_id,
                error=str(e)
            )
            return 'Error adding item to cart'

        return None

    def remove_item(self, cookies: Cookies, line_id: str) -> Optional[str]:
        """
        Remove a cart line.

        Returns:
            None on success, error message otherwise
        """
        cart_id = cookies.get(CART_ID_COOKIE)
        if not cart_id:
            return 'Missing cart ID'

        try:
            self.adapter.remove_from_cart(cart_id, [line_id], cookies.get(self.session_cookie))
            self.adapter.revalidate_tag(TAGS.cart)
        except (CommerceAPIError, ValueError) as e:
            log_with_context(
                logger, "ERROR",
                "Error removing item from cart",
                cart_hash=mask_token(cart_id),
                line_id=line_id,
                error=str(e)
            )
            return 'Error removing item from cart'

        return None

    def update_item_quantity(
        self,
        cookies: Cookies,
        line_id: str,
        variant_id: str,
        quantity: int
    ) -> Optional[str]:
        """
        Set the quantity of a cart line; zero removes it.

        Returns:
            None on success, error message otherwise
        """
        cart_id = cookies.get(CART_ID_COOKIE)
        if not cart_id:
            return 'Missing cart ID'

        session_token = cookies.get(self.session_cookie)

        try:
            if quantity == 0:
                self.adapter.remove_from_cart(cart_id, [line_id], session_token)
            else:
                self.adapter.update_cart(
                    cart_id,
                    [CartLineInput(merchandise_id=variant_id, quantity=quantity, id=line_id)],
                    session_token
                )
            self.adapter.revalidate_tag(TAGS.cart)
        except (CommerceAPIError, ValueError) as e:
            log_with_context(
                logger, "ERROR",
                "Error updating item quantity",
                cart_hash=mask_token(cart_id),
                line_id=line_id,
                quantity=quantity,
                error=str(e)
            )
            return 'Error updating item quantity'

        return None

    def _ensure_cart(self, cookies: Cookies) -> str:
        """Reuse the cookie cart if the provider still knows it, else create one."""
        cart_id = cookies.get(CART_ID_COOKIE)
        cart = None

        if cart_id:
            try:
                cart = self.adapter.get_cart(cart_id, cookies.get(self.session_cookie))
            except CommerceAPIError as e:
                log_with_context(
                    logger, "WARNING",
                    "Cookie cart unreadable, starting a new one",
                    cart_hash=mask_token(cart_id),
                    status=e.status,
                    error=e.message
                )

        if not cart_id or not cart:
            cart = self.adapter.create_cart()
            cookies[CART_ID_COOKIE] = cart.id
            cookies[self.session_cookie] = cart.session_token
            log_with_context(
                logger, "INFO",
                "Started new cart",
                cart_hash=mask_token(cart.id)
            )
            return cart.id

        return cart_id
