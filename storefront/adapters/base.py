"""
Storefront data model and the abstract commerce platform adapter.

The storefront only ever renders these models; each platform adapter
reshapes its provider's responses into them on every fetch.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import Any, List, Optional


def _camel(key: str) -> str:
    head, *rest = key.split('_')
    return head + ''.join(part.title() for part in rest)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


class Model:
    """Mixin giving dataclasses a camelCase JSON representation."""

    def to_dict(self) -> dict:
        return _camelize(asdict(self))


@dataclass
class Money(Model):
    """Amount as a decimal string plus ISO currency code."""

    amount: str
    currency_code: str


@dataclass
class Image(Model):
    url: str
    width: int = 0
    height: int = 0
    alt_text: str = ''


@dataclass
class SEO(Model):
    title: str = ''
    description: str = ''


@dataclass
class ProductOption(Model):
    id: str
    name: str
    values: List[str] = field(default_factory=list)
    type: str = ''


@dataclass
class SelectedOption(Model):
    name: str
    value: str
    type: Optional[str] = None


@dataclass
class ProductVariant(Model):
    """
    Purchasable product variant.

    The id encodes the product id and the selected options
    (see storefront.services.variants).
    """

    id: str
    title: str
    available_for_sale: bool
    selected_options: List[SelectedOption] = field(default_factory=list)
    price: float = 0


@dataclass
class PriceRange(Model):
    min_variant_price: Money
    max_variant_price: Money


@dataclass
class Product(Model):
    """Storefront product derived from a provider catalog node."""

    id: str
    handle: str
    title: str
    description: str = ''
    description_html: str = ''
    available_for_sale: bool = False
    options: List[ProductOption] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)
    price_range: Optional[PriceRange] = None
    featured_image: Optional[Image] = None
    images: List[Image] = field(default_factory=list)
    seo: SEO = field(default_factory=SEO)
    tags: List[str] = field(default_factory=list)
    updated_at: str = ''


@dataclass
class Collection(Model):
    handle: str
    title: str
    description: str = ''
    seo: SEO = field(default_factory=SEO)
    path: str = ''
    updated_at: str = ''


@dataclass
class Menu(Model):
    title: str
    path: str


@dataclass
class CartCost(Model):
    subtotal_amount: Money
    total_amount: Money
    total_tax_amount: Money


@dataclass
class Merchandise(Model):
    """Snapshot of the variant a cart line points at."""

    id: str
    title: str
    selected_options: List[SelectedOption]
    product: Product


@dataclass
class CartItem(Model):
    id: str
    quantity: int
    cost_total: Money
    merchandise: Merchandise


@dataclass
class Cart(Model):
    id: str
    checkout_url: str
    cost: CartCost
    total_quantity: int = 0
    lines: List[CartItem] = field(default_factory=list)
    session_token: Optional[str] = None


@dataclass
class CartLineInput:
    """Line mutation requested by a cart action."""

    merchandise_id: str
    quantity: int = 1
    id: Optional[str] = None


class CommerceAdapter(ABC):
    """Abstract base class for commerce platform adapters."""

    @abstractmethod
    def get_product(self, handle: str) -> Optional[Product]:
        """
        Retrieve single product by handle.

        Returns:
            Product object or None if not found or hidden

        Raises:
            CommerceAPIError: If API request fails
        """
        pass

    @abstractmethod
    def get_products(
        self,
        query: Optional[str] = None,
        reverse: bool = False,
        sort_key: Optional[str] = None
    ) -> List[Product]:
        """Search visible products."""
        pass

    @abstractmethod
    def get_collections(self) -> List[Collection]:
        pass

    @abstractmethod
    def get_collection(self, handle: str) -> Optional[Collection]:
        pass

    @abstractmethod
    def get_collection_products(
        self,
        collection: str,
        reverse: bool = False,
        sort_key: Optional[str] = None
    ) -> List[Product]:
        pass

    @abstractmethod
    def get_product_recommendations(self, product_id: str) -> List[Product]:
        pass

    @abstractmethod
    def get_menu(self, handle: str) -> List[Menu]:
        pass

    @abstractmethod
    def create_cart(self) -> Cart:
        """
        Open a new provider checkout session.

        Returns:
            Empty cart carrying the new session token
        """
        pass

    @abstractmethod
    def get_cart(self, cart_id: str, session_token: Optional[str]) -> Optional[Cart]:
        pass

    @abstractmethod
    def add_to_cart(
        self,
        cart_id: str,
        lines: List[CartLineInput],
        session_token: Optional[str]
    ) -> Cart:
        pass

    @abstractmethod
    def remove_from_cart(
        self,
        cart_id: str,
        line_ids: List[str],
        session_token: Optional[str]
    ) -> Cart:
        pass

    @abstractmethod
    def update_cart(
        self,
        cart_id: str,
        lines: List[CartLineInput],
        session_token: Optional[str]
    ) -> Cart:
        pass

    @abstractmethod
    def load_currency_code(self) -> str:
        """Refresh the store currency used for formatting amounts."""
        pass

    @abstractmethod
    def revalidate_tag(self, tag: str) -> None:
        """Invalidate cached data labelled with a cache tag."""
        pass


class CommerceAPIError(Exception):
    """Base exception for commerce platform API errors."""

    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.message = message
        self.status = status
