"""
Reshapers from Ecwid API entities to the storefront model.

All functions are pure: they take decoded JSON dicts and return model
instances. Missing upstream fields fall back to empty values rather than
raising.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from urllib.parse import quote

from storefront.adapters.base import (
    Cart, CartCost, CartItem, Collection, Image, Merchandise, Money,
    PriceRange, Product, ProductOption, SelectedOption, SEO
)
from storefront.constants import (
    DEFAULT_IMAGE_SIZE, DEFAULT_IMAGE_URL, DEFAULT_OPTION, TAGS
)
from storefront.services.variants import build_variants, encode_variant_id, format_pairs


def format_amount(value) -> str:
    """
    Render a provider number as a plain decimal string.

    19.99 -> "19.99", 10.0 -> "10", None -> "0"
    """
    if value is None or value == '':
        return '0'
    try:
        amount = Decimal(str(value)).normalize()
    except InvalidOperation:
        return '0'
    return format(amount, 'f')


def default_image(alt_text: str = '') -> Image:
    return Image(
        url=DEFAULT_IMAGE_URL,
        width=DEFAULT_IMAGE_SIZE,
        height=DEFAULT_IMAGE_SIZE,
        alt_text=alt_text
    )


def reshape_image(media: dict) -> Image:
    return Image(
        url=media.get('url') or '',
        width=media.get('width') or 0,
        height=media.get('height') or 0,
        alt_text=media.get('name') or ''
    )


def reshape_price(price: dict) -> Money:
    """Tax-inclusive provider price."""
    return Money(
        amount=format_amount(price.get('withTax')),
        currency_code=(price.get('currency') or {}).get('code', '')
    )


def reshape_adjusted_price(price: dict) -> Money:
    return reshape_price(price.get('value') or {})


def reshape_amount(value, currency_code: str) -> Money:
    return Money(amount=format_amount(value), currency_code=currency_code)


def reshape_collection(node: Optional[dict]) -> Optional[Collection]:
    if not node:
        return None

    name = node.get('name') or ''
    description = node.get('description') or ''

    return Collection(
        handle=str(node.get('id', '')),
        title=name,
        description=description,
        seo=SEO(
            title=node.get('seoTitle') or name,
            description=node.get('seoDescription') or description
        ),
        path=node.get('url') or '',
        updated_at=''
    )


def reshape_collections(nodes: Optional[List[dict]]) -> List[Collection]:
    collections = [reshape_collection(node) for node in nodes or []]
    return [c for c in collections if c]


def reshape_product(
    node: Optional[dict],
    currency_code: str,
    filter_hidden_products: bool = True
) -> Optional[Product]:
    """
    Reshape an Ecwid product node.

    Args:
        node: Product node from the Ecwid API
        currency_code: Store currency used for the price range
        filter_hidden_products: Return None for disabled products

    Returns:
        Product, or None if the node is missing or hidden
    """
    if not node or (filter_hidden_products and not node.get('enabled')):
        return None

    node_id = str(node.get('id', ''))
    name = node.get('name') or ''
    description = node.get('description') or ''
    in_stock = bool(node.get('inStock'))
    base_price = node.get('price') or 0
    options = node.get('options') or []

    variants, min_price, max_price = build_variants(
        node_id,
        name,
        options,
        node.get('combinations'),
        base_price,
        in_stock
    )

    images = [reshape_image(m) for m in node.get('galleryImages') or []]
    featured_image = None
    if node.get('originalImage'):
        featured_image = reshape_image(node['originalImage'])
        images.insert(0, featured_image)

    return Product(
        id=node_id,
        handle=quote((node.get('url') or '').strip('/'), safe="!*'()"),
        title=name,
        description=description,
        description_html=description,
        available_for_sale=in_stock,
        options=[
            ProductOption(
                id=option.get('name', ''),
                name=option.get('name', ''),
                values=[choice.get('text', '') for choice in option.get('choices') or []],
                type=option.get('type', '')
            )
            for option in options
        ],
        variants=variants,
        price_range=PriceRange(
            min_variant_price=reshape_amount(min_price, currency_code),
            max_variant_price=reshape_amount(max_price, currency_code)
        ),
        featured_image=featured_image or default_image(name),
        images=images,
        seo=SEO(
            title=node.get('seoTitle') or name,
            description=node.get('seoDescription') or description
        ),
        tags=[],
        updated_at=str(node.get('updateDate') or '')
    )


def reshape_products(nodes: Optional[List[dict]], currency_code: str) -> List[Product]:
    """Reshape product nodes, dropping hidden ones."""
    products = [reshape_product(node, currency_code) for node in nodes or []]
    return [p for p in products if p]


def reshape_order_line(item: dict, currency_code: str) -> CartItem:
    """
    Reshape a checkout cart item into a cart line.

    The line id is the composite variant id, so it matches the id of the
    variant that was added.
    """
    identifier = item.get('identifier') or {}
    product_info = item.get('productInfo') or {}
    product_id = str(identifier.get('productId', ''))

    selected_options = [
        SelectedOption(name=name, value=str(selection.get('choice', '')), type=selection.get('type'))
        for name, selection in (identifier.get('selectedOptions') or {}).items()
    ]
    pairs = [(o.name, o.value) for o in selected_options]
    line_id = encode_variant_id(product_id, pairs)

    name = product_info.get('name') or ''
    slug = (product_info.get('slugs') or {}).get('forRouteWithId') or ''
    image_url = (product_info.get('mediaItem') or {}).get('image160pxUrl') or ''
    price = item.get('price') or 0
    quantity = int(item.get('quantity') or 0)
    unit_price = reshape_amount(price, currency_code)

    product = Product(
        id=line_id,
        handle=f"{slug}-p{product_id}",
        title=name,
        available_for_sale=True,
        price_range=PriceRange(min_variant_price=unit_price, max_variant_price=unit_price),
        featured_image=Image(url=image_url, alt_text=name),
        tags=[TAGS.cart],
        updated_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )

    return CartItem(
        id=line_id,
        quantity=quantity,
        cost_total=reshape_amount(Decimal(str(price)) * quantity, currency_code),
        merchandise=Merchandise(
            id=line_id,
            title=format_pairs(pairs, ', ') if pairs else DEFAULT_OPTION,
            selected_options=selected_options,
            product=product
        )
    )


def reshape_order(order: dict, currency_code: str) -> Cart:
    """
    Reshape an Ecwid checkout order into a cart.

    Args:
        order: "checkout" object from a storefront checkout response
        currency_code: Store currency for all amounts

    Returns:
        Cart with lines and totals
    """
    items = order.get('cartItems') or []
    amounts = order.get('amounts') or {}
    order_id = str(order.get('id', ''))

    quantity = sum(int(item.get('quantity') or 0) for item in items)
    lines = [reshape_order_line(item, currency_code) for item in items] if quantity > 0 else []

    return Cart(
        id=order_id,
        checkout_url=f"/checkout?id={order_id}",
        total_quantity=quantity,
        cost=CartCost(
            subtotal_amount=reshape_amount(amounts.get('subtotal'), currency_code),
            total_amount=reshape_amount(amounts.get('total'), currency_code),
            total_tax_amount=reshape_amount(amounts.get('tax'), currency_code)
        ),
        lines=lines
    )
