"""
Variant identities and the option combinator.

Ecwid only returns combination records for variants that carry their own
SKU data, so the full variant space is synthesized from the declared option
choices and the real records are overlaid on top of it.

Variant ids double as composite keys:

    "<product id>|<option name>:<choice>|<option name>:<choice>..."

Cart operations decode them back into option selections. Names or choices
containing "|" or ":" do not survive the round trip.
"""

from itertools import product as _product
from typing import Iterable, List, Optional, Sequence, Tuple

from storefront.adapters.base import ProductVariant, SelectedOption

ID_SEPARATOR = '|'
PAIR_SEPARATOR = ':'

OptionPair = Tuple[str, str]


class InvalidVariantIdError(ValueError):
    """Variant id cannot be decoded."""
    pass


def format_pairs(pairs: Iterable[OptionPair], separator: str) -> str:
    return separator.join(f"{name}{PAIR_SEPARATOR}{value}" for name, value in pairs)


def encode_variant_id(product_id: str, pairs: Sequence[OptionPair]) -> str:
    """
    Build a composite variant id.

    Args:
        product_id: Provider product id
        pairs: Ordered (option name, choice) pairs

    Returns:
        Composite id; the bare product id when there are no pairs
    """
    if not pairs:
        return str(product_id)
    return str(product_id) + ID_SEPARATOR + format_pairs(pairs, ID_SEPARATOR)


def decode_variant_id(variant_id: str) -> Tuple[str, List[OptionPair]]:
    """
    Split a composite variant id into product id and option pairs.

    Args:
        variant_id: Id produced by encode_variant_id()

    Returns:
        (product_id, [(name, value), ...])

    Raises:
        InvalidVariantIdError: If the id is empty
    """
    if not variant_id:
        raise InvalidVariantIdError("Empty variant id")

    product_id, *parts = variant_id.split(ID_SEPARATOR)
    if not product_id:
        raise InvalidVariantIdError(f"Variant id has no product id: {variant_id!r}")

    pairs = []
    for part in parts:
        name, _, value = part.partition(PAIR_SEPARATOR)
        pairs.append((name, value))

    return product_id, pairs


def cartesian_product(*lists: Sequence) -> List[tuple]:
    """
    All combinations picking one entry from each list.

    No lists yields a single empty combination; any empty list yields none.
    """
    return list(_product(*lists))


def build_variants(
    node_id: str,
    node_name: str,
    options: Optional[list],
    combinations: Optional[list],
    base_price: float,
    in_stock: bool
) -> Tuple[List[ProductVariant], float, float]:
    """
    Derive every variant of a product plus its price range.

    Steps:
    1. Cartesian product of the declared option choices gives one synthetic
       variant per combination, priced at the base price.
    2. Each real combination record is matched to every synthetic variant
       whose option pairs contain the record's pairs; its stock flag and
       price (base price when unset) are overlaid.
    3. With no synthetic combination a single default variant is used.
    4. The price range spans available variants only, falling back to the
       base price when none is available.

    Args:
        node_id: Provider product id
        node_name: Product name used for variant titles
        options: Provider options ({name, type, choices: [{text}]})
        combinations: Provider combination records ({options, inStock, price})
        base_price: Product price
        in_stock: Product stock flag

    Returns:
        (variants, min_price, max_price)
    """
    node_id = str(node_id)
    choice_lists = [
        [(option.get('name', ''), choice.get('text', '')) for choice in option.get('choices') or []]
        for option in options or []
    ]

    variants = []
    if choice_lists:
        for combo in cartesian_product(*choice_lists):
            variants.append(ProductVariant(
                id=encode_variant_id(node_id, combo),
                title=f"{node_name} ({format_pairs(combo, ', ')})",
                available_for_sale=bool(in_stock),
                selected_options=[SelectedOption(name=n, value=v) for n, v in combo],
                price=base_price
            ))

    if variants:
        keyed = [
            (set((o.name, o.value) for o in variant.selected_options), variant)
            for variant in variants
        ]
        for record in combinations or []:
            keys = set(
                (o.get('name', ''), o.get('value', ''))
                for o in record.get('options') or []
            )
            for pairs, variant in keyed:
                if keys <= pairs:
                    variant.available_for_sale = bool(record.get('inStock'))
                    variant.price = record.get('price') or base_price
    else:
        variants = [ProductVariant(
            id=node_id,
            title=node_name,
            available_for_sale=bool(in_stock),
            selected_options=[],
            price=base_price
        )]

    available = [v.price for v in variants if v.available_for_sale]
    if available:
        return variants, min(available), max(available)

    return variants, base_price, base_price
