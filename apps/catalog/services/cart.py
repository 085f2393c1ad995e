"""
Cart hand-off.

The cart never sees raw rows or partial selections: ``build_cart_line``
checks the selection against the availability matrix and stock, then
flattens the resolved product into a line item with every sentinel filled.
"""
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Optional

from apps.catalog.exceptions import SelectionUnavailable

from .resolver import ResolvedProductView, quote_selection
from .sizes import FREE_SIZE, has_real_sizes


@dataclass(frozen=True)
class CartLineItem:
    product_id: str
    name: str
    resolved_price: Decimal
    image_url: str
    size: str
    color: Optional[str]
    variant_id: Optional[str]
    category_label: Optional[str]
    quantity: int = 1

    def as_dict(self):
        return asdict(self)


def build_cart_line(view: ResolvedProductView, size=None, color=None, quantity: int = 1) -> CartLineItem:
    """
    Build the line item for adding ``quantity`` of a selection to the cart.

    Raises:
        SelectionUnavailable: the selection names no variant, fails the
            availability predicate, or asks for more than is in stock.
    """
    if quantity < 1:
        raise SelectionUnavailable('Quantity must be at least 1', quantity=quantity)

    quote = quote_selection(view, size=size, color=color)
    if view.has_variants and quote.variant is None:
        raise SelectionUnavailable(
            'Choose an available size and color',
            size=size, color=color,
        )
    if not quote.is_available:
        raise SelectionUnavailable(
            f'{view.name} is out of stock for this selection',
            size=size, color=color,
        )
    if quantity > quote.stock.quantity:
        raise SelectionUnavailable(
            f'Only {quote.stock.quantity} left in stock',
            requested=quantity, available=quote.stock.quantity,
        )

    variant = quote.variant
    if not has_real_sizes(view.sizes):
        line_size = FREE_SIZE
    else:
        line_size = (variant.size if variant is not None and variant.size else None) or size or FREE_SIZE

    if variant is not None and variant.color:
        line_color = variant.color
    else:
        line_color = color or (view.product_colors[0] if view.product_colors else None)

    return CartLineItem(
        product_id=view.id,
        name=view.name,
        resolved_price=quote.price.price,
        image_url=view.primary_image,
        size=line_size,
        color=line_color,
        variant_id=variant.id if variant is not None else None,
        category_label=view.category_label,
        quantity=quantity,
    )
