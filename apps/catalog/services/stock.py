"""
Stock status derivation.

Inventory rows come in two pools: variant-scoped rows (``variant_id`` set)
and product-scoped rows (``variant_id`` empty). A product with variants is
counted from the first pool only, a product without variants from the
second only. The pools are never mixed.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from apps.catalog.conf import get_catalog_setting

from .availability import matches_selection
from .rows import RawInventoryRow


class StockStatus(str, Enum):
    IN_STOCK = 'In Stock'
    LOW_STOCK = 'Low Stock'
    OUT_OF_STOCK = 'Out of Stock'


def default_threshold() -> int:
    return get_catalog_setting('DEFAULT_LOW_STOCK_THRESHOLD')


def classify(quantity: int, threshold: int) -> StockStatus:
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


@dataclass(frozen=True)
class StockLevel:
    status: StockStatus
    quantity: int = 0
    threshold: int = 10

    @property
    def is_available(self) -> bool:
        return self.status is not StockStatus.OUT_OF_STOCK

    @classmethod
    def out_of_stock(cls, threshold: Optional[int] = None) -> 'StockLevel':
        return cls(
            status=StockStatus.OUT_OF_STOCK,
            quantity=0,
            threshold=default_threshold() if threshold is None else threshold,
        )

    @classmethod
    def from_quantity(cls, quantity: int, threshold: Optional[int] = None) -> 'StockLevel':
        threshold = default_threshold() if threshold is None else threshold
        quantity = max(int(quantity or 0), 0)
        return cls(status=classify(quantity, threshold), quantity=quantity, threshold=threshold)


def relevant_inventory(rows: Iterable[RawInventoryRow], has_variants: bool) -> List[RawInventoryRow]:
    """The inventory pool that counts for a product."""
    if has_variants:
        return [row for row in rows if row.variant_id is not None]
    return [row for row in rows if row.variant_id is None]


def _aggregate(rows: Sequence[RawInventoryRow]) -> StockLevel:
    if not rows:
        return StockLevel.out_of_stock()
    quantity = sum(int(row.quantity or 0) for row in rows)
    thresholds = [row.low_stock_threshold for row in rows if row.low_stock_threshold is not None]
    return StockLevel.from_quantity(quantity, min(thresholds) if thresholds else None)


def derive_stock(inventory: Iterable[RawInventoryRow], variants: Sequence) -> StockLevel:
    """Product-level stock, as shown on a listing card."""
    return _aggregate(relevant_inventory(inventory, has_variants=bool(variants)))


def variant_stock(inventory: Iterable[RawInventoryRow], variant_id) -> StockLevel:
    """Stock of one variant, from the rows scoped to it."""
    wanted = str(variant_id)
    return _aggregate([
        row for row in inventory
        if row.variant_id is not None and str(row.variant_id) == wanted
    ])


def selection_stock(variants: Sequence, product_level: StockLevel, size=None, color=None) -> StockLevel:
    """
    Stock for a shopper's (size, color) selection.

    ``variants`` are resolved variants carrying ``quantity`` and
    ``low_stock_threshold``. For a product with variants and nothing
    selected the result is Out of Stock, so a purchase always names a
    concrete variant. This conflates "nothing chosen" with "nothing
    available" and is kept pending product-owner confirmation.

    A partial selection (size only, or color only) resolves to the first
    matching variant, even when a later sibling still has stock.
    """
    if not variants:
        return product_level
    if not (size or '').strip() and not (color or '').strip():
        return StockLevel.out_of_stock(product_level.threshold)

    for variant in variants:
        if matches_selection(variant, size, color):
            return StockLevel.from_quantity(variant.quantity, variant.low_stock_threshold)
    return StockLevel.out_of_stock(product_level.threshold)
