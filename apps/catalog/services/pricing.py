"""
Price resolution for products and their variants.

A variant's ``price_adjustment`` is its own selling price when positive.
Cards show the cheapest such price ("starting at"); once a shopper picks a
variant, that variant's own price wins.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional

from .rows import to_decimal

ZERO = Decimal('0')


class PriceSource(str, Enum):
    SELECTED_VARIANT = 'selected_variant'
    VARIANT_MINIMUM = 'variant_minimum'
    SALE = 'sale'
    BASE = 'base'


@dataclass(frozen=True)
class PriceQuote:
    price: Decimal
    original_price: Optional[Decimal] = None
    discount_percentage: Optional[int] = None
    source: PriceSource = PriceSource.BASE

    @property
    def is_discounted(self) -> bool:
        return self.original_price is not None


def _positive(value) -> Optional[Decimal]:
    number = to_decimal(value)
    if number is not None and number > ZERO:
        return number
    return None


def discount_percentage(original: Decimal, price: Decimal) -> int:
    """Whole percent saved, rounded half-up."""
    saved = (original - price) / original * 100
    return int(saved.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def resolve_price(
    base_price,
    sale_price=None,
    adjustments: Iterable = (),
    selected_adjustment=None,
) -> PriceQuote:
    """
    Resolve the single display price.

    Order of precedence:
        1. the selected variant's own positive adjustment;
        2. the minimum positive adjustment over all variants;
        3. a positive sale price (with the base price as strike-through
           when it is higher);
        4. the base price, which may be zero when nothing is priced.
    """
    selected = _positive(selected_adjustment)
    if selected is not None:
        return PriceQuote(price=selected, source=PriceSource.SELECTED_VARIANT)

    positives = [number for number in map(_positive, adjustments) if number is not None]
    if positives:
        return PriceQuote(price=min(positives), source=PriceSource.VARIANT_MINIMUM)

    base = to_decimal(base_price)
    sale = _positive(sale_price)
    if sale is not None:
        if base is not None and base > sale:
            return PriceQuote(
                price=sale,
                original_price=base,
                discount_percentage=discount_percentage(base, sale),
                source=PriceSource.SALE,
            )
        return PriceQuote(price=sale, source=PriceSource.SALE)

    return PriceQuote(price=base if base is not None else ZERO, source=PriceSource.BASE)
