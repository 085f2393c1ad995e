"""
Raw catalog rows as returned by the backing store, and the repository
boundary the engine reads them through.

Rows are immutable snapshots: a refetch replaces them wholesale.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple


def to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce a stored price into a Decimal; None for empty or garbage values."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


@dataclass(frozen=True)
class RawImageRow:
    id: str
    url: str
    is_primary: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RawVariantRow:
    id: str
    sku: str = ''
    size: Optional[str] = None
    color: Optional[str] = None
    color_hex: Optional[str] = None
    price_adjustment: Optional[Decimal] = None
    swatch_image_id: Optional[str] = None


@dataclass(frozen=True)
class RawInventoryRow:
    id: str
    product_id: str
    variant_id: Optional[str] = None
    quantity: int = 0
    low_stock_threshold: Optional[int] = None


@dataclass(frozen=True)
class RawProductRow:
    id: str
    slug: str
    name: str
    base_price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    fabric: Optional[str] = None
    color: Optional[str] = None
    occasion: Any = None
    description: str = ''
    is_featured: bool = False
    created_at: Optional[datetime] = None
    images: Tuple[RawImageRow, ...] = ()
    variants: Tuple[RawVariantRow, ...] = ()
    inventory: Tuple[RawInventoryRow, ...] = ()


@dataclass(frozen=True)
class RawCategoryRow:
    id: str
    name: str
    slug: str
    parent_id: Optional[str] = None
    full_path: str = ''


@dataclass(frozen=True)
class ReviewAggregate:
    product_id: str
    review_count: int = 0
    average_rating: Decimal = Decimal('0')


class SortKey(str, Enum):
    NEWEST = 'newest'
    PRICE_LOW = 'price_low'
    PRICE_HIGH = 'price_high'
    NAME = 'name'
    RATING = 'rating'


@dataclass(frozen=True)
class RepositoryQuery:
    """Query handed to the backing store once the category is resolved."""
    category_id: Optional[str] = None
    price_min: Optional[Decimal] = None
    price_max: Optional[Decimal] = None
    fabric: Optional[str] = None
    occasion: Optional[str] = None
    search: Optional[str] = None
    sort: SortKey = SortKey.NEWEST
    page: int = 1
    page_size: int = 12

    @property
    def offset(self) -> int:
        return (max(self.page, 1) - 1) * self.page_size


@dataclass(frozen=True)
class RepositoryPage:
    rows: Tuple[RawProductRow, ...] = ()
    total_count: int = 0


class CatalogRepository(Protocol):
    """What the engine consumes from the backing store."""

    async def query_products(self, query: RepositoryQuery) -> RepositoryPage:
        ...

    async def get_product(self, slug: str) -> Optional[RawProductRow]:
        ...

    async def review_aggregates(self, product_ids: Sequence[str]) -> Dict[str, ReviewAggregate]:
        ...

    async def list_categories(self) -> Sequence[RawCategoryRow]:
        ...
