"""
Resolved product views.

``resolve_product`` is the one path from a raw product row to what listing
cards, detail pages and the cart see. It composes image resolution,
pricing, stock derivation and the variant matrix. Views are frozen and
rebuilt on every fetch, so resolving the same row twice gives equal views.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from .availability import VariantMatrix
from .images import resolve_gallery, swatch_urls_by_reference
from .pricing import PriceQuote, resolve_price
from .rows import RawProductRow, RawVariantRow, ReviewAggregate, to_decimal
from .stock import StockLevel, StockStatus, derive_stock, selection_stock, variant_stock

logger = logging.getLogger(__name__)

HEX_RE = re.compile(r'^(?:[0-9A-F]{3}|[0-9A-F]{6})$')


def normalize_hex(raw) -> Optional[str]:
    """
    Normalise a hex color to ``#RRGGBB``.

    Accepts values with or without ``#`` and the three digit shorthand.
    Returns None for empty or invalid input; the swatch then falls back to
    the color label.
    """
    if not isinstance(raw, str):
        return None
    value = raw.strip().lstrip('#').upper()
    if not value or not HEX_RE.match(value):
        return None
    if len(value) == 3:
        value = ''.join(ch * 2 for ch in value)
    return f'#{value}'


def parse_colors(raw) -> Tuple[str, ...]:
    """Product color text ("Red, Gold") as a tuple of labels."""
    if not raw:
        return ()
    if isinstance(raw, (list, tuple)):
        parts = raw
    else:
        parts = str(raw).split(',')
    return tuple(part.strip() for part in map(str, parts) if part and part.strip())


def parse_occasions(raw) -> Tuple[str, ...]:
    """
    Occasions stored as a list, JSON array text or comma-separated text.
    """
    if raw is None or raw == '':
        return ()
    if isinstance(raw, (list, tuple)):
        values = raw
    elif isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError:
            values = raw.split(',')
        else:
            values = parsed if isinstance(parsed, list) else [raw]
    else:
        values = [raw]
    return tuple(str(value).strip() for value in values if str(value).strip())


@dataclass(frozen=True)
class ResolvedVariant:
    id: str
    sku: str
    size: str
    color: str
    color_hex: Optional[str]
    price_adjustment: Optional[Decimal]
    swatch_url: Optional[str]
    quantity: int
    low_stock_threshold: int

    @property
    def stock(self) -> StockLevel:
        return StockLevel.from_quantity(self.quantity, self.low_stock_threshold)


@dataclass(frozen=True)
class ResolvedProductView:
    id: str
    slug: str
    name: str
    price: Decimal
    base_price: Decimal
    sale_price: Optional[Decimal]
    original_price: Optional[Decimal]
    discount_percentage: Optional[int]
    images: Tuple[str, ...]
    image_positions: Tuple[Tuple[int, int], ...]
    variants: Tuple[ResolvedVariant, ...]
    sizes: Tuple[str, ...]
    colors: Tuple[str, ...]
    product_colors: Tuple[str, ...]
    stock_status: StockStatus
    available_quantity: int
    low_stock_threshold: int
    category_id: Optional[str] = None
    category_label: Optional[str] = None
    fabric: Optional[str] = None
    occasions: Tuple[str, ...] = ()
    description: str = ''
    is_featured: bool = False
    rating: Decimal = Decimal('0.0')
    review_count: int = 0
    created_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def primary_image(self) -> str:
        return self.images[0]

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    @property
    def stock(self) -> StockLevel:
        return StockLevel(
            status=self.stock_status,
            quantity=self.available_quantity,
            threshold=self.low_stock_threshold,
        )

    def matrix(self) -> VariantMatrix:
        return VariantMatrix(
            self.variants,
            product_colors=self.product_colors,
            product_available=self.stock.is_available,
        )


@dataclass(frozen=True)
class SelectionQuote:
    """Price and stock for a shopper's (size, color) selection."""
    size: Optional[str]
    color: Optional[str]
    variant: Optional[ResolvedVariant]
    stock: StockLevel
    price: PriceQuote
    is_available: bool


def _resolve_variant(
    row: RawVariantRow,
    product: RawProductRow,
    swatch_urls,
) -> ResolvedVariant:
    level = variant_stock(product.inventory, row.id)
    swatch_url = None
    if row.swatch_image_id is not None:
        swatch_url = swatch_urls.get(str(row.swatch_image_id))
        if swatch_url is None:
            logger.debug(
                "Variant %s of product %s references unknown swatch %r",
                row.id, product.slug, row.swatch_image_id,
            )
    return ResolvedVariant(
        id=str(row.id),
        sku=row.sku or '',
        size=(row.size or '').strip(),
        color=(row.color or '').strip(),
        color_hex=normalize_hex(row.color_hex),
        price_adjustment=to_decimal(row.price_adjustment),
        swatch_url=swatch_url,
        quantity=level.quantity,
        low_stock_threshold=level.threshold,
    )


def _rating(review: Optional[ReviewAggregate]) -> Tuple[Decimal, int]:
    if review is None or not review.review_count:
        return Decimal('0.0'), 0
    rating = to_decimal(review.average_rating) or Decimal('0')
    return rating.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP), int(review.review_count)


def resolve_product(
    row: RawProductRow,
    review: Optional[ReviewAggregate] = None,
    *,
    placeholder_url: Optional[str] = None,
    media_base_url: Optional[str] = None,
) -> ResolvedProductView:
    """
    Build the display-ready view of one raw product row.

    Args:
        row: Raw product row with its images, variants and inventory.
        review: Review aggregate for the product, if it could be loaded.
        placeholder_url: Override for the empty-gallery placeholder.
        media_base_url: Override for the storage-path prefix.

    Returns:
        ResolvedProductView
    """
    swatch_refs = [v.swatch_image_id for v in row.variants if v.swatch_image_id is not None]
    gallery = resolve_gallery(
        row.images,
        swatch_refs,
        placeholder_url=placeholder_url,
        media_base_url=media_base_url,
    )
    swatch_urls = swatch_urls_by_reference(swatch_refs, row.images, media_base_url)

    variants = tuple(_resolve_variant(v, row, swatch_urls) for v in row.variants)
    level = derive_stock(row.inventory, variants)
    quote = resolve_price(
        row.base_price,
        row.sale_price,
        [v.price_adjustment for v in variants],
    )
    product_colors = parse_colors(row.color)
    matrix = VariantMatrix(variants, product_colors, product_available=level.is_available)
    rating, review_count = _rating(review)

    return ResolvedProductView(
        id=str(row.id),
        slug=row.slug,
        name=row.name,
        price=quote.price,
        base_price=to_decimal(row.base_price) or Decimal('0'),
        sale_price=to_decimal(row.sale_price),
        original_price=quote.original_price,
        discount_percentage=quote.discount_percentage,
        images=gallery.urls,
        image_positions=gallery.positions,
        variants=variants,
        sizes=tuple(matrix.sizes),
        colors=tuple(matrix.colors),
        product_colors=product_colors,
        stock_status=level.status,
        available_quantity=level.quantity,
        low_stock_threshold=level.threshold,
        category_id=str(row.category_id) if row.category_id is not None else None,
        category_label=row.category_name or None,
        fabric=row.fabric or None,
        occasions=parse_occasions(row.occasion),
        description=row.description or '',
        is_featured=bool(row.is_featured),
        rating=rating,
        review_count=review_count,
        created_at=row.created_at,
    )


def quote_selection(view: ResolvedProductView, size=None, color=None) -> SelectionQuote:
    """
    Price and stock once the shopper picks a size and/or color.

    For products with variants, an empty selection is quoted as
    Out of Stock (see ``selection_stock``). A size-only or color-only pick
    is quoted from the first matching variant, so it can read Out of Stock
    while ``is_size_available`` or ``is_color_available`` is still True.
    """
    matrix = view.matrix()
    variant = matrix.match_variant(size, color)
    stock = selection_stock(view.variants, view.stock, size=size, color=color)
    price = resolve_price(
        view.base_price,
        view.sale_price,
        [v.price_adjustment for v in view.variants],
        selected_adjustment=variant.price_adjustment if variant is not None else None,
    )
    return SelectionQuote(
        size=size or None,
        color=color or None,
        variant=variant,
        stock=stock,
        price=price,
        is_available=stock.is_available and matrix.is_selection_available(size, color),
    )
