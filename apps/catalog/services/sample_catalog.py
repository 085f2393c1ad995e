"""
Last-known-good sample catalog.

A small static catalog kept in code. The orchestrator serves it when the
backing store cannot be reached, and ``seed_sample_catalog`` loads it into
an empty database for local development.
"""
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from .category_cache import CategoryIndex
from .resolver import parse_occasions
from .rows import (
    RawCategoryRow,
    RawImageRow,
    RawInventoryRow,
    RawProductRow,
    RawVariantRow,
    RepositoryPage,
    RepositoryQuery,
    ReviewAggregate,
    SortKey,
)

logger = logging.getLogger(__name__)

_PEXELS = 'https://images.pexels.com/photos/{0}/pexels-photo-{0}.jpeg?auto=compress&cs=tinysrgb&w=1260&h=750&dpr=2'
_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


SAMPLE_CATEGORIES = (
    RawCategoryRow(id='sarees', name='Sarees', slug='sarees', full_path='Sarees'),
    RawCategoryRow(id='lehengas', name='Lehengas', slug='lehengas', full_path='Lehengas'),
    RawCategoryRow(id='suits', name='Salwar Suits', slug='suits', full_path='Salwar Suits'),
    RawCategoryRow(id='kurtis', name='Kurtis', slug='kurtis', full_path='Kurtis'),
    RawCategoryRow(id='gowns', name='Gowns', slug='gowns', full_path='Gowns'),
    RawCategoryRow(id='accessories', name='Accessories', slug='accessories', full_path='Accessories'),
)

_CATEGORY_NAMES = {row.id: row.name for row in SAMPLE_CATEGORIES}


def _images(product_id: str, photo_ids: Sequence[int]) -> tuple:
    return tuple(
        RawImageRow(
            id=f'{product_id}-img-{position}',
            url=_PEXELS.format(photo_id),
            is_primary=position == 0,
            created_at=_EPOCH + timedelta(minutes=position),
        )
        for position, photo_id in enumerate(photo_ids)
    )


def _variants(product_id: str, specs: Sequence[tuple]) -> tuple:
    """specs: (size, color, color_hex, price, quantity) tuples."""
    variants = []
    inventory = []
    for position, (size, color, color_hex, price, quantity) in enumerate(specs):
        variant_id = f'{product_id}-v{position}'
        variants.append(RawVariantRow(
            id=variant_id,
            sku=f'SAMPLE-{product_id}-{position}',
            size=size,
            color=color,
            color_hex=color_hex,
            price_adjustment=Decimal(price) if price is not None else None,
        ))
        inventory.append(RawInventoryRow(
            id=f'{variant_id}-inv',
            product_id=product_id,
            variant_id=variant_id,
            quantity=quantity,
            low_stock_threshold=5,
        ))
    return tuple(variants), tuple(inventory)


def _product(
    product_id: str,
    slug: str,
    name: str,
    category: str,
    base: str,
    sale: Optional[str],
    photos: Sequence[int],
    fabric: str,
    color: str,
    occasion: Sequence[str],
    description: str,
    days_old: int,
    featured: bool = False,
    variants: Sequence[tuple] = (),
    stock: int = 0,
) -> RawProductRow:
    variant_rows, inventory = _variants(product_id, variants)
    if not variant_rows:
        inventory = (RawInventoryRow(
            id=f'{product_id}-inv',
            product_id=product_id,
            quantity=stock,
            low_stock_threshold=5,
        ),)
    return RawProductRow(
        id=product_id,
        slug=slug,
        name=name,
        base_price=Decimal(base),
        sale_price=Decimal(sale) if sale else None,
        category_id=category,
        category_name=_CATEGORY_NAMES[category],
        fabric=fabric,
        color=color,
        occasion=list(occasion),
        description=description,
        is_featured=featured,
        created_at=_EPOCH - timedelta(days=days_old),
        images=_images(product_id, photos),
        variants=variant_rows,
        inventory=inventory,
    )


SAMPLE_PRODUCTS = (
    _product(
        '1', 'banarasi-silk-saree', 'Banarasi Silk Saree', 'sarees',
        '15999', '12999', (8369048, 8396886),
        'Banarasi Silk', 'Red', ('Wedding', 'Festival'),
        'Handcrafted Banarasi silk saree with gold zari work.',
        days_old=30, featured=True, stock=12,
    ),
    _product(
        '2', 'designer-wedding-lehenga', 'Designer Wedding Lehenga', 'lehengas',
        '34999', '28999', (2064507, 2836486),
        'Velvet', 'Maroon, Red', ('Wedding',),
        'Velvet lehenga with heavy embroidery, blouse and dupatta.',
        days_old=60, featured=True,
        variants=(
            ('S', 'Maroon', '#800000', '28999', 3),
            ('M', 'Maroon', '#800000', '28999', 6),
            ('L', 'Maroon', '#800000', '29999', 0),
            ('M', 'Red', '#C0392B', '30999', 2),
        ),
    ),
    _product(
        '3', 'embroidered-anarkali-suit', 'Embroidered Anarkali Suit', 'suits',
        '9999', '7999', (13009871, 4124201),
        'Georgette', 'Teal', ('Festival', 'Party'),
        'Floor-length Anarkali suit with matching bottom and dupatta.',
        days_old=45, featured=True,
        variants=(
            ('S', 'Teal', '#008080', None, 4),
            ('M', 'Teal', '#008080', None, 2),
            ('XL', 'Teal', '#008080', None, 1),
        ),
    ),
    _product(
        '4', 'printed-cotton-kurti', 'Printed Cotton Kurti', 'kurtis',
        '1999', '1499', (14622875, 8396651),
        'Cotton', 'Blue', ('Casual', 'Office'),
        'Cotton kurti with traditional block prints.',
        days_old=75,
        variants=(
            ('XS', 'Blue', '#1F4E9D', None, 10),
            ('S', 'Blue', '#1F4E9D', None, 25),
            ('M', 'Blue', '#1F4E9D', None, 30),
            ('L', 'Blue', '#1F4E9D', None, 18),
            ('XL', 'Blue', '#1F4E9D', None, 7),
        ),
    ),
    _product(
        '5', 'georgette-evening-gown', 'Georgette Evening Gown', 'gowns',
        '8999', None, (973401,),
        'Georgette', 'Emerald', ('Party',),
        'Flowing georgette gown with a sequinned bodice.',
        days_old=20, stock=3,
    ),
    _product(
        '6', 'kundan-jhumka-earrings', 'Kundan Jhumka Earrings', 'accessories',
        '2499', '1999', (230290,),
        'Alloy', 'Gold', ('Wedding', 'Festival', 'Traditional'),
        'Kundan jhumkas with pearl drops.',
        days_old=10, stock=40,
    ),
)

SAMPLE_REVIEWS = {
    '1': ReviewAggregate(product_id='1', review_count=125, average_rating=Decimal('4.8')),
    '2': ReviewAggregate(product_id='2', review_count=87, average_rating=Decimal('4.9')),
    '3': ReviewAggregate(product_id='3', review_count=154, average_rating=Decimal('4.7')),
    '4': ReviewAggregate(product_id='4', review_count=93, average_rating=Decimal('4.5')),
}


def _effective_price(row: RawProductRow) -> Decimal:
    return row.sale_price or row.base_price or Decimal('0')


def _contains(haystack, needle: str) -> bool:
    return needle.casefold() in (haystack or '').casefold()


class SampleCatalogRepository:
    """
    In-memory repository over fixed rows.

    Applies the same filters and sort keys as the database repository so a
    degraded page still honours the shopper's query.
    """

    def __init__(
        self,
        products: Iterable[RawProductRow] = SAMPLE_PRODUCTS,
        categories: Iterable[RawCategoryRow] = SAMPLE_CATEGORIES,
        reviews: Optional[Dict[str, ReviewAggregate]] = None,
    ):
        self.products = tuple(products)
        self.categories = tuple(categories)
        self.reviews = dict(SAMPLE_REVIEWS if reviews is None else reviews)
        self.category_index = CategoryIndex(self.categories)

    def filter_rows(self, query: RepositoryQuery) -> List[RawProductRow]:
        rows = list(self.products)
        if query.category_id is not None:
            rows = [r for r in rows if str(r.category_id) == str(query.category_id)]
        if query.price_min is not None:
            rows = [r for r in rows if _effective_price(r) >= query.price_min]
        if query.price_max is not None:
            rows = [r for r in rows if _effective_price(r) <= query.price_max]
        if query.fabric:
            rows = [r for r in rows if _contains(r.fabric, query.fabric)]
        if query.occasion:
            wanted = query.occasion.strip().casefold()
            rows = [
                r for r in rows
                if wanted in {o.casefold() for o in parse_occasions(r.occasion)}
            ]
        if query.search:
            rows = [
                r for r in rows
                if _contains(r.name, query.search) or _contains(r.description, query.search)
            ]
        return self._sorted(rows, query.sort)

    def _sorted(self, rows: List[RawProductRow], sort: SortKey) -> List[RawProductRow]:
        if sort == SortKey.PRICE_LOW:
            return sorted(rows, key=_effective_price)
        if sort == SortKey.PRICE_HIGH:
            return sorted(rows, key=_effective_price, reverse=True)
        if sort == SortKey.NAME:
            return sorted(rows, key=lambda r: r.name.casefold())
        if sort == SortKey.RATING:
            def rating(row):
                review = self.reviews.get(str(row.id))
                return review.average_rating if review else Decimal('0')
            return sorted(rows, key=rating, reverse=True)
        return sorted(rows, key=lambda r: r.created_at or _EPOCH, reverse=True)

    async def query_products(self, query: RepositoryQuery) -> RepositoryPage:
        rows = self.filter_rows(query)
        window = rows[query.offset:query.offset + query.page_size]
        return RepositoryPage(rows=tuple(window), total_count=len(rows))

    async def get_product(self, slug: str) -> Optional[RawProductRow]:
        for row in self.products:
            if row.slug == slug:
                return row
        return None

    async def review_aggregates(self, product_ids: Sequence[str]) -> Dict[str, ReviewAggregate]:
        wanted = {str(pid) for pid in product_ids}
        return {pid: agg for pid, agg in self.reviews.items() if pid in wanted}

    async def list_categories(self) -> List[RawCategoryRow]:
        return list(self.categories)


def seed_sample_catalog() -> int:
    """
    Load the sample catalog into the database.

    Existing products (matched by slug) are left untouched.

    Returns:
        Number of products created.
    """
    from django.db import transaction

    from apps.catalog.models import (
        Category,
        InventoryRecord,
        Product,
        ProductImage,
        ProductReview,
        Variant,
    )

    created = 0
    with transaction.atomic():
        categories = {}
        for position, row in enumerate(SAMPLE_CATEGORIES):
            category, _ = Category.objects.get_or_create(
                slug=row.slug,
                defaults={'name': row.name, 'display_order': position},
            )
            categories[row.id] = category

        for row in SAMPLE_PRODUCTS:
            product, was_created = Product.objects.get_or_create(
                slug=row.slug,
                defaults={
                    'name': row.name,
                    'description': row.description,
                    'category': categories.get(row.category_id),
                    'price': row.base_price,
                    'sale_price': row.sale_price,
                    'fabric': row.fabric or '',
                    'color': row.color or '',
                    'occasion': list(parse_occasions(row.occasion)),
                    'is_featured': row.is_featured,
                },
            )
            if not was_created:
                continue
            created += 1

            for image in row.images:
                ProductImage.objects.create(
                    product=product,
                    image_url=image.url,
                    is_primary=image.is_primary,
                )

            variants = {}
            for variant in row.variants:
                variants[variant.id] = Variant.objects.create(
                    product=product,
                    sku=variant.sku,
                    size=variant.size or '',
                    color=variant.color or '',
                    color_hex=variant.color_hex or '',
                    price_adjustment=variant.price_adjustment,
                )

            for record in row.inventory:
                InventoryRecord.objects.create(
                    product=product,
                    variant=variants.get(record.variant_id),
                    quantity=record.quantity,
                    low_stock_threshold=record.low_stock_threshold,
                )

            review = SAMPLE_REVIEWS.get(row.id)
            if review is not None:
                ProductReview.objects.create(
                    product=product,
                    author_name='Sample shopper',
                    rating=int(review.average_rating.to_integral_value()),
                    comment='Imported with the sample catalog.',
                )

    logger.info("Seeded %d sample products", created)
    return created
