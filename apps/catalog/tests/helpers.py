"""Raw-row builders and fakes shared by the catalog tests."""
import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from apps.catalog.services.rows import (
    RawCategoryRow,
    RawImageRow,
    RawInventoryRow,
    RawProductRow,
    RawVariantRow,
    RepositoryPage,
)

BASE_TIME = datetime(2024, 5, 1, tzinfo=timezone.utc)


def image(image_id, url, is_primary=False, minutes=None):
    created = BASE_TIME + timedelta(minutes=minutes) if minutes is not None else None
    return RawImageRow(id=str(image_id), url=url, is_primary=is_primary, created_at=created)


def variant(variant_id, size=None, color=None, adjustment=None, color_hex=None, swatch=None):
    return RawVariantRow(
        id=str(variant_id),
        sku=f'SKU-{variant_id}',
        size=size,
        color=color,
        color_hex=color_hex,
        price_adjustment=Decimal(adjustment) if adjustment is not None else None,
        swatch_image_id=swatch,
    )


def inventory(row_id, product_id, quantity, variant_id=None, threshold=None):
    return RawInventoryRow(
        id=str(row_id),
        product_id=str(product_id),
        variant_id=str(variant_id) if variant_id is not None else None,
        quantity=quantity,
        low_stock_threshold=threshold,
    )


def product(product_id='p1', **overrides):
    values = {
        'id': str(product_id),
        'slug': f'product-{product_id}',
        'name': f'Product {product_id}',
        'base_price': Decimal('1000'),
        'sale_price': None,
        'category_id': '7',
        'category_name': 'Sarees',
        'fabric': 'Silk',
        'color': 'Red',
        'occasion': ['Wedding'],
        'created_at': BASE_TIME,
    }
    values.update(overrides)
    return RawProductRow(**values)


def scenario_p():
    """Two variants: S/Red priced 500 with no stock, M/Blue priced 300 with 4 units."""
    return product(
        'P',
        variants=(
            variant('p-s-red', size='S', color='Red', adjustment='500', color_hex='#ff0000'),
            variant('p-m-blue', size='M', color='Blue', adjustment='300', color_hex='00f'),
        ),
        inventory=(
            inventory('i1', 'P', 0, variant_id='p-s-red', threshold=3),
            inventory('i2', 'P', 4, variant_id='p-m-blue', threshold=3),
        ),
    )


def scenario_q():
    """No variants, base 1000, sale 800, product-level stock 3 with threshold 5."""
    return product(
        'Q',
        base_price=Decimal('1000'),
        sale_price=Decimal('800'),
        inventory=(inventory('i1', 'Q', 3, threshold=5),),
    )


SAREES = RawCategoryRow(id='7', name='Sarees', slug='sarees', full_path='Sarees')
LEHENGAS = RawCategoryRow(id='8', name='Lehengas', slug='lehengas', full_path='Lehengas')


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeRepository:
    """
    In-memory repository recording every call.

    ``gates`` maps a search text to an ``asyncio.Event`` the query waits on,
    so tests can control the order in which overlapping fetches complete.
    """

    def __init__(self, rows=(), categories=(SAREES, LEHENGAS), reviews=None):
        self.rows = tuple(rows)
        self.categories = list(categories)
        self.reviews = reviews or {}
        self.queries = []
        self.category_loads = 0
        self.fail_queries = False
        self.fail_reviews = False
        self.gates = {}

    async def query_products(self, query):
        self.queries.append(query)
        gate = self.gates.get(query.search)
        if gate is not None:
            await gate.wait()
        if self.fail_queries:
            raise ConnectionError('connection refused')
        rows = [
            row for row in self.rows
            if query.category_id is None or row.category_id == query.category_id
        ]
        window = rows[query.offset:query.offset + query.page_size]
        return RepositoryPage(rows=tuple(window), total_count=len(rows))

    async def get_product(self, slug):
        if self.fail_queries:
            raise ConnectionError('connection refused')
        return next((row for row in self.rows if row.slug == slug), None)

    async def review_aggregates(self, product_ids):
        if self.fail_reviews:
            raise TimeoutError('reviews timed out')
        return {pid: agg for pid, agg in self.reviews.items() if pid in product_ids}

    async def list_categories(self):
        self.category_loads += 1
        await asyncio.sleep(0)
        return list(self.categories)
