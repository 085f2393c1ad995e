"""
Catalog repository backed by the Django ORM.

Reads products with their images, active variants and inventory in a fixed
number of queries and maps them onto raw rows. The ORM is synchronous, so
every public coroutine runs its query through ``sync_to_async``.
"""
import logging
from typing import Dict, List, Optional, Sequence

from asgiref.sync import sync_to_async
from django.db import DatabaseError
from django.db.models import Avg, Count, F, Prefetch, Q

from apps.catalog.api.filters import ProductFilter, with_effective_price
from apps.catalog.exceptions import RepositoryError
from apps.catalog.models import Category, Product, ProductReview, Variant

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


def _id(value) -> Optional[str]:
    return str(value) if value is not None else None


def product_to_row(product: Product) -> RawProductRow:
    """
    Map a product (with prefetched relations) onto a raw row.

    Inactive variants, and inventory scoped to them, are left out so they
    never count towards the variant pool.
    """
    variants = [variant for variant in product.variants.all() if variant.is_active]
    active_ids = {variant.pk for variant in variants}
    return RawProductRow(
        id=str(product.pk),
        slug=product.slug,
        name=product.name,
        base_price=product.price,
        sale_price=product.sale_price,
        category_id=_id(product.category_id),
        category_name=product.category.name if product.category_id else None,
        fabric=product.fabric or None,
        color=product.color or None,
        occasion=product.occasion,
        description=product.description,
        is_featured=product.is_featured,
        created_at=product.created_at,
        images=tuple(
            RawImageRow(
                id=str(image.pk),
                url=image.url,
                is_primary=image.is_primary,
                created_at=image.created_at,
            )
            for image in product.images.all()
        ),
        variants=tuple(
            RawVariantRow(
                id=str(variant.pk),
                sku=variant.sku,
                size=variant.size or None,
                color=variant.color or None,
                color_hex=variant.color_hex or None,
                price_adjustment=variant.price_adjustment,
                swatch_image_id=variant.swatch_key,
            )
            for variant in variants
        ),
        inventory=tuple(
            RawInventoryRow(
                id=str(record.pk),
                product_id=str(product.pk),
                variant_id=_id(record.variant_id),
                quantity=record.quantity,
                low_stock_threshold=record.low_stock_threshold,
            )
            for record in product.inventory.all()
            if record.variant_id is None or record.variant_id in active_ids
        ),
    )


def _ordering(sort: SortKey) -> List:
    if sort == SortKey.PRICE_LOW:
        return ['effective_price', 'name']
    if sort == SortKey.PRICE_HIGH:
        return ['-effective_price', 'name']
    if sort == SortKey.NAME:
        return ['name', 'pk']
    if sort == SortKey.RATING:
        return [F('average_rating').desc(nulls_last=True), '-created_at']
    return ['-created_at', '-pk']


class DjangoCatalogRepository:
    """``CatalogRepository`` over the catalog models."""

    def get_queryset(self):
        return Product.objects.filter(is_active=True).select_related('category').prefetch_related(
            'images',
            Prefetch('variants', queryset=Variant.objects.filter(is_active=True).order_by('pk')),
            'inventory',
        )

    def filter_params(self, query: RepositoryQuery) -> Dict[str, str]:
        params = {
            'category': query.category_id,
            'min_price': query.price_min,
            'max_price': query.price_max,
            'fabric': query.fabric,
            'occasion': query.occasion,
            'search': query.search,
        }
        return {key: str(value) for key, value in params.items() if value not in (None, '')}

    # Sync implementations

    def query_products_sync(self, query: RepositoryQuery) -> RepositoryPage:
        filterset = ProductFilter(self.filter_params(query), queryset=self.get_queryset())
        if not filterset.is_valid():
            raise RepositoryError('Invalid catalog query', errors=filterset.errors.get_json_data())
        try:
            queryset = with_effective_price(filterset.qs)
            if query.sort == SortKey.RATING:
                queryset = queryset.annotate(
                    average_rating=Avg('reviews__rating', filter=Q(reviews__is_approved=True))
                )
            queryset = queryset.order_by(*_ordering(query.sort))
            total = queryset.count()
            window = queryset[query.offset:query.offset + query.page_size]
            rows = tuple(product_to_row(product) for product in window)
        except DatabaseError as exc:
            logger.error("Product query failed: %s", exc)
            raise RepositoryError(f'Product query failed: {exc}') from exc
        return RepositoryPage(rows=rows, total_count=total)

    def get_product_sync(self, slug: str) -> Optional[RawProductRow]:
        try:
            product = self.get_queryset().filter(slug=slug).first()
        except DatabaseError as exc:
            raise RepositoryError(f'Product lookup failed: {exc}', slug=slug) from exc
        return product_to_row(product) if product is not None else None

    def review_aggregates_sync(self, product_ids: Sequence[str]) -> Dict[str, ReviewAggregate]:
        try:
            stats = (
                ProductReview.objects
                .filter(product_id__in=list(product_ids), is_approved=True)
                .values('product_id')
                .annotate(review_count=Count('id'), average_rating=Avg('rating'))
            )
            return {
                str(item['product_id']): ReviewAggregate(
                    product_id=str(item['product_id']),
                    review_count=item['review_count'],
                    average_rating=item['average_rating'],
                )
                for item in stats
            }
        except DatabaseError as exc:
            raise RepositoryError(f'Review aggregate query failed: {exc}') from exc

    def list_categories_sync(self) -> List[RawCategoryRow]:
        try:
            categories = list(Category.objects.filter(is_active=True).select_related('parent'))
        except DatabaseError as exc:
            raise RepositoryError(f'Category query failed: {exc}') from exc
        by_pk = {category.pk: category for category in categories}
        rows = []
        for category in categories:
            names = [category.name]
            parent_id = category.parent_id
            seen = {category.pk}
            while parent_id in by_pk and parent_id not in seen:
                seen.add(parent_id)
                names.insert(0, by_pk[parent_id].name)
                parent_id = by_pk[parent_id].parent_id
            rows.append(RawCategoryRow(
                id=str(category.pk),
                name=category.name,
                slug=category.slug,
                parent_id=_id(category.parent_id),
                full_path=' > '.join(names),
            ))
        return rows

    # CatalogRepository

    async def query_products(self, query: RepositoryQuery) -> RepositoryPage:
        return await sync_to_async(self.query_products_sync)(query)

    async def get_product(self, slug: str) -> Optional[RawProductRow]:
        return await sync_to_async(self.get_product_sync)(slug)

    async def review_aggregates(self, product_ids: Sequence[str]) -> Dict[str, ReviewAggregate]:
        return await sync_to_async(self.review_aggregates_sync)(product_ids)

    async def list_categories(self) -> List[RawCategoryRow]:
        return await sync_to_async(self.list_categories_sync)()
