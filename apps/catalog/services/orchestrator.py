"""
Catalog fetch orchestration.

One ``CatalogFetchOrchestrator`` backs one listing: every filter or page
change calls ``fetch``, which queries the repository, resolves each row
into a ``ResolvedProductView`` and publishes a ``CatalogPage``.

Fetches are not cancelled. Instead each fetch carries a ``FetchToken``
holding the generation it was started in; when it completes after a newer
fetch has begun, its result is dropped and nothing is published.
"""
import logging
import math
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from apps.catalog.conf import get_catalog_setting
from apps.catalog.exceptions import CatalogError, RepositoryError

from .category_cache import CategoryCache, CategoryIndex, get_category_cache
from .resolver import ResolvedProductView, resolve_product
from .rows import CatalogRepository, RepositoryQuery, ReviewAggregate, SortKey
from .sample_catalog import SampleCatalogRepository

logger = logging.getLogger(__name__)

Subscriber = Callable[['CatalogPage'], None]


@dataclass(frozen=True)
class CatalogQuery:
    """What a shopper asked the listing for."""
    category: Optional[str] = None
    price_min: Optional[Decimal] = None
    price_max: Optional[Decimal] = None
    fabric: Optional[str] = None
    occasion: Optional[str] = None
    search: Optional[str] = None
    sort: SortKey = SortKey.NEWEST
    page: int = 1
    page_size: Optional[int] = None

    def normalized(self) -> 'CatalogQuery':
        page_size = self.page_size or get_catalog_setting('DEFAULT_PAGE_SIZE')
        page_size = max(1, min(int(page_size), get_catalog_setting('MAX_PAGE_SIZE')))
        return replace(
            self,
            sort=SortKey(self.sort),
            page=max(1, int(self.page or 1)),
            page_size=page_size,
        )

    def with_page(self, page: int) -> 'CatalogQuery':
        return replace(self, page=page)

    def to_repository_query(self, category_id: Optional[str]) -> RepositoryQuery:
        return RepositoryQuery(
            category_id=category_id,
            price_min=self.price_min,
            price_max=self.price_max,
            fabric=self.fabric or None,
            occasion=self.occasion or None,
            search=self.search or None,
            sort=self.sort,
            page=self.page,
            page_size=self.page_size,
        )


@dataclass(frozen=True)
class CatalogPage:
    products: Tuple[ResolvedProductView, ...]
    total_count: int
    total_pages: int
    page: int
    page_size: int
    generation: int
    degraded: bool = False
    error: Optional[dict] = None

    @classmethod
    def build(cls, products, total_count, query: CatalogQuery, generation, **kwargs) -> 'CatalogPage':
        return cls(
            products=tuple(products),
            total_count=total_count,
            total_pages=math.ceil(total_count / query.page_size) if total_count else 0,
            page=query.page,
            page_size=query.page_size,
            generation=generation,
            **kwargs,
        )


@dataclass(frozen=True)
class FetchToken:
    generation: int


class CatalogFetchOrchestrator:
    """
    Issues catalog queries and publishes resolved pages.

    Args:
        repository: Backing store implementing ``CatalogRepository``.
        category_cache: Category lookup; defaults to one over ``repository``.
        fallback: Repository served when ``repository`` fails. Pass None
            together with ``use_fallback=False`` to publish empty degraded
            pages instead.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        category_cache: Optional[CategoryCache] = None,
        fallback: Optional[CatalogRepository] = None,
        *,
        use_fallback: Optional[bool] = None,
        placeholder_url: Optional[str] = None,
        media_base_url: Optional[str] = None,
    ):
        if use_fallback is None:
            use_fallback = get_catalog_setting('FALLBACK_TO_SAMPLE_CATALOG')
        self.repository = repository
        self.category_cache = category_cache or CategoryCache(repository.list_categories)
        self.fallback = (fallback or SampleCatalogRepository()) if use_fallback else None
        self.placeholder_url = placeholder_url
        self.media_base_url = media_base_url

        self._generation = 0
        self._loading = False
        self._published: Optional[CatalogPage] = None
        self._last_query: Optional[CatalogQuery] = None
        self._subscribers: List[Subscriber] = []

    # State

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def published(self) -> Optional[CatalogPage]:
        return self._published

    @property
    def last_query(self) -> Optional[CatalogQuery]:
        return self._last_query

    def begin_fetch(self) -> FetchToken:
        self._generation += 1
        self._loading = True
        return FetchToken(self._generation)

    def is_current(self, token: FetchToken) -> bool:
        return token.generation == self._generation

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for published pages; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # Fetching

    async def fetch(self, query: Optional[CatalogQuery] = None, token: Optional[FetchToken] = None) -> Optional[CatalogPage]:
        """
        Fetch, resolve and publish one page.

        Returns:
            The published page, or None when a newer fetch started meanwhile.
        """
        query = (query or CatalogQuery()).normalized()
        if token is None:
            token = self.begin_fetch()
        self._last_query = query

        page = await self._build_page(query, token)

        if not self.is_current(token):
            logger.debug(
                "Dropping stale catalog page (generation %d, current %d)",
                token.generation, self._generation,
            )
            return None

        self._loading = False
        self._publish(page)
        return page

    async def refetch(self) -> Optional[CatalogPage]:
        """Repeat the last query under a new generation."""
        return await self.fetch(self._last_query or CatalogQuery())

    async def fetch_product(self, slug: str) -> Optional[ResolvedProductView]:
        """Resolve a single product by slug through the listing engine."""
        try:
            return await self._lookup_product(self.repository, slug)
        except Exception as exc:
            error = self._as_repository_error(exc)
            if self.fallback is None:
                logger.warning("Product lookup for %r failed: %s", slug, error.message)
                return None
            logger.warning("Product lookup for %r failed, using sample catalog: %s", slug, error.message)

        try:
            return await self._lookup_product(self.fallback, slug)
        except Exception as exc:
            logger.warning("Sample catalog lookup for %r failed as well: %s", slug, exc)
            return None

    async def _lookup_product(self, repository, slug: str) -> Optional[ResolvedProductView]:
        row = await repository.get_product(slug)
        if row is None:
            return None
        reviews = await self._reviews(repository, [str(row.id)])
        return self._resolve(row, reviews)

    async def _build_page(self, query: CatalogQuery, token: FetchToken) -> CatalogPage:
        category_id = None
        try:
            if query.category:
                category_id = await self.category_cache.get_category_id(query.category)
                if category_id is None:
                    logger.info("Unknown category %r, returning an empty page", query.category)
                    return CatalogPage.build((), 0, query, token.generation)
            result = await self.repository.query_products(query.to_repository_query(category_id))
            reviews = await self._reviews(self.repository, [str(row.id) for row in result.rows])
            products = [self._resolve(row, reviews) for row in result.rows]
        except Exception as exc:
            return await self._fallback_page(query, token, self._as_repository_error(exc))

        return CatalogPage.build(products, result.total_count, query, token.generation)

    async def _fallback_page(self, query: CatalogQuery, token: FetchToken, error: CatalogError) -> CatalogPage:
        degraded = {'degraded': True, 'error': error.as_dict()}
        if self.fallback is None:
            logger.warning("Catalog query failed: %s", error.message)
            return CatalogPage.build((), 0, query, token.generation, **degraded)

        logger.warning("Catalog query failed, serving sample catalog: %s", error.message)
        category_id = None
        try:
            if query.category:
                match = CategoryIndex(await self.fallback.list_categories()).find(query.category)
                if match is None:
                    return CatalogPage.build((), 0, query, token.generation, **degraded)
                category_id = str(match.id)
            result = await self.fallback.query_products(query.to_repository_query(category_id))
            reviews = await self._reviews(self.fallback, [str(row.id) for row in result.rows])
            products = [self._resolve(row, reviews) for row in result.rows]
        except Exception as exc:
            logger.warning("Sample catalog failed as well, publishing an empty page: %s", exc)
            return CatalogPage.build((), 0, query, token.generation, **degraded)

        return CatalogPage.build(products, result.total_count, query, token.generation, **degraded)

    async def _reviews(self, repository, product_ids: Sequence[str]) -> Dict[str, ReviewAggregate]:
        if not product_ids:
            return {}
        try:
            return await repository.review_aggregates(product_ids)
        except Exception as exc:
            logger.warning("Review aggregates unavailable, defaulting ratings to zero: %s", exc)
            return {}

    def _resolve(self, row, reviews: Dict[str, ReviewAggregate]) -> ResolvedProductView:
        return resolve_product(
            row,
            reviews.get(str(row.id)),
            placeholder_url=self.placeholder_url,
            media_base_url=self.media_base_url,
        )

    def _publish(self, page: CatalogPage) -> None:
        self._published = page
        for callback in list(self._subscribers):
            try:
                callback(page)
            except Exception:
                logger.exception("Catalog page subscriber %r failed", callback)

    @staticmethod
    def _as_repository_error(exc: Exception) -> CatalogError:
        if isinstance(exc, CatalogError):
            return exc
        return RepositoryError(str(exc) or exc.__class__.__name__)


def build_catalog_orchestrator() -> CatalogFetchOrchestrator:
    """Orchestrator over the database, sharing the process-wide category cache."""
    from .repository import DjangoCatalogRepository

    return CatalogFetchOrchestrator(DjangoCatalogRepository(), category_cache=get_category_cache())
