"""
Category identifier cache.

Listing filters name categories the way shoppers see them ("Sarees",
"sarees"); the repository wants the store id. ``CategoryCache`` keeps the
full category list for a short TTL, keyed by slug, name and id, and rebuilds
it lazily on a miss after expiry. Concurrent callers share one load.
"""
import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from apps.catalog.conf import get_catalog_setting
from apps.catalog.exceptions import CategoryLookupError

from .rows import RawCategoryRow

logger = logging.getLogger(__name__)

T = TypeVar('T')

Clock = Callable[[], float]
CategoryLoader = Callable[[], Awaitable[Sequence[RawCategoryRow]]]


class TTLCache(Generic[T]):
    """One cached value that expires ``ttl`` seconds after it was set."""

    def __init__(self, ttl: float, clock: Clock = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._value: Optional[T] = None
        self._stored_at: Optional[float] = None

    def get(self) -> Optional[T]:
        if self._stored_at is None:
            return None
        if self.clock() - self._stored_at >= self.ttl:
            self.invalidate()
            return None
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._stored_at = self.clock()

    def invalidate(self) -> None:
        self._value = None
        self._stored_at = None


class CategoryIndex:
    """Category rows addressable by slug, name or id, case-insensitively."""

    def __init__(self, rows: Sequence[RawCategoryRow]):
        self.rows = list(rows)
        self._exact: Dict[str, RawCategoryRow] = {}
        self._folded: Dict[str, RawCategoryRow] = {}
        for row in self.rows:
            for key in (str(row.id), row.slug, row.name):
                if not key:
                    continue
                self._exact.setdefault(key, row)
                self._folded.setdefault(key.strip().casefold(), row)

    def find(self, identifier) -> Optional[RawCategoryRow]:
        if identifier is None:
            return None
        key = str(identifier).strip()
        if not key:
            return None
        return self._exact.get(key) or self._folded.get(key.casefold())


class CategoryCache:
    """
    Injected category lookup with an explicit clock.

    Example:
        cache = CategoryCache(repository.list_categories, ttl=300)
        await cache.get_category_id('Sarees')  # -> '7'

    ``invalidate()`` drops the cached list; a load that was already running
    when it was called does not repopulate the cache.
    """

    def __init__(self, loader: CategoryLoader, ttl: Optional[float] = None, clock: Clock = time.monotonic):
        if ttl is None:
            ttl = get_catalog_setting('CATEGORY_CACHE_TTL')
        self._loader = loader
        self._cache: TTLCache[CategoryIndex] = TTLCache(ttl, clock)
        self._inflight: Optional[asyncio.Task] = None
        self._version = 0

    async def get_category(self, identifier) -> Optional[RawCategoryRow]:
        index = await self._get_index()
        return index.find(identifier)

    async def get_category_id(self, identifier) -> Optional[str]:
        """Store id for a slug, name or id; None when nothing matches."""
        row = await self.get_category(identifier)
        return str(row.id) if row is not None else None

    async def categories(self) -> List[RawCategoryRow]:
        index = await self._get_index()
        return list(index.rows)

    def invalidate(self) -> None:
        self._version += 1
        self._cache.invalidate()
        self._inflight = None
        logger.debug("Category cache invalidated")

    async def _get_index(self) -> CategoryIndex:
        index = self._cache.get()
        if index is not None:
            return index

        loop = asyncio.get_running_loop()
        task = self._inflight
        # A task left over from another event loop cannot be awaited here
        if task is None or task.done() or task.get_loop() is not loop:
            task = loop.create_task(self._load(self._version))
            self._inflight = task
        return await asyncio.shield(task)

    async def _load(self, version: int) -> CategoryIndex:
        try:
            rows = await self._loader()
        except CategoryLookupError:
            raise
        except Exception as exc:
            raise CategoryLookupError(f"Could not load categories: {exc}") from exc
        finally:
            if self._version == version:
                self._inflight = None

        index = CategoryIndex(rows)
        if self._version == version:
            self._cache.set(index)
            logger.debug("Category cache rebuilt with %d categories", len(index.rows))
        return index


_shared_cache: Optional[CategoryCache] = None


def get_category_cache() -> CategoryCache:
    """Process-wide cache backed by the Django repository."""
    global _shared_cache
    if _shared_cache is None:
        from .repository import DjangoCatalogRepository

        _shared_cache = CategoryCache(DjangoCatalogRepository().list_categories)
    return _shared_cache


def invalidate_category_cache() -> None:
    if _shared_cache is not None:
        _shared_cache.invalidate()
