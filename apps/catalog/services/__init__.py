"""
Catalog normalization and variant resolution engine.

The engine works on raw rows (``rows``) and never touches the ORM itself;
``repository.DjangoCatalogRepository`` is the database-backed source.
"""

from .availability import VariantMatrix
from .cart import CartLineItem, build_cart_line
from .category_cache import CategoryCache, TTLCache, get_category_cache, invalidate_category_cache
from .images import ResolvedGallery, SwatchMatcher, resolve_gallery, resolve_image_url, resolve_swatch_url
from .orchestrator import (
    CatalogFetchOrchestrator,
    CatalogPage,
    CatalogQuery,
    FetchToken,
    build_catalog_orchestrator,
)
from .pricing import PriceQuote, resolve_price
from .resolver import ResolvedProductView, ResolvedVariant, SelectionQuote, quote_selection, resolve_product
from .rows import SortKey
from .sizes import real_sizes, sort_sizes
from .stock import StockLevel, StockStatus, derive_stock, selection_stock

__all__ = [
    'VariantMatrix',
    'CartLineItem',
    'build_cart_line',
    'CategoryCache',
    'TTLCache',
    'get_category_cache',
    'invalidate_category_cache',
    'ResolvedGallery',
    'SwatchMatcher',
    'resolve_gallery',
    'resolve_image_url',
    'resolve_swatch_url',
    'CatalogFetchOrchestrator',
    'CatalogPage',
    'CatalogQuery',
    'FetchToken',
    'build_catalog_orchestrator',
    'PriceQuote',
    'resolve_price',
    'ResolvedProductView',
    'ResolvedVariant',
    'SelectionQuote',
    'quote_selection',
    'resolve_product',
    'SortKey',
    'real_sizes',
    'sort_sizes',
    'StockLevel',
    'StockStatus',
    'derive_stock',
    'selection_stock',
]
