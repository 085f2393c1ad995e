"""
Catalog settings with defaults.

Projects override any of these through the ``CATALOG`` dict in settings.
"""
from django.conf import settings

DEFAULTS = {
    'CATEGORY_CACHE_TTL': 300,
    'DEFAULT_PAGE_SIZE': 12,
    'MAX_PAGE_SIZE': 60,
    'DEFAULT_LOW_STOCK_THRESHOLD': 10,
    'PLACEHOLDER_IMAGE_URL': '/static/catalog/img/placeholder-product.jpg',
    'MEDIA_BASE_URL': '/media/',
    'FALLBACK_TO_SAMPLE_CATALOG': True,
}


def get_catalog_setting(name):
    """Return a catalog option, falling back to the built-in default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown catalog setting: {name}")
    overrides = getattr(settings, 'CATALOG', None) or {}
    return overrides.get(name, DEFAULTS[name])
