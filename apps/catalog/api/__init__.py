from .serializers import (
    CatalogQuerySerializer,
    SelectionSerializer,
    CartLineRequestSerializer,
    ResolvedVariantSerializer,
    ResolvedProductSerializer,
    CatalogPageSerializer,
    SelectionQuoteSerializer,
    CartLineItemSerializer,
    CategorySerializer,
)

__all__ = [
    'CatalogQuerySerializer',
    'SelectionSerializer',
    'CartLineRequestSerializer',
    'ResolvedVariantSerializer',
    'ResolvedProductSerializer',
    'CatalogPageSerializer',
    'SelectionQuoteSerializer',
    'CartLineItemSerializer',
    'CategorySerializer',
]
