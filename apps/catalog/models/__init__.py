"""
Catalog models for the apparel storefront.

Model Hierarchy:
- Category: Hierarchical categories (Sarees, Lehengas > Bridal, ...)
- Product: Base product with base/sale price and descriptive text fields
- ProductImage: Gallery and swatch images owned by a product
- Variant: Size/color combination with an optional price adjustment
- InventoryRecord: Stock counts, scoped to a variant or to the product
- ProductReview: Customer ratings used for review aggregates
"""

from .category import Category
from .product import Product
from .image import ProductImage
from .variant import Variant
from .inventory import InventoryRecord
from .review import ProductReview

__all__ = [
    'Category',
    'Product',
    'ProductImage',
    'Variant',
    'InventoryRecord',
    'ProductReview',
]
