"""
Size x color availability for a product.

Which sizes and colors are offered is inferred from the product's variants.
For a partial selection the matrix answers two questions per value:
does a matching variant exist, and does the matching set have stock.
A selector should only enable values for which both hold.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .sizes import FREE_SIZE, is_free_size, real_sizes


def _norm(value) -> str:
    return (value or '').strip().casefold()


def matches_selection(variant, size=None, color=None) -> bool:
    """
    Whether a variant fits a (possibly partial) selection.

    An empty dimension matches anything. Selecting "Free Size" matches
    variants that carry no size of their own.
    """
    if _norm(size):
        if is_free_size(size):
            if _norm(variant.size) and not is_free_size(variant.size):
                return False
        elif _norm(variant.size) != _norm(size):
            return False
    if _norm(color) and _norm(variant.color) != _norm(color):
        return False
    return True


class VariantMatrix:
    """
    Availability queries over one product's variants.

    ``variants`` are objects with ``size``, ``color`` and ``quantity``
    attributes (normally ``ResolvedVariant``). Products without variants are
    size-agnostic: the only size is "Free Size", colors come from the
    product itself and everything is available unless the product is out
    of stock.
    """

    def __init__(
        self,
        variants: Sequence = (),
        product_colors: Iterable[str] = (),
        product_available: bool = True,
    ):
        self.variants = tuple(variants)
        self.product_colors = tuple(product_colors)
        self.product_available = product_available

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    @property
    def sizes(self) -> List[str]:
        if not self.has_variants:
            return [FREE_SIZE]
        seen = {}
        for variant in self.variants:
            label = (variant.size or '').strip()
            if label and _norm(label) not in seen:
                seen[_norm(label)] = label
        return real_sizes(seen.values()) or [FREE_SIZE]

    @property
    def colors(self) -> List[str]:
        source = (v.color for v in self.variants) if self.has_variants else self.product_colors
        seen = {}
        for color in source:
            label = (color or '').strip()
            if label and _norm(label) not in seen:
                seen[_norm(label)] = label
        return list(seen.values())

    def _matching(self, size=None, color=None) -> List[Any]:
        return [v for v in self.variants if matches_selection(v, size, color)]

    def _has_stock(self, matching) -> bool:
        return sum(max(int(v.quantity or 0), 0) for v in matching) > 0

    # Sizes

    def size_exists(self, size, color=None) -> bool:
        if not self.has_variants:
            return is_free_size(size) and (not _norm(color) or self.color_exists(color))
        return bool(self._matching(size, color))

    def size_in_stock(self, size, color=None) -> bool:
        if not self.has_variants:
            return self.product_available and self.size_exists(size, color)
        return self._has_stock(self._matching(size, color))

    def is_size_available(self, size, color=None) -> bool:
        return self.size_exists(size, color) and self.size_in_stock(size, color)

    def available_sizes(self, color=None) -> List[str]:
        return [size for size in self.sizes if self.is_size_available(size, color)]

    # Colors

    def color_exists(self, color, size=None) -> bool:
        if not self.has_variants:
            if _norm(size) and not is_free_size(size):
                return False
            return _norm(color) in {_norm(c) for c in self.product_colors}
        return bool(self._matching(size, color))

    def color_in_stock(self, color, size=None) -> bool:
        if not self.has_variants:
            return self.product_available and self.color_exists(color, size)
        return self._has_stock(self._matching(size, color))

    def is_color_available(self, color, size=None) -> bool:
        return self.color_exists(color, size) and self.color_in_stock(color, size)

    def available_colors(self, size=None) -> List[str]:
        return [color for color in self.colors if self.is_color_available(color, size)]

    # Selection

    def match_variant(self, size=None, color=None) -> Optional[Any]:
        """
        First variant fitting the selection, or None.

        Nothing selected matches nothing: a variant is only identified once
        the shopper has picked at least one dimension.
        """
        if not self.has_variants or (not _norm(size) and not _norm(color)):
            return None
        matching = self._matching(size, color)
        return matching[0] if matching else None

    def is_selection_available(self, size=None, color=None) -> bool:
        """Both chosen dimensions pass the availability predicate."""
        if _norm(size) and not self.is_size_available(size, color):
            return False
        if _norm(color) and not self.is_color_available(color, size):
            return False
        return True

    def selector_options(self, size=None, color=None) -> Dict[str, List[Dict[str, Any]]]:
        """
        Options for the size and color selectors given the current selection.

        Example:
            matrix.selector_options(color='Red')
            -> {'sizes': [{'value': 'S', 'is_available': False, 'is_selected': False}, ...],
                'colors': [{'value': 'Red', 'is_available': True, 'is_selected': True}, ...]}
        """
        return {
            'sizes': [
                {
                    'value': value,
                    'is_available': self.is_size_available(value, color),
                    'is_selected': _norm(value) == _norm(size),
                }
                for value in self.sizes
            ],
            'colors': [
                {
                    'value': value,
                    'is_available': self.is_color_available(value, size),
                    'is_selected': _norm(value) == _norm(color),
                }
                for value in self.colors
            ],
        }
