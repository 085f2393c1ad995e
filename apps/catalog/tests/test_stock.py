from django.test import SimpleTestCase, override_settings

from apps.catalog.services.stock import (
    StockLevel,
    StockStatus,
    classify,
    derive_stock,
    relevant_inventory,
    selection_stock,
    variant_stock,
)

from .helpers import inventory, variant


class ClassifyTests(SimpleTestCase):

    def test_thresholds(self):
        self.assertEqual(classify(0, 5), StockStatus.OUT_OF_STOCK)
        self.assertEqual(classify(-2, 5), StockStatus.OUT_OF_STOCK)
        self.assertEqual(classify(5, 5), StockStatus.LOW_STOCK)
        self.assertEqual(classify(6, 5), StockStatus.IN_STOCK)

    def test_status_labels(self):
        self.assertEqual(StockStatus.IN_STOCK.value, 'In Stock')
        self.assertEqual(StockStatus.LOW_STOCK.value, 'Low Stock')
        self.assertEqual(StockStatus.OUT_OF_STOCK.value, 'Out of Stock')

    @override_settings(CATALOG={'DEFAULT_LOW_STOCK_THRESHOLD': 2})
    def test_default_threshold_comes_from_settings(self):
        level = StockLevel.from_quantity(3)
        self.assertEqual(level.threshold, 2)
        self.assertEqual(level.status, StockStatus.IN_STOCK)


class DeriveStockTests(SimpleTestCase):

    def setUp(self):
        self.variants = [variant('v1', size='S'), variant('v2', size='M')]
        self.rows = [
            inventory('a', 'p', 3, variant_id='v1', threshold=8),
            inventory('b', 'p', 4, variant_id='v2', threshold=9),
            inventory('c', 'p', 100),
        ]

    def test_products_with_variants_count_variant_rows_only(self):
        level = derive_stock(self.rows, self.variants)
        self.assertEqual(level.quantity, 7)
        self.assertEqual(level.threshold, 8)
        self.assertEqual(level.status, StockStatus.LOW_STOCK)

    def test_products_without_variants_count_product_rows_only(self):
        level = derive_stock(self.rows, [])
        self.assertEqual(level.quantity, 100)
        self.assertEqual(level.status, StockStatus.IN_STOCK)

    def test_pools_are_isolated(self):
        without_product_row = [row for row in self.rows if row.variant_id is not None]
        self.assertEqual(
            derive_stock(self.rows, self.variants),
            derive_stock(without_product_row, self.variants),
        )

    def test_variants_without_variant_rows_are_out_of_stock(self):
        level = derive_stock([inventory('c', 'p', 100)], self.variants)
        self.assertEqual(level.status, StockStatus.OUT_OF_STOCK)
        self.assertEqual(level.quantity, 0)

    def test_no_rows_is_out_of_stock(self):
        self.assertEqual(derive_stock([], []).status, StockStatus.OUT_OF_STOCK)

    def test_relevant_inventory(self):
        self.assertEqual([row.id for row in relevant_inventory(self.rows, True)], ['a', 'b'])
        self.assertEqual([row.id for row in relevant_inventory(self.rows, False)], ['c'])

    def test_variant_stock(self):
        level = variant_stock(self.rows, 'v2')
        self.assertEqual(level.quantity, 4)
        self.assertEqual(level.threshold, 9)
        self.assertEqual(level.status, StockStatus.LOW_STOCK)
        self.assertEqual(variant_stock(self.rows, 'missing').status, StockStatus.OUT_OF_STOCK)


class SelectionStockTests(SimpleTestCase):
    """Selections are checked against resolved variants (quantity and threshold attached)."""

    class _Variant:
        def __init__(self, size, color, quantity, low_stock_threshold=3):
            self.size = size
            self.color = color
            self.quantity = quantity
            self.low_stock_threshold = low_stock_threshold

    def setUp(self):
        self.variants = [
            self._Variant('S', 'Red', 0),
            self._Variant('M', 'Blue', 4),
        ]
        self.product_level = StockLevel.from_quantity(4, 3)

    def test_no_variants_returns_product_level(self):
        self.assertIs(selection_stock([], self.product_level, size='M'), self.product_level)

    def test_nothing_selected_is_out_of_stock(self):
        level = selection_stock(self.variants, self.product_level)
        self.assertEqual(level.status, StockStatus.OUT_OF_STOCK)

    def test_matching_variant_uses_its_own_threshold(self):
        level = selection_stock(self.variants, self.product_level, size='m', color='BLUE')
        self.assertEqual(level.status, StockStatus.IN_STOCK)
        self.assertEqual(level.quantity, 4)

    def test_partial_selection_takes_first_match(self):
        level = selection_stock(self.variants, self.product_level, color='Red')
        self.assertEqual(level.status, StockStatus.OUT_OF_STOCK)

    def test_size_only_selection_ignores_stocked_siblings(self):
        variants = [self._Variant('M', 'Red', 0), self._Variant('M', 'Blue', 5)]
        level = selection_stock(variants, self.product_level, size='M')
        self.assertEqual(level.status, StockStatus.OUT_OF_STOCK)

    def test_unmatched_selection_is_out_of_stock(self):
        level = selection_stock(self.variants, self.product_level, size='XL')
        self.assertEqual(level.status, StockStatus.OUT_OF_STOCK)
