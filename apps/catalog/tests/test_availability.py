from types import SimpleNamespace

from django.test import SimpleTestCase

from apps.catalog.services.availability import VariantMatrix, matches_selection
from apps.catalog.services.sizes import FREE_SIZE


def _variant(size, color, quantity):
    return SimpleNamespace(size=size, color=color, quantity=quantity)


class MatchesSelectionTests(SimpleTestCase):

    def test_empty_dimensions_match_anything(self):
        self.assertTrue(matches_selection(_variant('M', 'Red', 1)))
        self.assertTrue(matches_selection(_variant('M', 'Red', 1), size='', color='red'))

    def test_comparison_ignores_case_and_whitespace(self):
        self.assertTrue(matches_selection(_variant('M', 'Red', 1), size=' m ', color='RED'))
        self.assertFalse(matches_selection(_variant('M', 'Red', 1), size='L'))

    def test_free_size_matches_unsized_variants_only(self):
        self.assertTrue(matches_selection(_variant('', 'Gold', 1), size=FREE_SIZE))
        self.assertTrue(matches_selection(_variant('free size', 'Gold', 1), size=FREE_SIZE))
        self.assertFalse(matches_selection(_variant('M', 'Gold', 1), size=FREE_SIZE))


class VariantMatrixTests(SimpleTestCase):

    def setUp(self):
        self.matrix = VariantMatrix([
            _variant('L', 'Red', 0),
            _variant('S', 'Red', 2),
            _variant('M', 'Blue', 5),
            _variant('S', 'red', 1),
        ])

    def test_sizes_sorted_and_colors_deduplicated(self):
        self.assertEqual(self.matrix.sizes, ['S', 'M', 'L'])
        self.assertEqual(self.matrix.colors, ['Red', 'Blue'])

    def test_size_exists_versus_in_stock(self):
        self.assertTrue(self.matrix.size_exists('L', 'Red'))
        self.assertFalse(self.matrix.size_in_stock('L', 'Red'))
        self.assertFalse(self.matrix.is_size_available('L'))
        self.assertFalse(self.matrix.size_exists('M', 'Red'))

    def test_available_sizes_for_color(self):
        self.assertEqual(self.matrix.available_sizes('Red'), ['S'])
        self.assertEqual(self.matrix.available_sizes('Blue'), ['M'])
        self.assertEqual(self.matrix.available_sizes(), ['S', 'M'])

    def test_available_colors_for_size(self):
        self.assertEqual(self.matrix.available_colors('S'), ['Red'])
        self.assertEqual(self.matrix.available_colors('L'), [])
        self.assertEqual(self.matrix.available_colors(), ['Red', 'Blue'])

    def test_match_variant(self):
        self.assertEqual(self.matrix.match_variant('M').color, 'Blue')
        self.assertEqual(self.matrix.match_variant(color='Red').size, 'L')
        self.assertIsNone(self.matrix.match_variant())
        self.assertIsNone(self.matrix.match_variant('XL'))

    def test_is_selection_available(self):
        self.assertTrue(self.matrix.is_selection_available('S', 'Red'))
        self.assertFalse(self.matrix.is_selection_available('L', 'Red'))
        self.assertFalse(self.matrix.is_selection_available('M', 'Red'))
        self.assertTrue(self.matrix.is_selection_available())

    def test_selector_options(self):
        options = self.matrix.selector_options(size='S')
        self.assertEqual(
            options['colors'],
            [
                {'value': 'Red', 'is_available': True, 'is_selected': False},
                {'value': 'Blue', 'is_available': False, 'is_selected': False},
            ],
        )
        self.assertEqual(
            [(o['value'], o['is_selected']) for o in options['sizes']],
            [('S', True), ('M', False), ('L', False)],
        )

    def test_unsized_variants_offer_free_size(self):
        matrix = VariantMatrix([_variant('', 'Gold', 3), _variant(None, 'Silver', 0)])
        self.assertEqual(matrix.sizes, [FREE_SIZE])
        self.assertTrue(matrix.is_size_available(FREE_SIZE, 'Gold'))
        self.assertFalse(matrix.is_color_available('Silver', FREE_SIZE))


class ProductWithoutVariantsTests(SimpleTestCase):

    def test_size_agnostic_product(self):
        matrix = VariantMatrix(product_colors=['Red', 'Gold'], product_available=True)
        self.assertFalse(matrix.has_variants)
        self.assertEqual(matrix.sizes, [FREE_SIZE])
        self.assertEqual(matrix.colors, ['Red', 'Gold'])
        self.assertTrue(matrix.is_size_available(FREE_SIZE))
        self.assertFalse(matrix.size_exists('M'))
        self.assertTrue(matrix.is_color_available('gold'))
        self.assertFalse(matrix.color_exists('Blue'))
        self.assertIsNone(matrix.match_variant(FREE_SIZE, 'Red'))

    def test_out_of_stock_product_offers_nothing(self):
        matrix = VariantMatrix(product_colors=['Red'], product_available=False)
        self.assertEqual(matrix.available_sizes(), [])
        self.assertEqual(matrix.available_colors(), [])
        self.assertFalse(matrix.is_selection_available(FREE_SIZE, 'Red'))
