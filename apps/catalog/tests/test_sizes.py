from django.test import SimpleTestCase

from apps.catalog.services.sizes import (
    FREE_SIZE,
    has_real_sizes,
    real_sizes,
    size_priority,
    sort_sizes,
)


class SortSizesTests(SimpleTestCase):

    def test_canonical_order(self):
        self.assertEqual(sort_sizes(['L', 'XS', '3XL', 'M']), ['XS', 'M', 'L', '3XL'])

    def test_labels_are_matched_case_and_whitespace_insensitively(self):
        self.assertEqual(sort_sizes(['xl', ' s ', 'M']), [' s ', 'M', 'xl'])

    def test_unknown_sizes_sort_last_alphabetically(self):
        self.assertEqual(
            sort_sizes(['Free Size', 'XL', '32', 'S', 'Custom']),
            ['S', 'XL', '32', 'Custom', 'Free Size'],
        )

    def test_sort_is_stable_for_equal_labels(self):
        labels = ['m', 'M', 'S']
        self.assertEqual(sort_sizes(labels), ['S', 'm', 'M'])

    def test_empty_input(self):
        self.assertEqual(sort_sizes([]), [])

    def test_unknown_priority_is_after_every_known_size(self):
        self.assertGreater(size_priority('Free Size'), size_priority('8XL'))


class RealSizesTests(SimpleTestCase):

    def test_drops_blanks_and_free_size(self):
        self.assertEqual(real_sizes(['', 'L', None, FREE_SIZE, '  ', 'S']), ['S', 'L'])

    def test_has_real_sizes(self):
        self.assertTrue(has_real_sizes(['M']))
        self.assertFalse(has_real_sizes([FREE_SIZE, '']))
