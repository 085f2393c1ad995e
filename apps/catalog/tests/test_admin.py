from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from apps.catalog.services.sample_catalog import seed_sample_catalog


class CatalogAdminTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        seed_sample_catalog()
        cls.admin = get_user_model().objects.create_superuser('admin', 'admin@example.com', 'password')

    def setUp(self):
        self.client.force_login(self.admin)

    def test_product_changelist_shows_resolved_price_and_stock(self):
        response = self.client.get(reverse('admin:catalog_product_changelist'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '28999')
        self.assertContains(response, 'Low Stock (3)')

    def test_variant_changelist(self):
        response = self.client.get(reverse('admin:catalog_variant_changelist'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'SAMPLE-2-0')
