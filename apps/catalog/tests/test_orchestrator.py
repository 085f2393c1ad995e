import asyncio
from decimal import Decimal

from django.test import SimpleTestCase

from apps.catalog.services.category_cache import CategoryCache
from apps.catalog.services.orchestrator import CatalogFetchOrchestrator, CatalogQuery
from apps.catalog.services.resolver import resolve_product
from apps.catalog.services.rows import ReviewAggregate, SortKey
from apps.catalog.services.sample_catalog import SampleCatalogRepository

from .helpers import FakeClock, FakeRepository, product, scenario_p, scenario_q

PLACEHOLDER = '/static/placeholder.jpg'


class CatalogQueryTests(SimpleTestCase):

    def test_normalized_applies_defaults_and_limits(self):
        query = CatalogQuery(page=0, page_size=500, sort='price_low').normalized()
        self.assertEqual(query.page, 1)
        self.assertEqual(query.page_size, 60)
        self.assertEqual(query.sort, SortKey.PRICE_LOW)
        self.assertEqual(CatalogQuery().normalized().page_size, 12)

    def test_to_repository_query(self):
        query = CatalogQuery(category='Sarees', fabric='', search='silk', page=2, page_size=5)
        repo_query = query.to_repository_query('7')
        self.assertEqual(repo_query.category_id, '7')
        self.assertIsNone(repo_query.fabric)
        self.assertEqual(repo_query.search, 'silk')
        self.assertEqual(repo_query.offset, 5)


class CatalogFetchOrchestratorTests(SimpleTestCase):

    def setUp(self):
        self.rows = [
            scenario_p(),
            scenario_q(),
            product('L1', category_id='8', category_name='Lehengas'),
        ]
        self.repository = FakeRepository(
            self.rows,
            reviews={'Q': ReviewAggregate(product_id='Q', review_count=2, average_rating=Decimal('4.5'))},
        )
        self.orchestrator = self.make_orchestrator(self.repository)

    def make_orchestrator(self, repository, **kwargs):
        cache = CategoryCache(repository.list_categories, ttl=300, clock=FakeClock())
        return CatalogFetchOrchestrator(
            repository,
            category_cache=cache,
            placeholder_url=PLACEHOLDER,
            **kwargs,
        )

    async def test_fetch_resolves_and_publishes_page(self):
        published = []
        self.orchestrator.subscribe(published.append)

        page = await self.orchestrator.fetch(CatalogQuery(page_size=2))

        self.assertEqual(published, [page])
        self.assertIs(self.orchestrator.published, page)
        self.assertFalse(self.orchestrator.loading)
        self.assertEqual(page.total_count, 3)
        self.assertEqual(page.total_pages, 2)
        self.assertEqual([view.id for view in page.products], ['P', 'Q'])
        self.assertFalse(page.degraded)
        self.assertEqual(page.products[1].rating, Decimal('4.5'))
        self.assertEqual(page.products[0], resolve_product(self.rows[0], placeholder_url=PLACEHOLDER))

    async def test_category_name_is_resolved_to_id(self):
        page = await self.orchestrator.fetch(CatalogQuery(category='Lehengas'))
        self.assertEqual(self.repository.queries[-1].category_id, '8')
        self.assertEqual([view.id for view in page.products], ['L1'])

    async def test_unknown_category_returns_empty_page_without_querying(self):
        page = await self.orchestrator.fetch(CatalogQuery(category='Gowns'))
        self.assertEqual(page.products, ())
        self.assertEqual(page.total_count, 0)
        self.assertEqual(page.total_pages, 0)
        self.assertFalse(page.degraded)
        self.assertEqual(self.repository.queries, [])

    async def test_stale_fetch_is_not_published(self):
        published = []
        self.orchestrator.subscribe(published.append)
        self.repository.gates = {'old': asyncio.Event(), 'new': asyncio.Event()}

        old = asyncio.ensure_future(self.orchestrator.fetch(CatalogQuery(search='old')))
        await asyncio.sleep(0)
        new = asyncio.ensure_future(self.orchestrator.fetch(CatalogQuery(search='new')))
        await asyncio.sleep(0)

        self.repository.gates['new'].set()
        new_page = await new
        self.repository.gates['old'].set()
        old_page = await old

        self.assertIsNone(old_page)
        self.assertEqual(published, [new_page])
        self.assertEqual(new_page.generation, 2)
        self.assertIs(self.orchestrator.published, new_page)
        self.assertEqual(self.orchestrator.last_query.search, 'new')

    async def test_explicit_token_from_older_generation_is_dropped(self):
        token = self.orchestrator.begin_fetch()
        self.orchestrator.begin_fetch()
        self.assertTrue(self.orchestrator.loading)
        self.assertIsNone(await self.orchestrator.fetch(CatalogQuery(), token=token))
        self.assertIsNone(self.orchestrator.published)

    async def test_transport_failure_serves_sample_catalog(self):
        self.repository.fail_queries = True
        with self.assertLogs('apps.catalog.services.orchestrator', level='WARNING') as logs:
            page = await self.orchestrator.fetch(CatalogQuery(category='Sarees'))

        self.assertTrue(page.degraded)
        self.assertEqual(page.error['code'], 'repository_error')
        self.assertEqual([view.slug for view in page.products], ['banarasi-silk-saree'])
        self.assertIn('serving sample catalog', logs.output[0])

    async def test_transport_failure_without_fallback_publishes_empty_page(self):
        self.repository.fail_queries = True
        orchestrator = self.make_orchestrator(self.repository, use_fallback=False)
        with self.assertLogs('apps.catalog.services.orchestrator', level='WARNING'):
            page = await orchestrator.fetch()
        self.assertTrue(page.degraded)
        self.assertEqual(page.products, ())
        self.assertIs(orchestrator.published, page)

    async def test_fallback_honours_filters(self):
        self.repository.fail_queries = True
        orchestrator = self.make_orchestrator(
            self.repository,
            fallback=SampleCatalogRepository(),
        )
        with self.assertLogs('apps.catalog.services.orchestrator', level='WARNING'):
            page = await orchestrator.fetch(CatalogQuery(sort=SortKey.PRICE_LOW, page_size=3))
        self.assertEqual(page.total_count, 6)
        self.assertEqual(
            [view.slug for view in page.products],
            ['printed-cotton-kurti', 'kundan-jhumka-earrings', 'embroidered-anarkali-suit'],
        )

    async def test_failing_fallback_publishes_empty_degraded_page(self):
        self.repository.fail_queries = True
        fallback = FakeRepository(self.rows)
        fallback.fail_queries = True
        orchestrator = self.make_orchestrator(self.repository, fallback=fallback, use_fallback=True)
        published = []
        orchestrator.subscribe(published.append)
        with self.assertLogs('apps.catalog.services.orchestrator', level='WARNING') as logs:
            page = await orchestrator.fetch(CatalogQuery(category='Sarees'))
        self.assertTrue(page.degraded)
        self.assertEqual(page.products, ())
        self.assertEqual(page.total_count, 0)
        self.assertEqual(page.error['code'], 'repository_error')
        self.assertFalse(orchestrator.loading)
        self.assertEqual(published, [page])
        self.assertEqual(len(fallback.queries), 1)
        self.assertIn('failed as well', logs.output[-1])

    async def test_review_failure_defaults_ratings(self):
        self.repository.fail_reviews = True
        with self.assertLogs('apps.catalog.services.orchestrator', level='WARNING'):
            page = await self.orchestrator.fetch()
        self.assertFalse(page.degraded)
        self.assertEqual(len(page.products), 3)
        self.assertTrue(all(view.rating == 0 and view.review_count == 0 for view in page.products))

    async def test_failing_subscriber_does_not_block_others(self):
        received = []

        def broken(page):
            raise RuntimeError('boom')

        self.orchestrator.subscribe(broken)
        self.orchestrator.subscribe(received.append)
        with self.assertLogs('apps.catalog.services.orchestrator', level='ERROR'):
            page = await self.orchestrator.fetch()
        self.assertEqual(received, [page])

    async def test_unsubscribe(self):
        received = []
        unsubscribe = self.orchestrator.subscribe(received.append)
        unsubscribe()
        await self.orchestrator.fetch()
        self.assertEqual(received, [])

    async def test_refetch_repeats_last_query(self):
        await self.orchestrator.fetch(CatalogQuery(category='Sarees', page_size=1))
        page = await self.orchestrator.refetch()
        self.assertEqual(page.generation, 2)
        self.assertEqual(page.page_size, 1)
        self.assertEqual(self.repository.queries[-1].category_id, '7')

    async def test_fetch_product(self):
        view = await self.orchestrator.fetch_product('product-Q')
        self.assertEqual(view.price, Decimal('800'))
        self.assertEqual(view.review_count, 2)
        self.assertIsNone(await self.orchestrator.fetch_product('missing'))

    async def test_fetch_product_falls_back_on_failure(self):
        self.repository.fail_queries = True
        with self.assertLogs('apps.catalog.services.orchestrator', level='WARNING'):
            view = await self.orchestrator.fetch_product('designer-wedding-lehenga')
        self.assertEqual(view.price, Decimal('28999'))

    async def test_fetch_product_with_failing_fallback_returns_none(self):
        self.repository.fail_queries = True
        fallback = FakeRepository(self.rows)
        fallback.fail_queries = True
        orchestrator = self.make_orchestrator(self.repository, fallback=fallback, use_fallback=True)
        with self.assertLogs('apps.catalog.services.orchestrator', level='WARNING') as logs:
            self.assertIsNone(await orchestrator.fetch_product('product-Q'))
        self.assertEqual(len(logs.output), 2)
