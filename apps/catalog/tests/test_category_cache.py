import asyncio
from dataclasses import replace

from django.test import SimpleTestCase

from apps.catalog.exceptions import CategoryLookupError
from apps.catalog.services.category_cache import CategoryCache, CategoryIndex, TTLCache

from .helpers import LEHENGAS, SAREES, FakeClock


class CountingLoader:
    def __init__(self, rows=(SAREES, LEHENGAS)):
        self.rows = list(rows)
        self.calls = 0
        self.error = None
        self.gate = None

    async def __call__(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.rows)


class TTLCacheTests(SimpleTestCase):

    def test_value_expires_after_ttl(self):
        clock = FakeClock()
        cache = TTLCache(60, clock)
        cache.set('value')
        clock.advance(59)
        self.assertEqual(cache.get(), 'value')
        clock.advance(1)
        self.assertIsNone(cache.get())

    def test_invalidate(self):
        cache = TTLCache(60, FakeClock())
        cache.set('value')
        cache.invalidate()
        self.assertIsNone(cache.get())


class CategoryIndexTests(SimpleTestCase):

    def test_find_by_id_slug_or_name(self):
        index = CategoryIndex([SAREES, LEHENGAS])
        self.assertEqual(index.find('7'), SAREES)
        self.assertEqual(index.find('lehengas'), LEHENGAS)
        self.assertEqual(index.find(' SAREES '), SAREES)
        self.assertEqual(index.find(7), SAREES)
        self.assertIsNone(index.find('gowns'))
        self.assertIsNone(index.find(''))
        self.assertIsNone(index.find(None))


class CategoryCacheTests(SimpleTestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.loader = CountingLoader()
        self.cache = CategoryCache(self.loader, ttl=300, clock=self.clock)

    async def test_lookup_loads_once_within_ttl(self):
        self.assertEqual(await self.cache.get_category_id('Sarees'), '7')
        self.clock.advance(120)
        self.assertEqual(await self.cache.get_category_id('sarees'), '7')
        self.assertEqual(self.loader.calls, 1)

    async def test_expired_entry_is_reloaded(self):
        await self.cache.get_category_id('Sarees')
        self.clock.advance(301)
        self.loader.rows = [replace(SAREES, id='70')]
        self.assertEqual(await self.cache.get_category_id('Sarees'), '70')
        self.assertEqual(self.loader.calls, 2)

    async def test_invalidate_forces_reload(self):
        await self.cache.get_category_id('Sarees')
        self.cache.invalidate()
        await self.cache.get_category_id('Sarees')
        self.assertEqual(self.loader.calls, 2)

    async def test_unknown_category_returns_none(self):
        self.assertIsNone(await self.cache.get_category_id('Gowns'))
        self.assertIsNone(await self.cache.get_category('Gowns'))

    async def test_concurrent_lookups_share_one_load(self):
        self.loader.gate = asyncio.Event()

        async def release():
            await asyncio.sleep(0)
            self.loader.gate.set()

        first, second, _ = await asyncio.gather(
            self.cache.get_category_id('Sarees'),
            self.cache.get_category_id('lehengas'),
            release(),
        )
        self.assertEqual((first, second), ('7', '8'))
        self.assertEqual(self.loader.calls, 1)

    async def test_load_failure_raises_lookup_error_and_is_retried(self):
        self.loader.error = ConnectionError('down')
        with self.assertRaises(CategoryLookupError):
            await self.cache.get_category_id('Sarees')

        self.loader.error = None
        self.assertEqual(await self.cache.get_category_id('Sarees'), '7')
        self.assertEqual(self.loader.calls, 2)

    async def test_load_started_before_invalidate_does_not_repopulate(self):
        self.loader.gate = asyncio.Event()
        pending = asyncio.ensure_future(self.cache.get_category_id('Sarees'))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        self.cache.invalidate()
        self.loader.gate.set()
        self.assertEqual(await pending, '7')

        self.loader.gate = None
        await self.cache.get_category_id('Sarees')
        self.assertEqual(self.loader.calls, 2)

    async def test_categories_lists_all_rows(self):
        self.assertEqual(await self.cache.categories(), [SAREES, LEHENGAS])
