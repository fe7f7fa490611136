"""Tests that concurrent creators never share a code.

Requests run concurrently on one event loop; the store's atomic insert is the
only coordination point between them.
"""

import asyncio

import pytest

from shortlinks.database.memory import InMemoryLinkStore
from shortlinks.errors import ErrorCode
from shortlinks.policy import CallerIdentity
from shortlinks.service import LinkService
from shortlinks.shortcode import ShortCodeGenerator


class InterleavingStore(InMemoryLinkStore):
    """Yields to the event loop between the free check and the insert."""

    async def exists_by_code(self, code):
        await asyncio.sleep(0)
        return await super().exists_by_code(code)

    async def find_by_owner_and_url(self, owner_id, url):
        await asyncio.sleep(0)
        return await super().find_by_owner_and_url(owner_id, url)


@pytest.fixture
def interleaving_service():
    return LinkService(store=InterleavingStore(), generator=ShortCodeGenerator(default_length=7))


class TestConcurrentCreates:

    async def test_distinct_urls_get_distinct_codes(self, service, store, alice):
        concurrency = 50
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]

        results = await asyncio.gather(*(service.create_link(url, alice) for url in urls))

        assert all(r.ok for r in results)
        codes = [r.value.code for r in results]
        assert len(set(codes)) == concurrency
        assert len({r.value.id for r in results}) == concurrency
        assert await store.count() == concurrency
        for url, result in zip(urls, results):
            assert result.value.original_url == url

    async def test_same_url_different_owners_race_for_one_candidate(self, interleaving_service):
        owners = [CallerIdentity.of(f"user{i}") for i in range(10)]
        url = "https://example.com/popular"

        results = await asyncio.gather(
            *(interleaving_service.create_link(url, owner) for owner in owners)
        )

        assert all(r.ok for r in results)
        assert len({r.value.code for r in results}) == 10
        assert await interleaving_service.store.count() == 10

    async def test_same_url_same_owner_creates_once(self, interleaving_service):
        caller = CallerIdentity.of("u1")
        url = "https://example.com/once"

        results = await asyncio.gather(
            *(interleaving_service.create_link(url, caller) for _ in range(10))
        )

        created = [r for r in results if r.ok]
        conflicts = [r for r in results if not r.ok]
        assert len(created) == 1
        assert all(r.error.code is ErrorCode.DUPLICATE_CONFLICT for r in conflicts)
        assert await interleaving_service.store.count() == 1

    async def test_concurrent_deletes_report_one_success(self, service, alice):
        created = await service.create_link("https://example.com/gone", alice)

        results = await asyncio.gather(
            *(service.delete_link(created.value.id, alice) for _ in range(5))
        )

        assert sum(r.ok for r in results) == 1
        assert all(r.error.code is ErrorCode.NOT_FOUND for r in results if not r.ok)
