"""Tests for code reservation and collision handling."""

import asyncio
import itertools
from datetime import datetime, timezone

import pytest

from shortlinks.database.memory import InMemoryLinkStore
from shortlinks.database.models import InsertResult, LinkRecord
from shortlinks.errors import ErrorCode
from shortlinks.resolver import UniquenessResolver
from shortlinks.shortcode import ShortCodeGenerator


URL = "https://example.com/a"


def counting_generator():
    counter = itertools.count(1)
    return ShortCodeGenerator(default_length=7, nonce_factory=lambda: f"nonce-{next(counter)}")


async def seed(store, code, url="https://seed.example/"):
    result, record = await store.insert_if_absent(
        LinkRecord(original_url=url, code=code, created_at=datetime.now(timezone.utc))
    )
    assert result is InsertResult.INSERTED
    return record


class RaceLosingStore(InMemoryLinkStore):
    """Reports every code as free, but loses the first N inserts."""

    def __init__(self, lost_races=1, **kwargs):
        super().__init__(**kwargs)
        self.lost_races = lost_races
        self.inserted_codes = []

    async def exists_by_code(self, code):
        return False

    async def insert_if_absent(self, record):
        self.inserted_codes.append(record.code)
        if self.lost_races:
            self.lost_races -= 1
            return InsertResult.ALREADY_EXISTS, None
        return await super().insert_if_absent(record)


class DuplicateStore(InMemoryLinkStore):
    async def insert_if_absent(self, record):
        return InsertResult.DUPLICATE, None


class TestUniquenessResolver:
    """Test the reservation loop."""

    async def test_first_candidate_reserved(self, store, short_code_generator):
        resolver = UniquenessResolver(short_code_generator)

        result = await resolver.reserve(URL, store, owner_id="u1")

        assert result.ok
        record = result.value
        assert record.code == short_code_generator.generate(URL, 0)
        assert record.id is not None
        assert record.owner_id == "u1"
        assert await store.find_by_code(record.code) == record

    async def test_collision_retries_with_new_code(self, store, short_code_generator):
        taken = short_code_generator.generate(URL, 0)
        await seed(store, taken)
        resolver = UniquenessResolver(short_code_generator)

        result = await resolver.reserve(URL, store, owner_id="u1")

        assert result.ok
        assert result.value.code != taken
        assert len(result.value.code) == 7
        assert await store.count() == 2

    async def test_lost_insert_race_is_retried(self):
        store = RaceLosingStore(lost_races=2)
        resolver = UniquenessResolver(counting_generator(), max_attempts=5)

        result = await resolver.reserve(URL, store, owner_id="u1")

        assert result.ok
        assert len(store.inserted_codes) == 3
        assert len(set(store.inserted_codes)) == 3
        assert result.value.code == store.inserted_codes[-1]
        assert await store.count() == 1

    async def test_exhaustion_when_every_candidate_taken(self, store):
        # Twin generators produce the same candidate sequence
        preview = counting_generator()
        candidates = [preview.generate(URL, attempt) for attempt in range(5)]
        for code in candidates:
            await seed(store, code)

        resolver = UniquenessResolver(counting_generator(), max_attempts=5)
        result = await resolver.reserve(URL, store, owner_id="u1")

        assert not result.ok
        assert result.error.code is ErrorCode.COLLISION_EXHAUSTED
        assert result.error.code.retryable
        assert await store.count() == 5
        assert await store.find_by_owner_and_url("u1", URL) is None

    async def test_exhaustion_after_lost_races(self):
        store = RaceLosingStore(lost_races=10)
        resolver = UniquenessResolver(counting_generator(), max_attempts=3)

        result = await resolver.reserve(URL, store)

        assert result.error.code is ErrorCode.COLLISION_EXHAUSTED
        assert len(store.inserted_codes) == 3
        assert await store.count() == 0

    async def test_duplicate_insert_reports_conflict(self):
        resolver = UniquenessResolver(ShortCodeGenerator())

        result = await resolver.reserve(URL, DuplicateStore(), owner_id="u1")

        assert result.error.code is ErrorCode.DUPLICATE_CONFLICT

    async def test_concurrent_reservations_get_distinct_codes(self, store, short_code_generator):
        resolver = UniquenessResolver(short_code_generator)

        results = await asyncio.gather(
            *(resolver.reserve(URL, store, owner_id=f"user{i}") for i in range(20))
        )

        assert all(r.ok for r in results)
        assert len({r.value.code for r in results}) == 20

    def test_invalid_ceiling(self):
        with pytest.raises(ValueError):
            UniquenessResolver(ShortCodeGenerator(), max_attempts=0)
