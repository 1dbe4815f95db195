"""
Unit tests for tasbih counters and the last-read bookmark.
"""

import asyncio

import pytest
from pydantic import ValidationError

from noor.domain.cache.value_objects import CacheKey, Partition
from noor.services.user_data_service import UserDataService


class SlowStore:
    """Store wrapper that yields to the event loop on every read and write."""

    def __init__(self, store):
        self.store = store

    async def get(self, partition, key):
        await asyncio.sleep(0)
        return await self.store.get(partition, key)

    async def put(self, partition, key, payload):
        await asyncio.sleep(0)
        return await self.store.put(partition, key, payload)


@pytest.fixture
def service(store):
    return UserDataService(store)


class TestTasbihCounters:
    @pytest.mark.asyncio
    async def test_defaults_to_empty(self, service):
        counters = await service.get_counters()
        assert counters.counters == {}

    @pytest.mark.asyncio
    async def test_increment_and_persist(self, service, memory_backend):
        await service.increment("subhanallah")
        record = await service.increment("subhanallah", by=32)

        assert record.counters == {"subhanallah": 33}
        stored = await memory_backend.get(
            Partition.USER_DATA, str(CacheKey.tasbih_counters())
        )
        assert stored["counters"] == {"subhanallah": 33}
        assert await memory_backend.get(Partition.APP_CACHE, str(CacheKey.tasbih_counters())) is None

    @pytest.mark.asyncio
    async def test_increment_rejects_non_positive(self, service):
        with pytest.raises(ValueError):
            await service.increment("alhamdulillah", by=0)

    @pytest.mark.asyncio
    async def test_save_rejects_negative(self, service):
        with pytest.raises(ValidationError):
            await service.save_counters({"allahuakbar": -1})

    @pytest.mark.asyncio
    async def test_reset_one_or_all(self, service):
        await service.save_counters({"a": 3, "b": 5})

        assert (await service.reset("a")).counters == {"b": 5}
        assert (await service.reset()).counters == {}

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self, store):
        service = UserDataService(SlowStore(store))

        await asyncio.gather(*(service.increment("subhanallah") for _ in range(33)))
        await asyncio.gather(
            service.increment("alhamdulillah", by=10),
            service.reset("subhanallah"),
            service.increment("alhamdulillah", by=23),
        )

        assert (await service.get_counters()).counters == {"alhamdulillah": 33}

    @pytest.mark.asyncio
    async def test_malformed_entry_yields_default(self, service, store):
        await store.put(
            Partition.USER_DATA, str(CacheKey.tasbih_counters()), {"counters": {"a": -4}}
        )
        assert (await service.get_counters()).counters == {}

    @pytest.mark.asyncio
    async def test_broken_store_still_answers(self, broken_store):
        service = UserDataService(broken_store)

        record = await service.increment("subhanallah")

        assert record.counters == {"subhanallah": 1}
        assert (await service.get_counters()).counters == {}


class TestLastRead:
    @pytest.mark.asyncio
    async def test_round_trip(self, service):
        assert await service.get_last_read() is None

        await service.save_last_read(18, 10)
        bookmark = await service.get_last_read()

        assert (bookmark.surah_number, bookmark.ayah_number) == (18, 10)
        assert bookmark.timestamp is not None

    @pytest.mark.asyncio
    async def test_invalid_surah_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.save_last_read(115, 1)

    @pytest.mark.asyncio
    async def test_malformed_bookmark_ignored(self, service, store):
        await store.put(Partition.USER_DATA, str(CacheKey.last_read()), {"surah": 2})
        assert await service.get_last_read() is None
