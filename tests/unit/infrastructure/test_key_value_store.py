"""
Unit tests for the key-value store backends and the resilient boundary.
"""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from noor.core.config import Settings
from noor.domain.cache.value_objects import Partition
from noor.infrastructure.storage import (
    DisabledKeyValueStore,
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    ResilientKeyValueStore,
    StorageQuotaException,
    StorageUnavailableException,
    create_key_value_store,
)


class TestInMemoryKeyValueStore:
    """Test the process-local backend."""

    @pytest.mark.asyncio
    async def test_put_and_get(self, memory_backend):
        payload = {"number": 1, "ayahs": [{"number": 1, "text": "نص"}]}

        assert await memory_backend.put(Partition.APP_CACHE, "k", payload) is True
        assert await memory_backend.get(Partition.APP_CACHE, "k") == payload

    @pytest.mark.asyncio
    async def test_stored_payload_is_a_copy(self, memory_backend):
        payload = {"counters": {"a": 1}}
        await memory_backend.put(Partition.USER_DATA, "k", payload)
        payload["counters"]["a"] = 99

        stored = await memory_backend.get(Partition.USER_DATA, "k")
        assert stored["counters"]["a"] == 1

    @pytest.mark.asyncio
    async def test_partitions_are_isolated(self, memory_backend):
        await memory_backend.put(Partition.APP_CACHE, "k", "cache")
        await memory_backend.put(Partition.USER_DATA, "k", "user")

        await memory_backend.clear(Partition.APP_CACHE)

        assert await memory_backend.get(Partition.APP_CACHE, "k") is None
        assert await memory_backend.get(Partition.USER_DATA, "k") == "user"

    @pytest.mark.asyncio
    async def test_delete(self, memory_backend):
        await memory_backend.put(Partition.APP_CACHE, "k", 1)
        assert await memory_backend.delete(Partition.APP_CACHE, "k") is True
        assert await memory_backend.get(Partition.APP_CACHE, "k") is None
        assert memory_backend.keys(Partition.APP_CACHE) == []

    @pytest.mark.asyncio
    async def test_quota(self):
        backend = InMemoryKeyValueStore(max_entries=2)
        await backend.put(Partition.APP_CACHE, "a", 1)
        await backend.put(Partition.USER_DATA, "b", 2)

        # Overwriting an existing key does not need a new slot
        await backend.put(Partition.APP_CACHE, "a", 3)

        with pytest.raises(StorageQuotaException) as exc_info:
            await backend.put(Partition.APP_CACHE, "c", 4)
        assert exc_info.value.details["limit"] == 2


class TestDisabledKeyValueStore:
    @pytest.mark.asyncio
    async def test_every_operation_raises(self):
        backend = DisabledKeyValueStore("private mode")

        with pytest.raises(StorageUnavailableException):
            await backend.get(Partition.APP_CACHE, "k")
        with pytest.raises(StorageUnavailableException):
            await backend.put(Partition.APP_CACHE, "k", 1)
        with pytest.raises(StorageUnavailableException):
            await backend.clear(Partition.USER_DATA)


class TestResilientKeyValueStore:
    """Test that backend failures never escape the boundary."""

    @pytest.mark.asyncio
    async def test_passes_through_working_backend(self, store):
        assert await store.put(Partition.APP_CACHE, "k", {"a": 1}) is True
        assert await store.get(Partition.APP_CACHE, "k") == {"a": 1}
        assert store.failure_count == 0

    @pytest.mark.asyncio
    async def test_degrades_disabled_backend(self, broken_store):
        assert await broken_store.get(Partition.APP_CACHE, "k") is None
        assert await broken_store.put(Partition.APP_CACHE, "k", 1) is False
        assert await broken_store.delete(Partition.APP_CACHE, "k") is False
        assert await broken_store.clear(Partition.APP_CACHE) is False
        assert broken_store.failure_count == 4

    @pytest.mark.asyncio
    async def test_absorbs_unexpected_errors(self):
        backend = AsyncMock()
        backend.get.side_effect = RuntimeError("boom")
        backend.put.side_effect = OSError("disk full")
        store = ResilientKeyValueStore(backend)

        assert await store.get(Partition.APP_CACHE, "k") is None
        assert await store.put(Partition.APP_CACHE, "k", 1) is False
        assert store.last_error is not None

    @pytest.mark.asyncio
    async def test_quota_exceeded_write_is_skipped(self):
        store = ResilientKeyValueStore(InMemoryKeyValueStore(max_entries=1))
        assert await store.put(Partition.APP_CACHE, "a", 1) is True
        assert await store.put(Partition.APP_CACHE, "b", 2) is False
        assert await store.get(Partition.APP_CACHE, "a") == 1

    @pytest.mark.asyncio
    async def test_health_check(self, store, broken_store):
        healthy = await store.health_check()
        assert healthy["available"] is True
        assert healthy["backend"] == "InMemoryKeyValueStore"

        degraded = await broken_store.health_check()
        assert degraded["available"] is False
        assert degraded["last_error"]


class TestRedisKeyValueStore:
    """Test the Redis backend against a mocked client."""

    @pytest.fixture
    def redis_client(self):
        client = AsyncMock()
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock(return_value=True)
        client.delete = AsyncMock(return_value=1)
        client.unlink = AsyncMock(return_value=2)
        return client

    @pytest.fixture
    def redis_store(self, redis_client):
        return RedisKeyValueStore(redis_client, key_prefix="noor")

    @pytest.mark.asyncio
    async def test_put_writes_json_under_partition_key(self, redis_store, redis_client):
        await redis_store.put(Partition.APP_CACHE, "quran-surah:v5:1", {"text": "نص"})

        redis_client.set.assert_awaited_once_with(
            "noor:app_cache:quran-surah:v5:1", '{"text": "نص"}'
        )

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, redis_store, redis_client):
        redis_client.get.return_value = '{"a": 1}'
        assert await redis_store.get(Partition.USER_DATA, "k") == {"a": 1}
        redis_client.get.assert_awaited_once_with("noor:user_data:k")

    @pytest.mark.asyncio
    async def test_undecodable_value_reads_as_miss(self, redis_store, redis_client):
        redis_client.get.return_value = "{not json"
        store = ResilientKeyValueStore(redis_store)

        assert await store.get(Partition.APP_CACHE, "k") is None
        assert store.failure_count == 1

    @pytest.mark.asyncio
    async def test_get_miss(self, redis_store):
        assert await redis_store.get(Partition.APP_CACHE, "missing") is None

    @pytest.mark.asyncio
    async def test_connection_error_translated(self, redis_store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageUnavailableException) as exc_info:
            await redis_store.get(Partition.APP_CACHE, "k")
        assert exc_info.value.details["backend"] == "redis"

    @pytest.mark.asyncio
    async def test_out_of_memory_translated(self, redis_store, redis_client):
        redis_client.set.side_effect = ResponseError(
            "OOM command not allowed when used memory > 'maxmemory'."
        )

        with pytest.raises(StorageQuotaException):
            await redis_store.put(Partition.APP_CACHE, "k", 1)

    @pytest.mark.asyncio
    async def test_clear_scans_one_partition(self, redis_store, redis_client):
        redis_client.scan = AsyncMock(
            side_effect=[
                (7, ["noor:app_cache:a"]),
                (0, ["noor:app_cache:b"]),
            ]
        )

        assert await redis_store.clear(Partition.APP_CACHE) is True

        first_call = redis_client.scan.await_args_list[0]
        assert first_call.kwargs["match"] == "noor:app_cache:*"
        redis_client.unlink.assert_awaited_once_with(
            "noor:app_cache:a", "noor:app_cache:b"
        )

    @pytest.mark.asyncio
    async def test_resilient_wrapper_hides_redis_outage(self, redis_store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")
        redis_client.set.side_effect = RedisConnectionError("down")
        store = ResilientKeyValueStore(redis_store)

        assert await store.get(Partition.APP_CACHE, "k") is None
        assert await store.put(Partition.APP_CACHE, "k", 1) is False


class TestCreateKeyValueStore:
    def test_memory_backend(self):
        store = create_key_value_store(Settings(STORAGE_BACKEND="memory"))
        assert isinstance(store, ResilientKeyValueStore)
        assert isinstance(store.backend, InMemoryKeyValueStore)

    def test_disabled_backend(self):
        store = create_key_value_store(Settings(STORAGE_BACKEND="disabled"))
        assert isinstance(store.backend, DisabledKeyValueStore)

    def test_redis_backend(self):
        store = create_key_value_store(
            Settings(STORAGE_BACKEND="redis", REDIS_URL="redis://localhost:6399/0")
        )
        assert isinstance(store.backend, RedisKeyValueStore)
        assert store.backend.key_prefix == "noor"
