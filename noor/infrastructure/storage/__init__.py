"""
Storage Infrastructure Module

Key-value persistence backends and the best-effort boundary in front of them.

This module provides:
- RedisKeyValueStore: redis.asyncio backend
- InMemoryKeyValueStore / DisabledKeyValueStore: process-local and absent storage
- ResilientKeyValueStore: never-raising wrapper used by every service
- create_key_value_store: backend selection from settings
"""

from ...core.config import Settings
from .exceptions import (
    StorageException,
    StorageQuotaException,
    StorageSerializationException,
    StorageUnavailableException,
)
from .memory_store import DisabledKeyValueStore, InMemoryKeyValueStore
from .redis_store import RedisKeyValueStore
from .resilient_store import ResilientKeyValueStore


def create_key_value_store(settings: Settings) -> ResilientKeyValueStore:
    """Build the configured backend wrapped in the resilient boundary."""
    if settings.STORAGE_BACKEND == "redis":
        backend = RedisKeyValueStore.from_url(
            settings.REDIS_URL,
            key_prefix=settings.REDIS_KEY_PREFIX,
            operation_timeout=settings.REDIS_OPERATION_TIMEOUT,
        )
    elif settings.STORAGE_BACKEND == "memory":
        backend = InMemoryKeyValueStore(max_entries=settings.MEMORY_STORE_MAX_ENTRIES)
    else:
        backend = DisabledKeyValueStore("storage disabled by configuration")
    return ResilientKeyValueStore(backend)


__all__ = [
    "StorageException",
    "StorageQuotaException",
    "StorageSerializationException",
    "StorageUnavailableException",
    "DisabledKeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "ResilientKeyValueStore",
    "create_key_value_store",
]
