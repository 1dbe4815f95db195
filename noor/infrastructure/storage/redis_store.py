"""
Redis Key-Value Store Implementation

Redis-backed persistence for cached content and user data.
Keys are laid out as "<prefix>:<partition>:<key>" so one partition can be
cleared without touching the other.
"""

import json
import logging
import time
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    RedisError,
    TimeoutError as RedisTimeoutError,
)

from ...domain.cache.repository_interfaces import KeyValueStore
from ...domain.cache.value_objects import Partition
from .exceptions import (
    StorageException,
    StorageQuotaException,
    StorageSerializationException,
    StorageUnavailableException,
)

logger = logging.getLogger(__name__)


class RedisKeyValueStore(KeyValueStore):
    """Redis implementation of the key-value store."""

    def __init__(
        self,
        client: Redis,
        key_prefix: str = "noor",
        scan_batch_size: int = 100,
    ):
        self._client = client
        self.key_prefix = key_prefix
        self.scan_batch_size = scan_batch_size

    @classmethod
    def from_url(
        cls, url: str, key_prefix: str = "noor", operation_timeout: float = 5.0
    ) -> "RedisKeyValueStore":
        """Create a store with its own connection pool."""
        client = Redis.from_url(
            url,
            socket_timeout=operation_timeout,
            socket_connect_timeout=operation_timeout,
            decode_responses=True,
        )
        return cls(client, key_prefix=key_prefix)

    def _full_key(self, partition: Partition, key: str) -> str:
        return f"{self.key_prefix}:{partition.value}:{key}"

    def _translate_error(self, error: RedisError, operation: str) -> StorageException:
        if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
            return StorageUnavailableException(
                message=f"Redis {operation} failed: {error}",
                backend="redis",
                original_error=error,
            )
        if "OOM" in str(error):
            return StorageQuotaException()
        return StorageException(
            message=f"Redis {operation} failed: {error}",
            error_code="REDIS_OPERATION_ERROR",
            details={"operation": operation},
        )

    async def get(self, partition: Partition, key: str) -> Optional[Any]:
        full_key = self._full_key(partition, key)
        start_time = time.time()

        try:
            raw = await self._client.get(full_key)
        except RedisError as e:
            raise self._translate_error(e, "get") from e

        logger.debug(
            f"Redis get {full_key}",
            extra={
                "hit": raw is not None,
                "execution_time_ms": (time.time() - start_time) * 1000,
            },
        )

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageSerializationException(full_key, e) from e

    async def put(self, partition: Partition, key: str, payload: Any) -> bool:
        full_key = self._full_key(partition, key)

        try:
            raw = json.dumps(payload, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            raise StorageSerializationException(full_key, e) from e

        try:
            await self._client.set(full_key, raw)
        except RedisError as e:
            raise self._translate_error(e, "set") from e

        logger.debug(f"Redis set {full_key}", extra={"size_bytes": len(raw)})
        return True

    async def delete(self, partition: Partition, key: str) -> bool:
        full_key = self._full_key(partition, key)
        try:
            await self._client.delete(full_key)
        except RedisError as e:
            raise self._translate_error(e, "delete") from e
        return True

    async def clear(self, partition: Partition) -> bool:
        """Delete every key of a partition using cursor-based SCAN."""
        pattern = f"{self.key_prefix}:{partition.value}:*"
        keys_to_delete = []

        try:
            # Use SCAN for non-blocking iteration
            cursor = 0
            while True:
                cursor, keys = await self._client.scan(
                    cursor, match=pattern, count=self.scan_batch_size
                )
                keys_to_delete.extend(keys)
                if cursor == 0:
                    break

            # Use UNLINK for non-blocking deletion
            if keys_to_delete:
                await self._client.unlink(*keys_to_delete)
        except RedisError as e:
            raise self._translate_error(e, "clear") from e

        logger.info(
            f"Cleared partition {partition.value}",
            extra={"deleted": len(keys_to_delete)},
        )
        return True

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            raise self._translate_error(e, "ping") from e

    async def close(self) -> None:
        await self._client.aclose()
