"""
Resilient Key-Value Store

Best-effort boundary in front of any backend. Every operation degrades to an
absent value or a False result instead of raising, so callers can treat
persistence purely as an optimization.
"""

import logging
from typing import Any, Dict, Optional

from ...domain.cache.repository_interfaces import KeyValueStore
from ...domain.cache.value_objects import Partition
from .exceptions import StorageException

logger = logging.getLogger(__name__)


class ResilientKeyValueStore(KeyValueStore):
    """Wraps a backend and absorbs its failures."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        self.failure_count = 0
        self.last_error: Optional[str] = None

    def _record_failure(
        self, operation: str, partition: Partition, key: Optional[str], error: Exception
    ) -> None:
        self.failure_count += 1
        self.last_error = str(error)
        extra: Dict[str, Any] = {
            "operation": operation,
            "partition": partition.value,
            "key": key,
            "error_type": type(error).__name__,
        }
        if isinstance(error, StorageException):
            extra["error_code"] = error.error_code
        logger.warning(
            f"Storage {operation} degraded gracefully: {error}", extra=extra
        )

    async def get(self, partition: Partition, key: str) -> Optional[Any]:
        try:
            return await self.backend.get(partition, key)
        except Exception as e:
            self._record_failure("get", partition, key, e)
            return None

    async def put(self, partition: Partition, key: str, payload: Any) -> bool:
        try:
            return bool(await self.backend.put(partition, key, payload))
        except Exception as e:
            self._record_failure("put", partition, key, e)
            return False

    async def delete(self, partition: Partition, key: str) -> bool:
        try:
            return bool(await self.backend.delete(partition, key))
        except Exception as e:
            self._record_failure("delete", partition, key, e)
            return False

    async def clear(self, partition: Partition) -> bool:
        try:
            return bool(await self.backend.clear(partition))
        except Exception as e:
            self._record_failure("clear", partition, None, e)
            return False

    async def health_check(self) -> Dict[str, Any]:
        """Report backend reachability without raising."""
        backend_name = type(self.backend).__name__
        ping = getattr(self.backend, "ping", None)
        available = True
        error = None
        if ping is not None:
            try:
                available = bool(await ping())
            except Exception as e:
                available = False
                error = str(e)
        return {
            "backend": backend_name,
            "available": available,
            "degraded_operations": self.failure_count,
            "last_error": error or self.last_error,
        }

    async def close(self) -> None:
        try:
            await self.backend.close()
        except Exception as e:
            logger.warning(f"Error closing storage backend: {e}")
