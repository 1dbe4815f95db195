"""
In-memory key-value backends.

InMemoryKeyValueStore keeps JSON-encoded payloads per partition and can
enforce an entry quota. DisabledKeyValueStore models storage that is absent
altogether (private mode, feature turned off).
"""

import json
from typing import Any, Dict, Optional

from ...domain.cache.repository_interfaces import KeyValueStore
from ...domain.cache.value_objects import Partition
from .exceptions import (
    StorageQuotaException,
    StorageSerializationException,
    StorageUnavailableException,
)


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; payloads are copied through JSON like a real backend."""

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries
        self._data: Dict[Partition, Dict[str, str]] = {
            partition: {} for partition in Partition
        }

    def _entry_count(self) -> int:
        return sum(len(entries) for entries in self._data.values())

    async def get(self, partition: Partition, key: str) -> Optional[Any]:
        raw = self._data[partition].get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageSerializationException(key, e) from e

    async def put(self, partition: Partition, key: str, payload: Any) -> bool:
        try:
            raw = json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageSerializationException(key, e) from e

        entries = self._data[partition]
        if (
            self.max_entries is not None
            and key not in entries
            and self._entry_count() >= self.max_entries
        ):
            raise StorageQuotaException(self.max_entries, key)

        entries[key] = raw
        return True

    async def delete(self, partition: Partition, key: str) -> bool:
        self._data[partition].pop(key, None)
        return True

    async def clear(self, partition: Partition) -> bool:
        self._data[partition].clear()
        return True

    def keys(self, partition: Partition) -> list:
        """Stored keys of one partition, in insertion order."""
        return list(self._data[partition])


class DisabledKeyValueStore(KeyValueStore):
    """Backend that is never available."""

    def __init__(self, reason: str = "storage disabled"):
        self.reason = reason

    def _unavailable(self) -> StorageUnavailableException:
        return StorageUnavailableException(message=self.reason, backend="disabled")

    async def get(self, partition: Partition, key: str) -> Optional[Any]:
        raise self._unavailable()

    async def put(self, partition: Partition, key: str, payload: Any) -> bool:
        raise self._unavailable()

    async def delete(self, partition: Partition, key: str) -> bool:
        raise self._unavailable()

    async def clear(self, partition: Partition) -> bool:
        raise self._unavailable()

    async def ping(self) -> bool:
        raise self._unavailable()
