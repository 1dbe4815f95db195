"""
Cache Repository Interfaces

Abstract interfaces the cache services depend on.
Defines contracts for persistence backends and bundled datasets.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Hashable, Optional, TypeVar

from .value_objects import Partition

T = TypeVar("T")
ItemId = TypeVar("ItemId", bound=Hashable)


class KeyValueStore(ABC):
    """
    Abstract asynchronous key-value store partitioned by namespace.

    Backends may raise StorageException subclasses; callers in the service
    layer only ever see them through ResilientKeyValueStore, which turns
    every failure into an absent value or a False result.
    """

    @abstractmethod
    async def get(self, partition: Partition, key: str) -> Optional[Any]:
        """Read a payload, None when absent."""
        pass

    @abstractmethod
    async def put(self, partition: Partition, key: str, payload: Any) -> bool:
        """Write a payload, True when it was stored."""
        pass

    @abstractmethod
    async def delete(self, partition: Partition, key: str) -> bool:
        """Delete a payload, True when the call succeeded."""
        pass

    @abstractmethod
    async def clear(self, partition: Partition) -> bool:
        """Delete every payload of one partition."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None


class BundledDataset(ABC, Generic[ItemId, T]):
    """Static dataset shipped with the application."""

    @abstractmethod
    async def get(self, item_id: ItemId) -> Optional[T]:
        """Bundled entry for item_id, None when the dataset has none."""
        pass
