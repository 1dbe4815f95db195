"""
User Data Service

Tasbih counters and the last-read bookmark, kept in the user_data
partition. There is no remote source and no fallback chain: a missing or
unreadable entry yields the default (empty counters, no bookmark).
"""

import asyncio
from typing import Dict, Optional

import structlog
from pydantic import ValidationError

from ..constants import get_current_timestamp
from ..domain.cache.entities import LastRead, TasbihCounters
from ..domain.cache.repository_interfaces import KeyValueStore
from ..domain.cache.value_objects import CacheKey, Partition

logger = structlog.get_logger()


class UserDataService:
    """
    Reads and writes small per-user records through the shared store.

    Counter updates are read-modify-write and run one at a time.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.partition = Partition.USER_DATA
        self._lock = asyncio.Lock()

    # Tasbih counters

    async def get_counters(self) -> TasbihCounters:
        raw = await self.store.get(self.partition, str(CacheKey.tasbih_counters()))
        if raw is None:
            return TasbihCounters()
        try:
            return TasbihCounters.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed tasbih counters")
            return TasbihCounters()

    async def save_counters(self, counters: Dict[str, int]) -> TasbihCounters:
        """
        Replace every counter.

        Raises:
            ValidationError: If a counter is negative
        """
        async with self._lock:
            return await self._save_counters(counters)

    async def increment(self, name: str, by: int = 1) -> TasbihCounters:
        if by < 1:
            raise ValueError("Increment must be at least 1")
        async with self._lock:
            current = await self.get_counters()
            counters = dict(current.counters)
            counters[name] = counters.get(name, 0) + by
            return await self._save_counters(counters)

    async def reset(self, name: Optional[str] = None) -> TasbihCounters:
        """Reset one counter, or all of them when name is None."""
        async with self._lock:
            if name is None:
                return await self._save_counters({})
            current = await self.get_counters()
            counters = dict(current.counters)
            counters.pop(name, None)
            return await self._save_counters(counters)

    async def _save_counters(self, counters: Dict[str, int]) -> TasbihCounters:
        record = TasbihCounters(counters=counters, updated_at=get_current_timestamp())
        await self._put(CacheKey.tasbih_counters(), record.model_dump(mode="json"))
        return record

    # Last-read bookmark

    async def get_last_read(self) -> Optional[LastRead]:
        raw = await self.store.get(self.partition, str(CacheKey.last_read()))
        if raw is None:
            return None
        try:
            return LastRead.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed last-read bookmark")
            return None

    async def save_last_read(self, surah_number: int, ayah_number: int) -> LastRead:
        """
        Store the bookmark.

        Raises:
            ValidationError: If the surah or ayah number is out of range
        """
        bookmark = LastRead(
            surah_number=surah_number,
            ayah_number=ayah_number,
            timestamp=get_current_timestamp(),
        )
        await self._put(CacheKey.last_read(), bookmark.model_dump(mode="json"))
        return bookmark

    async def _put(self, key: CacheKey, payload: Dict) -> bool:
        stored = await self.store.put(self.partition, str(key), payload)
        if not stored:
            logger.warning("User data not persisted, store unavailable", key=str(key))
        return stored
