"""
Prayer Times Cache Service

Daily schedules keyed by location (city or coordinates).
"""

from typing import Optional

from ...domain.cache.domain_services import has_real_timings
from ...domain.cache.entities import PrayerTimes
from ...domain.cache.repository_interfaces import BundledDataset, KeyValueStore
from ...domain.cache.value_objects import (
    CachedStatus,
    CacheKey,
    ContentDomain,
    FetchOptions,
    LoadResult,
    PrayerLocation,
)
from ...infrastructure.http.prayer_client import AlAdhanClient
from .domain_cache_service import DomainCacheService


def prayer_times_key(location: PrayerLocation) -> CacheKey:
    return CacheKey.prayer_times(location.slug)


class PrayerTimesService:
    """Prayer times with network, store and bundled-city tiers."""

    def __init__(
        self,
        store: KeyValueStore,
        client: AlAdhanClient,
        bundled: Optional[BundledDataset] = None,
    ):
        self.client = client
        self.cache: DomainCacheService[PrayerLocation, PrayerTimes] = DomainCacheService(
            domain=ContentDomain.PRAYER_TIMES,
            store=store,
            fetch=client.fetch,
            key_for=prayer_times_key,
            model=PrayerTimes,
            validator=has_real_timings,
            bundled=bundled,
        )

    async def load(self, location: PrayerLocation) -> PrayerTimes:
        return await self.cache.load(location)

    async def load_with_source(self, location: PrayerLocation) -> LoadResult[PrayerTimes]:
        return await self.cache.load_with_source(location)

    async def load_by_coordinates(
        self, latitude: float, longitude: float, label: Optional[str] = None
    ) -> LoadResult[PrayerTimes]:
        location = PrayerLocation.for_coordinates(latitude, longitude, label)
        return await self.cache.load_with_source(location)

    async def refresh(
        self, location: PrayerLocation, options: Optional[FetchOptions] = None
    ) -> Optional[PrayerTimes]:
        return await self.cache.refresh(location, options)

    async def get_cached_status(self, location: PrayerLocation) -> CachedStatus:
        return await self.cache.get_cached_status(location)
