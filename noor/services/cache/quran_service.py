"""
Quran Cache Service

Offline-first access to surah text and the surah index, plus the
"download the whole Quran" bulk synchronization.
"""

from typing import Optional

import structlog

from ...constants import TOTAL_SURAHS
from ...domain.cache.domain_services import has_real_text, has_surah_index
from ...domain.cache.entities import Surah, SurahList
from ...domain.cache.repository_interfaces import BundledDataset, KeyValueStore
from ...domain.cache.value_objects import (
    CachedStatus,
    CacheKey,
    ContentDomain,
    FetchOptions,
    LoadResult,
    validate_surah_number,
)
from ...infrastructure.http.quran_client import AlQuranCloudClient
from ..sync.bulk_synchronizer import BulkSynchronizer, ProgressCallback
from ..sync.cancellation import CancellationToken
from .domain_cache_service import DomainCacheService

logger = structlog.get_logger()

SURAH_LIST_ID = "all"


def surah_list_key(item_id: str = SURAH_LIST_ID) -> CacheKey:
    return CacheKey.quran_surah_list()


class QuranService:
    """
    Surah text and index with network, store and bundled tiers.

    Surah numbers outside 1..114 raise ValueError before any tier is tried.
    """

    def __init__(
        self,
        store: KeyValueStore,
        client: AlQuranCloudClient,
        bundled_surahs: Optional[BundledDataset] = None,
        bundled_index: Optional[BundledDataset] = None,
        sync_options: Optional[FetchOptions] = None,
        sync_delay_seconds: float = 0.25,
    ):
        self.client = client
        self.surahs: DomainCacheService[int, Surah] = DomainCacheService(
            domain=ContentDomain.QURAN,
            store=store,
            fetch=client.fetch_surah,
            key_for=CacheKey.quran_surah,
            model=Surah,
            validator=has_real_text,
            bundled=bundled_surahs,
            legacy_key_for=CacheKey.legacy_quran_surah,
        )
        self.index: DomainCacheService[str, SurahList] = DomainCacheService(
            domain=ContentDomain.QURAN_INDEX,
            store=store,
            fetch=client.fetch_surah_list,
            key_for=surah_list_key,
            model=SurahList,
            validator=has_surah_index,
            bundled=bundled_index,
        )
        self.synchronizer = BulkSynchronizer(
            domain=ContentDomain.QURAN,
            items=range(1, TOTAL_SURAHS + 1),
            target=self.surahs,
            options=sync_options or FetchOptions(timeout=20.0, max_retries=2),
            delay_seconds=sync_delay_seconds,
        )

    async def load_surah(self, number: int) -> Surah:
        validate_surah_number(number)
        return await self.surahs.load(number)

    async def load_surah_with_source(self, number: int) -> LoadResult[Surah]:
        validate_surah_number(number)
        return await self.surahs.load_with_source(number)

    async def refresh_surah(
        self, number: int, options: Optional[FetchOptions] = None
    ) -> Optional[Surah]:
        validate_surah_number(number)
        return await self.surahs.refresh(number, options)

    async def get_cached_status(self, number: int) -> CachedStatus:
        validate_surah_number(number)
        return await self.surahs.get_cached_status(number)

    async def list_surahs(self) -> SurahList:
        return await self.index.load(SURAH_LIST_ID)

    async def list_surahs_with_source(self) -> LoadResult[SurahList]:
        return await self.index.load_with_source(SURAH_LIST_ID)

    async def refresh_surah_list(self) -> Optional[SurahList]:
        return await self.index.refresh(SURAH_LIST_ID)

    async def get_cached_surah_count(self) -> int:
        """Number of surahs with a validated entry in the store."""
        count = 0
        for number in range(1, TOTAL_SURAHS + 1):
            status = await self.surahs.get_cached_status(number)
            if status.cached:
                count += 1
        return count

    async def download_all(
        self,
        on_progress: Optional[ProgressCallback] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> int:
        """
        Download every surah not yet stored.

        Args:
            on_progress: Receives {available, total, current} after each surah
            cancellation: Stops the run before the next surah once cancelled

        Returns:
            Number of surahs available offline when the run ended

        Raises:
            SyncAlreadyRunningException: If a download is already running
        """
        return await self.synchronizer.download_all(on_progress, cancellation)
