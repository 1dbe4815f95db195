"""
Service Container

Builds the shared store, HTTP fetcher, provider clients and cache services
from settings, and closes them again at shutdown.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from ..domain.cache.value_objects import FetchOptions
from ..infrastructure.bundled import (
    bundled_athkar,
    bundled_prayer_times,
    bundled_surah_list,
    bundled_surahs,
)
from ..infrastructure.http import (
    AlAdhanClient,
    AlQuranCloudClient,
    AthkarClient,
    NominatimClient,
    RemoteContentFetcher,
)
from ..infrastructure.storage import ResilientKeyValueStore, create_key_value_store
from ..services.cache import AthkarService, PrayerTimesService, QuranService
from ..services.sync import BulkSyncManager
from ..services.user_data_service import UserDataService
from .config import Settings, get_settings

logger = structlog.get_logger()


@dataclass
class ServiceContainer:
    """Everything the API layer needs, sharing one store and one fetcher."""

    settings: Settings
    store: ResilientKeyValueStore
    fetcher: RemoteContentFetcher
    geocoder: NominatimClient
    quran: QuranService
    prayer_times: PrayerTimesService
    athkar: AthkarService
    user_data: UserDataService
    quran_download: BulkSyncManager

    async def aclose(self) -> None:
        await self.quran_download.aclose()
        await self.fetcher.aclose()
        await self.store.close()
        logger.info("Service container closed")


def build_container(
    settings: Optional[Settings] = None,
    store: Optional[ResilientKeyValueStore] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ServiceContainer:
    """
    Wire services from settings.

    Args:
        settings: Application settings (cached settings when omitted)
        store: Pre-built store, replacing the configured backend
        http_client: Pre-built HTTP client, e.g. with a mock transport
    """
    settings = settings or get_settings()
    store = store or create_key_value_store(settings)

    fetcher = RemoteContentFetcher(
        client=http_client,
        base_delay=settings.FETCH_RETRY_BASE_DELAY,
        default_options=FetchOptions(
            timeout=settings.FETCH_TIMEOUT, max_retries=settings.FETCH_MAX_RETRIES
        ),
        user_agent=settings.HTTP_USER_AGENT,
    )

    geocoder = NominatimClient(
        fetcher,
        base_url=settings.GEOCODING_API_URL,
        language=settings.GEOCODING_LANGUAGE,
        options=FetchOptions(timeout=settings.GEOCODING_TIMEOUT, max_retries=1),
    )

    quran = QuranService(
        store,
        AlQuranCloudClient(
            fetcher,
            base_url=settings.QURAN_API_URL,
            edition=settings.QURAN_EDITION,
            surah_options=FetchOptions(
                timeout=settings.QURAN_SURAH_TIMEOUT,
                max_retries=settings.QURAN_SURAH_MAX_RETRIES,
            ),
            list_options=FetchOptions(
                timeout=settings.QURAN_LIST_TIMEOUT,
                max_retries=settings.QURAN_LIST_MAX_RETRIES,
            ),
        ),
        bundled_surahs=bundled_surahs(settings.QURAN_BUNDLED_PATH),
        bundled_index=bundled_surah_list(),
        sync_options=FetchOptions(
            timeout=settings.BULK_SYNC_TIMEOUT,
            max_retries=settings.BULK_SYNC_MAX_RETRIES,
        ),
        sync_delay_seconds=settings.BULK_SYNC_DELAY_SECONDS,
    )

    prayer_times = PrayerTimesService(
        store,
        AlAdhanClient(
            fetcher,
            base_url=settings.PRAYER_API_URL,
            method=settings.PRAYER_CALCULATION_METHOD,
            options=FetchOptions(
                timeout=settings.PRAYER_TIMEOUT, max_retries=settings.PRAYER_MAX_RETRIES
            ),
            geocoder=geocoder,
        ),
        bundled=bundled_prayer_times(),
    )

    athkar = AthkarService(
        store,
        AthkarClient(
            fetcher,
            url=settings.ATHKAR_API_URL,
            options=FetchOptions(
                timeout=settings.ATHKAR_TIMEOUT, max_retries=settings.ATHKAR_MAX_RETRIES
            ),
        ),
        bundled=bundled_athkar(),
    )

    logger.info(
        "Service container built",
        storage_backend=settings.STORAGE_BACKEND,
        athkar_remote=bool(settings.ATHKAR_API_URL),
    )

    return ServiceContainer(
        settings=settings,
        store=store,
        fetcher=fetcher,
        geocoder=geocoder,
        quran=quran,
        prayer_times=prayer_times,
        athkar=athkar,
        user_data=UserDataService(store),
        quran_download=BulkSyncManager(quran.synchronizer),
    )
