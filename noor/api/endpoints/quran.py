"""
Quran API endpoints

Surah text and index with offline fallback, cache probes and the
background "download all surahs" job.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from ...constants import TOTAL_SURAHS
from ...domain.cache.entities import Surah, SurahList
from ...domain.cache.value_objects import ContentDomain
from ...services.cache import QuranService
from ...services.exceptions import RefreshFailedException
from ...services.sync import BulkSyncManager
from ..dependencies import get_quran_download, get_quran_service
from ..schemas import CachedStatusResponse, ContentResponse

logger = structlog.get_logger()
router = APIRouter(prefix="/quran", tags=["quran"])


class OfflineAvailability(BaseModel):
    """How many surahs can be read without a connection."""

    available: int
    total: int


@router.get("/surahs", response_model=ContentResponse[SurahList])
async def list_surahs(
    refresh: bool = Query(False, description="Bypass the offline tiers"),
    quran: QuranService = Depends(get_quran_service),
):
    """Metadata of all surahs."""
    if refresh:
        surah_list = await quran.refresh_surah_list()
        if surah_list is None:
            raise RefreshFailedException(ContentDomain.QURAN_INDEX.value, "all")
        return ContentResponse[SurahList].from_network(surah_list)

    result = await quran.list_surahs_with_source()
    return ContentResponse[SurahList].from_result(result)


@router.get("/surahs/{number}", response_model=ContentResponse[Surah])
async def get_surah(
    number: int = Path(..., ge=1, le=TOTAL_SURAHS, description="Surah number"),
    refresh: bool = Query(False, description="Bypass the offline tiers"),
    quran: QuranService = Depends(get_quran_service),
):
    """
    Full text of one surah.

    Args:
        number: Surah number
        refresh: Fetch from the network only, failing instead of falling back

    Returns:
        The surah and the tier that served it
    """
    if refresh:
        surah = await quran.refresh_surah(number)
        if surah is None:
            raise RefreshFailedException(ContentDomain.QURAN.value, number)
        return ContentResponse[Surah].from_network(surah)

    result = await quran.load_surah_with_source(number)
    return ContentResponse[Surah].from_result(result)


@router.get("/surahs/{number}/status", response_model=CachedStatusResponse)
async def get_surah_status(
    number: int = Path(..., ge=1, le=TOTAL_SURAHS, description="Surah number"),
    quran: QuranService = Depends(get_quran_service),
):
    """Whether a surah is stored for offline reading."""
    status = await quran.get_cached_status(number)
    return CachedStatusResponse.from_status(status)


@router.get("/offline", response_model=OfflineAvailability)
async def get_offline_availability(quran: QuranService = Depends(get_quran_service)):
    """Number of surahs stored for offline reading."""
    available = await quran.get_cached_surah_count()
    return OfflineAvailability(available=available, total=TOTAL_SURAHS)


@router.post("/download", status_code=202)
async def start_download(
    manager: BulkSyncManager = Depends(get_quran_download),
) -> Dict[str, Any]:
    """Start downloading every surah in the background."""
    status = manager.start()
    logger.info("Quran download started via API")
    return status


@router.get("/download")
async def get_download_status(
    manager: BulkSyncManager = Depends(get_quran_download),
) -> Dict[str, Any]:
    """Current state and progress of the download job."""
    return manager.status()


@router.get("/download/events")
async def stream_download_events(
    manager: BulkSyncManager = Depends(get_quran_download),
):
    """Download progress as Server-Sent Events."""
    return StreamingResponse(
        manager.stream_events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.delete("/download")
async def cancel_download(
    manager: BulkSyncManager = Depends(get_quran_download),
) -> Dict[str, Any]:
    """Stop the download before its next surah."""
    cancelled = manager.cancel()
    return {"cancelled": cancelled, **manager.status()}
