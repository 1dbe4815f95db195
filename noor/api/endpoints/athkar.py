"""Athkar API endpoints"""

from fastapi import APIRouter, Depends, Query

from ...constants import ATHKAR_ITEM_ID
from ...domain.cache.entities import AthkarCollection
from ...domain.cache.value_objects import ContentDomain
from ...services.cache import AthkarService
from ...services.exceptions import RefreshFailedException
from ..dependencies import get_athkar_service
from ..schemas import CachedStatusResponse, ContentResponse

router = APIRouter(prefix="/athkar", tags=["athkar"])


@router.get("", response_model=ContentResponse[AthkarCollection])
async def get_athkar(
    refresh: bool = Query(False, description="Bypass the offline tiers"),
    athkar: AthkarService = Depends(get_athkar_service),
):
    """The athkar collection."""
    if refresh:
        collection = await athkar.refresh()
        if collection is None:
            raise RefreshFailedException(ContentDomain.ATHKAR.value, ATHKAR_ITEM_ID)
        return ContentResponse[AthkarCollection].from_network(collection)

    result = await athkar.load_with_source()
    return ContentResponse[AthkarCollection].from_result(result)


@router.get("/status", response_model=CachedStatusResponse)
async def get_athkar_status(athkar: AthkarService = Depends(get_athkar_service)):
    status = await athkar.get_cached_status()
    return CachedStatusResponse.from_status(status)
