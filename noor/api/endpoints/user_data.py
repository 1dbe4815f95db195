"""
User data API endpoints

Tasbih counters and the last-read bookmark.
"""

from typing import Annotated, Dict, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from ...constants import TOTAL_SURAHS
from ...domain.cache.entities import LastRead, TasbihCounters
from ...services.user_data_service import UserDataService
from ..dependencies import get_user_data_service

router = APIRouter(prefix="/user", tags=["user-data"])


class TasbihUpdate(BaseModel):
    """Replacement set of tasbih counters."""

    counters: Dict[str, Annotated[int, Field(ge=0)]] = Field(default_factory=dict)


class LastReadUpdate(BaseModel):
    """New last-read position."""

    surah_number: int = Field(..., ge=1, le=TOTAL_SURAHS)
    ayah_number: int = Field(..., ge=1)


@router.get("/tasbih", response_model=TasbihCounters)
async def get_tasbih(user_data: UserDataService = Depends(get_user_data_service)):
    return await user_data.get_counters()


@router.put("/tasbih", response_model=TasbihCounters)
async def save_tasbih(
    update: TasbihUpdate,
    user_data: UserDataService = Depends(get_user_data_service),
):
    return await user_data.save_counters(update.counters)


@router.post("/tasbih/{name}/increment", response_model=TasbihCounters)
async def increment_tasbih(
    name: str = Path(..., min_length=1, max_length=100),
    by: int = Query(1, ge=1, le=1000),
    user_data: UserDataService = Depends(get_user_data_service),
):
    """Add to one counter, creating it at zero when missing."""
    return await user_data.increment(name, by)


@router.delete("/tasbih", response_model=TasbihCounters)
async def reset_tasbih(
    name: Optional[str] = Query(None, description="Counter to reset; all when omitted"),
    user_data: UserDataService = Depends(get_user_data_service),
):
    return await user_data.reset(name)


@router.get("/last-read", response_model=Optional[LastRead])
async def get_last_read(user_data: UserDataService = Depends(get_user_data_service)):
    return await user_data.get_last_read()


@router.put("/last-read", response_model=LastRead)
async def save_last_read(
    update: LastReadUpdate,
    user_data: UserDataService = Depends(get_user_data_service),
):
    return await user_data.save_last_read(update.surah_number, update.ayah_number)
