"""
Prayer times API endpoints

Daily schedules by city or coordinates, and place search for location
pickers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ...domain.cache.entities import PrayerTimes
from ...domain.cache.value_objects import ContentDomain, PrayerLocation
from ...infrastructure.http import FetchException, NominatimClient, PlaceNotFoundException
from ...services.cache import PrayerTimesService
from ...services.exceptions import RefreshFailedException
from ..dependencies import get_geocoder, get_prayer_service
from ..schemas import CachedStatusResponse, ContentResponse

router = APIRouter(tags=["prayer-times"])

# At least one non-whitespace character
NON_BLANK = r"\S"


class PlaceResponse(BaseModel):
    label: str
    latitude: float
    longitude: float


@router.get("/prayer-times", response_model=ContentResponse[PrayerTimes])
async def get_prayer_times(
    city: str = Query(
        ..., min_length=1, max_length=100, pattern=NON_BLANK, description="City name"
    ),
    country: Optional[str] = Query(None, max_length=100, description="Country name"),
    refresh: bool = Query(False, description="Bypass the offline tiers"),
    prayer: PrayerTimesService = Depends(get_prayer_service),
):
    """Today's prayer times for a city."""
    location = PrayerLocation.for_city(city, country)

    if refresh:
        prayer_times = await prayer.refresh(location)
        if prayer_times is None:
            raise RefreshFailedException(ContentDomain.PRAYER_TIMES.value, location)
        return ContentResponse[PrayerTimes].from_network(prayer_times)

    result = await prayer.load_with_source(location)
    return ContentResponse[PrayerTimes].from_result(result)


@router.get("/prayer-times/coordinates", response_model=ContentResponse[PrayerTimes])
async def get_prayer_times_by_coordinates(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    label: Optional[str] = Query(None, max_length=200, description="Display label"),
    prayer: PrayerTimesService = Depends(get_prayer_service),
):
    """Today's prayer times for a position, labelled by reverse geocoding."""
    result = await prayer.load_by_coordinates(latitude, longitude, label)
    return ContentResponse[PrayerTimes].from_result(result)


@router.get("/prayer-times/status", response_model=CachedStatusResponse)
async def get_prayer_times_status(
    city: str = Query(..., min_length=1, max_length=100, pattern=NON_BLANK),
    country: Optional[str] = Query(None, max_length=100),
    prayer: PrayerTimesService = Depends(get_prayer_service),
):
    """Whether a city's prayer times are stored for offline use."""
    status = await prayer.get_cached_status(PrayerLocation.for_city(city, country))
    return CachedStatusResponse.from_status(status)


@router.get("/places/search", response_model=PlaceResponse)
async def search_place(
    q: str = Query(
        ..., min_length=2, max_length=200, pattern=NON_BLANK, description="Place name"
    ),
    geocoder: NominatimClient = Depends(get_geocoder),
):
    """Resolve a place name to coordinates."""
    try:
        place = await geocoder.search(q)
    except PlaceNotFoundException as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except FetchException as e:
        raise HTTPException(status_code=503, detail="Geocoding service unavailable") from e
    return PlaceResponse(label=place.label, latitude=place.latitude, longitude=place.longitude)
