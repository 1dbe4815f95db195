"""
AlAdhan prayer times client.

Fetches the daily schedule by city or by coordinates. For coordinates the
reverse-geocoding lookup runs concurrently and supplies the display label.
"""

import asyncio
import re
from datetime import date
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ...constants import CURRENT_LOCATION_LABEL, PRAYER_ORDER, PRAYER_TIME_PLACEHOLDER
from ...domain.cache.entities import PrayerTimes, PrayerTiming
from ...domain.cache.value_objects import FetchOptions, PrayerLocation
from .exceptions import PayloadShapeException
from .fetcher import RemoteContentFetcher
from .geocoding_client import NominatimClient

SOURCE_NAME = "AlAdhan API"


def clean_time_value(value: str) -> str:
    """Strip timezone suffixes such as "05:03 (EET)"."""
    return re.sub(r"\s*\([^)]*\)", "", value).strip()


def timing_value(raw: Any) -> str:
    """Render one AlAdhan timing; anything but a non-empty string is a placeholder."""
    if not isinstance(raw, str):
        return PRAYER_TIME_PLACEHOLDER
    return clean_time_value(raw) or PRAYER_TIME_PLACEHOLDER


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def map_aladhan_data(
    body: Any, city: str, country: str = "", url: Optional[str] = None
) -> PrayerTimes:
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict) or not isinstance(data.get("timings"), dict):
        raise PayloadShapeException("Prayer times response has no timings", url=url)

    timings = data["timings"]
    readable_date = _section(data, "date").get("readable")
    if not isinstance(readable_date, str) or not readable_date:
        readable_date = date.today().isoformat()
    timezone = _section(data, "meta").get("timezone")
    if not isinstance(timezone, str) or not timezone:
        timezone = "UTC"

    try:
        return PrayerTimes(
            city=city,
            country=country,
            source=SOURCE_NAME,
            date=readable_date,
            timezone=timezone,
            prayers=[
                PrayerTiming(name=name, time=timing_value(timings.get(name)))
                for name in PRAYER_ORDER
            ],
        )
    except ValidationError as e:
        raise PayloadShapeException(f"Malformed prayer times: {e}", url=url) from e


class AlAdhanClient:
    """Fetches daily prayer timings for a PrayerLocation."""

    def __init__(
        self,
        fetcher: RemoteContentFetcher,
        base_url: str = "https://api.aladhan.com/v1",
        method: int = 5,
        options: Optional[FetchOptions] = None,
        geocoder: Optional[NominatimClient] = None,
    ):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.method = method
        self.options = options or FetchOptions(timeout=10.0, max_retries=3)
        self.geocoder = geocoder

    async def fetch(
        self, location: PrayerLocation, options: Optional[FetchOptions] = None
    ) -> PrayerTimes:
        if location.uses_coordinates:
            return await self.fetch_by_coordinates(location, options)
        return await self.fetch_by_city(location, options)

    async def fetch_by_city(
        self, location: PrayerLocation, options: Optional[FetchOptions] = None
    ) -> PrayerTimes:
        url = f"{self.base_url}/timingsByCity"
        body = await self.fetcher.get_json(
            url,
            params={
                "city": location.city,
                "country": location.country or "",
                "method": self.method,
            },
            options=options or self.options,
        )
        return map_aladhan_data(body, location.city, location.country or "", url)

    async def fetch_by_coordinates(
        self, location: PrayerLocation, options: Optional[FetchOptions] = None
    ) -> PrayerTimes:
        url = f"{self.base_url}/timings"
        timings_request = self.fetcher.get_json(
            url,
            params={
                "latitude": location.latitude,
                "longitude": location.longitude,
                "method": self.method,
            },
            options=options or self.options,
        )

        if self.geocoder is not None:
            body, place = await asyncio.gather(
                timings_request,
                self.geocoder.reverse(location.latitude, location.longitude),
            )
        else:
            body, place = await timings_request, None

        city = (place.label if place else None) or location.label or CURRENT_LOCATION_LABEL
        country = place.country if place else ""
        return map_aladhan_data(body, city, country, url)
