"""
Nominatim geocoding client.

Forward (place name -> coordinates) and reverse (coordinates -> place name)
lookups. Reverse lookups are opportunistic and never raise.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.cache.value_objects import FetchOptions
from .exceptions import FetchException, PayloadShapeException, PlaceNotFoundException
from .fetcher import RemoteContentFetcher

logger = logging.getLogger(__name__)

CITY_FIELDS = ("city", "town", "village", "county", "state")


@dataclass(frozen=True)
class GeoPlace:
    """A geocoded place."""

    label: str
    city: str = ""
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class NominatimClient:
    """Geocoding against an OpenStreetMap Nominatim instance."""

    def __init__(
        self,
        fetcher: RemoteContentFetcher,
        base_url: str = "https://nominatim.openstreetmap.org",
        language: str = "ar",
        options: Optional[FetchOptions] = None,
    ):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.options = options or FetchOptions(timeout=10.0, max_retries=1)

    async def reverse(self, latitude: float, longitude: float) -> Optional[GeoPlace]:
        """Name the place at the given coordinates, None when unknown or unreachable."""
        try:
            body = await self.fetcher.get_json(
                f"{self.base_url}/reverse",
                params={
                    "lat": latitude,
                    "lon": longitude,
                    "format": "jsonv2",
                    "accept-language": self.language,
                },
                options=self.options,
            )
        except FetchException as e:
            logger.info(f"Reverse geocoding unavailable: {e.message}")
            return None

        address = body.get("address") if isinstance(body, dict) else None
        address = address or {}
        city = next((address[f] for f in CITY_FIELDS if address.get(f)), "")
        country = address.get("country") or ""

        if city and country:
            return GeoPlace(label=f"{city}، {country}", city=city, country=country)
        if city:
            return GeoPlace(label=city, city=city)
        if country:
            return GeoPlace(label=country, city=country, country=country)
        return None

    async def search(self, query: str) -> GeoPlace:
        """Resolve a place name to coordinates."""
        url = f"{self.base_url}/search"
        body = await self.fetcher.get_json(
            url,
            params={"q": query, "format": "jsonv2", "limit": 1},
            options=self.options,
        )

        first = body[0] if isinstance(body, list) and body else None
        if not first:
            raise PlaceNotFoundException(query)
        if not isinstance(first, dict):
            raise PayloadShapeException("Geocoding result is not an object", url=url)

        try:
            latitude, longitude = float(first["lat"]), float(first["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise PayloadShapeException(
                f"Geocoding result has no usable coordinates: {e}", url=url
            ) from e

        label = first.get("display_name")
        return GeoPlace(
            label=label if isinstance(label, str) and label else query,
            latitude=latitude,
            longitude=longitude,
        )
