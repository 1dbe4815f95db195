"""
AlQuran Cloud client.

Maps the provider's surah index and single-surah responses to domain models.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from ...constants import REVELATION_PLACES, UNKNOWN_REVELATION_PLACE
from ...domain.cache.entities import Ayah, Surah, SurahList, SurahSummary
from ...domain.cache.value_objects import FetchOptions, validate_surah_number
from .exceptions import PayloadShapeException
from .fetcher import RemoteContentFetcher


def map_revelation(revelation_type: Optional[str]) -> str:
    if revelation_type is None:
        return UNKNOWN_REVELATION_PLACE
    return REVELATION_PLACES.get(revelation_type, revelation_type)


def map_surah_summary(raw: Dict[str, Any]) -> SurahSummary:
    return SurahSummary(
        number=raw["number"],
        name_arabic=raw["name"],
        revelation_place=map_revelation(raw.get("revelationType")),
        ayah_count=raw["numberOfAyahs"],
    )


def map_surah_detail(raw: Dict[str, Any]) -> Surah:
    return Surah(
        number=raw["number"],
        name_arabic=raw["name"],
        revelation_place=map_revelation(raw.get("revelationType")),
        ayahs=[
            Ayah(number=ayah["numberInSurah"], text=ayah["text"])
            for ayah in raw["ayahs"]
        ],
    )


class AlQuranCloudClient:
    """Fetches surah metadata and full surah text for one script edition."""

    def __init__(
        self,
        fetcher: RemoteContentFetcher,
        base_url: str = "https://api.alquran.cloud/v1",
        edition: str = "quran-uthmani",
        surah_options: Optional[FetchOptions] = None,
        list_options: Optional[FetchOptions] = None,
    ):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.edition = edition
        self.surah_options = surah_options or FetchOptions(timeout=15.0, max_retries=2)
        self.list_options = list_options or FetchOptions(timeout=10.0, max_retries=3)

    def surah_url(self, number: int) -> str:
        return f"{self.base_url}/surah/{number}/{self.edition}"

    async def fetch_surah(
        self, number: int, options: Optional[FetchOptions] = None
    ) -> Surah:
        """Fetch the full text of one surah."""
        validate_surah_number(number)
        url = self.surah_url(number)
        body = await self.fetcher.get_json(url, options=options or self.surah_options)

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data.get("ayahs"):
            raise PayloadShapeException("Surah response has no ayahs", url=url)
        if data.get("number") != number:
            raise PayloadShapeException(
                f"Surah response is for surah {data.get('number')}, expected {number}",
                url=url,
            )

        try:
            return map_surah_detail(data)
        except (KeyError, TypeError, ValidationError) as e:
            raise PayloadShapeException(f"Malformed surah response: {e}", url=url) from e

    async def fetch_surah_list(
        self, item_id: str = "all", options: Optional[FetchOptions] = None
    ) -> SurahList:
        """Fetch metadata of every surah."""
        url = f"{self.base_url}/surah"
        body = await self.fetcher.get_json(url, options=options or self.list_options)

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list) or not data:
            raise PayloadShapeException("Surah index response is empty", url=url)

        try:
            return SurahList(surahs=[map_surah_summary(raw) for raw in data])
        except (KeyError, TypeError, ValidationError) as e:
            raise PayloadShapeException(
                f"Malformed surah index response: {e}", url=url
            ) from e
