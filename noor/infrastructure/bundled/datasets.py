"""
Bundled Datasets

Static JSON datasets packaged with the application. Each file is read and
parsed once, on first use, behind an asyncio lock; a file that is missing or
does not parse leaves the dataset empty so every lookup is a miss.
"""

import asyncio
import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Dict, Hashable, Optional, TypeVar

from pydantic import ValidationError

from ...constants import ATHKAR_ITEM_ID, CURRENT_LOCATION_LABEL
from ...domain.cache.entities import AthkarCollection, PrayerTimes, Surah, SurahList
from ...domain.cache.repository_interfaces import BundledDataset
from ...domain.cache.value_objects import PrayerLocation

logger = logging.getLogger(__name__)

DATA_PACKAGE = "noor.data"

ItemId = TypeVar("ItemId", bound=Hashable)
T = TypeVar("T")

DEFAULT_PRAYER_CITY = "cairo"


def _identity(item_id: Any) -> Any:
    return item_id


class StaticBundledDataset(BundledDataset[ItemId, T]):
    """Dataset backed by an in-memory mapping."""

    def __init__(
        self,
        entries: Optional[Dict[Hashable, T]] = None,
        lookup_key: Callable[[ItemId], Hashable] = _identity,
    ):
        self.entries = dict(entries or {})
        self.lookup_key = lookup_key

    async def get(self, item_id: ItemId) -> Optional[T]:
        return self.entries.get(self.lookup_key(item_id))


class JsonBundledDataset(BundledDataset[ItemId, T]):
    """
    Dataset parsed lazily from a packaged JSON resource or a file path.

    Args:
        resource: File name inside the noor.data package
        parse: Turns the decoded JSON document into a lookup mapping
        lookup_key: Maps an item id to its key in that mapping
        path: Optional file system path that replaces the packaged resource
    """

    def __init__(
        self,
        resource: str,
        parse: Callable[[Any], Dict[Hashable, T]],
        lookup_key: Callable[[ItemId], Hashable] = _identity,
        path: Optional[str] = None,
    ):
        self.resource = resource
        self.parse = parse
        self.lookup_key = lookup_key
        self.path = path
        self._entries: Optional[Dict[Hashable, T]] = None
        self._lock = asyncio.Lock()

    async def get(self, item_id: ItemId) -> Optional[T]:
        entries = await self._ensure_loaded()
        return entries.get(self.lookup_key(item_id))

    @property
    def loaded(self) -> bool:
        return self._entries is not None

    async def _ensure_loaded(self) -> Dict[Hashable, T]:
        if self._entries is not None:
            return self._entries

        async with self._lock:
            if self._entries is None:
                self._entries = self._load()
        return self._entries

    def _read_text(self) -> str:
        if self.path:
            return Path(self.path).read_text(encoding="utf-8")
        return resources.files(DATA_PACKAGE).joinpath(self.resource).read_text(
            encoding="utf-8"
        )

    def _load(self) -> Dict[Hashable, T]:
        source = self.path or f"{DATA_PACKAGE}/{self.resource}"
        try:
            entries = self.parse(json.loads(self._read_text()))
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
            logger.error(
                f"Bundled dataset {source} could not be loaded: {e}",
                extra={"source": source, "error_type": type(e).__name__},
            )
            return {}

        logger.info(f"Loaded bundled dataset {source} ({len(entries)} entries)")
        return entries


class PrayerFallbackDataset(JsonBundledDataset[PrayerLocation, PrayerTimes]):
    """
    Bundled prayer timings that answer for every location.

    A known city (or alias) gets its own schedule. Any other location gets
    the default city's schedule relabelled with the requested place name.
    """

    def __init__(self, default_key: str = DEFAULT_PRAYER_CITY, path: Optional[str] = None):
        super().__init__(
            "prayer_fallback.json",
            parse_prayer_fallbacks,
            lookup_key=prayer_lookup_key,
            path=path,
        )
        self.default_key = default_key

    async def get(self, item_id: PrayerLocation) -> Optional[PrayerTimes]:
        entries = await self._ensure_loaded()
        timings = entries.get(self.lookup_key(item_id))
        if timings is not None:
            return timings

        default = entries.get(self.default_key)
        if default is None:
            return None
        label = (item_id.city or item_id.label or "").strip() or CURRENT_LOCATION_LABEL
        return default.model_copy(update={"city": label, "country": item_id.country or ""})


def parse_surahs(document: Dict[str, Any]) -> Dict[Hashable, Surah]:
    surahs = (Surah.model_validate(raw) for raw in document["surahs"])
    return {surah.number: surah for surah in surahs}


def parse_surah_list(document: Dict[str, Any]) -> Dict[Hashable, SurahList]:
    return {"all": SurahList.model_validate(document)}


def parse_prayer_fallbacks(document: Dict[str, Any]) -> Dict[Hashable, PrayerTimes]:
    """Index each city's timings under its key and every alias."""
    entries: Dict[Hashable, PrayerTimes] = {}
    for key, raw in document.items():
        raw = dict(raw)
        aliases = raw.pop("aliases", [])
        timings = PrayerTimes.model_validate(raw)
        for name in [key, *aliases]:
            entries[name.strip().lower()] = timings
    return entries


def parse_athkar(document: Any) -> Dict[Hashable, AthkarCollection]:
    return {ATHKAR_ITEM_ID: AthkarCollection.model_validate(document)}


def prayer_lookup_key(location: PrayerLocation) -> str:
    return location.fallback_name


def bundled_surahs(path: Optional[str] = None) -> JsonBundledDataset[int, Surah]:
    return JsonBundledDataset("quran_bundled.json", parse_surahs, path=path)


def bundled_surah_list() -> JsonBundledDataset[str, SurahList]:
    return JsonBundledDataset("quran_surahs.json", parse_surah_list)


def bundled_prayer_times() -> PrayerFallbackDataset:
    return PrayerFallbackDataset()


def bundled_athkar() -> JsonBundledDataset[str, AthkarCollection]:
    return JsonBundledDataset("athkar.json", parse_athkar)
