"""
Cache Value Objects

Immutable value objects for the offline cache domain.
Provides type safety and key naming conventions for cache operations.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from ...constants import ATHKAR_ITEM_ID, TOTAL_SURAHS

T = TypeVar("T")


class Partition(str, Enum):
    """Logical namespaces of the persistence store."""

    APP_CACHE = "app_cache"
    USER_DATA = "user_data"


class ContentDomain(str, Enum):
    """Independently cacheable content areas."""

    QURAN = "quran"
    QURAN_INDEX = "quran_index"
    PRAYER_TIMES = "prayer_times"
    ATHKAR = "athkar"


class CacheSource(str, Enum):
    """Where a cached-status probe found its answer."""

    STORE = "store"
    NONE = "none"


class PayloadSource(str, Enum):
    """Which tier produced a loaded payload."""

    NETWORK = "network"
    STORE = "store"
    BUNDLED = "bundled"


class SyncState(str, Enum):
    """Bulk synchronizer lifecycle states."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Keys follow "<namespace>:<version>:<id>" so every domain owns its prefix
    and a schema change only needs a version bump.
    """

    value: str

    SURAH_NAMESPACE = "quran-surah"
    SURAH_LIST_NAMESPACE = "quran-surahs"
    PRAYER_NAMESPACE = "prayers"
    ATHKAR_NAMESPACE = "athkar"
    TASBIH_NAMESPACE = "tasbih"
    LAST_READ_NAMESPACE = "quran-last-read"

    SURAH_VERSION = "v5"
    LEGACY_SURAH_VERSION = "v4"

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > 250:
            raise ValueError("Cache key too long (max 250 characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def quran_surah(cls, number: int, version: Optional[str] = None) -> "CacheKey":
        """Create surah text cache key."""
        validate_surah_number(number)
        return cls(f"{cls.SURAH_NAMESPACE}:{version or cls.SURAH_VERSION}:{number}")

    @classmethod
    def legacy_quran_surah(cls, number: int) -> "CacheKey":
        """Key used by the previous cache schema for surah text."""
        return cls.quran_surah(number, version=cls.LEGACY_SURAH_VERSION)

    @classmethod
    def quran_surah_list(cls) -> "CacheKey":
        """Create surah metadata list cache key."""
        return cls(f"{cls.SURAH_LIST_NAMESPACE}:{cls.SURAH_VERSION}:all")

    @classmethod
    def prayer_times(cls, location_slug: str) -> "CacheKey":
        """Create prayer times cache key for a location slug."""
        if not location_slug:
            raise ValueError("Location slug cannot be empty")
        return cls(f"{cls.PRAYER_NAMESPACE}:v1:{location_slug}")

    @classmethod
    def athkar(cls, item_id: str = ATHKAR_ITEM_ID) -> "CacheKey":
        """Create athkar collection cache key."""
        if not re.match(r"^[a-z0-9_-]+$", item_id):
            raise ValueError("Invalid athkar collection id")
        return cls(f"{cls.ATHKAR_NAMESPACE}:v1:{item_id}")

    @classmethod
    def tasbih_counters(cls) -> "CacheKey":
        """Create tasbih counters key (user data)."""
        return cls(f"{cls.TASBIH_NAMESPACE}:v2:counters")

    @classmethod
    def last_read(cls) -> "CacheKey":
        """Create last-read bookmark key (user data)."""
        return cls(f"{cls.LAST_READ_NAMESPACE}:v1:bookmark")

    def __str__(self) -> str:
        return self.value


def validate_surah_number(number: int) -> int:
    """Ensure a surah number is within 1..114."""
    if isinstance(number, bool) or not isinstance(number, int):
        raise ValueError(f"Surah number must be an integer, got {number!r}")
    if not 1 <= number <= TOTAL_SURAHS:
        raise ValueError(f"Surah number must be between 1 and {TOTAL_SURAHS}")
    return number


@dataclass(frozen=True)
class PrayerLocation:
    """
    Item identity for prayer times.

    Either a city (with optional country) or a pair of coordinates
    (with an optional human-readable place label).
    """

    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    label: Optional[str] = None

    def __post_init__(self) -> None:
        has_city = bool(self.city and self.city.strip())
        has_coordinates = self.latitude is not None and self.longitude is not None
        if not has_city and not has_coordinates:
            raise ValueError("A prayer location needs a city or coordinates")
        if has_coordinates:
            if not -90 <= self.latitude <= 90:
                raise ValueError("Latitude must be between -90 and 90")
            if not -180 <= self.longitude <= 180:
                raise ValueError("Longitude must be between -180 and 180")

    @classmethod
    def for_city(cls, city: str, country: Optional[str] = None) -> "PrayerLocation":
        return cls(city=city.strip(), country=(country or "").strip() or None)

    @classmethod
    def for_coordinates(
        cls, latitude: float, longitude: float, label: Optional[str] = None
    ) -> "PrayerLocation":
        return cls(latitude=latitude, longitude=longitude, label=label)

    @property
    def uses_coordinates(self) -> bool:
        return not self.city and self.latitude is not None

    @property
    def slug(self) -> str:
        """Stable cache identifier for this location."""
        if self.uses_coordinates:
            return f"{self.latitude:.4f},{self.longitude:.4f}"
        return re.sub(r"\s+", "-", self.city.strip().lower())

    @property
    def fallback_name(self) -> str:
        """Name used to look up bundled fallback timings."""
        return (self.city or self.label or "").strip().lower()

    def __str__(self) -> str:
        return self.slug


@dataclass(frozen=True)
class FetchOptions:
    """
    Retry budget of one remote fetch.

    Transient: created per call and discarded after success or final failure.
    """

    timeout: float = 15.0
    max_retries: int = 3

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("Fetch timeout must be positive")
        if self.max_retries < 1:
            raise ValueError("Fetch needs at least one attempt")


@dataclass(frozen=True)
class CachedStatus:
    """Result of a read-only cache probe."""

    cached: bool
    source: CacheSource

    @classmethod
    def hit(cls) -> "CachedStatus":
        return cls(cached=True, source=CacheSource.STORE)

    @classmethod
    def miss(cls) -> "CachedStatus":
        return cls(cached=False, source=CacheSource.NONE)

    def to_dict(self) -> Dict[str, Any]:
        return {"cached": self.cached, "source": self.source.value}


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """A loaded payload together with the tier that produced it."""

    payload: T
    source: PayloadSource

    @property
    def is_offline_copy(self) -> bool:
        return self.source is not PayloadSource.NETWORK


@dataclass(frozen=True)
class SyncProgress:
    """Progress of a bulk synchronization, emitted after every item."""

    available: int
    total: int
    current: int

    @property
    def is_complete(self) -> bool:
        return self.available >= self.total

    def to_dict(self) -> Dict[str, int]:
        return {
            "available": self.available,
            "total": self.total,
            "current": self.current,
        }


@dataclass
class SyncStatus:
    """Polling view of one bulk synchronizer."""

    state: SyncState = SyncState.IDLE
    progress: Optional[SyncProgress] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "progress": self.progress.to_dict() if self.progress else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
