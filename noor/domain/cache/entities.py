"""
Cache Domain Entities

Payload models for every cacheable content domain and for user data.
Stored payloads are the JSON dump of these models; anything that no longer
parses into them is treated as a cache miss.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ...constants import PRAYER_ORDER, get_current_timestamp


class Ayah(BaseModel):
    """Single verse with its in-surah number."""

    number: int = Field(..., ge=1, description="Verse number within the surah")
    text: str = Field(..., description="Verse body text")


class Surah(BaseModel):
    """Full text of one surah."""

    number: int = Field(..., ge=1, le=114)
    name_arabic: str
    revelation_place: str
    ayahs: List[Ayah] = Field(default_factory=list)

    @property
    def first_text(self) -> str:
        return self.ayahs[0].text if self.ayahs else ""


class SurahSummary(BaseModel):
    """Surah metadata used by the chapter index."""

    number: int = Field(..., ge=1, le=114)
    name_arabic: str
    revelation_place: str
    ayah_count: int = Field(..., ge=1)


class SurahList(BaseModel):
    """Ordered metadata list of all surahs."""

    surahs: List[SurahSummary] = Field(default_factory=list)


class PrayerTiming(BaseModel):
    """One named prayer and its local time (HH:MM)."""

    name: str
    time: str


class PrayerTimes(BaseModel):
    """Daily prayer schedule for one location."""

    city: str
    country: str = ""
    source: str = "AlAdhan API"
    date: str
    timezone: str = "UTC"
    prayers: List[PrayerTiming] = Field(default_factory=list)

    @field_validator("prayers")
    @classmethod
    def validate_prayer_names(cls, v: List[PrayerTiming]) -> List[PrayerTiming]:
        unknown = [p.name for p in v if p.name not in PRAYER_ORDER]
        if unknown:
            raise ValueError(f"Unknown prayer names: {unknown}")
        return v

    def time_of(self, name: str) -> Optional[str]:
        for prayer in self.prayers:
            if prayer.name == name:
                return prayer.time
        return None


class Dhikr(BaseModel):
    """Single remembrance with its repetition count."""

    text: str
    count: int = Field(default=1, ge=1)
    reference: Optional[str] = None


class AthkarCategory(BaseModel):
    """Named list of athkar (e.g. morning, evening)."""

    id: str
    title: str
    icon: Optional[str] = None
    items: List[Dhikr] = Field(default_factory=list)


class AthkarCollection(BaseModel):
    """The complete athkar library."""

    categories: List[AthkarCategory] = Field(default_factory=list)

    def category(self, category_id: str) -> Optional[AthkarCategory]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None


class TasbihCounters(BaseModel):
    """User tasbih counters keyed by dhikr name."""

    counters: Dict[str, int] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=get_current_timestamp)

    @field_validator("counters")
    @classmethod
    def validate_counters(cls, v: Dict[str, int]) -> Dict[str, int]:
        if any(count < 0 for count in v.values()):
            raise ValueError("Tasbih counters cannot be negative")
        return v


class LastRead(BaseModel):
    """Bookmark of the last verse read."""

    surah_number: int = Field(..., ge=1, le=114)
    ayah_number: int = Field(..., ge=1)
    timestamp: datetime = Field(default_factory=get_current_timestamp)
