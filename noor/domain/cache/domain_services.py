"""
Cache Domain Services

Payload validation policy for cached content.

A payload counts as valid only when it carries actual content AND its first
content unit is not a known placeholder. Entries written by older, broken
versions fail this check and are handled as cache misses.
"""

from typing import Callable, TypeVar

from ...constants import PRAYER_TIME_PLACEHOLDER, QURAN_PLACEHOLDER_MARKER
from .entities import AthkarCollection, PrayerTimes, Surah, SurahList

T = TypeVar("T")

PayloadValidator = Callable[[T], bool]


def has_real_text(surah: Surah) -> bool:
    """Surah has verses and the first one is real text."""
    if not surah.ayahs:
        return False
    first = surah.first_text
    return len(first) > 0 and QURAN_PLACEHOLDER_MARKER not in first


def has_surah_index(surah_list: SurahList) -> bool:
    return len(surah_list.surahs) > 0


def has_real_timings(prayer_times: PrayerTimes) -> bool:
    """Schedule has timings and the first one is not a placeholder."""
    if not prayer_times.prayers:
        return False
    first = prayer_times.prayers[0].time.strip()
    return len(first) > 0 and first != PRAYER_TIME_PLACEHOLDER


def has_real_athkar(collection: AthkarCollection) -> bool:
    """Collection has a category whose first dhikr has text."""
    if not collection.categories:
        return False
    first_category = collection.categories[0]
    if not first_category.items:
        return False
    return len(first_category.items[0].text.strip()) > 0
