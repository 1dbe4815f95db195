"""
Main pytest configuration for the Noor backend tests.

Shared fixtures: in-memory and failing stores, payload factories and
provider response bodies.
"""

import os

# Set test environment variables before importing noor modules
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "DEBUG"

from typing import Any, Dict, List, Optional

import pytest

from noor.domain.cache.entities import (
    AthkarCategory,
    AthkarCollection,
    Ayah,
    Dhikr,
    PrayerTimes,
    PrayerTiming,
    Surah,
)
from noor.infrastructure.storage import (
    DisabledKeyValueStore,
    InMemoryKeyValueStore,
    ResilientKeyValueStore,
)

PRAYER_NAMES = ["Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha"]


def make_surah(
    number: int = 1,
    first_text: str = "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ",
    ayah_count: int = 3,
) -> Surah:
    ayahs = [Ayah(number=1, text=first_text)] + [
        Ayah(number=i, text=f"آية {i}") for i in range(2, ayah_count + 1)
    ]
    return Surah(
        number=number,
        name_arabic=f"سورة {number}",
        revelation_place="مكية",
        ayahs=ayahs,
    )


def make_prayer_times(city: str = "Cairo", fajr: str = "05:03") -> PrayerTimes:
    times = [fajr, "06:30", "12:10", "15:35", "17:52", "19:10"]
    return PrayerTimes(
        city=city,
        country="Egypt",
        date="27 Feb 2026",
        timezone="Africa/Cairo",
        prayers=[PrayerTiming(name=n, time=t) for n, t in zip(PRAYER_NAMES, times)],
    )


def make_athkar(first_text: str = "سُبْحَانَ اللَّهِ") -> AthkarCollection:
    return AthkarCollection(
        categories=[
            AthkarCategory(
                id="morning",
                title="أذكار الصباح",
                items=[Dhikr(text=first_text, count=33)],
            )
        ]
    )


def surah_api_body(number: int, texts: Optional[List[str]] = None) -> Dict[str, Any]:
    """AlQuran Cloud /surah/{n}/{edition} response."""
    texts = texts or ["بِسْمِ اللَّهِ", "الْحَمْدُ لِلَّهِ"]
    return {
        "code": 200,
        "status": "OK",
        "data": {
            "number": number,
            "name": f"سُورَةُ {number}",
            "revelationType": "Meccan",
            "numberOfAyahs": len(texts),
            "ayahs": [
                {"number": i, "numberInSurah": i, "text": text}
                for i, text in enumerate(texts, start=1)
            ],
        },
    }


def surah_list_api_body(count: int = 114) -> Dict[str, Any]:
    """AlQuran Cloud /surah response."""
    return {
        "code": 200,
        "data": [
            {
                "number": n,
                "name": f"سُورَةُ {n}",
                "revelationType": "Medinan" if n == 2 else "Meccan",
                "numberOfAyahs": 7,
            }
            for n in range(1, count + 1)
        ],
    }


def aladhan_body(timings: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """AlAdhan /timingsByCity or /timings response."""
    if timings is None:
        timings = {
            "Fajr": "05:03 (EET)",
            "Sunrise": "06:30 (EET)",
            "Dhuhr": "12:10 (EET)",
            "Asr": "15:35 (EET)",
            "Maghrib": "17:52 (EET)",
            "Isha": "19:10 (EET)",
        }
    return {
        "code": 200,
        "data": {
            "timings": timings,
            "date": {"readable": "27 Feb 2026"},
            "meta": {"timezone": "Africa/Cairo"},
        },
    }


@pytest.fixture
def memory_backend():
    """Raw in-memory backend, for inspecting what was written."""
    return InMemoryKeyValueStore()


@pytest.fixture
def store(memory_backend):
    """Working store behind the resilient boundary."""
    return ResilientKeyValueStore(memory_backend)


@pytest.fixture
def broken_store():
    """Store whose every operation fails."""
    return ResilientKeyValueStore(DisabledKeyValueStore())


@pytest.fixture
def surah_factory():
    return make_surah


@pytest.fixture
def prayer_times_factory():
    return make_prayer_times


@pytest.fixture
def athkar_factory():
    return make_athkar


@pytest.fixture
def provider_bodies():
    """Factories for provider JSON responses."""
    return {
        "surah": surah_api_body,
        "surah_list": surah_list_api_body,
        "aladhan": aladhan_body,
    }
