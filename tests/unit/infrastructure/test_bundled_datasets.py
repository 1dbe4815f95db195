"""
Unit tests for the packaged offline datasets.
"""

import json

import pytest

from noor.constants import QURAN_PLACEHOLDER_MARKER
from noor.domain.cache.domain_services import has_real_athkar, has_real_text, has_real_timings
from noor.domain.cache.value_objects import PrayerLocation
from noor.infrastructure.bundled import (
    JsonBundledDataset,
    PrayerFallbackDataset,
    StaticBundledDataset,
    bundled_athkar,
    bundled_prayer_times,
    bundled_surah_list,
    bundled_surahs,
)
from noor.infrastructure.bundled.datasets import parse_surahs


class TestPackagedDatasets:
    """The shipped JSON files parse and pass content validation."""

    @pytest.mark.asyncio
    async def test_surah_index_covers_every_surah(self):
        surah_list = await bundled_surah_list().get("all")

        assert [s.number for s in surah_list.surahs] == list(range(1, 115))
        assert sum(s.ayah_count for s in surah_list.surahs) == 6236
        assert surah_list.surahs[1].revelation_place == "مدنية"

    @pytest.mark.asyncio
    async def test_bundled_surah_text(self):
        dataset = bundled_surahs()

        fatiha = await dataset.get(1)
        assert fatiha is not None
        assert len(fatiha.ayahs) == 7
        assert has_real_text(fatiha)
        assert QURAN_PLACEHOLDER_MARKER not in fatiha.first_text

        for number in (103, 112, 114):
            assert has_real_text(await dataset.get(number))

    @pytest.mark.asyncio
    async def test_prayer_fallback_by_city_and_alias(self):
        dataset = bundled_prayer_times()

        cairo = await dataset.get(PrayerLocation.for_city("Cairo"))
        makkah = await dataset.get(PrayerLocation.for_city("Makkah"))
        mecca = await dataset.get(PrayerLocation.for_city("mecca"))

        assert cairo.time_of("Fajr") == "05:03"
        assert makkah.city == "Makkah"
        assert mecca == makkah
        assert has_real_timings(cairo)

    @pytest.mark.asyncio
    async def test_prayer_fallback_default_for_unknown_place(self):
        dataset = bundled_prayer_times()

        reykjavik = await dataset.get(PrayerLocation.for_city("Reykjavik", "Iceland"))
        here = await dataset.get(PrayerLocation.for_coordinates(1.0, 2.0))
        home = await dataset.get(PrayerLocation.for_coordinates(1.0, 2.0, "Home"))
        cairo = await dataset.get(PrayerLocation.for_city("Cairo"))

        assert (reykjavik.city, reykjavik.country) == ("Reykjavik", "Iceland")
        assert reykjavik.prayers == cairo.prayers
        assert here.city == "موقعي الحالي"
        assert home.city == "Home"
        # The shared default entry itself keeps its own label
        assert cairo.city == "Cairo"

    @pytest.mark.asyncio
    async def test_prayer_fallback_without_default_entry(self):
        dataset = PrayerFallbackDataset(default_key="atlantis")

        assert await dataset.get(PrayerLocation.for_city("Reykjavik")) is None


    @pytest.mark.asyncio
    async def test_bundled_athkar(self):
        collection = await bundled_athkar().get("daily")

        assert has_real_athkar(collection)
        assert collection.category("morning") is not None
        assert collection.category("after_prayer").items[2].count == 33


class TestJsonBundledDataset:
    @pytest.mark.asyncio
    async def test_loads_once(self, tmp_path):
        path = tmp_path / "surahs.json"
        path.write_text(
            json.dumps(
                {
                    "surahs": [
                        {
                            "number": 12,
                            "name_arabic": "سورة يوسف",
                            "revelation_place": "مكية",
                            "ayahs": [{"number": 1, "text": "الر"}],
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )
        dataset = JsonBundledDataset("unused.json", parse_surahs, path=str(path))

        assert (await dataset.get(12)).name_arabic == "سورة يوسف"
        path.unlink()
        assert (await dataset.get(12)) is not None
        assert dataset.loaded

    @pytest.mark.asyncio
    async def test_missing_file_yields_empty_dataset(self, tmp_path):
        dataset = JsonBundledDataset(
            "unused.json", parse_surahs, path=str(tmp_path / "missing.json")
        )
        assert await dataset.get(1) is None

    @pytest.mark.asyncio
    async def test_malformed_file_yields_empty_dataset(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"surahs": [{"number": 500}]}', encoding="utf-8")
        dataset = JsonBundledDataset("unused.json", parse_surahs, path=str(path))

        assert await dataset.get(500) is None


class TestStaticBundledDataset:
    @pytest.mark.asyncio
    async def test_lookup_key(self):
        dataset = StaticBundledDataset({"cairo": "timings"}, lookup_key=str.lower)
        assert await dataset.get("CAIRO") == "timings"
        assert await dataset.get("giza") is None
