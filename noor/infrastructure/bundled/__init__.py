"""
Bundled Data Infrastructure Module

Packaged datasets that form the last tier of every cache fallback chain.
"""

from .datasets import (
    JsonBundledDataset,
    PrayerFallbackDataset,
    StaticBundledDataset,
    bundled_athkar,
    bundled_prayer_times,
    bundled_surah_list,
    bundled_surahs,
)

__all__ = [
    "JsonBundledDataset",
    "PrayerFallbackDataset",
    "StaticBundledDataset",
    "bundled_athkar",
    "bundled_prayer_times",
    "bundled_surah_list",
    "bundled_surahs",
]
