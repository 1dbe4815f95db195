"""
Content Cache Services

Offline-first services for Quran, prayer times and athkar, all built on
the generic DomainCacheService.
"""

from .domain_cache_service import DomainCacheService
from .athkar_service import AthkarService
from .prayer_service import PrayerTimesService
from .quran_service import QuranService

__all__ = ["AthkarService", "DomainCacheService", "PrayerTimesService", "QuranService"]
