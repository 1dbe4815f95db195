"""
Noor Global Constants

Centralized location for all system-wide constants used across the application.
"""

from datetime import datetime, timezone

# Application Constants
APP_NAME = "Noor"
APP_VERSION = "1.0.0"

# Quran
TOTAL_SURAHS = 114
QURAN_PLACEHOLDER_MARKER = "(عنصر بديل)"

REVELATION_PLACES = {
    "Meccan": "مكية",
    "Medinan": "مدنية",
}
UNKNOWN_REVELATION_PLACE = "غير محدد"

# Prayer times
PRAYER_ORDER = ("Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha")
PRAYER_TIME_PLACEHOLDER = "--:--"
CURRENT_LOCATION_LABEL = "موقعي الحالي"

# Athkar
ATHKAR_ITEM_ID = "daily"

# User-facing message for the one fatal condition of the cache layer
CONTENT_UNAVAILABLE_MESSAGE = "لا يوجد اتصال بالإنترنت ولم يتم تخزين هذا المحتوى بعد."


def get_current_timestamp() -> datetime:
    """Get current timestamp with UTC timezone."""
    return datetime.now(timezone.utc)
