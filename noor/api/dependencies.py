"""
API Dependencies

FastAPI dependency providers resolving services from the container stored
on the application state.
"""

from fastapi import Depends, Request

from ..core.container import ServiceContainer
from ..infrastructure.http import NominatimClient
from ..services.cache import AthkarService, PrayerTimesService, QuranService
from ..services.sync import BulkSyncManager
from ..services.user_data_service import UserDataService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_quran_service(container: ServiceContainer = Depends(get_container)) -> QuranService:
    return container.quran


def get_quran_download(
    container: ServiceContainer = Depends(get_container),
) -> BulkSyncManager:
    return container.quran_download


def get_prayer_service(
    container: ServiceContainer = Depends(get_container),
) -> PrayerTimesService:
    return container.prayer_times


def get_geocoder(container: ServiceContainer = Depends(get_container)) -> NominatimClient:
    return container.geocoder


def get_athkar_service(container: ServiceContainer = Depends(get_container)) -> AthkarService:
    return container.athkar


def get_user_data_service(
    container: ServiceContainer = Depends(get_container),
) -> UserDataService:
    return container.user_data
