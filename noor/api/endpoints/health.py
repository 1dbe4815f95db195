"""
Health check endpoint for the Noor API.

Reports store reachability and the state of the Quran download job. The
service stays usable without storage, so an unreachable store only
degrades the status.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...constants import APP_NAME, APP_VERSION, get_current_timestamp
from ...core.container import ServiceContainer
from ..dependencies import get_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns "healthy" when the store answers, "degraded" otherwise.
    """
    storage = await container.store.health_check()
    return {
        "status": "healthy" if storage["available"] else "degraded",
        "timestamp": get_current_timestamp().isoformat(),
        "service": APP_NAME,
        "version": APP_VERSION,
        "environment": container.settings.ENVIRONMENT,
        "storage": storage,
        "quran_download": container.quran_download.status(),
    }
