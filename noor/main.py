"""
Noor Backend - Main FastAPI Application

Offline-first API for Quran text, prayer times and athkar:
- Network-first loading with store and bundled fallbacks
- Background download of every surah with SSE progress
- Tasbih counters and last-read bookmark
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.endpoints.athkar import router as athkar_router
from .api.endpoints.health import router as health_router
from .api.endpoints.prayer_times import router as prayer_times_router
from .api.endpoints.quran import router as quran_router
from .api.endpoints.user_data import router as user_data_router
from .constants import APP_NAME, APP_VERSION
from .core.config import get_settings
from .core.container import ServiceContainer, build_container
from .core.logging import configure_logging
from .services.exceptions import NoorServiceException

logger = structlog.get_logger()
settings = get_settings()

API_PREFIX = "/api/v1"


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the application.

    Args:
        container: Pre-built services; built from settings at startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
        logger.info(
            f"Starting {APP_NAME} API",
            version=APP_VERSION,
            environment=settings.ENVIRONMENT,
            storage_backend=settings.STORAGE_BACKEND,
        )
        if getattr(app.state, "container", None) is None:
            app.state.container = build_container(settings)

        yield

        logger.info(f"Shutting down {APP_NAME} API")
        try:
            await app.state.container.aclose()
        except Exception as e:
            logger.error("Error during application shutdown", error=str(e))

    app = FastAPI(
        title=f"{APP_NAME} API",
        description="Offline-first Quran, prayer times and athkar backend",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NoorServiceException)
    async def service_exception_handler(request: Request, exc: NoorServiceException):
        logger.warning(
            "Service error",
            path=request.url.path,
            error_code=exc.error_code,
            details=exc.details,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": exc.details,
            },
        )

    app.include_router(health_router)
    app.include_router(quran_router, prefix=API_PREFIX)
    app.include_router(prayer_times_router, prefix=API_PREFIX)
    app.include_router(athkar_router, prefix=API_PREFIX)
    app.include_router(user_data_router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "noor.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )
