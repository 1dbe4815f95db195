"""
Noor Application Configuration

Configuration management with environment variable support.
Implements secure defaults and validation for all settings.
"""

from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_JSON: bool = Field(
        default=False, description="Render structured logs as JSON lines"
    )

    # Persistence store
    STORAGE_BACKEND: str = Field(
        default="redis", description="Key-value backend: redis, memory or disabled"
    )
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", description="Redis connection URL"
    )
    REDIS_KEY_PREFIX: str = Field(
        default="noor", description="Prefix applied to every stored key"
    )
    REDIS_OPERATION_TIMEOUT: float = Field(
        default=5.0, gt=0, le=60, description="Redis socket timeout in seconds"
    )
    MEMORY_STORE_MAX_ENTRIES: Optional[int] = Field(
        default=None, ge=1, description="Entry quota for the in-memory backend"
    )

    # Remote fetching
    HTTP_USER_AGENT: str = Field(
        default="noor-backend/1.0 (+https://github.com/noor-app)",
        description="User-Agent sent to remote providers",
    )
    FETCH_TIMEOUT: float = Field(
        default=15.0, gt=0, le=120, description="Default per-attempt timeout"
    )
    FETCH_MAX_RETRIES: int = Field(
        default=3, ge=1, le=10, description="Default attempts per fetch"
    )
    FETCH_RETRY_BASE_DELAY: float = Field(
        default=1.0, ge=0, le=30, description="Backoff step between attempts"
    )

    # Quran provider
    QURAN_API_URL: str = Field(
        default="https://api.alquran.cloud/v1", description="AlQuran Cloud base URL"
    )
    QURAN_EDITION: str = Field(
        default="quran-uthmani", description="Script edition for surah text"
    )
    QURAN_SURAH_TIMEOUT: float = Field(default=15.0, gt=0, le=120)
    QURAN_SURAH_MAX_RETRIES: int = Field(default=2, ge=1, le=10)
    QURAN_LIST_TIMEOUT: float = Field(default=10.0, gt=0, le=120)
    QURAN_LIST_MAX_RETRIES: int = Field(default=3, ge=1, le=10)
    QURAN_BUNDLED_PATH: Optional[str] = Field(
        default=None,
        description="JSON file replacing the packaged offline surah text",
    )

    # Bulk download
    BULK_SYNC_TIMEOUT: float = Field(default=20.0, gt=0, le=120)
    BULK_SYNC_MAX_RETRIES: int = Field(default=2, ge=1, le=10)
    BULK_SYNC_DELAY_SECONDS: float = Field(
        default=0.25, ge=0, le=10, description="Pause between items"
    )

    # Prayer times provider
    PRAYER_API_URL: str = Field(
        default="https://api.aladhan.com/v1", description="AlAdhan base URL"
    )
    PRAYER_CALCULATION_METHOD: int = Field(
        default=5, ge=0, le=99, description="AlAdhan calculation method id"
    )
    PRAYER_TIMEOUT: float = Field(default=10.0, gt=0, le=120)
    PRAYER_MAX_RETRIES: int = Field(default=3, ge=1, le=10)

    # Geocoding provider
    GEOCODING_API_URL: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Nominatim base URL",
    )
    GEOCODING_LANGUAGE: str = Field(
        default="ar", description="accept-language for geocoding results"
    )
    GEOCODING_TIMEOUT: float = Field(default=10.0, gt=0, le=120)

    # Athkar provider
    ATHKAR_API_URL: Optional[str] = Field(
        default=None, description="Remote athkar collection URL (optional)"
    )
    ATHKAR_TIMEOUT: float = Field(default=10.0, gt=0, le=120)
    ATHKAR_MAX_RETRIES: int = Field(default=2, ge=1, le=10)

    # API configuration
    API_HOST: str = Field(default="0.0.0.0", description="API server host")
    API_PORT: int = Field(default=8000, ge=1, le=65535, description="API server port")
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:4173",
        description="CORS allowed origins (comma-separated)",
    )

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return v.upper()

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v):
        allowed = ["redis", "memory", "disabled"]
        if v.lower() not in allowed:
            raise ValueError(f"STORAGE_BACKEND must be one of: {allowed}")
        return v.lower()

    @field_validator("QURAN_API_URL", "PRAYER_API_URL", "GEOCODING_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as list."""
        return [
            origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()
        ]


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


settings = get_settings()
