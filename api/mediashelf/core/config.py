"""Application settings parsed from environment variables and defaults."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CACHE_BACKENDS = ("memory", "redis")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "Mediashelf API"
    environment: str = "development"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    cache_backend: str = "memory"
    redis_url: str = "redis://redis:6379/0"
    enable_caching: bool = True
    default_cache_ttl_seconds: int = Field(default=600, ge=0)
    metadata_cache_ttl_seconds: int = Field(default=600, ge=0)
    stats_cache_ttl_seconds: int = Field(default=600, ge=0)

    http_timeout_seconds: float = 15.0
    upcitemdb_base_url: str = "https://api.upcitemdb.com/prod/trial"
    upcitemdb_api_key: Optional[str] = None
    tmdb_api_key: Optional[str] = None
    tmdb_api_auth_header: Optional[str] = None
    openlibrary_base_url: str = "https://openlibrary.org"
    igdb_client_id: Optional[str] = None
    igdb_client_secret: Optional[str] = None
    musicbrainz_base_url: str = "https://musicbrainz.org"
    musicbrainz_user_agent: str = "Mediashelf/0.1 (https://github.com/mediashelf/mediashelf)"

    @field_validator("cache_backend", mode="before")
    @classmethod
    def _normalize_cache_backend(cls, value: str | None) -> str:
        """Lower-case the backend name and reject unknown backends."""
        if value is None:
            return "memory"
        backend = str(value).strip().lower() or "memory"
        if backend not in CACHE_BACKENDS:
            raise ValueError(f"cache_backend must be one of {', '.join(CACHE_BACKENDS)}")
        return backend

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str | None) -> str:
        return (str(value).strip() or "INFO").upper() if value is not None else "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings to avoid re-parsing environment variables."""
    return Settings()


settings = get_settings()
