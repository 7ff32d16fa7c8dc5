"""Runtime configuration for the catalog API."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.paths import default_database_url


class CatalogSettings(BaseSettings):
    """Environment-aware settings for the catalog service."""

    database_url: str = Field(
        default_factory=default_database_url,
        description="Connection URL for the catalog SQLite database.",
    )
    database_echo: bool = Field(
        default=False, description="Enable SQL echo for debugging queries."
    )
    tmdb_api_key: str | None = Field(
        default=None, description="API key used for movie metadata requests."
    )
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3",
        description="Base URL of the movie metadata service.",
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/",
        description="Base URL prepended to poster and backdrop paths.",
    )
    tmdb_language: str | None = Field(
        default=None, description="Optional language code forwarded to metadata requests."
    )
    geocoding_url: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Free-text geocoding search endpoint.",
    )
    geocoding_user_agent: str = Field(
        default="Cinemeteo/1.0",
        description="User-Agent header required by the geocoding provider.",
    )
    weather_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        description="Daily forecast endpoint.",
    )
    http_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for outbound requests."
    )
    geocoding_cache_ttl: float = Field(default=24 * 60 * 60, ge=0)
    weather_cache_ttl: float = Field(default=10 * 60, ge=0)
    tmdb_search_cache_ttl: float = Field(default=5 * 60, ge=0)
    tmdb_details_cache_ttl: float = Field(default=10 * 60, ge=0)
    tmdb_configuration_cache_ttl: float = Field(default=60 * 60, ge=0)
    log_level: str = Field(default="INFO", description="Root logging level.")

    model_config = SettingsConfigDict(
        env_prefix="CINEMETEO_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
