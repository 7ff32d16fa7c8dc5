"""Shared state container for the catalog API."""
from __future__ import annotations

from dataclasses import dataclass

import httpx
from sqlalchemy.engine import Engine

from .db import create_engine_from_settings, init_database
from .services import (
    ExportService,
    GeocodingService,
    LocationEnrichmentService,
    MovieImportService,
    TmdbClient,
    WeatherService,
)
from .settings import CatalogSettings
from .stores.movie_store import MovieStore


@dataclass(slots=True)
class AppState:
    """Wires settings, storage and outbound clients for the routers.

    ``transport`` replaces the network for every outbound client, which is
    how tests substitute canned upstream responses.
    """

    settings: CatalogSettings
    engine: Engine
    movie_store: MovieStore
    geocoder: GeocodingService
    weather: WeatherService
    tmdb: TmdbClient
    enrichment: LocationEnrichmentService
    importer: MovieImportService
    exporter: ExportService

    def __init__(
        self,
        settings: CatalogSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.engine = create_engine_from_settings(settings)
        init_database(self.engine)
        self.movie_store = MovieStore(self.engine)

        self.geocoder = GeocodingService(
            base_url=settings.geocoding_url,
            user_agent=settings.geocoding_user_agent,
            timeout=settings.http_timeout,
            cache_ttl=settings.geocoding_cache_ttl,
            transport=transport,
        )
        self.weather = WeatherService(
            geocoder=self.geocoder,
            base_url=settings.weather_url,
            timeout=settings.http_timeout,
            cache_ttl=settings.weather_cache_ttl,
            transport=transport,
        )
        self.tmdb = TmdbClient(
            settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            image_base_url=settings.tmdb_image_base_url,
            language=settings.tmdb_language,
            timeout=settings.http_timeout,
            search_ttl=settings.tmdb_search_cache_ttl,
            details_ttl=settings.tmdb_details_cache_ttl,
            configuration_ttl=settings.tmdb_configuration_cache_ttl,
            transport=transport,
        )
        self.enrichment = LocationEnrichmentService(weather=self.weather, store=self.movie_store)
        self.importer = MovieImportService(tmdb=self.tmdb, store=self.movie_store)
        self.exporter = ExportService()
