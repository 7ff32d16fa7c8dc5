"""FastAPI dependencies for the catalog API."""
from fastapi import Depends, Request

from .services import (
    ExportService,
    GeocodingService,
    LocationEnrichmentService,
    MovieImportService,
    TmdbClient,
    WeatherService,
)
from .state import AppState
from .stores.movie_store import MovieStore


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_movie_store(app_state: AppState = Depends(get_app_state)) -> MovieStore:
    """Return the catalog store dependency."""
    return app_state.movie_store


def get_geocoder(app_state: AppState = Depends(get_app_state)) -> GeocodingService:
    return app_state.geocoder


def get_weather_service(app_state: AppState = Depends(get_app_state)) -> WeatherService:
    return app_state.weather


def get_tmdb_client(app_state: AppState = Depends(get_app_state)) -> TmdbClient:
    return app_state.tmdb


def get_enrichment_service(
    app_state: AppState = Depends(get_app_state),
) -> LocationEnrichmentService:
    return app_state.enrichment


def get_import_service(app_state: AppState = Depends(get_app_state)) -> MovieImportService:
    return app_state.importer


def get_export_service(app_state: AppState = Depends(get_app_state)) -> ExportService:
    return app_state.exporter
