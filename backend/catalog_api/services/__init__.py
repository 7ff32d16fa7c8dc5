"""Service layer helpers for external integrations."""

from .cache import TTLCache
from .coordinates import CoordinateValidationError, validate_coordinates
from .enrichment import EnrichmentResult, LocationEnrichmentService
from .export import ExportService
from .geocoding import GeocodingService
from .importer import MovieImportService
from .tmdb import TmdbClient, TmdbServiceError, build_image_url
from .weather import WeatherService, WeatherServiceError, WeatherServiceTimeout

__all__ = [
    "CoordinateValidationError",
    "EnrichmentResult",
    "ExportService",
    "GeocodingService",
    "LocationEnrichmentService",
    "MovieImportService",
    "TTLCache",
    "TmdbClient",
    "TmdbServiceError",
    "WeatherService",
    "WeatherServiceError",
    "WeatherServiceTimeout",
    "build_image_url",
    "validate_coordinates",
]
