"""Translation of service errors into HTTP responses."""
from __future__ import annotations

from fastapi import HTTPException

from .services import TmdbServiceError, WeatherServiceError, WeatherServiceTimeout


def tmdb_http_error(exc: TmdbServiceError) -> HTTPException:
    if exc.status_code == 404:
        return HTTPException(status_code=404, detail="Movie not found in the metadata service")
    if exc.status_code == 401:
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))


def weather_http_error(exc: WeatherServiceError) -> HTTPException:
    if isinstance(exc, WeatherServiceTimeout):
        return HTTPException(status_code=504, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))
