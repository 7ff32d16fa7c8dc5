"""Location enrichment for catalog entries: forecasts plus coordinate write-back."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from ..schemas import (
    CatalogForecastsModel,
    ForecastResult,
    MovieForecastModel,
    MovieModel,
)
from ..stores.movie_store import MovieNotFoundError, MovieStore
from .coordinates import CoordinateValidationError
from .weather import WeatherService, WeatherServiceError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EnrichmentResult:
    """Forecast to display (if any) and the entry after any write-back."""

    forecast: ForecastResult | None
    movie: MovieModel


class LocationEnrichmentService:
    """Attach forecasts to catalog entries and upgrade their stored coordinates.

    Stored coordinates take precedence over the reference city. When only a
    city is known and it resolves, the coordinates used for the forecast are
    written back so later lookups skip geocoding. Every failure on this path
    is logged and swallowed: a forecast is an enhancement of the entry view.
    """

    def __init__(self, *, weather: WeatherService, store: MovieStore) -> None:
        self.weather = weather
        self.store = store

    async def enrich(self, movie: MovieModel) -> EnrichmentResult:
        coordinates = movie.coordinates
        if coordinates is not None:
            try:
                forecast = await self.weather.forecast_by_coordinates(
                    coordinates.latitude, coordinates.longitude
                )
            except (WeatherServiceError, CoordinateValidationError) as exc:
                logger.warning("Forecast unavailable for movie %s: %s", movie.id, exc)
                return EnrichmentResult(forecast=None, movie=movie)
            return EnrichmentResult(forecast=forecast, movie=movie)

        if not movie.city or not movie.city.strip():
            return EnrichmentResult(forecast=None, movie=movie)

        try:
            forecast = await self.weather.forecast_by_city(movie.city)
        except WeatherServiceError as exc:
            logger.warning(
                "Forecast unavailable for movie %s (city %r): %s", movie.id, movie.city, exc
            )
            return EnrichmentResult(forecast=None, movie=movie)

        if forecast is None:
            logger.warning("City %r of movie %s could not be resolved", movie.city, movie.id)
            return EnrichmentResult(forecast=None, movie=movie)

        updated = await self._write_back(movie, forecast)
        return EnrichmentResult(forecast=forecast, movie=updated)

    async def catalog_forecasts(self, movies: Sequence[MovieModel]) -> CatalogForecastsModel:
        """Fetch forecasts concurrently for every entry that has coordinates.

        A failing lookup is reported in ``failed`` and does not affect the others.
        """

        located = [movie for movie in movies if movie.coordinates is not None]
        results = await asyncio.gather(
            *(
                self.weather.forecast_by_coordinates(movie.latitude, movie.longitude)
                for movie in located
            ),
            return_exceptions=True,
        )

        summary = CatalogForecastsModel()
        for movie, result in zip(located, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Forecast lookup failed for movie %s: %s", movie.id, result)
                summary.failed.append(movie.id)
                continue
            summary.items.append(
                MovieForecastModel(movie_id=movie.id, title=movie.title, forecast=result)
            )
        return summary

    async def _write_back(self, movie: MovieModel, forecast: ForecastResult) -> MovieModel:
        try:
            return await run_in_threadpool(
                self.store.update_coordinates, movie.id, forecast.coordinates, city=movie.city
            )
        except (MovieNotFoundError, SQLAlchemyError) as exc:
            logger.warning("Could not store coordinates for movie %s: %s", movie.id, exc)
            return movie


__all__ = ["EnrichmentResult", "LocationEnrichmentService"]
