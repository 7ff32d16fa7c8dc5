"""Daily temperature forecasts from the Open-Meteo API."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from ..schemas import CoordinatePair, DailyReading, ForecastResult
from .cache import TTLCache
from .coordinates import format_coordinate, parse_decimal, validate_coordinates
from .geocoding import GeocodingService

logger = logging.getLogger(__name__)


class WeatherServiceError(RuntimeError):
    """Raised when a forecast request cannot be completed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WeatherServiceTimeout(WeatherServiceError):
    """Raised when the forecast provider does not answer in time."""


class WeatherService:
    """Fetch daily max/min temperatures for a coordinate pair or a city name.

    No automatic retries are made; a failed call raises and the caller decides
    whether to ask again.
    """

    DEFAULT_URL = "https://api.open-meteo.com/v1/forecast"
    CACHE_TTL = 10 * 60

    def __init__(
        self,
        *,
        geocoder: GeocodingService,
        base_url: str | None = None,
        timeout: float = 30.0,
        cache: TTLCache[ForecastResult] | None = None,
        cache_ttl: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.base_url = base_url or self.DEFAULT_URL
        self._timeout = timeout
        self.cache: TTLCache[ForecastResult] = cache if cache is not None else TTLCache()
        self.cache_ttl = self.CACHE_TTL if cache_ttl is None else cache_ttl
        self._transport = transport

    # Public API ---------------------------------------------------------
    async def forecast_by_coordinates(self, latitude: float, longitude: float) -> ForecastResult:
        """Return the forecast for a coordinate pair, validating it before any request."""

        coordinates = validate_coordinates(latitude, longitude)
        cache_key = (coordinates.latitude, coordinates.longitude)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(
                "Weather cache hit for lat=%s lon=%s", coordinates.latitude, coordinates.longitude
            )
            return cached

        result = await self._fetch(coordinates)
        self.cache.set(cache_key, result, self.cache_ttl)
        return result

    async def forecast_by_city(self, city: str | None) -> ForecastResult | None:
        """Resolve ``city`` then fetch its forecast; ``None`` when the city is unknown."""

        coordinates = await self.geocoder.resolve(city)
        if coordinates is None:
            logger.info("No coordinates for %r; skipping forecast", city)
            return None
        return await self.forecast_by_coordinates(coordinates.latitude, coordinates.longitude)

    # Helpers ------------------------------------------------------------
    async def _fetch(self, coordinates: CoordinatePair) -> ForecastResult:
        params = {
            "latitude": format_coordinate(coordinates.latitude),
            "longitude": format_coordinate(coordinates.longitude),
            "daily": "temperature_2m_max,temperature_2m_min",
            "timezone": "auto",
        }
        logger.info("Requesting forecast from %s with %s", self.base_url, params)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException as exc:
            logger.error("Forecast request timed out: %s %s", self.base_url, params)
            raise WeatherServiceTimeout("Weather service timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("Forecast request failed: %s %s: %s", self.base_url, params, exc)
            raise WeatherServiceError(f"Failed to contact weather service: {exc}") from exc

        if response.status_code != 200:
            logger.error(
                "Weather service responded with HTTP %s for %s: %s",
                response.status_code,
                params,
                response.text[:500],
            )
            raise WeatherServiceError(
                f"Weather service responded with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Weather service returned invalid JSON for %s", params)
            raise WeatherServiceError(
                "Weather service returned invalid JSON", status_code=response.status_code
            ) from exc

        return self._parse(payload, coordinates, response.status_code)

    def _parse(self, payload: Any, coordinates: CoordinatePair, status_code: int) -> ForecastResult:
        if not isinstance(payload, dict):
            raise WeatherServiceError("Weather response must be an object", status_code=status_code)
        daily = payload.get("daily")
        if not isinstance(daily, dict) or not isinstance(daily.get("time"), list):
            raise WeatherServiceError("Weather response is missing daily data", status_code=status_code)

        try:
            days = [date.fromisoformat(str(value)) for value in daily["time"]]
        except ValueError as exc:
            raise WeatherServiceError(
                "Weather response contains an invalid date", status_code=status_code
            ) from exc

        maxima = daily.get("temperature_2m_max") or []
        minima = daily.get("temperature_2m_min") or []
        return ForecastResult(
            coordinates=coordinates,
            timezone=str(payload.get("timezone") or ""),
            daily_max=[DailyReading(day=day, temperature=_safe_index(maxima, idx)) for idx, day in enumerate(days)],
            daily_min=[DailyReading(day=day, temperature=_safe_index(minima, idx)) for idx, day in enumerate(days)],
        )


def _safe_index(values: Any, index: int) -> float | None:
    try:
        value = values[index]
    except (IndexError, KeyError, TypeError):
        return None
    return parse_decimal(value)


__all__ = ["WeatherService", "WeatherServiceError", "WeatherServiceTimeout"]
