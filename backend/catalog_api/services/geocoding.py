"""City name to coordinate resolution backed by a free-text search provider."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ..schemas import CoordinatePair
from .cache import TTLCache
from .coordinates import parse_decimal, round_coordinate

logger = logging.getLogger(__name__)


def normalize_city(city: str | None) -> str:
    """Return the cache key for a city name (trimmed and case-folded)."""

    if not city:
        return ""
    return city.strip().casefold()


class GeocodingService:
    """Resolve a city name to the coordinates of its best-ranked match.

    Resolution is best-effort: timeouts, error statuses and malformed payloads
    are logged and reported as ``None``.
    """

    DEFAULT_URL = "https://nominatim.openstreetmap.org/search"
    CACHE_TTL = 24 * 60 * 60

    def __init__(
        self,
        *,
        base_url: str | None = None,
        user_agent: str = "Cinemeteo/1.0",
        timeout: float = 30.0,
        cache: TTLCache[CoordinatePair] | None = None,
        cache_ttl: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or self.DEFAULT_URL
        self.user_agent = user_agent
        self._timeout = timeout
        self.cache: TTLCache[CoordinatePair] = cache if cache is not None else TTLCache()
        self.cache_ttl = self.CACHE_TTL if cache_ttl is None else cache_ttl
        self._transport = transport

    async def resolve(self, city: str | None) -> CoordinatePair | None:
        """Return the coordinates for ``city`` or ``None`` when it cannot be resolved."""

        cache_key = normalize_city(city)
        if not cache_key:
            return None

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("Geocoding cache hit for %r", city)
            return cached

        query = city.strip()
        params = {"q": query, "format": "json", "limit": 1, "addressdetails": 1}
        logger.info("Resolving coordinates for %r via %s", query, self.base_url)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"User-Agent": self.user_agent},
            ) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException:
            logger.error("Geocoding timed out for %r", query)
            return None
        except httpx.HTTPError as exc:
            logger.error("Geocoding request failed for %r: %s", query, exc)
            return None

        if response.status_code != 200:
            logger.warning(
                "Geocoding provider responded with HTTP %s for %r: %s",
                response.status_code,
                query,
                response.text[:500],
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.error("Geocoding provider returned invalid JSON for %r", query)
            return None

        coordinates = self._extract(payload, query)
        if coordinates is None:
            return None

        self.cache.set(cache_key, coordinates, self.cache_ttl)
        return coordinates

    def _extract(self, payload: Any, query: str) -> CoordinatePair | None:
        if not isinstance(payload, list):
            logger.error("Unexpected geocoding payload for %r: %r", query, type(payload).__name__)
            return None
        if not payload:
            logger.warning("City not found: %r", query)
            return None

        best = payload[0]
        if not isinstance(best, dict):
            logger.error("Unexpected geocoding result for %r: %r", query, best)
            return None

        raw_lat, raw_lon = best.get("lat"), best.get("lon")
        latitude = parse_decimal(raw_lat)
        longitude = parse_decimal(raw_lon)
        if latitude is None or longitude is None:
            logger.error(
                "Could not parse coordinates for %r: lat=%r lon=%r", query, raw_lat, raw_lon
            )
            return None
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            logger.error(
                "Out-of-range coordinates for %r: lat=%r lon=%r", query, raw_lat, raw_lon
            )
            return None

        coordinates = CoordinatePair(
            latitude=round_coordinate(latitude), longitude=round_coordinate(longitude)
        )
        logger.info(
            "Resolved %r to %s,%s (%s)",
            query,
            coordinates.latitude,
            coordinates.longitude,
            best.get("display_name", ""),
        )
        return coordinates


__all__ = ["GeocodingService", "normalize_city"]
