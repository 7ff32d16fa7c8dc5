"""Client for the TMDB movie metadata service."""
from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..schemas import ImagesResponse, MovieDetails, SearchResponse, TmdbConfiguration
from .cache import TTLCache

logger = logging.getLogger(__name__)
# httpx logs full request URLs at INFO, which would include the api_key parameter.
logging.getLogger("httpx").setLevel(logging.WARNING)

ModelT = TypeVar("ModelT", bound=BaseModel)

PLACEHOLDER_IMAGE = "/images/no-poster.png"
DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/"


class TmdbServiceError(RuntimeError):
    """Raised when the metadata service cannot satisfy a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_image_url(
    path: str | None, size: str = "w500", base_url: str = DEFAULT_IMAGE_BASE_URL
) -> str:
    """Return the full poster/backdrop URL, or a placeholder when ``path`` is empty."""

    if not path:
        return PLACEHOLDER_IMAGE
    return f"{base_url.rstrip('/')}/{size}{path}"


class TmdbClient:
    """Read-only wrapper over search, details, images and configuration endpoints."""

    BASE_URL = "https://api.themoviedb.org/3"
    SEARCH_TTL = 5 * 60
    DETAILS_TTL = 10 * 60
    CONFIGURATION_TTL = 60 * 60

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str | None = None,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
        language: str | None = None,
        timeout: float = 30.0,
        cache: TTLCache[BaseModel] | None = None,
        search_ttl: float | None = None,
        details_ttl: float | None = None,
        configuration_ttl: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.image_base_url = image_base_url
        self.language = language
        self._timeout = timeout
        self.cache: TTLCache[BaseModel] = cache if cache is not None else TTLCache()
        self.search_ttl = self.SEARCH_TTL if search_ttl is None else search_ttl
        self.details_ttl = self.DETAILS_TTL if details_ttl is None else details_ttl
        self.configuration_ttl = (
            self.CONFIGURATION_TTL if configuration_ttl is None else configuration_ttl
        )
        self._transport = transport

    # Public API ---------------------------------------------------------
    async def search_movies(self, query: str, page: int = 1) -> SearchResponse:
        cache_key = ("search", query, page)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("TMDB cache hit for search %r page %s", query, page)
            return cached  # type: ignore[return-value]
        result = await self._get(
            "/search/movie", {"query": query, "page": page}, SearchResponse, "search movies"
        )
        self.cache.set(cache_key, result, self.search_ttl)
        return result

    async def discover_by_genre(self, genre_id: int, page: int = 1) -> SearchResponse:
        cache_key = ("genre", genre_id, page)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("TMDB cache hit for genre %s page %s", genre_id, page)
            return cached  # type: ignore[return-value]
        result = await self._get(
            "/discover/movie",
            {"with_genres": genre_id, "page": page, "sort_by": "popularity.desc"},
            SearchResponse,
            "discover movies by genre",
        )
        self.cache.set(cache_key, result, self.search_ttl)
        return result

    async def get_movie_details(self, tmdb_id: int) -> MovieDetails:
        cache_key = ("movie", tmdb_id)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("TMDB cache hit for movie %s", tmdb_id)
            return cached  # type: ignore[return-value]
        result = await self._get(
            f"/movie/{tmdb_id}",
            {"append_to_response": "credits"},
            MovieDetails,
            "fetch movie details",
        )
        self.cache.set(cache_key, result, self.details_ttl)
        return result

    async def get_movie_images(self, tmdb_id: int) -> ImagesResponse:
        # image lists are always fetched fresh
        return await self._get(
            f"/movie/{tmdb_id}/images", {}, ImagesResponse, "fetch movie images"
        )

    async def get_configuration(self) -> TmdbConfiguration:
        cache_key = ("configuration",)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("TMDB cache hit for configuration")
            return cached  # type: ignore[return-value]
        result = await self._get("/configuration", {}, TmdbConfiguration, "fetch configuration")
        self.cache.set(cache_key, result, self.configuration_ttl)
        return result

    def image_url(self, path: str | None, size: str = "w500") -> str:
        return build_image_url(path, size, self.image_base_url)

    # Helpers ------------------------------------------------------------
    async def _get(
        self,
        path: str,
        params: dict[str, Any],
        model: type[ModelT],
        action: str,
    ) -> ModelT:
        if not self.api_key:
            raise TmdbServiceError("TMDB API key is not configured", status_code=401)

        url = f"{self.base_url}{path}"
        query: dict[str, Any] = dict(params)
        if self.language:
            query.setdefault("language", self.language)
        logger.info("TMDB request to %s with %s", url, dict(query))
        query["api_key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, params=query)
        except httpx.TimeoutException as exc:
            logger.error("TMDB request timed out: %s", url)
            raise TmdbServiceError(f"Failed to {action}: request timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("TMDB request failed: %s: %s", url, exc)
            raise TmdbServiceError(f"Failed to {action}: {exc}") from exc

        if response.status_code != 200:
            logger.error(
                "TMDB responded with HTTP %s for %s: %s",
                response.status_code,
                url,
                response.text[:500],
            )
            raise TmdbServiceError(
                f"Failed to {action}: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.error("TMDB returned an invalid payload for %s", url)
            raise TmdbServiceError(
                f"Failed to {action}: invalid response", status_code=response.status_code
            ) from exc


__all__ = ["PLACEHOLDER_IMAGE", "TmdbClient", "TmdbServiceError", "build_image_url"]
