"""Shared fixtures: an isolated catalog database and a fake upstream web."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.catalog_api.settings import CatalogSettings  # noqa: E402

GEOCODING_HOST = "nominatim.openstreetmap.org"
WEATHER_HOST = "api.open-meteo.com"
TMDB_HOST = "api.themoviedb.org"


def forecast_payload(latitude: str, longitude: str) -> dict[str, Any]:
    return {
        "latitude": float(latitude),
        "longitude": float(longitude),
        "timezone": "Europe/Paris",
        "daily": {
            "time": ["2026-10-18", "2026-10-19", "2026-10-20"],
            "temperature_2m_max": [18.4, None, 16.0],
            "temperature_2m_min": [9.1, 8.7, None],
        },
    }


def movie_details_payload(tmdb_id: int = 603, title: str = "The Matrix") -> dict[str, Any]:
    return {
        "id": tmdb_id,
        "title": title,
        "original_title": title,
        "overview": "  A hacker learns the truth about reality.  ",
        "release_date": "1999-03-30",
        "poster_path": "/matrix.jpg",
        "backdrop_path": "/matrix-bg.jpg",
        "runtime": 136,
        "vote_average": 8.2,
        "vote_count": 25000,
        "genres": [{"id": 28, "name": "Action"}, {"id": 878, "name": "Science Fiction"}],
        "spoken_languages": [{"iso_639_1": "en", "name": "English", "english_name": "English"}],
        "credits": {
            "cast": [
                {"id": 6, "name": "Carrie-Anne Moss", "character": "Trinity", "order": 2},
                {"id": 1, "name": "Keanu Reeves", "character": "Neo", "order": 0},
                {"id": 2, "name": "Laurence Fishburne", "character": "Morpheus", "order": 1},
                {"id": 3, "name": "Hugo Weaving", "character": "Agent Smith", "order": 3},
                {"id": 4, "name": "Joe Pantoliano", "character": "Cypher", "order": 4},
                {"id": 5, "name": "Gloria Foster", "character": "Oracle", "order": 5},
            ]
        },
    }


class FakeUpstream:
    """Routes outbound requests to canned geocoding, weather and TMDB replies."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.places: dict[str, list[dict[str, Any]]] = {
            "paris": [{"lat": "48.856600", "lon": "2.352200", "display_name": "Paris, France"}],
            "lisbon": [{"lat": "38.7077507", "lon": "-9.1365919", "display_name": "Lisboa, Portugal"}],
        }
        self.failing_forecasts: set[tuple[str, str]] = set()
        self.movies: dict[int, dict[str, Any]] = {603: movie_details_payload()}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, host: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        params = request.url.params
        if host == GEOCODING_HOST:
            return httpx.Response(200, json=self.places.get(params["q"].casefold(), []))
        if host == WEATHER_HOST:
            key = (params["latitude"], params["longitude"])
            if key in self.failing_forecasts:
                return httpx.Response(500, json={"error": True, "reason": "boom"})
            return httpx.Response(200, json=forecast_payload(*key))
        if host == TMDB_HOST:
            return self._tmdb(request)
        return httpx.Response(404)

    def _tmdb(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/3")
        if path == "/search/movie":
            results = [
                {key: value for key, value in movie.items() if key not in ("credits", "genres")}
                for movie in self.movies.values()
                if request.url.params["query"].lower() in movie["title"].lower()
            ]
            return httpx.Response(
                200,
                json={"page": 1, "results": results, "total_pages": 1, "total_results": len(results)},
            )
        if path == "/discover/movie":
            return httpx.Response(200, json={"page": 1, "results": [], "total_pages": 0, "total_results": 0})
        if path == "/configuration":
            return httpx.Response(
                200,
                json={"images": {"secure_base_url": "https://image.tmdb.org/t/p/", "poster_sizes": ["w500"]}},
            )
        parts = path.strip("/").split("/")
        if parts[0] == "movie" and parts[1].isdigit():
            movie = self.movies.get(int(parts[1]))
            if movie is None:
                return httpx.Response(404, json={"status_message": "The resource could not be found."})
            if len(parts) == 3 and parts[2] == "images":
                return httpx.Response(
                    200,
                    json={"id": movie["id"], "posters": [{"file_path": "/p.jpg", "width": 500, "height": 750}], "backdrops": []},
                )
            return httpx.Response(200, json=movie)
        return httpx.Response(404)


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def settings(tmp_path: Path) -> CatalogSettings:
    """Settings backed by an isolated SQLite database."""

    return CatalogSettings(
        database_url=f"sqlite:///{tmp_path / 'catalog.db'}",
        tmdb_api_key="test-key",
    )
