"""Tests for importing metadata into the catalog."""
from __future__ import annotations

from datetime import date

import pytest

from backend.catalog_api.db import create_engine_from_settings, init_database
from backend.catalog_api.schemas import MovieDetails
from backend.catalog_api.services.coordinates import CoordinateValidationError
from backend.catalog_api.services.importer import MovieImportService, map_details
from backend.catalog_api.services.tmdb import TmdbClient, TmdbServiceError
from backend.catalog_api.settings import CatalogSettings
from backend.catalog_api.stores.movie_store import DuplicateMovieError, MovieStore

from .conftest import TMDB_HOST, FakeUpstream, movie_details_payload


@pytest.fixture()
def store(settings: CatalogSettings) -> MovieStore:
    engine = create_engine_from_settings(settings)
    init_database(engine)
    return MovieStore(engine)


@pytest.fixture()
def importer(upstream: FakeUpstream, store: MovieStore) -> MovieImportService:
    return MovieImportService(tmdb=TmdbClient("key", transport=upstream.transport), store=store)


def test_map_details_flattens_lists() -> None:
    record = map_details(MovieDetails.model_validate(movie_details_payload()))

    assert record.tmdb_id == 603
    assert record.genres == "Action, Science Fiction"
    assert record.languages == "English"
    assert record.main_cast == (
        "Keanu Reeves (Neo), Laurence Fishburne (Morpheus), Carrie-Anne Moss (Trinity), "
        "Hugo Weaving (Agent Smith), Joe Pantoliano (Cypher)"
    )
    assert record.release_date == date(1999, 3, 30)
    assert record.overview == "A hacker learns the truth about reality."
    assert record.vote_average == 8.2
    assert record.latitude is None and record.longitude is None and record.city is None


def test_map_details_handles_sparse_records() -> None:
    payload = {"id": 1, "title": "Untitled", "release_date": "soon", "vote_average": 0}

    record = map_details(MovieDetails.model_validate(payload))

    assert record.original_title == "Untitled"
    assert record.release_date is None
    assert record.vote_average is None
    assert record.genres is None
    assert record.main_cast is None


@pytest.mark.asyncio
async def test_import_persists_movie_with_location(
    importer: MovieImportService, store: MovieStore
) -> None:
    movie = await importer.import_movie(603, city=" Paris ", latitude=48.85661234, longitude=2.3522)

    assert movie.id is not None
    assert movie.city == "Paris"
    assert (movie.latitude, movie.longitude) == (48.856612, 2.3522)
    assert store.get_by_tmdb_id(603) == movie


@pytest.mark.asyncio
async def test_duplicate_import_is_rejected_before_fetching(
    importer: MovieImportService, upstream: FakeUpstream
) -> None:
    await importer.import_movie(603)

    with pytest.raises(DuplicateMovieError):
        await importer.import_movie(603)
    assert len(upstream.calls(TMDB_HOST)) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(("latitude", "longitude"), [(95.0, 0.0), (0.0, 200.0), (10.0, None)])
async def test_invalid_coordinates_are_rejected(
    importer: MovieImportService, upstream: FakeUpstream, latitude, longitude
) -> None:
    with pytest.raises(CoordinateValidationError):
        await importer.import_movie(603, latitude=latitude, longitude=longitude)
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_unknown_movie_propagates_service_error(importer: MovieImportService) -> None:
    with pytest.raises(TmdbServiceError) as excinfo:
        await importer.import_movie(404404)
    assert excinfo.value.status_code == 404
