"""Import movies from the metadata service into the local catalog."""
from __future__ import annotations

import logging
from datetime import date

from fastapi.concurrency import run_in_threadpool

from ..models import MovieRecord
from ..schemas import MovieDetails, MovieModel
from ..stores.movie_store import DuplicateMovieError, MovieStore
from .coordinates import CoordinateValidationError, validate_coordinates
from .tmdb import TmdbClient

logger = logging.getLogger(__name__)

MAIN_CAST_SIZE = 5


class MovieImportService:
    """Fetch movie details and persist them as a new catalog entry."""

    def __init__(self, *, tmdb: TmdbClient, store: MovieStore) -> None:
        self.tmdb = tmdb
        self.store = store

    async def import_movie(
        self,
        tmdb_id: int,
        *,
        city: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> MovieModel:
        existing = await run_in_threadpool(self.store.get_by_tmdb_id, tmdb_id)
        if existing is not None:
            logger.warning("Movie already imported: id=%s tmdb_id=%s", existing.id, tmdb_id)
            raise DuplicateMovieError(f"Movie '{existing.title}' has already been imported.")

        if latitude is not None or longitude is not None:
            if latitude is None or longitude is None:
                raise CoordinateValidationError("Latitude and longitude must be provided together.")
            coordinates = validate_coordinates(latitude, longitude)
            latitude, longitude = coordinates.latitude, coordinates.longitude

        details = await self.tmdb.get_movie_details(tmdb_id)
        logger.info("Importing movie %r (tmdb_id=%s)", details.title, details.id)

        record = map_details(details)
        record.city = city.strip() if city and city.strip() else None
        record.latitude = latitude
        record.longitude = longitude

        movie = await run_in_threadpool(self.store.create, record)
        logger.info("Movie imported: id=%s title=%r", movie.id, movie.title)
        return movie


def map_details(details: MovieDetails) -> MovieRecord:
    """Translate a metadata service record into a catalog row."""

    genres = ", ".join(genre.name for genre in details.genres if genre.name) or None
    languages = ", ".join(lang.name for lang in details.spoken_languages if lang.name) or None

    cast = sorted(details.credits.cast if details.credits else [], key=lambda member: member.order)
    main_cast = ", ".join(
        f"{member.name} ({member.character})" if member.character else member.name
        for member in cast[:MAIN_CAST_SIZE]
    ) or None

    return MovieRecord(
        tmdb_id=details.id,
        title=details.title or details.original_title,
        original_title=details.original_title or details.title,
        overview=(details.overview or "").strip() or None,
        release_date=_parse_release_date(details.release_date),
        genres=genres,
        poster_path=details.poster_path,
        languages=languages,
        runtime=details.runtime,
        vote_average=details.vote_average if details.vote_average > 0 else None,
        main_cast=main_cast,
    )


def _parse_release_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


__all__ = ["MAIN_CAST_SIZE", "MovieImportService", "map_details"]
