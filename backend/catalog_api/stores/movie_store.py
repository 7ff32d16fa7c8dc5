"""Movie store persisting catalog entries in SQLite."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..db import session_scope
from ..models import MovieRecord, utc_now
from ..schemas import CoordinatePair, MovieModel, MovieUpdate

logger = logging.getLogger(__name__)


class MovieNotFoundError(LookupError):
    """Raised when updating a movie that is not in the catalog."""


class DuplicateMovieError(RuntimeError):
    """Raised when a TMDB identifier has already been imported."""


@dataclass(slots=True)
class MovieStore:
    """Catalog accessor opening a fresh session for every operation."""

    engine: Engine

    def create(self, record: MovieRecord) -> MovieModel:
        """Insert a new movie and return the stored row."""

        now = utc_now()
        record.created_at = now
        record.updated_at = now
        try:
            with session_scope(self.engine) as session:
                session.add(record)
                session.flush()
                session.refresh(record)
                model = MovieModel.model_validate(record)
        except IntegrityError as exc:
            logger.warning("Duplicate movie import attempted: tmdb_id=%s", record.tmdb_id)
            raise DuplicateMovieError(
                f"Movie with TMDB id {record.tmdb_id} already exists"
            ) from exc
        logger.info("Movie created: id=%s title=%r", model.id, model.title)
        return model

    def get(self, movie_id: int) -> MovieModel | None:
        """Return a single movie if present."""

        with Session(self.engine) as session:
            record = session.get(MovieRecord, movie_id)
            return MovieModel.model_validate(record) if record else None

    def get_by_tmdb_id(self, tmdb_id: int) -> MovieModel | None:
        with Session(self.engine) as session:
            record = session.exec(
                select(MovieRecord).where(MovieRecord.tmdb_id == tmdb_id)
            ).first()
            return MovieModel.model_validate(record) if record else None

    def list(self, *, query: str | None = None) -> list[MovieModel]:
        """Return every movie ordered by title, optionally filtered by a title term."""

        statement = select(MovieRecord)
        if query:
            pattern = f"%{_escape_like(query.lower())}%"
            statement = statement.where(
                func.lower(MovieRecord.title).like(pattern, escape="\\")
            )
        statement = statement.order_by(func.lower(MovieRecord.title), MovieRecord.id)

        with Session(self.engine) as session:
            records: Sequence[MovieRecord] = session.exec(statement).all()
            items = [MovieModel.model_validate(record) for record in records]
        logger.info("Listed %s movies", len(items))
        return items

    def count(self) -> int:
        with Session(self.engine) as session:
            return session.exec(select(func.count()).select_from(MovieRecord)).one()

    def update(self, movie_id: int, update: MovieUpdate) -> MovieModel:
        """Apply edits to a stored movie.

        Changing the reference city without supplying coordinates clears the
        stored coordinates, so the next forecast lookup re-resolves the city.
        """

        payload = _extract_update(update)
        with session_scope(self.engine) as session:
            record = session.get(MovieRecord, movie_id)
            if record is None:
                raise MovieNotFoundError(f"Movie {movie_id} not found")
            city_changed = "city" in payload and payload["city"] != record.city
            if city_changed and "latitude" not in payload and "longitude" not in payload:
                payload["latitude"] = None
                payload["longitude"] = None
            for key, value in payload.items():
                setattr(record, key, value)
            record.updated_at = utc_now()
            session.add(record)
            session.flush()
            session.refresh(record)
            model = MovieModel.model_validate(record)
        logger.info("Movie updated: id=%s", movie_id)
        return model

    def update_coordinates(
        self, movie_id: int, coordinates: CoordinatePair, *, city: str | None
    ) -> MovieModel:
        """Persist coordinates resolved from ``city`` in a single update.

        The row is only written while it still references ``city`` and lacks
        a coordinate; otherwise the current row is returned unchanged.
        """

        with session_scope(self.engine) as session:
            record = session.get(MovieRecord, movie_id)
            if record is None:
                raise MovieNotFoundError(f"Movie {movie_id} not found")
            if record.city != city or (
                record.latitude is not None and record.longitude is not None
            ):
                logger.warning(
                    "Skipping coordinate write-back for movie %s: location changed since lookup",
                    movie_id,
                )
                return MovieModel.model_validate(record)
            record.latitude = coordinates.latitude
            record.longitude = coordinates.longitude
            record.updated_at = utc_now()
            session.add(record)
            session.flush()
            session.refresh(record)
            model = MovieModel.model_validate(record)
        logger.info(
            "Coordinates stored for movie %s: %s,%s",
            movie_id,
            coordinates.latitude,
            coordinates.longitude,
        )
        return model

    def delete(self, movie_id: int) -> bool:
        """Remove a movie, returning whether a row was deleted."""

        with session_scope(self.engine) as session:
            record = session.get(MovieRecord, movie_id)
            if record is None:
                logger.warning("Movie not found for deletion: id=%s", movie_id)
                return False
            session.delete(record)
        logger.info("Movie removed: id=%s", movie_id)
        return True


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _extract_update(update: MovieUpdate) -> dict[str, Any]:
    """Extract explicitly supplied fields; ``None`` clears a value."""

    payload = update.model_dump(exclude_unset=True)
    for required in ("title", "original_title"):
        if payload.get(required, "") is None:
            payload.pop(required)
    return payload
