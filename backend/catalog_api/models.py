"""Database models for the catalog API."""
from __future__ import annotations

from datetime import date, datetime, timezone

from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


class MovieRecord(SQLModel, table=True):
    """Imported movie enriched with an optional reference location."""

    __tablename__ = "movies"

    id: int | None = Field(default=None, primary_key=True)
    tmdb_id: int = Field(index=True, unique=True)
    title: str = Field(index=True)
    original_title: str
    overview: str | None = Field(default=None)
    release_date: date | None = Field(default=None)
    genres: str | None = Field(default=None)
    poster_path: str | None = Field(default=None)
    languages: str | None = Field(default=None)
    runtime: int | None = Field(default=None)
    vote_average: float | None = Field(default=None)
    main_cast: str | None = Field(default=None)
    city: str | None = Field(default=None)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)
