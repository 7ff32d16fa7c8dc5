"""Pydantic models exposed by the catalog API."""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(default="0.1.0", description="Semantic version of the API service.")
    movies: int = Field(default=0, description="Number of movies stored in the catalog.")


class CoordinatePair(BaseModel):
    """Latitude and longitude in decimal degrees, always resolved together."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class DailyReading(BaseModel):
    """Temperature for a single forecast day; absent readings stay ``None``."""

    day: date
    temperature: float | None = None


class ForecastResult(BaseModel):
    """Daily maximum and minimum temperatures aligned on the same dates."""

    coordinates: CoordinatePair
    timezone: str = ""
    daily_max: list[DailyReading] = Field(default_factory=list)
    daily_min: list[DailyReading] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Movie metadata service payloads


class MovieSummary(BaseModel):
    """Search result entry returned by the metadata service."""

    id: int
    title: str = ""
    original_title: str = ""
    overview: str | None = None
    release_date: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: list[int] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Paginated search or discovery results."""

    page: int = 1
    results: list[MovieSummary] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0


class Genre(BaseModel):
    id: int
    name: str = ""


class SpokenLanguage(BaseModel):
    iso_639_1: str = ""
    name: str = ""
    english_name: str | None = None


class CastMember(BaseModel):
    id: int
    name: str = ""
    character: str | None = None
    order: int = 0


class Credits(BaseModel):
    cast: list[CastMember] = Field(default_factory=list)


class MovieDetails(BaseModel):
    """Full movie record including credits."""

    id: int
    title: str = ""
    original_title: str = ""
    overview: str | None = None
    release_date: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    runtime: int | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    genres: list[Genre] = Field(default_factory=list)
    spoken_languages: list[SpokenLanguage] = Field(default_factory=list)
    credits: Credits | None = None


class ImageModel(BaseModel):
    file_path: str
    width: int = 0
    height: int = 0
    aspect_ratio: float = 0.0
    vote_average: float = 0.0
    vote_count: int = 0


class ImagesResponse(BaseModel):
    """Posters and backdrops published for a movie."""

    id: int
    backdrops: list[ImageModel] = Field(default_factory=list)
    posters: list[ImageModel] = Field(default_factory=list)


class ImageConfiguration(BaseModel):
    base_url: str = ""
    secure_base_url: str = ""
    backdrop_sizes: list[str] = Field(default_factory=list)
    logo_sizes: list[str] = Field(default_factory=list)
    poster_sizes: list[str] = Field(default_factory=list)
    profile_sizes: list[str] = Field(default_factory=list)
    still_sizes: list[str] = Field(default_factory=list)


class TmdbConfiguration(BaseModel):
    """Image base URLs and available sizes."""

    images: ImageConfiguration | None = None


# ---------------------------------------------------------------------------
# Catalog payloads


class MovieModel(BaseModel):
    """Catalog entry as exposed to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tmdb_id: int
    title: str
    original_title: str
    overview: str | None = None
    release_date: date | None = None
    genres: str | None = None
    poster_path: str | None = None
    languages: str | None = None
    runtime: int | None = None
    vote_average: float | None = None
    main_cast: str | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def coordinates(self) -> CoordinatePair | None:
        """Return the stored coordinates when both halves are present."""

        if self.latitude is None or self.longitude is None:
            return None
        return CoordinatePair(latitude=self.latitude, longitude=self.longitude)


class MovieListModel(BaseModel):
    """List container for catalog responses."""

    items: list[MovieModel]
    total: int


class MovieUpdate(BaseModel):
    """Subset of catalog fields allowed to be edited."""

    title: str | None = Field(default=None, min_length=1)
    original_title: str | None = Field(default=None, min_length=1)
    overview: str | None = None
    release_date: date | None = None
    genres: str | None = None
    poster_path: str | None = None
    languages: str | None = None
    runtime: int | None = Field(default=None, ge=0)
    vote_average: float | None = Field(default=None, ge=0, le=10)
    main_cast: str | None = None
    city: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _coordinates_together(self) -> "MovieUpdate":
        supplied = {"latitude", "longitude"} & self.model_fields_set
        if len(supplied) == 1 or (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be updated together")
        return self


class MovieImportRequest(BaseModel):
    """Payload used to import a movie from the metadata service."""

    tmdb_id: int = Field(..., gt=0, description="Identifier in the metadata service.")
    city: str | None = Field(default=None, description="Optional reference city.")
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _coordinates_together(self) -> "MovieImportRequest":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class MovieDetailResponse(BaseModel):
    """Catalog entry with its poster URL and an optional forecast."""

    movie: MovieModel
    poster_url: str
    forecast: ForecastResult | None = None


class MovieForecastModel(BaseModel):
    movie_id: int
    title: str
    forecast: ForecastResult


class CatalogForecastsModel(BaseModel):
    """Forecasts for every catalog entry that has coordinates."""

    items: list[MovieForecastModel] = Field(default_factory=list)
    failed: list[int] = Field(
        default_factory=list,
        description="Movie identifiers whose forecast lookup failed.",
    )
