"""Search endpoints proxying the movie metadata service."""
from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_tmdb_client
from ..errors import tmdb_http_error
from ..schemas import ImagesResponse, MovieDetails, SearchResponse, TmdbConfiguration
from ..services import TmdbClient, TmdbServiceError

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/movies", response_model=SearchResponse)
async def search_movies(
    query: str = Query(..., min_length=1, description="Free-text title search."),
    page: int = Query(default=1, ge=1, le=500, description="Result page starting at 1."),
    tmdb: TmdbClient = Depends(get_tmdb_client),
) -> SearchResponse:
    """Return movies whose title matches the query."""

    trimmed = query.strip()
    if not trimmed:
        raise HTTPException(status_code=422, detail="Search query must not be blank")
    try:
        return await tmdb.search_movies(trimmed, page)
    except TmdbServiceError as exc:
        raise tmdb_http_error(exc) from exc


@router.get("/genres/{genre_id}", response_model=SearchResponse)
async def discover_genre(
    genre_id: int,
    page: int = Query(default=1, ge=1, le=500),
    tmdb: TmdbClient = Depends(get_tmdb_client),
) -> SearchResponse:
    """Browse popular movies for a genre identifier."""

    try:
        return await tmdb.discover_by_genre(genre_id, page)
    except TmdbServiceError as exc:
        raise tmdb_http_error(exc) from exc


@router.get("/movies/{tmdb_id}", response_model=MovieDetails)
async def movie_details(tmdb_id: int, tmdb: TmdbClient = Depends(get_tmdb_client)) -> MovieDetails:
    """Return full metadata, including credits, for a movie."""

    try:
        return await tmdb.get_movie_details(tmdb_id)
    except TmdbServiceError as exc:
        raise tmdb_http_error(exc) from exc


@router.get("/movies/{tmdb_id}/images", response_model=ImagesResponse)
async def movie_images(tmdb_id: int, tmdb: TmdbClient = Depends(get_tmdb_client)) -> ImagesResponse:
    """Return posters and backdrops published for a movie."""

    try:
        return await tmdb.get_movie_images(tmdb_id)
    except TmdbServiceError as exc:
        raise tmdb_http_error(exc) from exc


@router.get("/configuration", response_model=TmdbConfiguration)
async def configuration(tmdb: TmdbClient = Depends(get_tmdb_client)) -> TmdbConfiguration:
    """Return image base URLs and available sizes."""

    try:
        return await tmdb.get_configuration()
    except TmdbServiceError as exc:
        raise tmdb_http_error(exc) from exc
