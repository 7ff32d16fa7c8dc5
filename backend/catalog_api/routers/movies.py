"""Catalog endpoints: import, browse, edit and enrich stored movies."""
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.concurrency import run_in_threadpool

from ..dependencies import (
    get_enrichment_service,
    get_import_service,
    get_movie_store,
    get_tmdb_client,
)
from ..errors import tmdb_http_error
from ..schemas import (
    CatalogForecastsModel,
    MovieDetailResponse,
    MovieImportRequest,
    MovieListModel,
    MovieModel,
    MovieUpdate,
)
from ..services import (
    CoordinateValidationError,
    LocationEnrichmentService,
    MovieImportService,
    TmdbClient,
    TmdbServiceError,
)
from ..stores.movie_store import DuplicateMovieError, MovieNotFoundError, MovieStore

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("", response_model=MovieListModel)
async def list_movies(
    query: str | None = Query(default=None, description="Optional title search term."),
    store: MovieStore = Depends(get_movie_store),
) -> MovieListModel:
    """Return every catalog entry ordered by title."""

    items = await run_in_threadpool(store.list, query=query)
    return MovieListModel(items=items, total=len(items))


@router.post("/import", response_model=MovieModel, status_code=201)
async def import_movie(
    request: MovieImportRequest,
    importer: MovieImportService = Depends(get_import_service),
) -> MovieModel:
    """Fetch a movie from the metadata service and store it in the catalog."""

    try:
        return await importer.import_movie(
            request.tmdb_id,
            city=request.city,
            latitude=request.latitude,
            longitude=request.longitude,
        )
    except DuplicateMovieError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except CoordinateValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except TmdbServiceError as exc:
        raise tmdb_http_error(exc) from exc


@router.get("/forecasts", response_model=CatalogForecastsModel)
async def catalog_forecasts(
    store: MovieStore = Depends(get_movie_store),
    enrichment: LocationEnrichmentService = Depends(get_enrichment_service),
) -> CatalogForecastsModel:
    """Return forecasts for every stored movie with coordinates."""

    movies = await run_in_threadpool(store.list)
    return await enrichment.catalog_forecasts(movies)


@router.get("/{movie_id}", response_model=MovieDetailResponse)
async def get_movie(
    movie_id: int,
    store: MovieStore = Depends(get_movie_store),
    tmdb: TmdbClient = Depends(get_tmdb_client),
    enrichment: LocationEnrichmentService = Depends(get_enrichment_service),
) -> MovieDetailResponse:
    """Return a catalog entry with its poster URL and, when possible, a forecast."""

    movie = await run_in_threadpool(store.get, movie_id)
    if movie is None:
        raise HTTPException(status_code=404, detail="Movie not found")

    result = await enrichment.enrich(movie)
    return MovieDetailResponse(
        movie=result.movie,
        poster_url=tmdb.image_url(result.movie.poster_path),
        forecast=result.forecast,
    )


@router.put("/{movie_id}", response_model=MovieModel)
async def update_movie(
    movie_id: int,
    update: MovieUpdate,
    store: MovieStore = Depends(get_movie_store),
) -> MovieModel:
    """Update editable fields of a catalog entry."""

    try:
        return await run_in_threadpool(store.update, movie_id, update)
    except MovieNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Movie not found") from exc


@router.delete("/{movie_id}", status_code=204)
async def delete_movie(movie_id: int, store: MovieStore = Depends(get_movie_store)) -> Response:
    """Remove a catalog entry."""

    if not await run_in_threadpool(store.delete, movie_id):
        raise HTTPException(status_code=404, detail="Movie not found")
    return Response(status_code=204)
