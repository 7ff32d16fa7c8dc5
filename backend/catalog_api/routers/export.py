"""Catalog export endpoints."""
from fastapi import APIRouter, Depends, Response
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_export_service, get_movie_store
from ..services import ExportService
from ..services.export import CSV_MEDIA_TYPE, EXCEL_MEDIA_TYPE, export_filename
from ..stores.movie_store import MovieStore

router = APIRouter(prefix="/export", tags=["export"])


def _attachment(content: bytes, media_type: str, extension: str) -> Response:
    filename = export_filename(extension)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/csv")
async def export_csv(
    store: MovieStore = Depends(get_movie_store),
    exporter: ExportService = Depends(get_export_service),
) -> Response:
    """Download the catalog as CSV."""

    movies = await run_in_threadpool(store.list)
    return _attachment(exporter.to_csv(movies), CSV_MEDIA_TYPE, "csv")


@router.get("/excel")
async def export_excel(
    store: MovieStore = Depends(get_movie_store),
    exporter: ExportService = Depends(get_export_service),
) -> Response:
    """Download the catalog as an Excel workbook."""

    movies = await run_in_threadpool(store.list)
    content = await run_in_threadpool(exporter.to_excel, movies)
    return _attachment(content, EXCEL_MEDIA_TYPE, "xlsx")
