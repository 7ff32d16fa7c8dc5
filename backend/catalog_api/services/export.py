"""CSV and Excel export of the movie catalog."""
from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..schemas import MovieModel

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: tuple[str, ...] = (
    "id",
    "tmdb_id",
    "title",
    "original_title",
    "overview",
    "release_date",
    "genres",
    "poster_path",
    "languages",
    "runtime",
    "vote_average",
    "main_cast",
    "city",
    "latitude",
    "longitude",
    "created_at",
    "updated_at",
)

CSV_MEDIA_TYPE = "text/csv"
EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MAX_COLUMN_WIDTH = 60


def _cell(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    return value


class ExportService:
    """Serialize catalog entries to downloadable files."""

    def to_csv(self, movies: Sequence[MovieModel]) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(EXPORT_COLUMNS)
        for movie in movies:
            row = []
            for column in EXPORT_COLUMNS:
                value = _cell(getattr(movie, column))
                row.append("" if value is None else value)
            writer.writerow(row)
        data = buffer.getvalue().encode("utf-8")
        logger.info("CSV export finished: %s movies, %s bytes", len(movies), len(data))
        return data

    def to_excel(self, movies: Sequence[MovieModel]) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Movies"

        header_font = Font(bold=True)
        header_fill = PatternFill(fill_type="solid", start_color="D3D3D3", end_color="D3D3D3")
        sheet.append(list(EXPORT_COLUMNS))
        for cell in sheet[1]:
            cell.font = header_font
            cell.fill = header_fill

        for movie in movies:
            sheet.append([_cell(getattr(movie, column)) for column in EXPORT_COLUMNS])

        for index, column in enumerate(sheet.iter_cols(), start=1):
            width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
            sheet.column_dimensions[get_column_letter(index)].width = min(width + 2, MAX_COLUMN_WIDTH)

        buffer = io.BytesIO()
        workbook.save(buffer)
        data = buffer.getvalue()
        logger.info("Excel export finished: %s movies, %s bytes", len(movies), len(data))
        return data


def export_filename(extension: str, now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"movie_catalog_{stamp}.{extension}"


__all__ = [
    "CSV_MEDIA_TYPE",
    "EXCEL_MEDIA_TYPE",
    "EXPORT_COLUMNS",
    "ExportService",
    "export_filename",
]
