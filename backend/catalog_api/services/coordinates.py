"""Coordinate parsing, rounding and validation helpers."""
from __future__ import annotations

import math
from typing import Any

from ..schemas import CoordinatePair

PRECISION = 6


class CoordinateValidationError(ValueError):
    """Raised when a latitude or longitude falls outside its legal range."""


def round_coordinate(value: float) -> float:
    return round(float(value), PRECISION)


def format_coordinate(value: float) -> str:
    """Fixed six-decimal formatting, independent of the host locale."""

    return f"{value:.{PRECISION}f}"


def parse_decimal(raw: Any) -> float | None:
    """Parse a provider number using ``.`` as the decimal separator.

    Returns ``None`` for anything that is not a finite number so that an
    unparseable value is never mistaken for zero.
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text or "," in text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(value):
        return None
    return value


def validate_coordinates(latitude: float, longitude: float) -> CoordinatePair:
    """Return a rounded pair or raise when either value is out of range."""

    if latitude is None or longitude is None:
        raise CoordinateValidationError("Latitude and longitude are both required.")
    if not math.isfinite(latitude) or not -90 <= latitude <= 90:
        raise CoordinateValidationError(
            f"Latitude must be between -90 and 90 (got {latitude})."
        )
    if not math.isfinite(longitude) or not -180 <= longitude <= 180:
        raise CoordinateValidationError(
            f"Longitude must be between -180 and 180 (got {longitude})."
        )
    return CoordinatePair(
        latitude=round_coordinate(latitude), longitude=round_coordinate(longitude)
    )


__all__ = [
    "CoordinateValidationError",
    "PRECISION",
    "format_coordinate",
    "parse_decimal",
    "round_coordinate",
    "validate_coordinates",
]
