"""Weather and geocoding endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_geocoder, get_weather_service
from ..errors import weather_http_error
from ..schemas import CoordinatePair, ForecastResult
from ..services import (
    CoordinateValidationError,
    GeocodingService,
    WeatherService,
    WeatherServiceError,
)

router = APIRouter(tags=["weather"])


@router.get("/weather", response_model=ForecastResult)
async def forecast_by_coordinates(
    latitude: float = Query(..., ge=-90, le=90, description="Latitude in decimal degrees."),
    longitude: float = Query(..., ge=-180, le=180, description="Longitude in decimal degrees."),
    weather: WeatherService = Depends(get_weather_service),
) -> ForecastResult:
    """Return the daily forecast for a coordinate pair."""

    try:
        return await weather.forecast_by_coordinates(latitude, longitude)
    except CoordinateValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except WeatherServiceError as exc:
        raise weather_http_error(exc) from exc


@router.get("/weather/city", response_model=ForecastResult)
async def forecast_by_city(
    name: str = Query(..., min_length=1, description="City name to resolve."),
    weather: WeatherService = Depends(get_weather_service),
) -> ForecastResult:
    """Resolve a city and return its daily forecast."""

    try:
        forecast = await weather.forecast_by_city(name)
    except WeatherServiceError as exc:
        raise weather_http_error(exc) from exc
    if forecast is None:
        raise HTTPException(status_code=404, detail="City not found")
    return forecast


@router.get("/geocode", response_model=CoordinatePair)
async def geocode(
    city: str = Query(..., min_length=1, description="City name to resolve."),
    geocoder: GeocodingService = Depends(get_geocoder),
) -> CoordinatePair:
    """Return the coordinates of the best match for a city name."""

    coordinates = await geocoder.resolve(city)
    if coordinates is None:
        raise HTTPException(status_code=404, detail="City not found")
    return coordinates
