"""Tests for the forecast provider."""
from __future__ import annotations

from datetime import date

import httpx
import pytest

from backend.catalog_api.services.coordinates import CoordinateValidationError
from backend.catalog_api.services.geocoding import GeocodingService
from backend.catalog_api.services.weather import (
    WeatherService,
    WeatherServiceError,
    WeatherServiceTimeout,
)

from .conftest import GEOCODING_HOST, WEATHER_HOST, FakeUpstream


def _weather(transport: httpx.AsyncBaseTransport) -> WeatherService:
    return WeatherService(geocoder=GeocodingService(transport=transport), transport=transport)


@pytest.mark.asyncio
async def test_forecast_by_coordinates_parses_daily_series(upstream: FakeUpstream) -> None:
    service = _weather(upstream.transport)

    forecast = await service.forecast_by_coordinates(48.8566, 2.3522)

    assert forecast.coordinates.latitude == 48.8566
    assert forecast.timezone == "Europe/Paris"
    assert [reading.day for reading in forecast.daily_max] == [
        date(2026, 10, 18),
        date(2026, 10, 19),
        date(2026, 10, 20),
    ]
    assert [reading.day for reading in forecast.daily_min] == [r.day for r in forecast.daily_max]
    assert [reading.temperature for reading in forecast.daily_max] == [18.4, None, 16.0]
    assert [reading.temperature for reading in forecast.daily_min] == [9.1, 8.7, None]


@pytest.mark.asyncio
async def test_request_uses_fixed_six_decimal_formatting(upstream: FakeUpstream) -> None:
    service = _weather(upstream.transport)

    await service.forecast_by_coordinates(48.8566, 2.3522)

    (request,) = upstream.calls(WEATHER_HOST)
    assert request.url.params["latitude"] == "48.856600"
    assert request.url.params["longitude"] == "2.352200"
    assert request.url.params["daily"] == "temperature_2m_max,temperature_2m_min"


@pytest.mark.asyncio
async def test_forecast_is_cached_per_rounded_pair(upstream: FakeUpstream) -> None:
    service = _weather(upstream.transport)

    first = await service.forecast_by_coordinates(48.8566, 2.3522)
    second = await service.forecast_by_coordinates(48.85660001, 2.35219999)

    assert first is second
    assert len(upstream.calls(WEATHER_HOST)) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(("latitude", "longitude"), [(95, 0), (0, 200), (-90.5, 10), (10, -181)])
async def test_out_of_range_coordinates_rejected_before_network(
    upstream: FakeUpstream, latitude: float, longitude: float
) -> None:
    service = _weather(upstream.transport)

    with pytest.raises(CoordinateValidationError):
        await service.forecast_by_coordinates(latitude, longitude)
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_error_status_raises_with_status_code(upstream: FakeUpstream) -> None:
    upstream.failing_forecasts.add(("10.000000", "20.000000"))
    service = _weather(upstream.transport)

    with pytest.raises(WeatherServiceError) as excinfo:
        await service.forecast_by_coordinates(10, 20)

    assert excinfo.value.status_code == 500
    assert not isinstance(excinfo.value, WeatherServiceTimeout)


@pytest.mark.asyncio
async def test_timeout_raises_distinct_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("no answer", request=request)

    service = _weather(httpx.MockTransport(handler))

    with pytest.raises(WeatherServiceTimeout):
        await service.forecast_by_coordinates(1, 2)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=None),
        httpx.Response(200, json={"timezone": "UTC"}),
        httpx.Response(200, json={"daily": {"time": ["yesterday"]}}),
    ],
)
async def test_malformed_body_raises(response: httpx.Response) -> None:
    service = _weather(httpx.MockTransport(lambda request: response))

    with pytest.raises(WeatherServiceError) as excinfo:
        await service.forecast_by_coordinates(1, 2)
    assert excinfo.value.status_code == 200


@pytest.mark.asyncio
async def test_failed_call_is_not_cached_or_retried(upstream: FakeUpstream) -> None:
    upstream.failing_forecasts.add(("1.000000", "2.000000"))
    service = _weather(upstream.transport)

    with pytest.raises(WeatherServiceError):
        await service.forecast_by_coordinates(1, 2)
    assert len(upstream.calls(WEATHER_HOST)) == 1

    upstream.failing_forecasts.clear()
    await service.forecast_by_coordinates(1, 2)
    assert len(upstream.calls(WEATHER_HOST)) == 2


@pytest.mark.asyncio
async def test_forecast_by_city_for_paris(upstream: FakeUpstream) -> None:
    service = _weather(upstream.transport)

    forecast = await service.forecast_by_city("Paris")
    again = await service.forecast_by_city("paris")

    assert forecast is not None
    assert forecast.coordinates.latitude == 48.8566
    assert forecast.coordinates.longitude == 2.3522
    assert again is forecast
    assert len(upstream.calls(GEOCODING_HOST)) == 1
    (weather_request,) = upstream.calls(WEATHER_HOST)
    assert (weather_request.url.params["latitude"], weather_request.url.params["longitude"]) == (
        "48.856600",
        "2.352200",
    )


@pytest.mark.asyncio
async def test_forecast_by_city_returns_none_for_unknown_city(upstream: FakeUpstream) -> None:
    service = _weather(upstream.transport)

    assert await service.forecast_by_city("Atlantis") is None
    assert upstream.calls(WEATHER_HOST) == []


@pytest.mark.asyncio
async def test_forecast_by_city_propagates_weather_failure(upstream: FakeUpstream) -> None:
    upstream.failing_forecasts.add(("48.856600", "2.352200"))
    service = _weather(upstream.transport)

    with pytest.raises(WeatherServiceError):
        await service.forecast_by_city("Paris")
