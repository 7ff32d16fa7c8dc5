"""Tests for the Typer-based catalog CLI."""
from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient
from typer.testing import CliRunner

from backend.catalog_api import create_app
from backend.catalog_api.settings import CatalogSettings
from backend.catalog_cli import client as client_module
from backend.catalog_cli.app import app as cli_app

from .conftest import WEATHER_HOST, FakeUpstream

cli_app_module = importlib.import_module("backend.catalog_cli.app")


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_client(settings: CatalogSettings, upstream: FakeUpstream) -> TestClient:
    """Provide a TestClient and patch the CLI HTTP client factory."""

    test_client = TestClient(create_app(settings=settings, transport=upstream.transport))

    original_factory = client_module.create_client
    original_app_factory = cli_app_module.create_client

    def _factory(base_url: str, *, timeout: float = 60.0, transport: Any = None):  # type: ignore[override]
        return test_client

    client_module.create_client = _factory  # type: ignore[assignment]
    cli_app_module.create_client = _factory  # type: ignore[assignment]

    yield test_client

    client_module.create_client = original_factory  # type: ignore[assignment]
    cli_app_module.create_client = original_app_factory  # type: ignore[assignment]


def _import(runner: CliRunner, *args: str) -> dict[str, Any]:
    result = runner.invoke(cli_app, ["movies", "import", "603", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def test_cli_health_command_outputs_status(runner: CliRunner, cli_client: TestClient) -> None:
    result = runner.invoke(cli_app, ["health"])

    assert result.exit_code == 0
    assert "\"status\": \"ok\"" in result.output


def test_cli_search_movies(runner: CliRunner, cli_client: TestClient) -> None:
    result = runner.invoke(cli_app, ["search", "movies", "matrix"])

    assert result.exit_code == 0
    assert json.loads(result.output)["results"][0]["id"] == 603


def test_cli_search_details_not_found(runner: CliRunner, cli_client: TestClient) -> None:
    result = runner.invoke(cli_app, ["search", "details", "404404"])

    assert result.exit_code == 1
    assert "Movie not found" in result.output


def test_cli_import_and_list(runner: CliRunner, cli_client: TestClient) -> None:
    movie = _import(runner, "--city", "Paris")

    listing = runner.invoke(cli_app, ["movies", "list", "--query", "matrix"])

    assert movie["city"] == "Paris"
    assert listing.exit_code == 0
    assert json.loads(listing.output)["total"] == 1


def test_cli_import_requires_both_coordinates(runner: CliRunner, cli_client: TestClient) -> None:
    result = runner.invoke(cli_app, ["movies", "import", "603", "--latitude", "10"])

    assert result.exit_code == 1
    assert "provided together" in result.output


def test_cli_duplicate_import_reports_conflict(runner: CliRunner, cli_client: TestClient) -> None:
    _import(runner)

    result = runner.invoke(cli_app, ["movies", "import", "603"])

    assert result.exit_code == 1
    assert "Error (409)" in result.output


def test_cli_show_movie_includes_forecast(runner: CliRunner, cli_client: TestClient) -> None:
    movie = _import(runner, "--city", "Paris")

    result = runner.invoke(cli_app, ["movies", "show", str(movie["id"])])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["forecast"]["coordinates"]["latitude"] == 48.8566
    assert payload["movie"]["latitude"] == 48.8566


def test_cli_update_and_delete(runner: CliRunner, cli_client: TestClient) -> None:
    movie = _import(runner, "--latitude", "1", "--longitude", "2")

    updated = runner.invoke(cli_app, ["movies", "update", str(movie["id"]), "--clear-location"])
    removed = runner.invoke(cli_app, ["movies", "delete", str(movie["id"])])
    missing = runner.invoke(cli_app, ["movies", "delete", str(movie["id"])])

    assert updated.exit_code == 0
    assert json.loads(updated.output)["latitude"] is None
    assert removed.exit_code == 0
    assert f"Movie {movie['id']} removed." in removed.output
    assert missing.exit_code == 1


def test_cli_update_without_changes_fails(runner: CliRunner, cli_client: TestClient) -> None:
    result = runner.invoke(cli_app, ["movies", "update", "1"])

    assert result.exit_code == 1
    assert "No updates supplied." in result.output


def test_cli_weather_coords_accepts_negative_values(
    runner: CliRunner, cli_client: TestClient, upstream: FakeUpstream
) -> None:
    result = runner.invoke(cli_app, ["weather", "coords", "--lat", "-33.8688", "--lon", "151.2093"])

    assert result.exit_code == 0
    assert json.loads(result.output)["coordinates"] == {"latitude": -33.8688, "longitude": 151.2093}
    (request,) = upstream.calls(WEATHER_HOST)
    assert request.url.params["latitude"] == "-33.868800"


def test_cli_weather_coords_rejects_out_of_range(
    runner: CliRunner, cli_client: TestClient, upstream: FakeUpstream
) -> None:
    result = runner.invoke(cli_app, ["weather", "coords", "--lat", "95", "--lon", "0"])

    assert result.exit_code == 1
    assert upstream.requests == []


def test_cli_weather_city_not_found(runner: CliRunner, cli_client: TestClient) -> None:
    result = runner.invoke(cli_app, ["weather", "city", "Atlantis"])

    assert result.exit_code == 1
    assert "City not found" in result.output


def test_cli_geocode(runner: CliRunner, cli_client: TestClient) -> None:
    result = runner.invoke(cli_app, ["geocode", "Paris"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"latitude": 48.8566, "longitude": 2.3522}


def test_cli_export_writes_files(runner: CliRunner, cli_client: TestClient, tmp_path: Path) -> None:
    _import(runner)
    csv_path = tmp_path / "catalog.csv"
    excel_path = tmp_path / "catalog.xlsx"

    csv_result = runner.invoke(cli_app, ["export", "csv", "-o", str(csv_path)])
    excel_result = runner.invoke(cli_app, ["export", "excel", "--output", str(excel_path)])

    assert csv_result.exit_code == 0
    assert csv_path.read_text(encoding="utf-8").startswith("id,tmdb_id,title")
    assert excel_result.exit_code == 0
    assert excel_path.read_bytes()[:2] == b"PK"
