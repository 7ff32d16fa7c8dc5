"""Command line interface for the Cinemeteo catalog API."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import httpx
import typer

from .client import create_client


DEFAULT_API_BASE = "http://localhost:8000"

app = typer.Typer(help="Search, import and enrich movies through the catalog service.")
search_app = typer.Typer(help="Query the movie metadata service.")
app.add_typer(search_app, name="search")
movies_app = typer.Typer(help="Manage movies stored in the catalog.")
app.add_typer(movies_app, name="movies")
weather_app = typer.Typer(help="Fetch daily temperature forecasts.")
app.add_typer(weather_app, name="weather")
export_app = typer.Typer(help="Download the catalog as CSV or Excel.")
app.add_typer(export_app, name="export")


def _api_base_option() -> typer.Option:
    return typer.Option(
        DEFAULT_API_BASE,
        "--api-base",
        help="Base URL for the catalog API service.",
        show_default=True,
        envvar="CINEMETEO_API_BASE",
    )


def _print_json(response: httpx.Response) -> None:
    typer.echo(json.dumps(response.json(), indent=2, ensure_ascii=False))


def _check(response: httpx.Response, not_found: str) -> None:
    """Exit with a readable message for expected client errors."""

    if response.status_code == 404:
        typer.echo(not_found, err=True)
        raise typer.Exit(code=1)
    if response.status_code in (409, 422, 502, 503, 504):
        detail = response.json().get("detail", response.text)
        typer.echo(f"Error ({response.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    response.raise_for_status()


@app.command()
def health(api_base: str = _api_base_option()) -> None:
    """Call the /health endpoint and pretty-print the response."""

    with create_client(api_base) as client:
        response = client.get("/health")
        response.raise_for_status()
        _print_json(response)


@app.command()
def geocode(
    city: str = typer.Argument(..., help="City name to resolve."),
    api_base: str = _api_base_option(),
) -> None:
    """Resolve a city name to coordinates."""

    with create_client(api_base) as client:
        response = client.get("/geocode", params={"city": city})
        _check(response, "City not found")
        _print_json(response)


@search_app.command("movies")
def search_movies(
    query: str = typer.Argument(..., help="Title search term."),
    page: int = typer.Option(1, min=1, max=500, help="Result page starting at 1."),
    api_base: str = _api_base_option(),
) -> None:
    """Search movies by title."""

    with create_client(api_base) as client:
        response = client.get("/search/movies", params={"query": query, "page": page})
        _check(response, "No results")
        _print_json(response)


@search_app.command("genre")
def search_genre(
    genre_id: int = typer.Argument(..., help="Genre identifier in the metadata service."),
    page: int = typer.Option(1, min=1, max=500, help="Result page starting at 1."),
    api_base: str = _api_base_option(),
) -> None:
    """Browse movies by genre."""

    with create_client(api_base) as client:
        response = client.get(f"/search/genres/{genre_id}", params={"page": page})
        _check(response, "Genre not found")
        _print_json(response)


@search_app.command("details")
def search_details(
    tmdb_id: int = typer.Argument(..., help="Movie identifier in the metadata service."),
    api_base: str = _api_base_option(),
) -> None:
    """Show full metadata for a movie before importing it."""

    with create_client(api_base) as client:
        response = client.get(f"/search/movies/{tmdb_id}")
        _check(response, "Movie not found")
        _print_json(response)


@search_app.command("images")
def search_images(
    tmdb_id: int = typer.Argument(..., help="Movie identifier in the metadata service."),
    api_base: str = _api_base_option(),
) -> None:
    """List posters and backdrops for a movie."""

    with create_client(api_base) as client:
        response = client.get(f"/search/movies/{tmdb_id}/images")
        _check(response, "Movie not found")
        _print_json(response)


@movies_app.command("list")
def list_movies(
    query: Optional[str] = typer.Option(None, help="Optional title search term."),
    api_base: str = _api_base_option(),
) -> None:
    """Display the movies stored in the catalog."""

    params: dict[str, object] = {}
    if query:
        params["query"] = query
    with create_client(api_base) as client:
        response = client.get("/movies", params=params)
        response.raise_for_status()
        _print_json(response)


@movies_app.command("show")
def show_movie(
    movie_id: int = typer.Argument(..., help="Catalog identifier of the movie."),
    api_base: str = _api_base_option(),
) -> None:
    """Display a movie together with its forecast when one is available."""

    with create_client(api_base) as client:
        response = client.get(f"/movies/{movie_id}")
        _check(response, "Movie not found")
        _print_json(response)


@movies_app.command("import")
def import_movie(
    tmdb_id: int = typer.Argument(..., help="Movie identifier in the metadata service."),
    city: Optional[str] = typer.Option(None, help="Reference city for the movie."),
    latitude: Optional[float] = typer.Option(None, min=-90, max=90, help="Latitude in decimal degrees."),
    longitude: Optional[float] = typer.Option(None, min=-180, max=180, help="Longitude in decimal degrees."),
    api_base: str = _api_base_option(),
) -> None:
    """Import a movie from the metadata service into the catalog."""

    if (latitude is None) != (longitude is None):
        typer.echo("Latitude and longitude must be provided together.", err=True)
        raise typer.Exit(code=1)

    payload: dict[str, object] = {"tmdb_id": tmdb_id}
    if city is not None:
        payload["city"] = city
    if latitude is not None and longitude is not None:
        payload["latitude"] = latitude
        payload["longitude"] = longitude

    with create_client(api_base) as client:
        response = client.post("/movies/import", json=payload)
        _check(response, "Movie not found in the metadata service")
        _print_json(response)


@movies_app.command("update")
def update_movie(
    movie_id: int = typer.Argument(..., help="Catalog identifier of the movie."),
    title: Optional[str] = typer.Option(None, help="New display title."),
    city: Optional[str] = typer.Option(None, help="Reference city."),
    latitude: Optional[float] = typer.Option(None, min=-90, max=90, help="Latitude in decimal degrees."),
    longitude: Optional[float] = typer.Option(None, min=-180, max=180, help="Longitude in decimal degrees."),
    clear_location: bool = typer.Option(
        False,
        "--clear-location/--no-clear-location",
        help="Remove the stored city and coordinates.",
        show_default=False,
    ),
    api_base: str = _api_base_option(),
) -> None:
    """Update editable fields of a catalog entry."""

    if clear_location and any(value is not None for value in (city, latitude, longitude)):
        typer.echo("Cannot set and clear the location in the same command.", err=True)
        raise typer.Exit(code=1)

    payload: dict[str, object] = {}
    if title is not None:
        payload["title"] = title
    if clear_location:
        payload.update({"city": None, "latitude": None, "longitude": None})
    if city is not None:
        payload["city"] = city
    if latitude is not None:
        payload["latitude"] = latitude
    if longitude is not None:
        payload["longitude"] = longitude

    if not payload:
        typer.echo("No updates supplied.")
        raise typer.Exit(code=1)

    with create_client(api_base) as client:
        response = client.put(f"/movies/{movie_id}", json=payload)
        _check(response, "Movie not found")
        _print_json(response)


@movies_app.command("delete")
def delete_movie(
    movie_id: int = typer.Argument(..., help="Catalog identifier of the movie."),
    api_base: str = _api_base_option(),
) -> None:
    """Remove a movie from the catalog."""

    with create_client(api_base) as client:
        response = client.delete(f"/movies/{movie_id}")
        _check(response, "Movie not found")
        typer.echo(f"Movie {movie_id} removed.")


@movies_app.command("forecasts")
def catalog_forecasts(api_base: str = _api_base_option()) -> None:
    """Display forecasts for every movie with coordinates."""

    with create_client(api_base) as client:
        response = client.get("/movies/forecasts")
        response.raise_for_status()
        _print_json(response)


@weather_app.command("coords")
def weather_coords(
    latitude: float = typer.Option(..., "--latitude", "--lat", help="Latitude in decimal degrees."),
    longitude: float = typer.Option(..., "--longitude", "--lon", help="Longitude in decimal degrees."),
    api_base: str = _api_base_option(),
) -> None:
    """Display the forecast for a coordinate pair."""

    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        typer.echo("Latitude must be within [-90, 90] and longitude within [-180, 180].", err=True)
        raise typer.Exit(code=1)

    with create_client(api_base) as client:
        response = client.get("/weather", params={"latitude": latitude, "longitude": longitude})
        _check(response, "Forecast not found")
        _print_json(response)


@weather_app.command("city")
def weather_city(
    name: str = typer.Argument(..., help="City name to resolve."),
    api_base: str = _api_base_option(),
) -> None:
    """Display the forecast for a city."""

    with create_client(api_base) as client:
        response = client.get("/weather/city", params={"name": name})
        _check(response, "City not found")
        _print_json(response)


def _download(path: str, output: Path, api_base: str) -> None:
    with create_client(api_base) as client:
        response = client.get(path)
        response.raise_for_status()
    output.write_bytes(response.content)
    typer.echo(f"Wrote {len(response.content)} bytes to {output}")


@export_app.command("csv")
def export_csv(
    output: Path = typer.Option(Path("movie_catalog.csv"), "--output", "-o", help="Destination file."),
    api_base: str = _api_base_option(),
) -> None:
    """Save the catalog as a CSV file."""

    _download("/export/csv", output, api_base)


@export_app.command("excel")
def export_excel(
    output: Path = typer.Option(Path("movie_catalog.xlsx"), "--output", "-o", help="Destination file."),
    api_base: str = _api_base_option(),
) -> None:
    """Save the catalog as an Excel workbook."""

    _download("/export/excel", output, api_base)
