"""Application factory for the Cinemeteo catalog API."""
from __future__ import annotations

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import export, health, movies, search, weather
from .settings import CatalogSettings
from .state import AppState


def create_app(
    settings: CatalogSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""

    resolved_settings = settings or CatalogSettings()
    app_state = AppState(settings=resolved_settings, transport=transport)

    app = FastAPI(title="Cinemeteo Catalog API", version="0.1.0")
    app.state.app_state = app_state
    app.state.settings = app_state.settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in (
        health.router,
        search.router,
        movies.router,
        weather.router,
        export.router,
    ):
        app.include_router(router)

    return app
