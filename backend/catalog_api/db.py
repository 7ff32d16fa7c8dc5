"""Database helpers for the catalog API."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from . import models  # noqa: F401  registers tables on SQLModel.metadata
from .settings import CatalogSettings
from .utils.paths import ensure_sqlite_directory

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: CatalogSettings) -> Engine:
    """Create a SQLModel engine using catalog settings."""

    url = settings.database_url
    ensure_sqlite_directory(url)
    kwargs: dict[str, object] = {"echo": settings.database_echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def init_database(engine: Engine) -> None:
    """Create the catalog tables when they do not exist yet."""

    SQLModel.metadata.create_all(engine)
    logger.info("Catalog tables verified at %s", engine.url)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Yield a SQLModel session that commits on success and closes automatically."""

    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
