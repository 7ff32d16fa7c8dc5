"""Router exports for the catalog API."""
from . import export, health, movies, search, weather

__all__ = ["export", "health", "movies", "search", "weather"]
