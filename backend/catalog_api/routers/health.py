"""Health endpoints."""
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_movie_store
from ..schemas import HealthStatus
from ..stores.movie_store import MovieStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus)
async def get_health(store: MovieStore = Depends(get_movie_store)) -> HealthStatus:
    """Return service heartbeat information."""

    return HealthStatus(movies=await run_in_threadpool(store.count))
