"""Top-level API router aggregation."""

from fastapi import APIRouter, Depends

from . import activities, precipitation
from .dependencies import get_precipitation_monitor, get_recommendation_service

api_router = APIRouter(prefix="/api")

api_router.include_router(activities.router)
api_router.include_router(precipitation.router)


@api_router.get("/health")
def health(
    recommendations=Depends(get_recommendation_service),
    monitor=Depends(get_precipitation_monitor),
):
    """Liveness check with in-memory cache sizes."""
    return {
        "status": "ok",
        "recommendation_cache_entries": len(recommendations.cache),
        "precipitation_cache_entries": len(monitor.cache),
    }
