"""Precipitation alert endpoints.

GET  /api/precipitation/check                          - Check one location
POST /api/precipitation/check-multiple                 - Check many locations
GET  /api/precipitation/cooldown/{location_id}         - Cooldown status
POST /api/precipitation/cooldown/{location_id}/clear   - Reset cooldown
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..errors import InvalidInputError
from ..schemas.precipitation import (
    CheckMultipleResponse,
    CheckResponse,
    CooldownStatus,
    LocationCheckRequest,
)
from ..services.precipitation_monitor import PrecipitationMonitor
from .dependencies import get_precipitation_monitor

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/precipitation", tags=["precipitation"])


@router.get("/check", response_model=CheckResponse)
async def check_location(
    lat: float,
    lon: float,
    location_id: str | None = None,
    monitor: PrecipitationMonitor = Depends(get_precipitation_monitor),
):
    """Check a single location for imminent precipitation."""
    try:
        alert = await monitor.check_precipitation(lat, lon, location_id or f"{lat},{lon}")
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"has_alert": alert is not None, "alert": alert.to_dict() if alert else None}


@router.post("/check-multiple", response_model=CheckMultipleResponse)
async def check_multiple(
    req: LocationCheckRequest,
    monitor: PrecipitationMonitor = Depends(get_precipitation_monitor),
):
    """Check several locations; only locations with a deliverable alert are returned."""
    alerts = await monitor.check_multiple_locations(req.locations)
    return {"alerts": [a.to_dict() for a in alerts], "count": len(alerts)}


@router.get(
    "/cooldown/{location_id}",
    response_model=CooldownStatus,
    response_model_exclude_none=True,
)
def get_cooldown_status(
    location_id: str,
    monitor: PrecipitationMonitor = Depends(get_precipitation_monitor),
):
    return monitor.get_cooldown_status(location_id)


@router.post("/cooldown/{location_id}/clear")
def clear_cooldown(
    location_id: str,
    monitor: PrecipitationMonitor = Depends(get_precipitation_monitor),
):
    monitor.clear_cooldown(location_id)
    return {"message": "Cooldown cleared", "location_id": location_id}
