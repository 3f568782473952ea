"""GET /api/activities - Activity suitability recommendations."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..errors import InvalidInputError
from ..schemas.activity import RecommendationOut
from ..services.recommendations import RecommendationService
from .dependencies import get_recommendation_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["activities"])


@router.get("/activities", response_model=list[RecommendationOut])
async def get_activity_recommendations(
    lat: float,
    lon: float,
    units: str = "imperial",
    settings: str | None = None,
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Return per-activity recommendations for a location, best first.

    ``settings`` is an optional JSON-encoded ActivitySettings object.
    """
    logger.info("Getting activity recommendations for location: %s,%s", lat, lon)
    try:
        recommendations = await service.get_recommendations(lat, lon, settings, units)
    except InvalidInputError as exc:
        logger.warning("Rejected recommendation request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))
    return [r.to_dict() for r in recommendations]
