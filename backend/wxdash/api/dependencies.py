"""Holders for the running RecommendationService and PrecipitationMonitor.

Route handlers get the services through ``Depends`` on the getters below.
The application lifespan installs them at startup and removes them at
shutdown.
"""

from ..services.precipitation_monitor import PrecipitationMonitor
from ..services.recommendations import RecommendationService

_recommendation_service: RecommendationService | None = None
_precipitation_monitor: PrecipitationMonitor | None = None


def set_services(
    recommendations: RecommendationService | None,
    precipitation: PrecipitationMonitor | None,
) -> None:
    global _recommendation_service, _precipitation_monitor
    _recommendation_service = recommendations
    _precipitation_monitor = precipitation


def get_recommendation_service() -> RecommendationService:
    if _recommendation_service is None:
        raise RuntimeError("Recommendation service not initialised; is the app running?")
    return _recommendation_service


def get_precipitation_monitor() -> PrecipitationMonitor:
    if _precipitation_monitor is None:
        raise RuntimeError("Precipitation monitor not initialised; is the app running?")
    return _precipitation_monitor
