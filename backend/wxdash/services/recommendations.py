"""Activity recommendations for a location, cached per request shape.

On a cache miss the current observation and hourly forecast are fetched,
every enabled activity is scored, and the list is stored sorted by score
(best first). Upstream trouble yields an empty list, never an exception.
"""

import json
import logging
from typing import Optional, Union

from ..config import settings
from ..errors import UpstreamFetchError
from ..models.weather import Activity, Recommendation
from ..schemas.activity import ActivitySettings
from .activity_scorer import rate_activity
from .provider import WeatherProvider
from .ttl_cache import TTLCache
from .validation import parse_settings, validate_coordinates, validate_units

logger = logging.getLogger(__name__)


def _location_prefix(lat: float, lon: float) -> str:
    return f"{lat}-{lon}-"


def _cache_key(
    lat: float, lon: float, units: str, activity_settings: Optional[ActivitySettings],
) -> str:
    if activity_settings is None:
        serialized = "{}"
    else:
        serialized = json.dumps(
            activity_settings.model_dump(mode="json"), sort_keys=True,
        )
    return f"{_location_prefix(lat, lon)}{units}-{serialized}"


class RecommendationService:
    """Scores activities against fetched weather and memoizes the result."""

    def __init__(
        self,
        provider: WeatherProvider,
        cache: Optional[TTLCache[list[Recommendation]]] = None,
        hourly_window: Optional[int] = None,
    ) -> None:
        self._provider = provider
        self._cache = cache if cache is not None else TTLCache(
            default_ttl=settings.recommendation_cache_ttl_sec,
            max_entries=settings.cache_max_entries,
        )
        self._hourly_window = hourly_window or settings.hourly_window

    @property
    def cache(self) -> TTLCache[list[Recommendation]]:
        return self._cache

    async def get_recommendations(
        self,
        lat: float,
        lon: float,
        activity_settings: Union[None, str, dict, ActivitySettings] = None,
        units: str = "imperial",
    ) -> list[Recommendation]:
        """Return recommendations sorted by score, best first.

        Raises:
            InvalidInputError: bad coordinates, units or settings. Raised
                before the cache or the provider is touched.
        """
        lat, lon = validate_coordinates(lat, lon)
        units = validate_units(units)
        parsed = parse_settings(activity_settings)

        key = _cache_key(lat, lon, units, parsed)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Returning cached recommendations for %s,%s", lat, lon)
            return list(cached)

        try:
            current = await self._provider.fetch_current_weather(lat, lon, units)
            hourly = await self._provider.fetch_hourly_forecast(lat, lon, units)
        except UpstreamFetchError as exc:
            logger.warning("Weather fetch failed for %s,%s: %s", lat, lon, exc)
            return []
        except Exception:
            logger.error("Unexpected error fetching weather for %s,%s",
                         lat, lon, exc_info=True)
            return []

        if current is None:
            logger.warning("No weather data available for location %s,%s", lat, lon)
            return []

        if parsed is not None and parsed.enabled_activities is not None:
            activities = list(parsed.enabled_activities)
        else:
            activities = list(Activity)
        custom = parsed.custom_thresholds if parsed is not None else {}
        window = hourly[: self._hourly_window]

        try:
            recommendations = [
                rate_activity(
                    activity, current, window,
                    custom_thresholds=custom.get(activity),
                    units=units,
                )
                for activity in activities
            ]
        except Exception:
            logger.error("Failed to score activities for %s,%s", lat, lon, exc_info=True)
            return []

        recommendations.sort(key=lambda r: r.score, reverse=True)
        self._cache.set(key, recommendations)
        logger.debug("Generated %d recommendations for location %s,%s",
                     len(recommendations), lat, lon)
        return list(recommendations)

    def clear_cache(self, lat: Optional[float] = None, lon: Optional[float] = None) -> int:
        """Drop cached results for one location, or everything if no location given."""
        if lat is None or lon is None:
            count = len(self._cache)
            self._cache.clear()
            logger.debug("Recommendation cache cleared for all locations")
            return count
        lat, lon = validate_coordinates(lat, lon)
        count = self._cache.delete_prefix(_location_prefix(lat, lon))
        logger.debug("Recommendation cache cleared for %s,%s (%d entries)", lat, lon, count)
        return count
