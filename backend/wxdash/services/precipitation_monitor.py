"""Imminent precipitation alerts for monitored locations.

Pipeline per location: validate -> minutely fetch (cached 5 minutes per
rounded coordinate) -> onset detection -> cooldown. The fetch cache cuts
upstream traffic; the cooldown limits how often a user sees an alert.
Both are independent. Every failure degrades to "no alert".
"""

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from ..config import settings
from ..errors import InvalidInputError, UpstreamFetchError
from ..models.weather import PrecipitationAlert, PrecipitationSample
from .cooldown import CooldownTracker
from .precip_detector import LOOKAHEAD_MINUTES, detect_onset
from .provider import WeatherProvider
from .ttl_cache import TTLCache
from .validation import validate_coordinates, validate_location_id

logger = logging.getLogger(__name__)


def _cache_key(lat: float, lon: float) -> str:
    return f"precip:{lat}:{lon}"


def _round_coordinate(value: float) -> float:
    """Round to 0.01 degree with halves rounding up (40.125 -> 40.13)."""
    return math.floor(value * 100 + 0.5) / 100


class PrecipitationMonitor:
    """Checks locations for rain starting within the next 15 minutes."""

    def __init__(
        self,
        provider: WeatherProvider,
        cache: Optional[TTLCache[list[PrecipitationSample]]] = None,
        cooldown: Optional[CooldownTracker] = None,
    ) -> None:
        self._provider = provider
        self._cache = cache if cache is not None else TTLCache(
            default_ttl=settings.precipitation_cache_ttl_sec,
            max_entries=settings.cache_max_entries,
        )
        self._cooldown = cooldown if cooldown is not None else CooldownTracker(
            window_minutes=settings.alert_cooldown_minutes,
        )

    @property
    def cache(self) -> TTLCache[list[PrecipitationSample]]:
        return self._cache

    @property
    def cooldown(self) -> CooldownTracker:
        return self._cooldown

    async def _samples(self, lat: float, lon: float) -> list[PrecipitationSample]:
        key = _cache_key(lat, lon)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Minutely cache hit for %s,%s", lat, lon)
            return cached
        samples = await self._provider.fetch_minutely_precipitation(lat, lon)
        samples = list(samples[:LOOKAHEAD_MINUTES])
        self._cache.set(key, samples)
        return samples

    async def check_precipitation(
        self, lat: float, lon: float, location_id: str,
    ) -> Optional[PrecipitationAlert]:
        """Return an alert if precipitation is imminent and not in cooldown.

        Raises:
            InvalidInputError: bad coordinates or location id, before any
                cache lookup or fetch.
        """
        lat, lon = validate_coordinates(lat, lon)
        location_id = validate_location_id(location_id)
        rounded_lat = _round_coordinate(lat)
        rounded_lon = _round_coordinate(lon)

        try:
            samples = await self._samples(rounded_lat, rounded_lon)
            onset = detect_onset(samples)
        except UpstreamFetchError as exc:
            logger.error("Failed to check precipitation for location %s: %s",
                         location_id, exc)
            return None
        except Exception:
            logger.error("Failed to check precipitation for location %s",
                         location_id, exc_info=True)
            return None

        if onset is None:
            logger.debug("No precipitation onset for location %s", location_id)
            return None

        if not self._cooldown.admit(location_id):
            logger.debug("Alert for %s suppressed due to cooldown", location_id)
            return None

        alert = PrecipitationAlert(
            location_id=location_id,
            lat=rounded_lat,
            lon=rounded_lon,
            minutes_to_start=onset.minutes_to_start,
            precipitation_type=onset.precipitation_type,
            intensity=onset.intensity,
            estimated_duration=onset.estimated_duration,
            timestamp=datetime.now(timezone.utc),
        )
        logger.info(
            "Precipitation alert for %s: %s %s in %d min for ~%d min",
            location_id, alert.intensity, alert.precipitation_type,
            alert.minutes_to_start, alert.estimated_duration,
        )
        return alert

    async def _check_one(self, location: Any) -> Optional[PrecipitationAlert]:
        try:
            if isinstance(location, dict):
                loc_id, lat, lon = location["id"], location["lat"], location["lon"]
            else:
                loc_id, lat, lon = location.id, location.lat, location.lon
            return await self.check_precipitation(lat, lon, loc_id)
        except (InvalidInputError, KeyError, AttributeError) as exc:
            logger.warning("Skipping invalid location %r: %s", location, exc)
            return None

    async def check_multiple_locations(
        self, locations: Iterable[Any],
    ) -> list[PrecipitationAlert]:
        """Check every location concurrently; return alerts in input order.

        Locations may be dicts with ``id``/``lat``/``lon`` keys or objects
        with those attributes. Suppressed, alert-free and failing locations
        are dropped without affecting the others.
        """
        results = await asyncio.gather(*(self._check_one(loc) for loc in locations))
        return [alert for alert in results if alert is not None]

    def clear_cooldown(self, location_id: str) -> None:
        self._cooldown.clear(location_id)

    def get_cooldown_status(self, location_id: str) -> dict:
        return self._cooldown.status(location_id)

    def sweep(self) -> int:
        """Drop expired minutely data and lapsed cooldown records."""
        return self._cache.sweep() + self._cooldown.sweep()
