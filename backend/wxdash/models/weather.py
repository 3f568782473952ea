"""Plain data records shared by the provider client and decision services.

Everything here is an in-memory value object; nothing is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class Activity(str, Enum):
    """Discretionary outdoor activities that receive a recommendation."""
    RUNNING = "running"
    CYCLING = "cycling"
    GARDENING = "gardening"
    OUTDOOR_WORK = "outdoor_work"
    STARGAZING = "stargazing"


class Rating(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class WeatherObservation:
    """Snapshot of conditions at one point in time."""
    temperature: Optional[float]
    wind_speed: Optional[float]
    precipitation: Optional[float]
    humidity: Optional[float]
    aqi: Optional[float] = None


@dataclass(frozen=True)
class HourlyObservation(WeatherObservation):
    """One hourly forecast step; ``time`` is a display label such as "14:00"."""
    time: str = ""


@dataclass(frozen=True)
class Recommendation:
    """Suitability verdict for one activity.

    Immutable so a cached instance can be handed to any number of callers.
    """
    activity: Activity
    rating: Rating
    score: int  # 0-100
    best_hours: tuple[str, ...] = ()
    factors: Mapping[str, Rating] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "best_hours", tuple(self.best_hours))
        object.__setattr__(self, "factors", MappingProxyType(dict(self.factors)))

    def to_dict(self) -> dict:
        return {
            "activity": self.activity.value,
            "rating": self.rating.value,
            "score": self.score,
            "best_hours": list(self.best_hours),
            "factors": {name: r.value for name, r in self.factors.items()},
        }


@dataclass(frozen=True)
class PrecipitationSample:
    """Minute-resolution precipitation intensity (mm per interval)."""
    timestamp: int  # Unix seconds
    precipitation: float


@dataclass
class PrecipitationAlert:
    """An upcoming precipitation event at a monitored location."""
    location_id: str
    lat: float
    lon: float
    minutes_to_start: int
    precipitation_type: str  # "rain", "snow" or "sleet"; only "rain" is produced
    intensity: str  # "light", "moderate", "heavy"
    estimated_duration: int  # minutes
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "location_id": self.location_id,
            "lat": self.lat,
            "lon": self.lon,
            "minutes_to_start": self.minutes_to_start,
            "precipitation_type": self.precipitation_type,
            "intensity": self.intensity,
            "estimated_duration": self.estimated_duration,
            "timestamp": self.timestamp.isoformat(),
        }
