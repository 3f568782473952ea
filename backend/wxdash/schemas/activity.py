"""Pydantic schemas for activity thresholds, settings and responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from ..models.weather import Activity


class _CamelModel(BaseModel):
    # The dashboard frontend sends camelCase; snake_case is accepted too.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TemperatureBounds(_CamelModel):
    min: float
    max: float
    optimal: float

    @model_validator(mode="after")
    def _check_order(self) -> "TemperatureBounds":
        if not self.min < self.max:
            raise ValueError("temperature min must be below max")
        if not self.min <= self.optimal <= self.max:
            raise ValueError("temperature optimal must lie within [min, max]")
        return self


class RangeBounds(_CamelModel):
    min: float
    max: float

    @model_validator(mode="after")
    def _check_order(self) -> "RangeBounds":
        if not self.min < self.max:
            raise ValueError("min must be below max")
        return self


class UpperBound(_CamelModel):
    max: float


class ThresholdSet(_CamelModel):
    """Per-factor bounds for one activity. A missing factor is rated fair."""
    temperature: Optional[TemperatureBounds] = None
    wind: Optional[UpperBound] = None
    precipitation: Optional[UpperBound] = None
    humidity: Optional[RangeBounds] = None
    aqi: Optional[UpperBound] = None


class ActivitySettings(_CamelModel):
    """Caller preferences for a recommendation request."""
    show_activities: bool = True
    enabled_activities: Optional[list[Activity]] = None
    show_best_hours: bool = True
    custom_thresholds: dict[Activity, ThresholdSet] = {}


class RecommendationOut(BaseModel):
    activity: Activity
    rating: str
    score: int
    best_hours: list[str]
    factors: dict[str, str]
