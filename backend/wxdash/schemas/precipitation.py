"""Pydantic schemas for precipitation alert API."""

from pydantic import BaseModel


class LocationIn(BaseModel):
    id: str
    lat: float
    lon: float


class LocationCheckRequest(BaseModel):
    locations: list[LocationIn]


class PrecipitationAlertOut(BaseModel):
    location_id: str
    lat: float
    lon: float
    minutes_to_start: int
    precipitation_type: str
    intensity: str
    estimated_duration: int
    timestamp: str


class CheckResponse(BaseModel):
    has_alert: bool
    alert: PrecipitationAlertOut | None = None


class CheckMultipleResponse(BaseModel):
    alerts: list[PrecipitationAlertOut]
    count: int


class CooldownStatus(BaseModel):
    in_cooldown: bool
    remaining_minutes: int | None = None
