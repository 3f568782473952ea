"""Input checks applied before any cache lookup or upstream call."""

import math
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..errors import InvalidInputError
from ..schemas.activity import ActivitySettings

UNITS = ("imperial", "metric")


def validate_coordinates(lat: Any, lon: Any) -> tuple[float, float]:
    """Return (lat, lon) as floats or raise InvalidInputError."""
    values = []
    for name, value, limit in (("latitude", lat, 90.0), ("longitude", lon, 180.0)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"{name} must be a number, got {value!r}")
        value = float(value)
        if not math.isfinite(value) or abs(value) > limit:
            raise InvalidInputError(f"{name} {value} out of range [-{limit}, {limit}]")
        values.append(value)
    return values[0], values[1]


def validate_units(units: str) -> str:
    if units not in UNITS:
        raise InvalidInputError(f"units must be one of {UNITS}, got {units!r}")
    return units


def validate_location_id(location_id: Any) -> str:
    if not isinstance(location_id, str) or not location_id.strip():
        raise InvalidInputError("location id must be a non-empty string")
    return location_id


def parse_settings(
    raw: Union[None, str, dict, ActivitySettings],
) -> Optional[ActivitySettings]:
    """Accept settings as a model, a dict, or a JSON string."""
    if raw is None or isinstance(raw, ActivitySettings):
        return raw
    try:
        if isinstance(raw, str):
            return ActivitySettings.model_validate_json(raw)
        if isinstance(raw, dict):
            return ActivitySettings.model_validate(raw)
    except ValidationError as exc:
        raise InvalidInputError(f"Malformed activity settings: {exc}") from exc
    raise InvalidInputError(f"Unsupported settings type {type(raw).__name__}")
