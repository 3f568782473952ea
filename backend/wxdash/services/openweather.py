"""OpenWeather One Call 3.0 client.

Fetches current conditions, the hourly forecast and the minutely
precipitation nowcast for a latitude/longitude. Every failure surfaces
as ``UpstreamFetchError``; callers decide how to degrade.

API docs: https://openweathermap.org/api/one-call-3
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx

from ..config import settings
from ..errors import UpstreamFetchError
from ..models.weather import HourlyObservation, PrecipitationSample, WeatherObservation

logger = logging.getLogger(__name__)

MM_PER_INCH = 25.4

# One Call sections excluded per request so each call returns one block.
_EXCLUDE_FOR = {
    "current": "minutely,hourly,daily,alerts",
    "hourly": "current,minutely,daily,alerts",
    "minutely": "current,hourly,daily,alerts",
}


def _precip_amount(block: dict, units: str) -> float:
    """Rain plus snow over the last hour, in inches for imperial else mm."""
    mm = 0.0
    for kind in ("rain", "snow"):
        amount = block.get(kind)
        if isinstance(amount, dict):
            mm += float(amount.get("1h", 0.0) or 0.0)
    if units == "imperial":
        return round(mm / MM_PER_INCH, 3)
    return mm


def _hour_label(dt: int, offset_sec: int) -> str:
    """Format a Unix timestamp as HH:MM in the location's local time."""
    tz = timezone(timedelta(seconds=offset_sec))
    return datetime.fromtimestamp(dt, tz=tz).strftime("%H:%M")


class OpenWeatherClient:
    """Async OpenWeather One Call client implementing ``WeatherProvider``."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.openweather_api_key
        self._base_url = base_url or settings.openweather_onecall_url
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport
        if not self._api_key:
            logger.warning("No OpenWeather API key configured; upstream calls will fail")

    async def _get(self, lat: float, lon: float, section: str, **extra: Any) -> dict:
        params = {
            "lat": lat,
            "lon": lon,
            "appid": self._api_key,
            "exclude": _EXCLUDE_FOR[section],
            **extra,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                resp = await client.get(self._base_url, params=params)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamFetchError(
                f"OpenWeather {section} returned HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamFetchError(f"OpenWeather {section} request failed: {exc}") from exc

        if not isinstance(data, dict):
            raise UpstreamFetchError(f"OpenWeather {section} payload is not an object")
        return data

    async def fetch_current_weather(
        self, lat: float, lon: float, units: str,
    ) -> Optional[WeatherObservation]:
        data = await self._get(lat, lon, "current", units=units)
        current = data.get("current")
        if not current:
            return None
        try:
            return WeatherObservation(
                temperature=float(current["temp"]),
                wind_speed=float(current.get("wind_speed", 0.0)),
                precipitation=_precip_amount(current, units),
                humidity=float(current["humidity"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamFetchError(f"Malformed current block: {exc}") from exc

    async def fetch_hourly_forecast(
        self, lat: float, lon: float, units: str,
    ) -> list[HourlyObservation]:
        data = await self._get(lat, lon, "hourly", units=units)
        offset = int(data.get("timezone_offset", 0) or 0)
        hours: list[HourlyObservation] = []
        try:
            for h in data.get("hourly", []):
                hours.append(HourlyObservation(
                    temperature=float(h["temp"]),
                    wind_speed=float(h.get("wind_speed", 0.0)),
                    precipitation=_precip_amount(h, units),
                    humidity=float(h["humidity"]),
                    time=_hour_label(int(h["dt"]), offset),
                ))
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamFetchError(f"Malformed hourly block: {exc}") from exc
        return hours

    async def fetch_minutely_precipitation(
        self, lat: float, lon: float,
    ) -> list[PrecipitationSample]:
        data = await self._get(lat, lon, "minutely")
        try:
            samples = [
                PrecipitationSample(
                    timestamp=int(m["dt"]),
                    precipitation=float(m.get("precipitation", 0.0) or 0.0),
                )
                for m in data.get("minutely", [])
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamFetchError(f"Malformed minutely block: {exc}") from exc
        samples.sort(key=lambda s: s.timestamp)
        return samples
