"""Contract for the upstream weather data source."""

from typing import Optional, Protocol

from ..models.weather import HourlyObservation, PrecipitationSample, WeatherObservation


class WeatherProvider(Protocol):
    """Anything that can supply current, hourly and minutely weather data.

    Implementations raise ``UpstreamFetchError`` on network or payload
    failures and enforce their own request timeout.
    """

    async def fetch_current_weather(
        self, lat: float, lon: float, units: str,
    ) -> Optional[WeatherObservation]:
        ...

    async def fetch_hourly_forecast(
        self, lat: float, lon: float, units: str,
    ) -> list[HourlyObservation]:
        ...

    async def fetch_minutely_precipitation(
        self, lat: float, lon: float,
    ) -> list[PrecipitationSample]:
        ...
