"""Shared fakes for service tests."""

import asyncio

import pytest

from wxdash.errors import UpstreamFetchError
from wxdash.models.weather import HourlyObservation, PrecipitationSample, WeatherObservation


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """In-memory WeatherProvider that records every call."""

    def __init__(self):
        self.current: WeatherObservation | None = WeatherObservation(
            temperature=60, wind_speed=5, precipitation=0, humidity=50,
        )
        self.hourly: list[HourlyObservation] = []
        self.minutely: dict[tuple[float, float], list[float]] = {}
        self.failing: set[tuple[float, float]] = set()
        self.fail_weather = False
        self.delays: dict[tuple[float, float], float] = {}
        self.calls: list[tuple] = []
        self.completed: list[tuple[float, float]] = []

    async def fetch_current_weather(self, lat, lon, units):
        self.calls.append(("current", lat, lon, units))
        if self.fail_weather:
            raise UpstreamFetchError("boom")
        return self.current

    async def fetch_hourly_forecast(self, lat, lon, units):
        self.calls.append(("hourly", lat, lon, units))
        if self.fail_weather:
            raise UpstreamFetchError("boom")
        return list(self.hourly)

    async def fetch_minutely_precipitation(self, lat, lon):
        self.calls.append(("minutely", lat, lon))
        delay = self.delays.get((lat, lon))
        if delay:
            await asyncio.sleep(delay)
        if (lat, lon) in self.failing:
            raise UpstreamFetchError(f"upstream down for {lat},{lon}")
        self.completed.append((lat, lon))
        values = self.minutely.get((lat, lon), [0.0] * 15)
        return make_samples(values)

    def count(self, kind: str) -> int:
        return sum(1 for c in self.calls if c[0] == kind)


def make_samples(values, start: int = 1_700_000_000) -> list[PrecipitationSample]:
    return [
        PrecipitationSample(timestamp=start + 60 * i, precipitation=v)
        for i, v in enumerate(values)
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return FakeProvider()
