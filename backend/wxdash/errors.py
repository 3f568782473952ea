"""Exception types raised by the weather decision services."""


class WeatherEngineError(Exception):
    """Base class for all wxdash errors."""


class UpstreamFetchError(WeatherEngineError):
    """A weather provider call failed or returned an unusable payload."""


class InvalidInputError(WeatherEngineError, ValueError):
    """Caller supplied bad coordinates, settings or identifiers."""


class ComputeDegenerateError(WeatherEngineError):
    """No weather factor was available to score an activity."""
