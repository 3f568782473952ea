"""Rule-based activity suitability scoring.

Rates each weather factor against per-activity thresholds, combines the
ratings into a 0-100 score, and picks the best forecast hours for an
activity. Also holds the default threshold table.
"""

import logging
import math
from typing import Optional, Sequence

from ..errors import ComputeDegenerateError
from ..models.weather import (
    Activity,
    HourlyObservation,
    Rating,
    Recommendation,
    WeatherObservation,
)
from ..schemas.activity import (
    RangeBounds,
    TemperatureBounds,
    ThresholdSet,
    UpperBound,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FACTOR_WEIGHTS: dict[str, float] = {
    "temperature": 0.35,
    "wind": 0.20,
    "precipitation": 0.25,
    "humidity": 0.15,
    "aqi": 0.05,
}

RATING_VALUES: dict[Rating, int] = {
    Rating.GOOD: 100,
    Rating.FAIR: 50,
    Rating.POOR: 0,
}

GOOD_SCORE = 70
FAIR_SCORE = 40

# Normalized closeness-to-optimal cutoffs for range factors.
GOOD_CLOSENESS = 0.7
FAIR_CLOSENESS = 0.3

MAX_BEST_HOURS = 3

# ---------------------------------------------------------------------------
# Default thresholds (imperial: F, mph, inches)
# ---------------------------------------------------------------------------


def _thresholds(
    temp: tuple[float, float, float],
    wind_max: float,
    precip_max: float,
    humidity: tuple[float, float],
    aqi_max: float,
) -> ThresholdSet:
    return ThresholdSet(
        temperature=TemperatureBounds(min=temp[0], max=temp[1], optimal=temp[2]),
        wind=UpperBound(max=wind_max),
        precipitation=UpperBound(max=precip_max),
        humidity=RangeBounds(min=humidity[0], max=humidity[1]),
        aqi=UpperBound(max=aqi_max),
    )


DEFAULT_THRESHOLDS: dict[Activity, ThresholdSet] = {
    Activity.RUNNING: _thresholds((40, 75, 60), 15, 0.1, (30, 70), 100),
    Activity.CYCLING: _thresholds((45, 85, 70), 20, 0.05, (20, 80), 100),
    Activity.GARDENING: _thresholds((50, 85, 72), 25, 0.2, (40, 90), 150),
    Activity.OUTDOOR_WORK: _thresholds((35, 90, 65), 30, 0.3, (20, 90), 150),
    Activity.STARGAZING: _thresholds((30, 85, 65), 10, 0.0, (0, 60), 200),
}

MPH_TO_MS = 0.44704
INCH_TO_MM = 25.4


def _f_to_c(value: float) -> float:
    return round((value - 32) * 5 / 9, 2)


def default_thresholds(activity: Activity, units: str = "imperial") -> ThresholdSet:
    """Return the default threshold set for an activity in the given units."""
    base = DEFAULT_THRESHOLDS[activity]
    if units != "metric":
        return base
    t = base.temperature
    return ThresholdSet(
        temperature=TemperatureBounds(
            min=_f_to_c(t.min), max=_f_to_c(t.max), optimal=_f_to_c(t.optimal),
        ),
        wind=UpperBound(max=round(base.wind.max * MPH_TO_MS, 2)),
        precipitation=UpperBound(max=round(base.precipitation.max * INCH_TO_MM, 2)),
        humidity=base.humidity,
        aqi=base.aqi,
    )


# ---------------------------------------------------------------------------
# Factor evaluators
# ---------------------------------------------------------------------------

def _closeness_rating(closeness: float) -> Rating:
    if closeness > GOOD_CLOSENESS:
        return Rating.GOOD
    if closeness > FAIR_CLOSENESS:
        return Rating.FAIR
    return Rating.POOR


def evaluate_temperature(temp: float, bounds: Optional[TemperatureBounds]) -> Rating:
    """Rate temperature by its distance from the optimal value."""
    if bounds is None:
        return Rating.FAIR
    if temp < bounds.min or temp > bounds.max:
        return Rating.POOR
    max_deviation = max(bounds.optimal - bounds.min, bounds.max - bounds.optimal)
    closeness = 1 - abs(temp - bounds.optimal) / max_deviation
    return _closeness_rating(closeness)


def evaluate_wind(speed: float, bounds: Optional[UpperBound]) -> Rating:
    if bounds is None:
        return Rating.FAIR
    if speed > bounds.max:
        return Rating.POOR
    if speed < bounds.max * 0.5:
        return Rating.GOOD
    return Rating.FAIR


def evaluate_precipitation(amount: float, bounds: Optional[UpperBound]) -> Rating:
    if bounds is None:
        return Rating.FAIR
    if amount > bounds.max:
        return Rating.POOR
    if amount < bounds.max * 0.3:
        return Rating.GOOD
    return Rating.FAIR


def evaluate_humidity(humidity: float, bounds: Optional[RangeBounds]) -> Rating:
    """Rate humidity by its distance from the middle of the allowed range."""
    if bounds is None:
        return Rating.FAIR
    if humidity < bounds.min or humidity > bounds.max:
        return Rating.POOR
    midpoint = (bounds.min + bounds.max) / 2
    closeness = 1 - abs(humidity - midpoint) / ((bounds.max - bounds.min) / 2)
    return _closeness_rating(closeness)


def evaluate_aqi(aqi: float, bounds: Optional[UpperBound]) -> Rating:
    if bounds is None:
        return Rating.FAIR
    if aqi > bounds.max:
        return Rating.POOR
    if aqi <= 50:
        return Rating.GOOD
    if aqi <= bounds.max * 0.7:
        return Rating.FAIR
    return Rating.POOR


def evaluate_factors(
    observation: WeatherObservation, thresholds: ThresholdSet,
) -> dict[str, Rating]:
    """Rate every factor the observation carries data for."""
    factors: dict[str, Rating] = {}
    if observation.temperature is not None:
        factors["temperature"] = evaluate_temperature(
            observation.temperature, thresholds.temperature,
        )
    if observation.wind_speed is not None:
        factors["wind"] = evaluate_wind(observation.wind_speed, thresholds.wind)
    if observation.precipitation is not None:
        factors["precipitation"] = evaluate_precipitation(
            observation.precipitation, thresholds.precipitation,
        )
    if observation.humidity is not None:
        factors["humidity"] = evaluate_humidity(observation.humidity, thresholds.humidity)
    if observation.aqi is not None:
        factors["aqi"] = evaluate_aqi(observation.aqi, thresholds.aqi)
    return factors


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def compute_score(factors: dict[str, Rating]) -> int:
    """Weighted mean of factor values, renormalized over present factors.

    Raises:
        ComputeDegenerateError: if ``factors`` is empty.
    """
    total_weight = 0.0
    weighted = 0.0
    for name, rating in factors.items():
        weight = FACTOR_WEIGHTS[name]
        total_weight += weight
        weighted += RATING_VALUES[rating] * weight

    if total_weight <= 0:
        raise ComputeDegenerateError("No weather factors available to score")

    # Half rounds up, never to even.
    return int(math.floor(weighted / total_weight + 0.5))


def score_to_rating(score: int) -> Rating:
    if score >= GOOD_SCORE:
        return Rating.GOOD
    if score >= FAIR_SCORE:
        return Rating.FAIR
    return Rating.POOR


def find_best_hours(
    hourly: Sequence[HourlyObservation], thresholds: ThresholdSet,
) -> list[str]:
    """Return up to three hour labels scoring >= 70, best first.

    Labels come back in score-descending order; ties keep forecast order.
    """
    scored = []
    for hour in hourly:
        factors = evaluate_factors(hour, thresholds)
        if not factors:
            continue
        scored.append((compute_score(factors), hour.time))

    good = [entry for entry in scored if entry[0] >= GOOD_SCORE]
    good.sort(key=lambda entry: entry[0], reverse=True)
    return [label for _, label in good[:MAX_BEST_HOURS]]


def rate_activity(
    activity: Activity,
    observation: WeatherObservation,
    hourly: Optional[Sequence[HourlyObservation]] = None,
    custom_thresholds: Optional[ThresholdSet] = None,
    units: str = "imperial",
) -> Recommendation:
    """Build the recommendation for one activity.

    ``custom_thresholds`` replaces the activity's defaults wholesale.
    """
    if custom_thresholds is not None:
        thresholds = custom_thresholds
    else:
        thresholds = default_thresholds(activity, units)
    factors = evaluate_factors(observation, thresholds)
    score = compute_score(factors)
    best_hours = find_best_hours(hourly, thresholds) if hourly else []
    logger.debug("Scored %s: %d %s", activity.value, score, factors)
    return Recommendation(
        activity=activity,
        rating=score_to_rating(score),
        score=score,
        best_hours=best_hours,
        factors=factors,
    )
