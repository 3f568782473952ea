"""Imminent precipitation detection from minutely nowcast samples.

Scans the next 15 minutes for the first sample at or above the detection
threshold, then follows the event forward, tolerating short lulls, to
estimate its duration and intensity.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.weather import PrecipitationSample

# Minimum intensity (mm per interval) that counts as precipitation.
DETECTION_THRESHOLD = 0.1

# Samples considered, one per minute starting now.
LOOKAHEAD_MINUTES = 15

# Consecutive sub-threshold samples tolerated inside one event.
MAX_GAP = 2

# Average intensity bucket upper bounds (mm per interval).
LIGHT_BELOW = 0.5
MODERATE_BELOW = 2.5


@dataclass
class PrecipitationOnset:
    """Detected event, before it is tied to a location."""
    minutes_to_start: int
    estimated_duration: int  # minutes
    average_intensity: float
    intensity: str  # "light", "moderate", "heavy"
    precipitation_type: str = "rain"


def classify_intensity(average: float) -> str:
    if average < LIGHT_BELOW:
        return "light"
    if average < MODERATE_BELOW:
        return "moderate"
    return "heavy"


def detect_onset(
    samples: Sequence[PrecipitationSample],
    threshold: float = DETECTION_THRESHOLD,
) -> Optional[PrecipitationOnset]:
    """Return the upcoming event in ``samples``, or None if none qualifies.

    Only the first LOOKAHEAD_MINUTES samples are used. An event ends once
    more than MAX_GAP consecutive samples fall below the threshold.
    """
    window = list(samples[:LOOKAHEAD_MINUTES])

    start = next(
        (i for i, s in enumerate(window) if s.precipitation >= threshold), None
    )
    if start is None:
        return None

    total = 0.0
    end = start
    for i in range(start, len(window)):
        if window[i].precipitation >= threshold:
            total += window[i].precipitation
            end = i
        elif i - end > MAX_GAP:
            break

    duration = end - start + 1
    average = total / duration

    # TODO: classify snow/sleet once the current temperature is passed in.
    return PrecipitationOnset(
        minutes_to_start=start + 1,
        estimated_duration=duration,
        average_intensity=average,
        intensity=classify_intensity(average),
    )
