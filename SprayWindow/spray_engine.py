"""Spray window decision engine - pure functions over an hourly forecast."""
import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from spray_data import (
    HourlyObservation,
    SprayRecommendation,
    coerce,
    STATE_GOOD,
    STATE_CAUTION,
    STATE_DONT,
    REASON_GOOD,
    REASON_CAUTION,
    REASON_RAIN,
    REASON_WIND,
)

# Thresholds (rain in percent, wind in km/h)
RAIN_DONT_PCT = 40
WIND_DONT_KMH = 18
RAIN_CAUTION_PCT = 20
WIND_CAUTION_KMH = 12

HourInput = Union[HourlyObservation, Mapping[str, Any]]


def _rain(hour: HourlyObservation) -> float:
    return hour.rain_prob if hour.rain_prob is not None else 0


def _wind(hour: HourlyObservation) -> float:
    return hour.wind_speed if hour.wind_speed is not None else 0


def is_good_hour(hour: HourInput) -> bool:
    """
    Check whether a single hour is suitable for spraying.

    This is stricter than the caution rule: both rain and wind must be
    below the caution thresholds.
    """
    hour = coerce(hour)
    return _rain(hour) < RAIN_CAUTION_PCT and _wind(hour) < WIND_CAUTION_KMH


def find_next_good_window(hours: Iterable[HourInput]) -> Tuple[Optional[Any], Optional[Any]]:
    """
    Find the first contiguous run of good hours.

    Args:
        hours: Chronologically ordered observations

    Returns:
        (start_time, end_time) of the first run, or (None, None)
    """
    start = None
    end = None
    for hour in (coerce(h) for h in hours):
        if is_good_hour(hour):
            if start is None:
                start = hour.time
            end = hour.time
        elif start is not None:
            break
    return start, end


def compute_spray_state(hours: Iterable[HourInput]) -> SprayRecommendation:
    """
    Classify a forecast horizon into a spray recommendation.

    Every rule looks at the whole horizon, so a single risky hour anywhere
    decides the outcome. Rain is checked before wind.

    Args:
        hours: Chronologically ordered observations (may be empty). Missing
            rain/wind values count as 0.

    Returns:
        SprayRecommendation with state, reason, maxima and next good window
    """
    observations: List[HourlyObservation] = [coerce(h) for h in hours]
    logging.debug(f"Computing spray state for {len(observations)} hours")

    max_rain = max([0] + [_rain(h) for h in observations])
    max_wind = max([0] + [_wind(h) for h in observations])

    if any(_rain(h) >= RAIN_DONT_PCT for h in observations):
        state, reason = STATE_DONT, REASON_RAIN
    elif any(_wind(h) >= WIND_DONT_KMH for h in observations):
        state, reason = STATE_DONT, REASON_WIND
    elif any(_rain(h) >= RAIN_CAUTION_PCT or _wind(h) >= WIND_CAUTION_KMH for h in observations):
        state, reason = STATE_CAUTION, REASON_CAUTION
    else:
        state, reason = STATE_GOOD, REASON_GOOD

    next_good_start, next_good_end = find_next_good_window(observations)

    result = SprayRecommendation(
        state=state,
        reason=reason,
        max_rain=max_rain,
        max_wind=max_wind,
        next_good_start=next_good_start,
        next_good_end=next_good_end,
    )
    logging.debug(
        f"Spray state result: state={state} reason={reason} maxRain={max_rain} "
        f"maxWind={max_wind} window={next_good_start}..{next_good_end}"
    )
    return result
