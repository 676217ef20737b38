"""Pure sub-score functions.

Each function maps one forecast measurement and the matching preference
bounds to a score in [0, 1]. None of them raise on missing input: a missing
measurement yields a neutral score instead.

| Function          | Missing value | No preference |
|-------------------|---------------|---------------|
| direction_score   | 0.5           | 1.0           |
| band_score        | 0.5           | 1.0           |
| wind_speed_score  | 0.5           | 1.0           |
| tide_score        | 0.5           | 0.75          |
"""

from __future__ import annotations

import math
from collections.abc import Collection

from surf_planner.models.preferences import Octant

NEUTRAL_UNKNOWN = 0.5
NO_TIDE_PREFERENCE = 0.75

# Full score within this many degrees of an allowed octant center
FULL_SCORE_ARC_DEG = 22.5
# Score reaches zero at this distance
ZERO_SCORE_ARC_DEG = 45.0

BAND_PADDING_FRACTION = 0.25
MIN_BAND_SPAN = 0.0001
WIND_FALLOFF_FRACTION = 0.5


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def circular_distance(a_deg: float, b_deg: float) -> float:
    """Shortest angular distance between two bearings, in [0, 180]."""
    delta = abs((a_deg % 360) - (b_deg % 360))
    return min(delta, 360 - delta)


def direction_score(
    actual_deg: float | None,
    allowed: Collection[Octant],
) -> float:
    """Score a direction against a set of allowed compass octants.

    Full score within ±22.5° of the nearest allowed octant center, cosine
    falloff to zero at ±45°.
    """
    if not allowed:
        return 1.0
    if actual_deg is None:
        return NEUTRAL_UNKNOWN

    distance = min(circular_distance(actual_deg, o.center_deg) for o in allowed)

    if distance <= FULL_SCORE_ARC_DEG:
        return 1.0
    if distance <= ZERO_SCORE_ARC_DEG:
        width = ZERO_SCORE_ARC_DEG - FULL_SCORE_ARC_DEG
        t = (distance - FULL_SCORE_ARC_DEG) / width
        return 0.5 * (1 + math.cos(math.pi * t))
    return 0.0


def band_score(
    value: float | None,
    min_value: float | None,
    max_value: float | None,
) -> float:
    """Score a value against an optional [min, max] range.

    With both bounds, values outside the band fall off linearly to zero over
    a padding of 25% of the band width. With a single bound, the bound value
    itself is used as the falloff scale.
    """
    if value is None:
        return NEUTRAL_UNKNOWN
    if min_value is None and max_value is None:
        return 1.0

    if min_value is not None and max_value is not None:
        if min_value <= value <= max_value:
            return 1.0
        pad = BAND_PADDING_FRACTION * ((max_value - min_value) or MIN_BAND_SPAN)
        if value < min_value:
            return 1 - _clamp((min_value - value) / pad)
        return 1 - _clamp((value - max_value) / pad)

    if min_value is not None:
        if value >= min_value:
            return 1.0
        return 1 - _clamp((min_value - value) / (min_value or 1))

    if value <= max_value:
        return 1.0
    return 1 - _clamp((value - max_value) / (max_value or 1))


def wind_speed_score(speed_kt: float | None, max_kt: float | None) -> float:
    """Score wind speed: full at or below the maximum, zero at 150% of it."""
    if speed_kt is None:
        return NEUTRAL_UNKNOWN
    if max_kt is None:
        return 1.0
    if speed_kt <= max_kt:
        return 1.0
    falloff = (max_kt * WIND_FALLOFF_FRACTION) or 1
    return 1 - _clamp((speed_kt - max_kt) / falloff)


def tide_score(
    tide_m: float | None,
    min_tide: float | None,
    max_tide: float | None,
) -> float:
    """Score tide height. Without bounds tide is a weak signal (0.75)."""
    if min_tide is None and max_tide is None:
        return NO_TIDE_PREFERENCE
    return band_score(tide_m, min_tide, max_tide)
