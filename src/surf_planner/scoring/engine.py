"""Composite scoring of forecast hours against surf preferences.

The composite score is a weighted sum of the six sub-scores. By default the
sum is clamped to [0, 1]; because the default weights add up to 5.0, any hour
that clears most preference bands saturates at 1.0. `ScoringWeights.normalize`
switches to dividing by the weight sum instead, which keeps differences
between good and excellent hours visible.
"""

from __future__ import annotations

from dataclasses import dataclass

from surf_planner.models.forecast import ForecastHour
from surf_planner.models.preferences import PreferenceProfile
from surf_planner.models.session import ScoredHour, SubScores
from surf_planner.scoring.subscores import (
    band_score,
    direction_score,
    tide_score,
    wind_speed_score,
)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights applied to each sub-score in the composite."""

    height: float = 1.0
    period: float = 0.8
    swell_direction: float = 0.7
    wind_direction: float = 1.0
    wind_speed: float = 1.0
    tide: float = 0.5
    normalize: bool = False

    @property
    def total(self) -> float:
        return (
            self.height
            + self.period
            + self.swell_direction
            + self.wind_direction
            + self.wind_speed
            + self.tide
        )


DEFAULT_WEIGHTS = ScoringWeights()


def score_subscores(hour: ForecastHour, prefs: PreferenceProfile) -> SubScores:
    """Compute the six sub-scores for one hour."""
    return SubScores(
        height=band_score(hour.wave_height_m, prefs.min_height_m, prefs.max_height_m),
        period=band_score(hour.swell_period_s, prefs.min_period_s, prefs.max_period_s),
        swell_direction=direction_score(
            hour.swell_direction_deg, prefs.swell_directions
        ),
        wind_direction=direction_score(hour.wind_direction_deg, prefs.wind_directions),
        wind_speed=wind_speed_score(hour.wind_speed_kt, prefs.max_wind_kt),
        tide=tide_score(hour.tide_m, prefs.min_tide_m, prefs.max_tide_m),
    )


def weighted_sum(subscores: SubScores, weights: ScoringWeights) -> float:
    """Raw weighted sum of sub-scores, before clamping or normalization."""
    return (
        weights.height * subscores.height
        + weights.period * subscores.period
        + weights.swell_direction * subscores.swell_direction
        + weights.wind_direction * subscores.wind_direction
        + weights.wind_speed * subscores.wind_speed
        + weights.tide * subscores.tide
    )


def combine(subscores: SubScores, weights: ScoringWeights = DEFAULT_WEIGHTS) -> float:
    """Combine sub-scores into a composite score in [0, 1]."""
    total = weighted_sum(subscores, weights)
    if weights.normalize and weights.total > 0:
        total /= weights.total
    return max(0.0, min(1.0, total))


def composite_score(
    hour: ForecastHour,
    prefs: PreferenceProfile,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> float:
    """Composite score of one forecast hour for one preference profile."""
    return combine(score_subscores(hour, prefs), weights)


def score_hour(
    hour: ForecastHour,
    prefs: PreferenceProfile,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoredHour:
    """Score one hour, keeping the sub-scores alongside the composite."""
    subscores = score_subscores(hour, prefs)
    return ScoredHour(hour=hour, subscores=subscores, score=combine(subscores, weights))


class ScoringEngine:
    """Scores forecast hours with a fixed set of weights.

    Example:
        ```python
        engine = ScoringEngine(ScoringWeights(tide=1.0, normalize=True))
        scored = engine.score(hour, prefs)
        print(scored.score, scored.subscores.tide)
        ```
    """

    def __init__(self, weights: ScoringWeights | None = None):
        self.weights = weights or DEFAULT_WEIGHTS

    def score(self, hour: ForecastHour, prefs: PreferenceProfile) -> ScoredHour:
        return score_hour(hour, prefs, self.weights)
