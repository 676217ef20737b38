"""Condition scoring for surf preferences."""

from surf_planner.scoring.engine import (
    DEFAULT_WEIGHTS,
    ScoringEngine,
    ScoringWeights,
    combine,
    composite_score,
    score_hour,
    score_subscores,
)
from surf_planner.scoring.subscores import (
    band_score,
    circular_distance,
    direction_score,
    tide_score,
    wind_speed_score,
)

__all__ = [
    "DEFAULT_WEIGHTS",
    "ScoringEngine",
    "ScoringWeights",
    "combine",
    "composite_score",
    "score_hour",
    "score_subscores",
    "band_score",
    "circular_distance",
    "direction_score",
    "tide_score",
    "wind_speed_score",
]
