"""Domain models for surf session planning."""

from surf_planner.models.location import Coordinates, SurfBreak
from surf_planner.models.forecast import ForecastHour
from surf_planner.models.preferences import (
    AvailabilitySlot,
    Octant,
    PreferenceProfile,
    format_octants,
    parse_octants,
)
from surf_planner.models.session import (
    MAX_WINDOW_DAYS,
    HourlyDetail,
    PlanRequest,
    ScoredHour,
    SessionPlan,
    SessionWindow,
    SubScores,
)

__all__ = [
    # Location
    "Coordinates",
    "SurfBreak",
    # Forecast
    "ForecastHour",
    # Preferences
    "AvailabilitySlot",
    "Octant",
    "PreferenceProfile",
    "format_octants",
    "parse_octants",
    # Sessions
    "MAX_WINDOW_DAYS",
    "HourlyDetail",
    "PlanRequest",
    "ScoredHour",
    "SessionPlan",
    "SessionWindow",
    "SubScores",
]
