"""Session window recommendations built on condition scores."""

from surf_planner.recommendations.calendar_mapper import (
    CalendarMapper,
    LocalSlot,
    resolve_timezone,
    to_local,
)
from surf_planner.recommendations.planner import SessionPlanner
from surf_planner.recommendations.ranking import rank_windows
from surf_planner.recommendations.sources import (
    AvailabilitySource,
    ForecastSource,
    PreferenceSource,
)
from surf_planner.recommendations.windows import WindowBuilder, availability_keys

__all__ = [
    "CalendarMapper",
    "LocalSlot",
    "resolve_timezone",
    "to_local",
    "SessionPlanner",
    "rank_windows",
    "AvailabilitySource",
    "ForecastSource",
    "PreferenceSource",
    "WindowBuilder",
    "availability_keys",
]
