"""Session planning across all of a user's preferred breaks.

## Planning Process

1. Validate the request (horizon, timezone) before touching any source
2. Load the user's preference profiles (optionally filtered by region)
3. Load the user's weekly availability
4. Fetch every break's forecast series concurrently
5. Build session windows per break
6. Rank the pooled windows

A break whose forecast cannot be retrieved contributes no windows; the rest
of the plan is still returned.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import httpx
from pydantic import ValidationError

from surf_planner.exceptions import (
    ForecastUnavailableError,
    InvalidPlanRequestError,
)
from surf_planner.models.forecast import ForecastHour
from surf_planner.models.preferences import PreferenceProfile
from surf_planner.models.session import (
    MAX_WINDOW_DAYS,
    PlanRequest,
    SessionPlan,
    SessionWindow,
)
from surf_planner.providers.base import ProviderError
from surf_planner.recommendations.calendar_mapper import CalendarMapper
from surf_planner.recommendations.ranking import rank_windows
from surf_planner.recommendations.sources import (
    AvailabilitySource,
    ForecastSource,
    PreferenceSource,
)
from surf_planner.recommendations.windows import WindowBuilder
from surf_planner.scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)

DEFAULT_FORECAST_HOURS = 168

# Failures that only exclude the affected break from a plan
ISOLATED_ERRORS: tuple[type[BaseException], ...] = (
    ForecastUnavailableError,
    ProviderError,
    httpx.HTTPError,
    ValidationError,
    ValueError,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionPlanner:
    """Plans surf sessions for a user.

    Example:
        ```python
        planner = SessionPlanner(
            preferences=sources,
            availability=sources,
            forecasts=sources,
        )
        plan = await planner.plan_sessions(
            "surfer@example.com",
            PlanRequest(region="Ericeira", window_days=3, timezone="Europe/Lisbon"),
        )
        for window in plan.windows[:3]:
            print(window.location_name, window.start, window.score)
        ```
    """

    def __init__(
        self,
        preferences: PreferenceSource,
        availability: AvailabilitySource,
        forecasts: ForecastSource,
        engine: ScoringEngine | None = None,
        skip_paired_hours: bool = False,
        forecast_hours: int = DEFAULT_FORECAST_HOURS,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the planner.

        Args:
            preferences: Source of preference profiles
            availability: Source of availability slots
            forecasts: Source of forecast series
            engine: Scoring engine (default weights if omitted)
            skip_paired_hours: Passed through to the window builder
            forecast_hours: Hours of forecast to request per break
            clock: Returns the current UTC time (for tests)
        """
        self.preferences = preferences
        self.availability = availability
        self.forecasts = forecasts
        self.engine = engine or ScoringEngine()
        self.skip_paired_hours = skip_paired_hours
        self.forecast_hours = forecast_hours
        self.clock = clock or _utcnow

    async def plan_sessions(self, user_id: str, request: PlanRequest) -> SessionPlan:
        """Build the ranked session plan for a user.

        Raises:
            InvalidPlanRequestError: If the horizon is out of range
            InvalidTimezoneError: If the timezone cannot be resolved
        """
        if not 1 <= request.window_days <= MAX_WINDOW_DAYS:
            raise InvalidPlanRequestError(
                f"window_days must be between 1 and {MAX_WINDOW_DAYS}"
            )
        mapper = CalendarMapper(request.timezone)

        now = self.clock()
        plan = SessionPlan(generated_at=now, timezone=mapper.timezone_id)

        profiles = await self.preferences.list_preferences(user_id, request.region)
        if not profiles:
            logger.info(f"No saved preferences for {user_id}; returning empty plan")
            return plan

        slots = await self.availability.list_availability(user_id)
        cutoff = now + timedelta(days=request.window_days)
        builder = WindowBuilder(
            self.engine, mapper, skip_paired_hours=self.skip_paired_hours
        )

        results = await asyncio.gather(
            *(self._fetch_series(p) for p in profiles),
            return_exceptions=True,
        )

        windows: list[SessionWindow] = []
        for profile, result in zip(profiles, results):
            if isinstance(result, BaseException):
                if not isinstance(result, ISOLATED_ERRORS):
                    raise result
                logger.warning(
                    f"Skipping break {profile.location_id} ({profile.display_name}): "
                    f"{result}"
                )
                continue
            windows.extend(builder.build(result, profile, slots, cutoff))

        plan.windows = rank_windows(windows)
        logger.info(
            f"Planned {len(plan.windows)} windows across {len(profiles)} breaks "
            f"for {user_id}"
        )
        return plan

    async def _fetch_series(self, profile: PreferenceProfile) -> list[ForecastHour]:
        series = await self.forecasts.get_forecast_series(
            profile.location_id, self.forecast_hours
        )
        return sorted(series, key=lambda h: h.time)
