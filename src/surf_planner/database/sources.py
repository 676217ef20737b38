"""Database-backed implementations of the planner's data sources."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from surf_planner.database.repositories import (
    AvailabilityRepository,
    BreakRepository,
    ForecastCacheRepository,
    PreferenceRepository,
)
from surf_planner.exceptions import (
    ForecastNotCachedError,
    LocationNotFoundError,
    MissingCoordinatesError,
)
from surf_planner.models.forecast import ForecastHour
from surf_planner.models.preferences import AvailabilitySlot, PreferenceProfile
from surf_planner.providers.stormglass import translate_hours
from surf_planner.recommendations.sources import (
    AvailabilitySource,
    ForecastSource,
    PreferenceSource,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DatabaseSources(PreferenceSource, AvailabilitySource, ForecastSource):
    """Serves preferences, availability and cached forecasts from the database.

    Every call opens its own session, so concurrent forecast lookups from the
    planner never share one.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_age_hours: int = 24,
        clock: Callable[[], datetime] | None = None,
    ):
        self.session_factory = session_factory
        self.max_age = timedelta(hours=max_age_hours)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def list_preferences(
        self,
        user_id: str,
        region: str | None = None,
    ) -> list[PreferenceProfile]:
        async with self.session_factory() as session:
            return await PreferenceRepository(session).list_preferences(user_id, region)

    async def list_availability(self, user_id: str) -> list[AvailabilitySlot]:
        async with self.session_factory() as session:
            return await AvailabilityRepository(session).list(user_id)

    async def get_forecast_series(
        self,
        location_id: int,
        horizon_hours: int,
    ) -> list[ForecastHour]:
        async with self.session_factory() as session:
            surf_break = await BreakRepository(session).get(location_id)
            if surf_break is None:
                raise LocationNotFoundError(location_id)
            if not surf_break.has_coordinates:
                raise MissingCoordinatesError(location_id)
            entry = await ForecastCacheRepository(session).latest(location_id)

        now = self.clock()
        if entry is None:
            raise ForecastNotCachedError(location_id)
        if now - _as_utc(entry.fetched_at) > self.max_age:
            logger.info(f"Cached forecast for break {location_id} is stale")
            raise ForecastNotCachedError(location_id)

        # Hours that have already ended are of no use for planning
        current_hour = now.replace(minute=0, second=0, microsecond=0)
        series = translate_hours(entry.weather_json, entry.sea_level_json)
        upcoming = [h for h in series if h.time >= current_hour]
        return upcoming[:horizon_hours]
