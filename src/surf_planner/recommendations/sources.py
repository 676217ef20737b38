"""Data source interfaces consumed by the session planner.

The planner never talks to storage or forecast providers directly. It reads
through these interfaces, which the database layer implements and tests fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from surf_planner.models.forecast import ForecastHour
from surf_planner.models.preferences import AvailabilitySlot, PreferenceProfile


class PreferenceSource(ABC):
    """Provides a user's per-break preference profiles."""

    @abstractmethod
    async def list_preferences(
        self,
        user_id: str,
        region: str | None = None,
    ) -> list[PreferenceProfile]:
        """List preference profiles, joined with break name and region.

        Args:
            user_id: User identifier
            region: Only return profiles for breaks in this region
        """


class AvailabilitySource(ABC):
    """Provides a user's weekly availability."""

    @abstractmethod
    async def list_availability(self, user_id: str) -> list[AvailabilitySlot]:
        """List the user's availability slots."""


class ForecastSource(ABC):
    """Provides hourly forecast series per break."""

    @abstractmethod
    async def get_forecast_series(
        self,
        location_id: int,
        horizon_hours: int,
    ) -> list[ForecastHour]:
        """Get up to `horizon_hours` forecast hours for a break.

        Raises:
            LocationNotFoundError: If the break does not exist
            MissingCoordinatesError: If the break has no coordinates
            ForecastNotCachedError: If no forecast is available yet
        """
