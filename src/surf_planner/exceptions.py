"""Exceptions raised by the session planner.

Request-level errors (`InvalidPlanRequestError` and subclasses) abort a whole
planning request before any scoring runs. Forecast availability errors
(`ForecastUnavailableError` and subclasses) are scoped to one break and are
absorbed by the planner, which drops that break from the results.
"""

from __future__ import annotations


class SurfPlannerError(Exception):
    """Base exception for all planner errors."""


class InvalidPlanRequestError(SurfPlannerError):
    """Raised when a planning request has invalid or missing parameters."""


class InvalidTimezoneError(InvalidPlanRequestError):
    """Raised when a timezone identifier cannot be resolved."""

    def __init__(self, timezone_id: str | None):
        super().__init__(f"Unknown timezone: {timezone_id!r}")
        self.timezone_id = timezone_id


class ForecastUnavailableError(SurfPlannerError):
    """Base class for a forecast series that cannot be produced for a break."""

    def __init__(self, message: str, location_id: int):
        super().__init__(message)
        self.location_id = location_id


class LocationNotFoundError(ForecastUnavailableError):
    """Raised when the requested break does not exist."""

    def __init__(self, location_id: int):
        super().__init__(f"Break {location_id} not found", location_id)


class MissingCoordinatesError(ForecastUnavailableError):
    """Raised when a break has no latitude/longitude to forecast for."""

    def __init__(self, location_id: int):
        super().__init__(f"Break {location_id} has no coordinates", location_id)


class ForecastNotCachedError(ForecastUnavailableError):
    """Raised when no (fresh) cached forecast exists for a break yet."""

    def __init__(self, location_id: int):
        super().__init__(
            f"Forecast for break {location_id} is not yet available", location_id
        )
