"""Marine forecast models."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

NUMERIC_FIELDS = (
    "wave_height_m",
    "wind_speed_kt",
    "wind_direction_deg",
    "swell_height_m",
    "swell_direction_deg",
    "swell_period_s",
    "water_temperature_c",
    "tide_m",
)


def coerce_number(value: Any) -> float | None:
    """Convert a raw numeric value to float, or None if it is unusable.

    Malformed values (non-numeric strings, booleans, NaN, infinities) are
    treated as missing rather than rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


class ForecastHour(BaseModel):
    """Marine conditions for a single forecast hour.

    All measurements are optional; a missing value yields the neutral score
    of whichever sub-score reads it.
    """

    model_config = ConfigDict(frozen=True)

    time: datetime = Field(..., description="Forecast instant (UTC, start of hour)")

    wave_height_m: float | None = Field(default=None, description="Wave height in meters")
    wind_speed_kt: float | None = Field(default=None, description="Wind speed in knots")
    wind_direction_deg: float | None = Field(
        default=None, description="Wind direction in degrees (0=N, 90=E)"
    )
    swell_height_m: float | None = Field(default=None, description="Swell height in meters")
    swell_direction_deg: float | None = Field(
        default=None, description="Swell direction in degrees (0=N, 90=E)"
    )
    swell_period_s: float | None = Field(default=None, description="Swell period in seconds")
    water_temperature_c: float | None = Field(
        default=None, description="Water temperature in Celsius"
    )
    tide_m: float | None = Field(default=None, description="Tide height in meters")

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def coerce_measurement(cls, v: Any) -> float | None:
        return coerce_number(v)

    @field_validator("time")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Naive times are taken as UTC; aware times are converted to UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
