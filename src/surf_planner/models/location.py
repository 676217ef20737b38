"""Location models for surf breaks."""

from __future__ import annotations

import re
from typing import Self

from pydantic import BaseModel, Field


# Regex for parsing lat/long coordinates: "latitude,longitude"
# Supports optional +/- prefix for both values
COORDINATE_PATTERN = re.compile(
    r"^(?P<lat>[-+]?\d*\.?\d+)\s*,\s*(?P<lon>[-+]?\d*\.?\d+)$"
)


class Coordinates(BaseModel):
    """Geographic coordinates (latitude/longitude).

    Latitude:
        - Negative (-) = south of equator
        - Positive (+) = north of equator
        - Range: -90 to +90

    Longitude:
        - Negative (-) = west of prime meridian
        - Positive (+) = east of prime meridian
        - Range: -180 to +180
    """

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse coordinates from string format 'latitude,longitude'.

        Examples:
            '38.9637,-9.4176' -> Ericeira
            '-38.3305,144.3256' -> Torquay
        """
        match = COORDINATE_PATTERN.match(value.strip())
        if not match:
            raise ValueError(
                f"Invalid coordinate format: '{value}'. "
                "Expected format: 'latitude,longitude' (e.g., '38.9637,-9.4176')"
            )
        return cls(
            latitude=float(match.group("lat")),
            longitude=float(match.group("lon")),
        )

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"


class SurfBreak(BaseModel):
    """A surf break that forecasts and preferences are attached to."""

    id: int = Field(..., description="Break identifier")
    name: str = Field(..., description="Display name of the break")
    region: str = Field(default="", description="Region the break belongs to")
    coordinates: Coordinates | None = Field(
        default=None, description="Break location, if known"
    )
    timezone: str | None = Field(
        default=None,
        description="IANA timezone identifier of the break (e.g., 'Europe/Lisbon')",
    )

    @property
    def has_coordinates(self) -> bool:
        return self.coordinates is not None

    def display_name(self) -> str:
        """Get a display name for this break."""
        return self.name or f"#{self.id}"
