"""User preference and availability models."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


class Octant(str, Enum):
    """The eight 45°-wide compass sectors used for direction matching."""

    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"

    @property
    def center_deg(self) -> float:
        """Center bearing of the sector in degrees (N=0, E=90)."""
        return OCTANT_CENTERS[self]


OCTANT_CENTERS: dict[Octant, float] = {
    Octant.N: 0.0,
    Octant.NE: 45.0,
    Octant.E: 90.0,
    Octant.SE: 135.0,
    Octant.S: 180.0,
    Octant.SW: 225.0,
    Octant.W: 270.0,
    Octant.NW: 315.0,
}


def parse_octants(value: Any, strict: bool = True) -> frozenset[Octant]:
    """Parse a set of octants from a list or a comma-separated string.

    The preference store keeps directions as "NW,W" strings; the API sends
    lists. Labels are case-insensitive and blanks are ignored. With
    `strict=False` unknown labels are skipped instead of rejected.

    Raises:
        ValueError: If strict and a label is not one of the eight octants
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        labels: Iterable[Any] = value.split(",")
    else:
        labels = value

    octants: set[Octant] = set()
    for label in labels:
        if isinstance(label, Octant):
            octants.add(label)
            continue
        text = str(label).strip().upper()
        if not text:
            continue
        try:
            octants.add(Octant(text))
        except ValueError:
            if not strict:
                continue
            raise ValueError(f"Unknown compass direction: '{label}'") from None
    return frozenset(octants)


def format_octants(octants: Iterable[Octant]) -> str | None:
    """Format octants as the comma-separated string used for storage."""
    ordered = [o.value for o in Octant if o in set(octants)]
    return ",".join(ordered) if ordered else None


class PreferenceProfile(BaseModel):
    """A user's surf preferences for one break.

    Every bound is optional; a missing bound means no preference on that
    side. Empty direction sets mean any direction is acceptable.
    """

    model_config = ConfigDict(frozen=True)

    location_id: int = Field(..., description="Break identifier")
    location_name: str = Field(default="", description="Break display name")
    region: str = Field(default="", description="Break region")

    min_height_m: float | None = Field(default=None, ge=0)
    max_height_m: float | None = Field(default=None, ge=0)
    min_period_s: float | None = Field(default=None, ge=0)
    max_period_s: float | None = Field(default=None, ge=0)
    swell_directions: frozenset[Octant] = Field(default_factory=frozenset)
    max_wind_kt: float | None = Field(default=None, ge=0)
    wind_directions: frozenset[Octant] = Field(default_factory=frozenset)
    min_tide_m: float | None = Field(default=None)
    max_tide_m: float | None = Field(default=None)

    @field_validator("swell_directions", "wind_directions", mode="before")
    @classmethod
    def parse_directions(cls, v: Any) -> frozenset[Octant]:
        return parse_octants(v)

    @field_serializer("swell_directions", "wind_directions")
    def serialize_directions(self, v: frozenset[Octant]) -> list[str]:
        return [o.value for o in Octant if o in v]

    @model_validator(mode="after")
    def validate_bounds(self) -> Self:
        """Ensure min <= max for every pair where both bounds are set."""
        pairs = (
            ("height", self.min_height_m, self.max_height_m),
            ("period", self.min_period_s, self.max_period_s),
            ("tide", self.min_tide_m, self.max_tide_m),
        )
        for name, low, high in pairs:
            if low is not None and high is not None and low > high:
                raise ValueError(f"Min {name} must be less than max {name}")
        return self

    @property
    def display_name(self) -> str:
        return self.location_name or f"#{self.location_id}"


class AvailabilitySlot(BaseModel):
    """A recurring weekly local-time hour during which the user can surf."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(..., ge=0, le=6, description="Day of week (0=Sunday)")
    start_hour: int = Field(..., ge=0, le=23, description="Local start hour")
