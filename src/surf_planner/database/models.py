"""Database models for surf session planning.

## Schema Overview

```
surf_breaks
├── user_break_preferences (1:N, one per user)
└── forecast_cache (1:N, newest row wins)
availability_slots (per user)
```

Users are identified by the email-like claim of their bearer token; there is
no local user table. Direction preferences are stored as comma-separated
octant labels ("NW,W").
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""

    type_annotation_map = {
        dict[str, Any]: JSON().with_variant(JSONB(), "postgresql"),
    }


class SurfBreakRecord(Base):
    """A surf break with its location."""

    __tablename__ = "surf_breaks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    region: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    timezone: Mapped[str | None] = mapped_column(String(64))

    # Relationships
    preferences: Mapped[list["UserBreakPreference"]] = relationship(
        back_populates="surf_break", cascade="all, delete-orphan"
    )
    forecasts: Mapped[list["ForecastCacheEntry"]] = relationship(
        back_populates="surf_break", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_surf_breaks_region", "region"),)

    def __repr__(self) -> str:
        return f"<SurfBreak {self.name}>"


class UserBreakPreference(Base):
    """A user's surf preferences for one break."""

    __tablename__ = "user_break_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    break_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("surf_breaks.id", ondelete="CASCADE"), nullable=False
    )

    # Bands
    min_height_m: Mapped[float | None] = mapped_column(Float)
    max_height_m: Mapped[float | None] = mapped_column(Float)
    min_period_s: Mapped[float | None] = mapped_column(Float)
    max_period_s: Mapped[float | None] = mapped_column(Float)
    min_tide_m: Mapped[float | None] = mapped_column(Float)
    max_tide_m: Mapped[float | None] = mapped_column(Float)

    # Directions and wind
    allowed_swell_dirs: Mapped[str | None] = mapped_column(String(64))
    max_wind_kt: Mapped[float | None] = mapped_column(Float)
    allowed_wind_dirs: Mapped[str | None] = mapped_column(String(64))

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    surf_break: Mapped["SurfBreakRecord"] = relationship(back_populates="preferences")

    __table_args__ = (
        UniqueConstraint("user_email", "break_id", name="uq_user_break_pref"),
        Index("ix_user_break_preferences_user", "user_email"),
    )

    def __repr__(self) -> str:
        return f"<UserBreakPreference {self.user_email} break={self.break_id}>"


class AvailabilitySlotRecord(Base):
    """One recurring weekly local hour a user is available."""

    __tablename__ = "availability_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Sunday
    start_hour: Mapped[int] = mapped_column(Integer, nullable=False)  # local time

    __table_args__ = (
        UniqueConstraint(
            "user_email", "day_of_week", "start_hour", name="uq_user_slot"
        ),
        Index("ix_availability_slots_user", "user_email"),
    )

    def __repr__(self) -> str:
        return f"<AvailabilitySlot {self.user_email} {self.day_of_week}@{self.start_hour}>"


class ForecastCacheEntry(Base):
    """Raw provider payloads cached for a break."""

    __tablename__ = "forecast_cache"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    break_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("surf_breaks.id", ondelete="CASCADE"), nullable=False
    )
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)
    weather_json: Mapped[dict[str, Any]] = mapped_column(nullable=False)
    sea_level_json: Mapped[dict[str, Any] | None] = mapped_column()
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    surf_break: Mapped["SurfBreakRecord"] = relationship(back_populates="forecasts")

    __table_args__ = (
        Index("ix_forecast_cache_break_fetched", "break_id", "fetched_at"),
    )

    def __repr__(self) -> str:
        return f"<ForecastCacheEntry break={self.break_id} at={self.fetched_at}>"
