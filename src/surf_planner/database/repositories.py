"""Repositories for breaks, preferences, availability and cached forecasts.

Repositories translate between ORM rows and the pydantic domain models. They
never commit on their own; callers own the transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from surf_planner.database.models import (
    AvailabilitySlotRecord,
    ForecastCacheEntry,
    SurfBreakRecord,
    UserBreakPreference,
)
from surf_planner.exceptions import LocationNotFoundError
from surf_planner.models.location import Coordinates, SurfBreak
from surf_planner.models.preferences import (
    AvailabilitySlot,
    PreferenceProfile,
    format_octants,
    parse_octants,
)

logger = logging.getLogger(__name__)


def break_from_record(record: SurfBreakRecord) -> SurfBreak:
    coordinates = None
    if record.latitude is not None and record.longitude is not None:
        coordinates = Coordinates(latitude=record.latitude, longitude=record.longitude)
    return SurfBreak(
        id=record.id,
        name=record.name,
        region=record.region or "",
        coordinates=coordinates,
        timezone=record.timezone,
    )


def profile_from_record(
    pref: UserBreakPreference,
    surf_break: SurfBreakRecord,
) -> PreferenceProfile:
    return PreferenceProfile(
        location_id=pref.break_id,
        location_name=surf_break.name,
        region=surf_break.region or "",
        min_height_m=pref.min_height_m,
        max_height_m=pref.max_height_m,
        min_period_s=pref.min_period_s,
        max_period_s=pref.max_period_s,
        swell_directions=parse_octants(pref.allowed_swell_dirs, strict=False),
        max_wind_kt=pref.max_wind_kt,
        wind_directions=parse_octants(pref.allowed_wind_dirs, strict=False),
        min_tide_m=pref.min_tide_m,
        max_tide_m=pref.max_tide_m,
    )


class BreakRepository:
    """Read access to surf breaks."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_regions(self) -> list[str]:
        result = await self.db.execute(
            select(SurfBreakRecord.region)
            .where(SurfBreakRecord.region != "")
            .distinct()
            .order_by(SurfBreakRecord.region)
        )
        return list(result.scalars().all())

    async def list_breaks(self, region: str | None = None) -> list[SurfBreak]:
        query = select(SurfBreakRecord).order_by(SurfBreakRecord.name)
        if region:
            query = query.where(SurfBreakRecord.region == region)
        result = await self.db.execute(query)
        return [break_from_record(r) for r in result.scalars().all()]

    async def list_with_coordinates(self) -> list[SurfBreak]:
        """Breaks that a forecast can be fetched for."""
        result = await self.db.execute(
            select(SurfBreakRecord)
            .where(
                SurfBreakRecord.latitude.is_not(None),
                SurfBreakRecord.longitude.is_not(None),
            )
            .order_by(SurfBreakRecord.id)
        )
        return [break_from_record(r) for r in result.scalars().all()]

    async def get(self, break_id: int) -> SurfBreak | None:
        record = await self.db.get(SurfBreakRecord, break_id)
        return break_from_record(record) if record else None


class PreferenceRepository:
    """Per-user, per-break preference profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_email: str, break_id: int) -> PreferenceProfile | None:
        result = await self.db.execute(
            select(UserBreakPreference, SurfBreakRecord)
            .join(SurfBreakRecord, UserBreakPreference.break_id == SurfBreakRecord.id)
            .where(
                UserBreakPreference.user_email == user_email,
                UserBreakPreference.break_id == break_id,
            )
        )
        row = result.first()
        if row is None:
            return None
        pref, surf_break = row
        return profile_from_record(pref, surf_break)

    async def list_preferences(
        self,
        user_email: str,
        region: str | None = None,
    ) -> list[PreferenceProfile]:
        query = (
            select(UserBreakPreference, SurfBreakRecord)
            .join(SurfBreakRecord, UserBreakPreference.break_id == SurfBreakRecord.id)
            .where(UserBreakPreference.user_email == user_email)
            .order_by(SurfBreakRecord.name)
        )
        if region:
            query = query.where(SurfBreakRecord.region == region)
        result = await self.db.execute(query)
        return [profile_from_record(pref, brk) for pref, brk in result.all()]

    async def upsert(self, user_email: str, profile: PreferenceProfile) -> PreferenceProfile:
        """Create or replace the user's preferences for a break.

        Raises:
            LocationNotFoundError: If the break does not exist
        """
        surf_break = await self.db.get(SurfBreakRecord, profile.location_id)
        if surf_break is None:
            raise LocationNotFoundError(profile.location_id)

        result = await self.db.execute(
            select(UserBreakPreference).where(
                UserBreakPreference.user_email == user_email,
                UserBreakPreference.break_id == profile.location_id,
            )
        )
        pref = result.scalar_one_or_none()
        if pref is None:
            pref = UserBreakPreference(user_email=user_email, break_id=profile.location_id)
            self.db.add(pref)

        pref.min_height_m = profile.min_height_m
        pref.max_height_m = profile.max_height_m
        pref.min_period_s = profile.min_period_s
        pref.max_period_s = profile.max_period_s
        pref.allowed_swell_dirs = format_octants(profile.swell_directions)
        pref.max_wind_kt = profile.max_wind_kt
        pref.allowed_wind_dirs = format_octants(profile.wind_directions)
        pref.min_tide_m = profile.min_tide_m
        pref.max_tide_m = profile.max_tide_m
        pref.updated_at = datetime.now(timezone.utc)

        await self.db.flush()
        return profile_from_record(pref, surf_break)


class AvailabilityRepository:
    """Weekly availability slots per user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, user_email: str) -> list[AvailabilitySlot]:
        result = await self.db.execute(
            select(AvailabilitySlotRecord)
            .where(AvailabilitySlotRecord.user_email == user_email)
            .order_by(AvailabilitySlotRecord.day_of_week, AvailabilitySlotRecord.start_hour)
        )
        return [
            AvailabilitySlot(day_of_week=r.day_of_week, start_hour=r.start_hour)
            for r in result.scalars().all()
        ]

    async def replace(
        self,
        user_email: str,
        slots: Iterable[AvailabilitySlot],
    ) -> list[AvailabilitySlot]:
        """Replace all of a user's slots. Duplicates collapse to one."""
        unique = sorted(set(slots), key=lambda s: (s.day_of_week, s.start_hour))

        await self.db.execute(
            delete(AvailabilitySlotRecord).where(
                AvailabilitySlotRecord.user_email == user_email
            )
        )
        self.db.add_all(
            AvailabilitySlotRecord(
                user_email=user_email,
                day_of_week=s.day_of_week,
                start_hour=s.start_hour,
            )
            for s in unique
        )
        await self.db.flush()
        return unique


class ForecastCacheRepository:
    """Raw provider payloads cached per break."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def store(
        self,
        break_id: int,
        provider: str,
        hours: int,
        weather_json: dict[str, Any],
        sea_level_json: dict[str, Any] | None = None,
        fetched_at: datetime | None = None,
    ) -> ForecastCacheEntry:
        entry = ForecastCacheEntry(
            break_id=break_id,
            provider=provider,
            hours=hours,
            weather_json=weather_json,
            sea_level_json=sea_level_json,
            fetched_at=fetched_at or datetime.now(timezone.utc),
        )
        self.db.add(entry)
        await self.db.flush()
        logger.debug(f"Cached {provider} forecast for break {break_id}")
        return entry

    async def latest(self, break_id: int) -> ForecastCacheEntry | None:
        result = await self.db.execute(
            select(ForecastCacheEntry)
            .where(ForecastCacheEntry.break_id == break_id)
            .order_by(ForecastCacheEntry.fetched_at.desc(), ForecastCacheEntry.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
