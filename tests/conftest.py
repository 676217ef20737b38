"""Pytest fixtures for surf session planner tests.

This module provides test fixtures that ensure:
1. No external API calls are made (forecast provider)
2. No real database connections; database tests use in-memory SQLite
3. Isolated test environment with controlled configuration
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ.setdefault("SECRET_KEY", "test-secret-key-at-least-32-characters-long")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEBUG", "true")

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from surf_planner.database.models import Base, SurfBreakRecord
from surf_planner.models.forecast import ForecastHour
from surf_planner.models.preferences import AvailabilitySlot, PreferenceProfile

# Saturday 2024-07-06 07:00 UTC is 08:00 in Lisbon (WEST, UTC+1)
BASE_TIME = datetime(2024, 7, 6, 7, 0, tzinfo=timezone.utc)


def make_hour(time: datetime, **overrides) -> ForecastHour:
    """Forecast hour that clears the `surfer_prefs` bands."""
    values = {
        "wave_height_m": 1.0,
        "swell_direction_deg": 315.0,
        "swell_period_s": 12.0,
        "wind_speed_kt": 10.0,
        "wind_direction_deg": 200.0,
        "tide_m": None,
    }
    values.update(overrides)
    return ForecastHour(time=time, **values)


def hourly_series(start: datetime, count: int, **overrides) -> list[ForecastHour]:
    return [make_hour(start + timedelta(hours=i), **overrides) for i in range(count)]


def all_week() -> list[AvailabilitySlot]:
    return [
        AvailabilitySlot(day_of_week=d, start_hour=h) for d in range(7) for h in range(24)
    ]


async def create_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_breaks(factory) -> None:
    """Three breaks: two in Ericeira (one without coordinates) and one in Peniche."""
    async with factory() as session:
        session.add_all(
            [
                SurfBreakRecord(
                    id=1,
                    name="Ribeira d'Ilhas",
                    region="Ericeira",
                    latitude=38.9885,
                    longitude=-9.4205,
                    timezone="Europe/Lisbon",
                ),
                SurfBreakRecord(
                    id=2,
                    name="Coxos",
                    region="Ericeira",
                    latitude=None,
                    longitude=None,
                    timezone="Europe/Lisbon",
                ),
                SurfBreakRecord(
                    id=3,
                    name="Supertubos",
                    region="Peniche",
                    latitude=39.3450,
                    longitude=-9.3630,
                    timezone="Europe/Lisbon",
                ),
            ]
        )
        await session.commit()


def new_engine():
    return create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from surf_planner.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def run_db():
    """Run an async scenario against a fresh, seeded in-memory database.

    The scenario receives a session factory. Engine and scenario share one
    event loop.
    """

    def runner(scenario, seed: bool = True):
        async def main():
            engine = new_engine()
            await create_schema(engine)
            factory = async_sessionmaker(engine, expire_on_commit=False)
            try:
                if seed:
                    await seed_breaks(factory)
                return await scenario(factory)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return runner


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def surfer_prefs() -> PreferenceProfile:
    """Preferences from the documented end-to-end example."""
    return PreferenceProfile(
        location_id=1,
        location_name="Ribeira d'Ilhas",
        region="Ericeira",
        min_height_m=0.8,
        max_height_m=1.5,
        swell_directions=["NW"],
        max_wind_kt=15,
        wind_directions=[],
    )


@pytest.fixture
def example_hour() -> ForecastHour:
    """Forecast hour from the documented end-to-end example."""
    return ForecastHour(
        time=BASE_TIME,
        wave_height_m=1.0,
        swell_direction_deg=315,
        wind_speed_kt=10,
        wind_direction_deg=200,
    )


@pytest.fixture
def saturday_morning() -> list[AvailabilitySlot]:
    """Saturday 08:00 and 09:00 local."""
    return [
        AvailabilitySlot(day_of_week=6, start_hour=8),
        AvailabilitySlot(day_of_week=6, start_hour=9),
    ]
