"""Database package: connection management, models and repositories."""

from surf_planner.database.connection import (
    close_db,
    create_tables,
    get_db,
    get_db_session,
    get_session_factory,
    init_db,
)
from surf_planner.database.models import (
    AvailabilitySlotRecord,
    Base,
    ForecastCacheEntry,
    SurfBreakRecord,
    UserBreakPreference,
)
from surf_planner.database.repositories import (
    AvailabilityRepository,
    BreakRepository,
    ForecastCacheRepository,
    PreferenceRepository,
)
from surf_planner.database.sources import DatabaseSources

__all__ = [
    "AvailabilityRepository",
    "AvailabilitySlotRecord",
    "Base",
    "BreakRepository",
    "DatabaseSources",
    "ForecastCacheEntry",
    "ForecastCacheRepository",
    "PreferenceRepository",
    "SurfBreakRecord",
    "UserBreakPreference",
    "close_db",
    "create_tables",
    "get_db",
    "get_db_session",
    "get_session_factory",
    "init_db",
]
