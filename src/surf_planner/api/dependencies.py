"""FastAPI dependencies wiring the planner to the database and provider."""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, HTTPException, status

from surf_planner.config import Settings, get_settings
from surf_planner.database.connection import get_session_factory
from surf_planner.database.sources import DatabaseSources
from surf_planner.forecast_cache import build_provider
from surf_planner.providers.stormglass import StormglassProvider
from surf_planner.recommendations.planner import SessionPlanner
from surf_planner.scoring.engine import ScoringEngine, ScoringWeights


def get_sources(settings: Settings = Depends(get_settings)) -> DatabaseSources:
    return DatabaseSources(
        get_session_factory(),
        max_age_hours=settings.forecast_cache_max_age_hours,
    )


def get_session_planner(
    sources: DatabaseSources = Depends(get_sources),
    settings: Settings = Depends(get_settings),
) -> SessionPlanner:
    engine = ScoringEngine(ScoringWeights(normalize=settings.normalize_composite))
    return SessionPlanner(
        preferences=sources,
        availability=sources,
        forecasts=sources,
        engine=engine,
        skip_paired_hours=settings.skip_paired_hours,
        forecast_hours=settings.forecast_hours,
    )


async def get_forecast_provider(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[StormglassProvider, None]:
    """Yield a Stormglass provider, closed after the request.

    Raises 503 when no API key is configured.
    """
    if not settings.stormglass_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Forecast provider is not configured",
        )
    async with build_provider(settings) as provider:
        yield provider
