"""Forecast routes.

Serves cached canonical forecast series and refreshes the cache from
Stormglass on demand.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from surf_planner.api.dependencies import get_forecast_provider, get_sources
from surf_planner.auth.dependencies import get_current_user_id
from surf_planner.config import Settings, get_settings
from surf_planner.database.connection import get_db_session
from surf_planner.database.sources import DatabaseSources
from surf_planner.exceptions import (
    ForecastNotCachedError,
    LocationNotFoundError,
    MissingCoordinatesError,
)
from surf_planner.forecast_cache import ForecastCacheService
from surf_planner.models.forecast import ForecastHour
from surf_planner.providers.base import ProviderError
from surf_planner.providers.stormglass import StormglassProvider

logger = logging.getLogger(__name__)

router = APIRouter()


class CacheRefreshResponse(BaseModel):
    """Result of refreshing a break's cached forecast."""

    break_id: int
    hours_cached: int
    has_tide: bool
    fetched_at: datetime


@router.get("/timeseries", response_model=list[ForecastHour])
async def get_timeseries(
    break_id: int = Query(...),
    hours: int | None = Query(default=None, ge=1, le=240),
    user_id: str = Depends(get_current_user_id),
    sources: DatabaseSources = Depends(get_sources),
    settings: Settings = Depends(get_settings),
) -> list[ForecastHour]:
    """Get the cached hourly forecast for a break."""
    try:
        return await sources.get_forecast_series(
            break_id, hours or settings.forecast_hours
        )
    except LocationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except MissingCoordinatesError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from None
    except ForecastNotCachedError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None


@router.post("/cache", response_model=CacheRefreshResponse)
async def refresh_cache(
    break_id: int = Query(...),
    hours: int | None = Query(default=None, ge=1, le=240),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    provider: StormglassProvider = Depends(get_forecast_provider),
    settings: Settings = Depends(get_settings),
) -> CacheRefreshResponse:
    """Fetch a fresh forecast for a break from Stormglass and cache it."""
    service = ForecastCacheService(db, provider)
    try:
        result = await service.refresh_break(break_id, hours or settings.forecast_hours)
    except LocationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except MissingCoordinatesError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from None
    except ProviderError as e:
        logger.error(f"Forecast refresh failed for break {break_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Forecast provider error: {e}",
        ) from None

    await db.commit()
    return CacheRefreshResponse(
        break_id=result.break_id,
        hours_cached=result.hours_cached,
        has_tide=result.has_tide,
        fetched_at=result.fetched_at,
    )
