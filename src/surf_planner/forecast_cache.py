"""Forecast cache refresh service.

Fetches raw Stormglass payloads for surf breaks and stores them in the
forecast cache, where the planner reads them from.

## Refresh Process

1. Look up the break and check it has coordinates
2. Fetch weather and sea level payloads from the provider
3. Validate that the weather payload translates
4. Store both payloads with the fetch time
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from surf_planner.config import Settings, get_settings
from surf_planner.database.repositories import BreakRepository, ForecastCacheRepository
from surf_planner.exceptions import LocationNotFoundError, MissingCoordinatesError
from surf_planner.models.location import SurfBreak
from surf_planner.providers.base import ProviderError
from surf_planner.providers.stormglass import StormglassProvider, translate_hours

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Result of refreshing the cache for one break."""

    break_id: int
    hours_cached: int = 0
    has_tide: bool = False
    error: str | None = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        return self.error is None


def build_provider(settings: Settings | None = None) -> StormglassProvider:
    """Create the Stormglass provider from settings.

    Raises:
        ValueError: If no Stormglass API key is configured
    """
    settings = settings or get_settings()
    return StormglassProvider(
        api_key=settings.stormglass_api_key,
        base_url=settings.stormglass_base_url,
        user_agent=f"surf-planner/{settings.app_version}",
        timeout=settings.stormglass_timeout_seconds,
    )


class ForecastCacheService:
    """Service for refreshing cached forecasts.

    Example:
        ```python
        async with build_provider() as provider:
            service = ForecastCacheService(db_session, provider)
            result = await service.refresh_break(break_id, hours=168)
            await db_session.commit()
        ```
    """

    def __init__(self, db: AsyncSession, provider: StormglassProvider):
        self.db = db
        self.provider = provider
        self.breaks = BreakRepository(db)
        self.cache = ForecastCacheRepository(db)

    async def refresh_break(
        self,
        break_id: int,
        hours: int,
        start_time: datetime | None = None,
    ) -> RefreshResult:
        """Fetch and store the forecast for one break.

        Raises:
            LocationNotFoundError: If the break does not exist
            MissingCoordinatesError: If the break has no coordinates
            ProviderError: If the provider fails or returns an unusable payload
        """
        surf_break = await self.breaks.get(break_id)
        if surf_break is None:
            raise LocationNotFoundError(break_id)
        return await self._refresh(surf_break, hours, start_time)

    async def refresh_all(
        self,
        hours: int,
        start_time: datetime | None = None,
    ) -> list[RefreshResult]:
        """Refresh every break with coordinates, one at a time.

        A failure for one break is logged and recorded; the rest continue.
        """
        results: list[RefreshResult] = []
        for surf_break in await self.breaks.list_with_coordinates():
            try:
                result = await self._refresh(surf_break, hours, start_time)
            except ProviderError as e:
                logger.error(
                    f"Forecast refresh failed for {surf_break.display_name()}: {e}"
                )
                result = RefreshResult(break_id=surf_break.id, error=str(e))
            results.append(result)

        failed = sum(1 for r in results if not r.success)
        logger.info(f"Refreshed {len(results) - failed}/{len(results)} breaks")
        return results

    async def _refresh(
        self,
        surf_break: SurfBreak,
        hours: int,
        start_time: datetime | None,
    ) -> RefreshResult:
        if surf_break.coordinates is None:
            raise MissingCoordinatesError(surf_break.id)

        start = (start_time or datetime.now(timezone.utc)).replace(
            minute=0, second=0, microsecond=0
        )
        weather, sea_level = await self.provider.fetch_payloads(
            surf_break.coordinates, start, hours
        )
        try:
            series = translate_hours(weather, sea_level)
        except ValueError as e:
            raise ProviderError(str(e), provider=self.provider.name) from e

        entry = await self.cache.store(
            surf_break.id,
            provider=self.provider.name,
            hours=hours,
            weather_json=weather,
            sea_level_json=sea_level,
        )
        logger.info(
            f"Cached {len(series)} forecast hours for {surf_break.display_name()}"
        )
        return RefreshResult(
            break_id=surf_break.id,
            hours_cached=len(series),
            has_tide=sea_level is not None,
            fetched_at=entry.fetched_at,
        )
