"""Planner routes.

Breaks, per-break preferences, weekly availability and the ranked session
plan for the authenticated user.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from surf_planner.api.dependencies import get_session_planner
from surf_planner.auth.dependencies import get_current_user_id
from surf_planner.database.connection import get_db_session
from surf_planner.database.repositories import (
    AvailabilityRepository,
    BreakRepository,
    PreferenceRepository,
)
from surf_planner.exceptions import (
    InvalidPlanRequestError,
    InvalidTimezoneError,
    LocationNotFoundError,
)
from surf_planner.models.location import SurfBreak
from surf_planner.models.preferences import AvailabilitySlot, PreferenceProfile
from surf_planner.models.session import MAX_WINDOW_DAYS, PlanRequest, SessionPlan
from surf_planner.recommendations.planner import SessionPlanner

logger = logging.getLogger(__name__)

router = APIRouter()


class PreferenceRequest(BaseModel):
    """Create or replace preferences for a break."""

    break_id: int
    min_height_m: float | None = None
    max_height_m: float | None = None
    min_period_s: float | None = None
    max_period_s: float | None = None
    swell_directions: list[str] | str | None = None
    max_wind_kt: float | None = None
    wind_directions: list[str] | str | None = None
    min_tide_m: float | None = None
    max_tide_m: float | None = None

    def to_profile(self) -> PreferenceProfile:
        """Build the validated profile.

        Raises:
            ValidationError: If a bound pair is inverted or a direction unknown
        """
        fields = self.model_dump(exclude={"break_id"})
        return PreferenceProfile(location_id=self.break_id, **fields)


class AvailabilityUpdate(BaseModel):
    """Replace the user's weekly availability."""

    slots: list[AvailabilitySlot] = Field(default_factory=list)


def _validation_detail(error: ValidationError) -> list[str]:
    return [e["msg"] for e in error.errors()]


@router.get("/regions", response_model=list[str])
async def list_regions(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> list[str]:
    """List the distinct regions of known breaks."""
    return await BreakRepository(db).list_regions()


@router.get("/breaks", response_model=list[SurfBreak])
async def list_breaks(
    region: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> list[SurfBreak]:
    """List the breaks in a region."""
    if not region or not region.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="region is required",
        )
    return await BreakRepository(db).list_breaks(region.strip())


@router.get(
    "/prefs",
    response_model=PreferenceProfile,
    responses={204: {"description": "No preferences saved for this break"}},
)
async def get_preferences(
    break_id: int = Query(...),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> PreferenceProfile | Response:
    """Get the user's preferences for one break."""
    profile = await PreferenceRepository(db).get(user_id, break_id)
    if profile is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return profile


@router.post("/prefs", response_model=PreferenceProfile)
async def save_preferences(
    data: PreferenceRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> PreferenceProfile:
    """Create or replace the user's preferences for a break."""
    try:
        profile = data.to_profile()
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=_validation_detail(e),
        ) from None

    try:
        saved = await PreferenceRepository(db).upsert(user_id, profile)
    except LocationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from None

    await db.commit()
    logger.info(f"Saved preferences of {user_id} for break {profile.location_id}")
    return saved


@router.get("/prefs/list", response_model=list[PreferenceProfile])
async def list_preferences(
    region: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> list[PreferenceProfile]:
    """List the user's saved preferences, optionally for one region."""
    return await PreferenceRepository(db).list_preferences(user_id, region or None)


@router.get("/availability", response_model=list[AvailabilitySlot])
async def get_availability(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> list[AvailabilitySlot]:
    """Get the user's weekly availability."""
    return await AvailabilityRepository(db).list(user_id)


@router.put("/availability", response_model=list[AvailabilitySlot])
async def replace_availability(
    data: AvailabilityUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> list[AvailabilitySlot]:
    """Replace the user's weekly availability."""
    slots = await AvailabilityRepository(db).replace(user_id, data.slots)
    await db.commit()
    return slots


@router.get("/sessions", response_model=SessionPlan)
async def plan_sessions(
    tz: str = Query(..., description="IANA timezone of the availability calendar"),
    region: str | None = Query(default=None),
    days: int = Query(default=MAX_WINDOW_DAYS),
    user_id: str = Depends(get_current_user_id),
    planner: SessionPlanner = Depends(get_session_planner),
) -> SessionPlan:
    """Get ranked surf session windows across the user's preferred breaks."""
    try:
        request = PlanRequest(region=region or None, window_days=days, timezone=tz)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=_validation_detail(e),
        ) from None

    try:
        return await planner.plan_sessions(user_id, request)
    except InvalidTimezoneError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from None
    except InvalidPlanRequestError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e),
        ) from None
