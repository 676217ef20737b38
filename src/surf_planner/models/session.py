"""Session window models produced by the planner."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from surf_planner.models.forecast import ForecastHour

MAX_WINDOW_DAYS = 7


class SubScores(BaseModel):
    """The six per-hour sub-scores, each in [0, 1]."""

    height: float = Field(..., ge=0, le=1)
    period: float = Field(..., ge=0, le=1)
    swell_direction: float = Field(..., ge=0, le=1)
    wind_direction: float = Field(..., ge=0, le=1)
    wind_speed: float = Field(..., ge=0, le=1)
    tide: float = Field(..., ge=0, le=1)


class ScoredHour(BaseModel):
    """A forecast hour with its sub-scores and composite score."""

    hour: ForecastHour
    subscores: SubScores
    score: float = Field(..., ge=0, le=1, description="Composite score")

    @property
    def time(self) -> datetime:
        return self.hour.time


class HourlyDetail(BaseModel):
    """Per-hour detail entry shown inside a session window."""

    time: datetime
    score: float = Field(..., ge=0, le=1)
    wave_height_m: float | None = None
    swell_period_s: float | None = None
    swell_direction_deg: float | None = None
    wind_speed_kt: float | None = None
    wind_direction_deg: float | None = None
    tide_m: float | None = None

    @classmethod
    def from_scored(cls, scored: ScoredHour) -> "HourlyDetail":
        hour = scored.hour
        return cls(
            time=hour.time,
            score=scored.score,
            wave_height_m=hour.wave_height_m,
            swell_period_s=hour.swell_period_s,
            swell_direction_deg=hour.swell_direction_deg,
            wind_speed_kt=hour.wind_speed_kt,
            wind_direction_deg=hour.wind_direction_deg,
            tide_m=hour.tide_m,
        )


class SessionWindow(BaseModel):
    """A candidate surf session of one or two consecutive local hours."""

    location_id: int = Field(..., description="Break identifier")
    location_name: str = Field(..., description="Break display name")
    region: str = Field(default="", description="Break region")

    start: datetime = Field(..., description="Instant of the anchor hour")
    end: datetime = Field(
        ..., description="Instant of the last hour in the window (== start if single)"
    )
    score: int = Field(..., ge=0, le=100, description="Window score (0-100)")

    why: SubScores = Field(..., description="Sub-scores of the anchor hour")
    best_hour: datetime = Field(..., description="Instant of the better-scoring hour")
    hourly: list[HourlyDetail] = Field(
        ..., min_length=1, max_length=2, description="Per-hour details"
    )

    @property
    def is_paired(self) -> bool:
        return len(self.hourly) == 2


class PlanRequest(BaseModel):
    """Parameters of a session planning request."""

    region: str | None = Field(default=None, description="Only plan for this region")
    window_days: int = Field(
        default=MAX_WINDOW_DAYS,
        ge=1,
        le=MAX_WINDOW_DAYS,
        description="Days ahead to consider (1-7)",
    )
    timezone: str = Field(..., description="IANA timezone of the availability calendar")


class SessionPlan(BaseModel):
    """Ranked session windows across all preferred breaks."""

    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the plan was generated",
    )
    timezone: str = Field(..., description="Timezone the availability was mapped in")
    windows: list[SessionWindow] = Field(
        default_factory=list, description="Session windows, best first"
    )
