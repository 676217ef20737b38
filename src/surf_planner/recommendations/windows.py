"""Session window builder.

Walks one break's hourly forecast series in order and turns every hour that
falls inside the user's availability into a candidate session window:

- An hour is a window start only if its local (day, hour) slot is in the
  availability set.
- The following array element is paired with it only when its local slot is
  exactly the next local hour. A data gap, a DST jump or a repeated local hour
  leaves the window single-hour.
- The walk advances one element at a time, so an hour used as a pairing
  partner can start its own window on the next step. Overlapping windows are
  intentional; consumers may merge them.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from surf_planner.models.forecast import ForecastHour
from surf_planner.models.preferences import AvailabilitySlot, PreferenceProfile
from surf_planner.models.session import HourlyDetail, ScoredHour, SessionWindow
from surf_planner.recommendations.calendar_mapper import CalendarMapper, LocalSlot
from surf_planner.scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)


def availability_keys(slots: Iterable[AvailabilitySlot]) -> frozenset[LocalSlot]:
    """Build the lookup set of available local slots."""
    return frozenset(LocalSlot(s.day_of_week, s.start_hour) for s in slots)


def to_percent(score: float) -> int:
    """Convert a [0, 1] score to an integer 0-100, rounding halves up."""
    return max(0, min(100, math.floor(score * 100 + 0.5)))


@dataclass
class WindowCandidate:
    """A one- or two-hour window being assembled."""

    anchor: ScoredHour
    partner: ScoredHour | None = None

    @property
    def hours(self) -> list[ScoredHour]:
        return [self.anchor] if self.partner is None else [self.anchor, self.partner]

    @property
    def start_time(self) -> datetime:
        return self.anchor.time

    @property
    def end_time(self) -> datetime:
        return self.hours[-1].time

    @property
    def avg_score(self) -> float:
        hours = self.hours
        return sum(h.score for h in hours) / len(hours)

    @property
    def best(self) -> ScoredHour:
        # Strictly better partner wins; ties stay with the earlier hour
        if self.partner is not None and self.partner.score > self.anchor.score:
            return self.partner
        return self.anchor

    def to_window(self, prefs: PreferenceProfile) -> SessionWindow:
        return SessionWindow(
            location_id=prefs.location_id,
            location_name=prefs.display_name,
            region=prefs.region,
            start=self.start_time,
            end=self.end_time,
            score=to_percent(self.avg_score),
            why=self.anchor.subscores,
            best_hour=self.best.time,
            hourly=[HourlyDetail.from_scored(h) for h in self.hours],
        )


class WindowBuilder:
    """Builds session windows for one break at a time.

    Example:
        ```python
        builder = WindowBuilder(ScoringEngine(), CalendarMapper("Europe/Lisbon"))
        windows = builder.build(series, prefs, availability, cutoff)
        ```
    """

    def __init__(
        self,
        engine: ScoringEngine,
        mapper: CalendarMapper,
        skip_paired_hours: bool = False,
    ):
        """Initialize the builder.

        Args:
            engine: Scoring engine (carries the composite weights)
            mapper: Calendar mapper for the user's timezone
            skip_paired_hours: Do not let an hour consumed as a pairing
                partner start its own window
        """
        self.engine = engine
        self.mapper = mapper
        self.skip_paired_hours = skip_paired_hours

    def build(
        self,
        series: Sequence[ForecastHour],
        prefs: PreferenceProfile,
        availability: Iterable[AvailabilitySlot],
        cutoff: datetime,
    ) -> list[SessionWindow]:
        """Build windows from a series ordered by ascending time.

        Args:
            series: Hourly forecast for one break, ascending
            prefs: Preference profile for the break
            availability: The user's weekly availability slots
            cutoff: Hours after this instant are not considered

        Returns:
            Session windows in series order (unranked)
        """
        available = availability_keys(availability)
        windows: list[SessionWindow] = []

        i = 0
        while i < len(series):
            hour = series[i]
            if hour.time > cutoff:
                break

            slot = self.mapper.to_local(hour.time)
            if slot not in available:
                i += 1
                continue

            candidate = WindowCandidate(anchor=self.engine.score(hour, prefs))

            if i + 1 < len(series):
                following = series[i + 1]
                if self.mapper.to_local(following.time) == slot.successor():
                    candidate.partner = self.engine.score(following, prefs)

            windows.append(candidate.to_window(prefs))

            if candidate.partner is not None and self.skip_paired_hours:
                i += 2
            else:
                i += 1

        logger.debug(
            f"Built {len(windows)} windows for break {prefs.location_id} "
            f"from {len(series)} forecast hours"
        )
        return windows
