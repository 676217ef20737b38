"""Mapping of UTC instants onto the user's local weekly calendar.

Availability is recorded as (day-of-week, hour) pairs in the user's local
time, with 0 = Sunday. Conversion goes through the IANA tz database so that
daylight-saving transitions are honored: on the spring-forward day one local
hour never occurs, and on the fall-back day one local hour occurs twice.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from surf_planner.exceptions import InvalidTimezoneError


class LocalSlot(NamedTuple):
    """A local (day-of-week, hour) pair. Day 0 is Sunday."""

    day_of_week: int
    hour: int

    def successor(self) -> LocalSlot:
        """The local slot one hour later, wrapping 23 -> 0 into the next day."""
        if self.hour < 23:
            return LocalSlot(self.day_of_week, self.hour + 1)
        return LocalSlot((self.day_of_week + 1) % 7, 0)


def resolve_timezone(timezone_id: str | None) -> ZoneInfo:
    """Resolve an IANA timezone identifier.

    Raises:
        InvalidTimezoneError: If the identifier is blank or unknown
    """
    if not timezone_id or not timezone_id.strip():
        raise InvalidTimezoneError(timezone_id)
    try:
        return ZoneInfo(timezone_id.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(timezone_id) from e


class CalendarMapper:
    """Maps instants to local calendar slots for one timezone.

    Example:
        ```python
        mapper = CalendarMapper("Europe/Lisbon")
        slot = mapper.to_local(datetime(2024, 7, 6, 7, 0, tzinfo=timezone.utc))
        # LocalSlot(day_of_week=6, hour=8) - Saturday 08:00 WEST
        ```
    """

    def __init__(self, timezone_id: str):
        self.zone = resolve_timezone(timezone_id)
        self.timezone_id = timezone_id.strip()

    def to_local(self, instant: datetime) -> LocalSlot:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        local = instant.astimezone(self.zone)
        # datetime.weekday() is Monday=0; calendar slots use Sunday=0
        return LocalSlot((local.weekday() + 1) % 7, local.hour)


def to_local(instant: datetime, timezone_id: str) -> LocalSlot:
    """Map a UTC instant to a local (day-of-week, hour) slot."""
    return CalendarMapper(timezone_id).to_local(instant)
