"""Stormglass marine forecast provider.

## API Documentation Summary
Source: https://docs.stormglass.io/#/weather
Source: https://docs.stormglass.io/#/tide

## Endpoints
- Weather: {base}/weather/point?lat=..&lng=..&params=..&start=..&end=..
- Sea level: {base}/tide/sea-level/point?lat=..&lng=..&start=..&end=..

## Authentication
- API key sent verbatim in the `Authorization` header

## Response Format
```json
{
  "hours": [
    {
      "time": "2024-07-06T07:00:00+00:00",
      "waveHeight": {"sg": 1.21, "noaa": 1.10, "meteo": 1.25},
      "windSpeed": {"sg": 4.2, "noaa": 4.0},
      ...
    }
  ],
  "meta": {"dailyQuota": 10, "requestCount": 3, ...}
}
```
Sea level: `{"data": [{"time": "2024-07-06T07:00:00+00:00", "sg": 0.83}], "meta": {...}}`

## Variable Translation (Stormglass -> Canonical)
| Stormglass Param  | Canonical Field      | Unit | Notes            |
|-------------------|----------------------|------|------------------|
| waveHeight        | wave_height_m        | m    | Direct           |
| windSpeed         | wind_speed_kt        | kt   | m/s * 1.943844   |
| windDirection     | wind_direction_deg   | deg  | Direct           |
| waterTemperature  | water_temperature_c  | °C   | Direct           |
| swellHeight       | swell_height_m       | m    | Direct           |
| swellDirection    | swell_direction_deg  | deg  | Direct           |
| swellPeriod       | swell_period_s       | s    | Direct           |
| sea-level sg      | tide_m               | m    | Matched by hour  |

Each parameter carries values from several model sources. The Stormglass
blend (`sg`) is preferred; otherwise the first numeric source is used.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from surf_planner.models.forecast import ForecastHour, coerce_number
from surf_planner.models.location import Coordinates
from surf_planner.providers.base import ForecastProvider, ProviderError, RateLimitError

logger = logging.getLogger(__name__)

STORMGLASS_PARAMS = (
    "waveHeight",
    "windSpeed",
    "windDirection",
    "waterTemperature",
    "swellHeight",
    "swellDirection",
    "swellPeriod",
)

PREFERRED_SOURCE = "sg"
MS_TO_KNOTS = 1.943844

# Stormglass param -> canonical ForecastHour field
PARAM_TO_FIELD: dict[str, str] = {
    "waveHeight": "wave_height_m",
    "windDirection": "wind_direction_deg",
    "waterTemperature": "water_temperature_c",
    "swellHeight": "swell_height_m",
    "swellDirection": "swell_direction_deg",
    "swellPeriod": "swell_period_s",
}


def _parse_time(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def pick_source_value(value: Any) -> float | None:
    """Pick one number from a per-source value mapping.

    Prefers the Stormglass blend, then the first usable source.
    """
    if isinstance(value, dict):
        preferred = coerce_number(value.get(PREFERRED_SOURCE))
        if preferred is not None:
            return preferred
        for source_value in value.values():
            number = coerce_number(source_value)
            if number is not None:
                return number
        return None
    return coerce_number(value)


def _sea_level_by_time(sea_level_json: dict[str, Any] | None) -> dict[datetime, float]:
    if not sea_level_json:
        return {}
    entries = sea_level_json.get("data")
    if not isinstance(entries, list):
        return {}

    levels: dict[datetime, float] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        time = _parse_time(entry.get("time"))
        height = pick_source_value(entry)
        if time is not None and height is not None:
            levels[time] = height
    return levels


def translate_hours(
    weather_json: dict[str, Any],
    sea_level_json: dict[str, Any] | None = None,
) -> list[ForecastHour]:
    """Translate Stormglass payloads into canonical forecast hours.

    Entries with an unparseable time are skipped; unusable values become
    missing measurements.

    Raises:
        ValueError: If the weather payload has no `hours` list
    """
    hours = weather_json.get("hours") if isinstance(weather_json, dict) else None
    if not isinstance(hours, list):
        raise ValueError("Malformed Stormglass payload: missing 'hours' list")

    tide_levels = _sea_level_by_time(sea_level_json)
    result: list[ForecastHour] = []

    for entry in hours:
        if not isinstance(entry, dict):
            continue
        time = _parse_time(entry.get("time"))
        if time is None:
            continue

        fields: dict[str, Any] = {
            field: pick_source_value(entry.get(param))
            for param, field in PARAM_TO_FIELD.items()
        }
        wind_ms = pick_source_value(entry.get("windSpeed"))
        fields["wind_speed_kt"] = wind_ms * MS_TO_KNOTS if wind_ms is not None else None
        fields["tide_m"] = tide_levels.get(time)

        result.append(ForecastHour(time=time, **fields))

    result.sort(key=lambda h: h.time)
    return result


class StormglassProvider(ForecastProvider):
    """Stormglass point forecast provider.

    Example:
        ```python
        async with StormglassProvider(api_key="...") as provider:
            weather, sea_level = await provider.fetch_payloads(
                Coordinates(latitude=38.9637, longitude=-9.4176),
                start_time=datetime.now(timezone.utc),
                hours=168,
            )
            series = translate_hours(weather, sea_level)
        ```
    """

    name = "stormglass"
    base_url = "https://api.stormglass.io/v2"
    requires_api_key = True

    def _get_default_headers(self) -> dict[str, str]:
        headers = super()._get_default_headers()
        headers["Authorization"] = self.api_key or ""
        return headers

    def _time_params(self, start_time: datetime, hours: int) -> dict[str, str]:
        hours = max(1, min(hours, self.get_max_forecast_hours()))
        end_time = start_time + timedelta(hours=hours)
        return {"start": start_time.isoformat(), "end": end_time.isoformat()}

    async def get_weather(
        self,
        coordinates: Coordinates,
        start_time: datetime,
        hours: int,
    ) -> dict[str, Any]:
        """Fetch the raw weather point payload."""
        params = {
            "lat": coordinates.latitude,
            "lng": coordinates.longitude,
            "params": ",".join(STORMGLASS_PARAMS),
            **self._time_params(start_time, hours),
        }
        response = await self._fetch(f"{self.base_url}/weather/point", params=params)
        return self._parse_json(response)

    async def get_sea_level(
        self,
        coordinates: Coordinates,
        start_time: datetime,
        hours: int,
    ) -> dict[str, Any]:
        """Fetch the raw hourly sea level payload."""
        params = {
            "lat": coordinates.latitude,
            "lng": coordinates.longitude,
            **self._time_params(start_time, hours),
        }
        response = await self._fetch(
            f"{self.base_url}/tide/sea-level/point", params=params
        )
        return self._parse_json(response)

    async def fetch_payloads(
        self,
        coordinates: Coordinates,
        start_time: datetime,
        hours: int,
    ) -> tuple[dict[str, Any], dict[str, Any] | None]:
        """Fetch weather and sea level payloads.

        Tide is optional: a failed sea level request (other than a rate limit)
        is logged and yields None rather than failing the whole fetch.
        """
        weather = await self.get_weather(coordinates, start_time, hours)
        try:
            sea_level = await self.get_sea_level(coordinates, start_time, hours)
        except RateLimitError:
            raise
        except (ProviderError, httpx.HTTPError) as e:
            logger.warning(f"Sea level unavailable for {coordinates}: {e}")
            sea_level = None
        return weather, sea_level

    async def get_forecast(
        self,
        coordinates: Coordinates,
        start_time: datetime,
        hours: int,
    ) -> list[ForecastHour]:
        weather, sea_level = await self.fetch_payloads(coordinates, start_time, hours)
        try:
            return translate_hours(weather, sea_level)
        except ValueError as e:
            raise ProviderError(str(e), provider=self.name) from e
