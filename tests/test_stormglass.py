"""Tests for the Stormglass provider and payload translation."""

import asyncio
from datetime import datetime, timezone

import httpx
import pytest
from tenacity import wait_none

from surf_planner.models.location import Coordinates
from surf_planner.providers.base import (
    AuthenticationError,
    ForecastProvider,
    ProviderError,
    RateLimitError,
)
from surf_planner.providers.stormglass import (
    MS_TO_KNOTS,
    StormglassProvider,
    pick_source_value,
    translate_hours,
)

START = datetime(2024, 7, 6, 7, 0, tzinfo=timezone.utc)
ERICEIRA = Coordinates(latitude=38.9885, longitude=-9.4205)

WEATHER = {
    "hours": [
        {
            "time": "2024-07-06T08:00:00+00:00",
            "waveHeight": {"noaa": 1.1, "sg": 1.3},
            "windSpeed": {"sg": 5.0},
            "windDirection": {"sg": 200},
            "swellDirection": {"meteo": 310, "sg": 315},
            "swellPeriod": {"sg": 11.5},
            "swellHeight": {"sg": 1.0},
            "waterTemperature": {"sg": 18.2},
        },
        {
            "time": "2024-07-06T07:00:00+00:00",
            "waveHeight": {"noaa": 1.2},
            "windSpeed": {"sg": None, "noaa": 4.0},
            "swellPeriod": {"sg": "n/a"},
        },
        {"time": "not-a-time", "waveHeight": {"sg": 9.9}},
    ],
    "meta": {"dailyQuota": 10, "requestCount": 1},
}

SEA_LEVEL = {
    "data": [
        {"time": "2024-07-06T07:00:00+00:00", "sg": 0.83},
        {"time": "2024-07-06T08:00:00+00:00", "sg": 1.02},
    ],
    "meta": {},
}


def run(coro):
    return asyncio.run(coro)


def provider_with(handler) -> StormglassProvider:
    return StormglassProvider(api_key="test-key", transport=httpx.MockTransport(handler))


class TestTranslateHours:
    """Tests for payload translation into canonical hours."""

    def test_sorted_and_bad_times_skipped(self):
        hours = translate_hours(WEATHER, SEA_LEVEL)
        assert [h.time.hour for h in hours] == [7, 8]

    def test_prefers_stormglass_source(self):
        hour = translate_hours(WEATHER)[1]
        assert hour.wave_height_m == 1.3
        assert hour.swell_direction_deg == 315

    def test_falls_back_to_first_numeric_source(self):
        hour = translate_hours(WEATHER)[0]
        assert hour.wave_height_m == 1.2
        assert hour.wind_speed_kt == pytest.approx(4.0 * MS_TO_KNOTS)

    def test_wind_converted_to_knots(self):
        hour = translate_hours(WEATHER)[1]
        assert hour.wind_speed_kt == pytest.approx(9.71922)

    def test_malformed_values_are_missing(self):
        hour = translate_hours(WEATHER)[0]
        assert hour.swell_period_s is None
        assert hour.wind_direction_deg is None

    def test_tide_matched_by_hour(self):
        hours = translate_hours(WEATHER, SEA_LEVEL)
        assert [h.tide_m for h in hours] == [0.83, 1.02]

    def test_no_sea_level(self):
        assert all(h.tide_m is None for h in translate_hours(WEATHER, None))

    def test_missing_hours_list(self):
        with pytest.raises(ValueError):
            translate_hours({"errors": {"key": "invalid"}})

    def test_pick_source_value(self):
        assert pick_source_value({"icon": 2.0, "noaa": 3.0}) == 2.0
        assert pick_source_value({"sg": "bad"}) is None
        assert pick_source_value(4) == 4.0


class TestStormglassProvider:
    """Tests for the HTTP client using a mock transport."""

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            StormglassProvider(api_key=None)

    def test_get_forecast(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.path.endswith("/weather/point"):
                return httpx.Response(200, json=WEATHER)
            return httpx.Response(200, json=SEA_LEVEL)

        async def scenario():
            async with provider_with(handler) as provider:
                return await provider.get_forecast(ERICEIRA, START, hours=24)

        hours = run(scenario())
        assert [h.tide_m for h in hours] == [0.83, 1.02]

        weather_request = requests[0]
        assert weather_request.url.path == "/v2/weather/point"
        assert weather_request.headers["Authorization"] == "test-key"
        assert weather_request.url.params["lat"] == "38.9885"
        assert "swellPeriod" in weather_request.url.params["params"]
        assert weather_request.url.params["start"] == START.isoformat()
        assert requests[1].url.path == "/v2/tide/sea-level/point"

    def test_hours_clamped_to_max(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=WEATHER)

        async def scenario():
            async with provider_with(handler) as provider:
                await provider.get_weather(ERICEIRA, START, hours=1000)

        run(scenario())
        end = datetime.fromisoformat(requests[0].url.params["end"])
        assert (end - START).total_seconds() == 168 * 3600

    def test_sea_level_failure_is_tolerated(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/weather/point"):
                return httpx.Response(200, json=WEATHER)
            return httpx.Response(500, text="upstream down")

        async def scenario():
            async with provider_with(handler) as provider:
                return await provider.fetch_payloads(ERICEIRA, START, 24)

        weather, sea_level = run(scenario())
        assert weather == WEATHER
        assert sea_level is None

    def test_sea_level_rate_limit_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/weather/point"):
                return httpx.Response(200, json=WEATHER)
            return httpx.Response(429, headers={"Retry-After": "60"})

        async def scenario():
            async with provider_with(handler) as provider:
                await provider.fetch_payloads(ERICEIRA, START, 24)

        with pytest.raises(RateLimitError) as excinfo:
            run(scenario())
        assert excinfo.value.retry_after == 60

    @pytest.mark.parametrize(
        "status,error",
        [(401, AuthenticationError), (403, AuthenticationError), (500, ProviderError)],
    )
    def test_error_statuses(self, status, error):
        async def scenario():
            async with provider_with(lambda r: httpx.Response(status)) as provider:
                await provider.get_weather(ERICEIRA, START, 24)

        with pytest.raises(error) as excinfo:
            run(scenario())
        assert excinfo.value.status_code == status

    def test_non_object_body(self):
        async def scenario():
            async with provider_with(lambda r: httpx.Response(200, json=[1, 2])) as provider:
                await provider.get_weather(ERICEIRA, START, 24)

        with pytest.raises(ProviderError, match="JSON object"):
            run(scenario())

    def test_malformed_weather_payload(self):
        async def scenario():
            async with provider_with(lambda r: httpx.Response(200, json={})) as provider:
                await provider.get_forecast(ERICEIRA, START, 24)

        with pytest.raises(ProviderError, match="hours"):
            run(scenario())

    def test_network_errors_are_retried(self, monkeypatch):
        monkeypatch.setattr(ForecastProvider._fetch.retry, "wait", wait_none())
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=WEATHER)

        async def scenario():
            async with provider_with(handler) as provider:
                return await provider.get_weather(ERICEIRA, START, 24)

        assert run(scenario()) == WEATHER
        assert len(attempts) == 3
