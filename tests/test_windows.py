"""Tests for the session window builder and ranking."""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import BASE_TIME, all_week, hourly_series, make_hour
from surf_planner.models.preferences import AvailabilitySlot, PreferenceProfile
from surf_planner.models.session import SessionWindow, SubScores
from surf_planner.recommendations.calendar_mapper import CalendarMapper, LocalSlot
from surf_planner.recommendations.ranking import rank_windows
from surf_planner.recommendations.windows import (
    WindowBuilder,
    availability_keys,
    to_percent,
)
from surf_planner.scoring.engine import ScoringEngine, ScoringWeights

FAR_CUTOFF = BASE_TIME + timedelta(days=7)


def lisbon_builder(**kwargs) -> WindowBuilder:
    return WindowBuilder(ScoringEngine(), CalendarMapper("Europe/Lisbon"), **kwargs)


def normalized_builder(**kwargs) -> WindowBuilder:
    engine = ScoringEngine(ScoringWeights(normalize=True))
    return WindowBuilder(engine, CalendarMapper("Europe/Lisbon"), **kwargs)


class TestHelpers:
    """Tests for window helper functions."""

    def test_availability_keys_deduplicate(self):
        slots = [
            AvailabilitySlot(day_of_week=6, start_hour=8),
            AvailabilitySlot(day_of_week=6, start_hour=8),
        ]
        assert availability_keys(slots) == frozenset({LocalSlot(6, 8)})

    @pytest.mark.parametrize(
        "score,expected",
        [(0.0, 0), (1.0, 100), (0.125, 13), (0.375, 38), (0.994, 99), (0.25, 25)],
    )
    def test_to_percent_rounds_half_up(self, score, expected):
        assert to_percent(score) == expected


class TestPairing:
    """Tests for pairing adjacent local hours."""

    def test_consecutive_hours_pair_and_overlap(self, surfer_prefs: PreferenceProfile):
        series = hourly_series(BASE_TIME, 3)
        windows = lisbon_builder().build(series, surfer_prefs, all_week(), FAR_CUTOFF)

        assert [w.start for w in windows] == [h.time for h in series]
        assert [len(w.hourly) for w in windows] == [2, 2, 1]
        # Partner of the first window starts the second one
        assert windows[0].end == windows[1].start

    def test_single_hour_window_ends_at_start(self, surfer_prefs: PreferenceProfile):
        windows = lisbon_builder().build(
            [make_hour(BASE_TIME)], surfer_prefs, all_week(), FAR_CUTOFF
        )
        assert len(windows) == 1
        assert windows[0].end == windows[0].start
        assert not windows[0].is_paired

    def test_data_gap_prevents_pairing(self, surfer_prefs: PreferenceProfile):
        series = [
            make_hour(BASE_TIME),
            make_hour(BASE_TIME + timedelta(hours=1)),
            make_hour(BASE_TIME + timedelta(hours=3)),
        ]
        windows = lisbon_builder().build(series, surfer_prefs, all_week(), FAR_CUTOFF)
        assert [len(w.hourly) for w in windows] == [2, 1, 1]

    def test_pairs_across_midnight(self, surfer_prefs: PreferenceProfile):
        # Saturday 23:00 and Sunday 00:00 in Lisbon (UTC+1)
        start = datetime(2024, 7, 6, 22, 0, tzinfo=timezone.utc)
        windows = lisbon_builder().build(
            hourly_series(start, 2), surfer_prefs, all_week(), FAR_CUTOFF
        )
        assert windows[0].is_paired
        assert windows[0].end == start + timedelta(hours=1)

    def test_spring_forward_gap_never_pairs(self, surfer_prefs: PreferenceProfile):
        # 00:00 WET is followed by 02:00 WEST
        start = datetime(2024, 3, 31, 0, 0, tzinfo=timezone.utc)
        windows = lisbon_builder().build(
            hourly_series(start, 2), surfer_prefs, all_week(), start + timedelta(days=1)
        )
        assert [(w.start, len(w.hourly)) for w in windows] == [
            (start, 1),
            (start + timedelta(hours=1), 1),
        ]

    def test_fall_back_repeated_hour_never_pairs(self, surfer_prefs: PreferenceProfile):
        # 01:00 WEST is followed by 01:00 WET
        start = datetime(2024, 10, 27, 0, 0, tzinfo=timezone.utc)
        windows = lisbon_builder().build(
            hourly_series(start, 2), surfer_prefs, all_week(), start + timedelta(days=1)
        )
        assert [(w.start, len(w.hourly)) for w in windows] == [
            (start, 1),
            (start + timedelta(hours=1), 1),
        ]

    def test_skip_paired_hours(self, surfer_prefs: PreferenceProfile):
        series = hourly_series(BASE_TIME, 3)
        windows = lisbon_builder(skip_paired_hours=True).build(
            series, surfer_prefs, all_week(), FAR_CUTOFF
        )
        assert [w.start for w in windows] == [series[0].time, series[2].time]
        assert [len(w.hourly) for w in windows] == [2, 1]


class TestGating:
    """Tests for availability and horizon gating."""

    def test_unavailable_hours_never_start_windows(self, surfer_prefs: PreferenceProfile):
        series = hourly_series(BASE_TIME, 6)
        # Only Saturday 09:00 local, i.e. 08:00 UTC
        slots = [AvailabilitySlot(day_of_week=6, start_hour=9)]
        windows = lisbon_builder().build(series, surfer_prefs, slots, FAR_CUTOFF)

        assert len(windows) == 1
        assert windows[0].start == BASE_TIME + timedelta(hours=1)

    def test_partner_need_not_be_available(
        self, surfer_prefs: PreferenceProfile, saturday_morning: list[AvailabilitySlot]
    ):
        # Saturday 08:00-09:00 available; 10:00 local is only a partner
        series = hourly_series(BASE_TIME, 4)
        windows = lisbon_builder().build(series, surfer_prefs, saturday_morning, FAR_CUTOFF)
        assert [len(w.hourly) for w in windows] == [2, 2]
        assert windows[1].end == BASE_TIME + timedelta(hours=2)

    def test_no_availability_no_windows(self, surfer_prefs: PreferenceProfile):
        series = hourly_series(BASE_TIME, 24)
        assert lisbon_builder().build(series, surfer_prefs, [], FAR_CUTOFF) == []

    def test_stops_after_cutoff(self, surfer_prefs: PreferenceProfile):
        series = hourly_series(BASE_TIME, 5)
        cutoff = BASE_TIME + timedelta(hours=1)
        windows = lisbon_builder().build(series, surfer_prefs, all_week(), cutoff)
        assert [w.start for w in windows] == [BASE_TIME, cutoff]

    def test_empty_series(self, surfer_prefs: PreferenceProfile):
        assert lisbon_builder().build([], surfer_prefs, all_week(), FAR_CUTOFF) == []


class TestWindowScoring:
    """Tests for window score, best hour and details."""

    def test_saturated_scores(self, surfer_prefs: PreferenceProfile):
        windows = lisbon_builder().build(
            hourly_series(BASE_TIME, 2), surfer_prefs, all_week(), FAR_CUTOFF
        )
        assert windows[0].score == 100

    def test_window_score_is_mean_of_hours(self, surfer_prefs: PreferenceProfile):
        # 4.875 / 5 for an in-band hour; the second is below the height band
        series = [
            make_hour(BASE_TIME),
            make_hour(BASE_TIME + timedelta(hours=1), wave_height_m=0.7),
        ]
        windows = normalized_builder().build(series, surfer_prefs, all_week(), FAR_CUTOFF)
        assert windows[0].hourly[0].score == pytest.approx(0.975)
        assert windows[0].hourly[1].score == pytest.approx(0.860714, abs=1e-6)
        assert windows[0].score == 92
        assert windows[1].score == 86

    def test_better_partner_is_best_hour(self, surfer_prefs: PreferenceProfile):
        series = [
            make_hour(BASE_TIME, wave_height_m=0.1),
            make_hour(BASE_TIME + timedelta(hours=1)),
        ]
        window = normalized_builder().build(series, surfer_prefs, all_week(), FAR_CUTOFF)[0]
        assert window.best_hour == series[1].time

    def test_tie_favors_earlier_hour(self, surfer_prefs: PreferenceProfile):
        series = hourly_series(BASE_TIME, 2)
        window = normalized_builder().build(series, surfer_prefs, all_week(), FAR_CUTOFF)[0]
        assert window.best_hour == series[0].time

    def test_why_is_anchor_subscores(self, surfer_prefs: PreferenceProfile):
        series = [
            make_hour(BASE_TIME, wave_height_m=None),
            make_hour(BASE_TIME + timedelta(hours=1)),
        ]
        window = lisbon_builder().build(series, surfer_prefs, all_week(), FAR_CUTOFF)[0]
        assert window.why.height == 0.5

    def test_window_carries_break_and_details(self, surfer_prefs: PreferenceProfile):
        series = hourly_series(BASE_TIME, 2, tide_m=1.1)
        window = lisbon_builder().build(series, surfer_prefs, all_week(), FAR_CUTOFF)[0]
        assert window.location_id == 1
        assert window.location_name == "Ribeira d'Ilhas"
        assert window.region == "Ericeira"
        assert [d.time for d in window.hourly] == [h.time for h in series]
        assert window.hourly[0].tide_m == 1.1
        assert window.hourly[0].wave_height_m == 1.0


def window(score: int, start: datetime, location_id: int = 1) -> SessionWindow:
    subscores = SubScores(
        height=1, period=1, swell_direction=1, wind_direction=1, wind_speed=1, tide=1
    )
    return SessionWindow(
        location_id=location_id,
        location_name=f"#{location_id}",
        start=start,
        end=start,
        score=score,
        why=subscores,
        best_hour=start,
        hourly=[{"time": start, "score": score / 100}],
    )


class TestRanking:
    """Tests for ranking pooled windows."""

    def test_score_descending(self):
        low = window(40, BASE_TIME)
        high = window(90, BASE_TIME + timedelta(hours=5))
        assert rank_windows([low, high]) == [high, low]

    def test_ties_order_by_start(self):
        later = window(70, BASE_TIME + timedelta(hours=2), location_id=1)
        earlier = window(70, BASE_TIME, location_id=2)
        assert rank_windows([later, earlier]) == [earlier, later]

    def test_full_ties_keep_input_order(self):
        first = window(70, BASE_TIME, location_id=1)
        second = window(70, BASE_TIME, location_id=2)
        assert [w.location_id for w in rank_windows([first, second])] == [1, 2]

    def test_no_deduplication(self):
        same = window(50, BASE_TIME)
        assert len(rank_windows([same, same])) == 2

    def test_empty(self):
        assert rank_windows([]) == []
