"""Ranking of pooled session windows."""

from __future__ import annotations

from collections.abc import Iterable

from surf_planner.models.session import SessionWindow


def rank_windows(windows: Iterable[SessionWindow]) -> list[SessionWindow]:
    """Order windows by score (highest first), then by start (soonest first).

    The sort is stable, so windows equal on both keys keep their input order.
    Overlapping windows are neither merged nor deduplicated.
    """
    return sorted(windows, key=lambda w: (-w.score, w.start))
