"""Tests for trend classification."""

from datetime import datetime, timezone

from core.models import SwingKind, SwingPoint, SwingSet, TrendDirection
from logic.swings import detect_swings
from logic.trend import classify_trend

TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _swings(highs, lows) -> SwingSet:
    return SwingSet(
        highs=tuple(SwingPoint(i, p, TS, SwingKind.HIGH) for i, p in enumerate(highs)),
        lows=tuple(SwingPoint(i, p, TS, SwingKind.LOW) for i, p in enumerate(lows)),
    )


def test_higher_high_and_higher_low_is_up():
    trend = classify_trend(_swings([10, 12], [5, 6]))

    assert trend.direction is TrendDirection.UP
    assert trend.protected_level == 6
    assert trend.reclaim_level == 12
    assert trend.has_bias
    assert any("HH" in line for line in trend.why)


def test_lower_high_and_lower_low_is_down():
    trend = classify_trend(_swings([110, 100], [95, 90]), timeframe="1h")

    assert trend.direction is TrendDirection.DOWN
    assert trend.protected_level == 100
    assert trend.reclaim_level == 90
    assert trend.timeframe == "1h"
    assert any(line.endswith("1h LL: 95 → 90") for line in trend.why)


def test_only_last_two_swings_matter():
    trend = classify_trend(_swings([50, 10, 12], [40, 5, 6]))
    assert trend.direction is TrendDirection.UP


def test_equal_highs_stay_none():
    trend = classify_trend(_swings([10, 10], [5, 6]))

    assert trend.direction is TrendDirection.NONE
    assert trend.protected_level is None
    assert trend.reclaim_level is None
    assert not trend.has_bias


def test_mixed_structure_stays_none():
    trend = classify_trend(_swings([10, 12], [6, 5]))
    assert trend.direction is TrendDirection.NONE
    assert "Structure not clean" in trend.why[-1]


def test_not_enough_swings():
    trend = classify_trend(_swings([10, 12], [5]))

    assert trend.direction is TrendDirection.NONE
    assert "Not enough swings yet" in trend.why[0]


def test_candle_series_end_to_end(down_trend_htf, up_trend_htf):
    down = classify_trend(detect_swings(down_trend_htf))
    up = classify_trend(detect_swings(up_trend_htf))

    assert (down.direction, down.protected_level, down.reclaim_level) == (TrendDirection.DOWN, 100, 90)
    assert (up.direction, up.protected_level, up.reclaim_level) == (TrendDirection.UP, 100, 110)
