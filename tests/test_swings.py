"""Tests for swing detection."""

import pytest

from core.models import SwingKind
from logic.swings import detect_swings
from tests.candles import DOWN_HIGHS, from_highs


def test_too_few_candles_gives_empty_set():
    swings = detect_swings(from_highs([1, 2, 5, 2]), look=2)
    assert swings.is_empty


def test_single_peak_and_trough():
    swings = detect_swings(from_highs([10, 11, 15, 11, 10, 8, 5, 8, 10]), look=2)

    assert [p.index for p in swings.highs] == [2]
    assert swings.highs[0].price == 15
    assert swings.highs[0].kind is SwingKind.HIGH
    assert [p.index for p in swings.lows] == [6]
    assert swings.lows[0].price == 2  # 5 - spread


def test_equal_neighbour_disqualifies_candidate():
    swings = detect_swings(from_highs([1, 2, 5, 5, 2, 1]), look=2)
    assert swings.highs == ()


def test_edges_are_never_swings():
    # Index 0 holds the highest high and index 1 the lowest low
    swings = detect_swings(from_highs([9, 1, 2, 3, 4]), look=2)
    assert swings.is_empty


def test_look_one_finds_more_pivots():
    highs = [1, 3, 2, 4, 3, 5, 4]
    assert [p.index for p in detect_swings(from_highs(highs), look=1).highs] == [1, 3, 5]
    assert detect_swings(from_highs(highs), look=2).highs == ()


def test_down_series_swings(down_trend_htf):
    swings = detect_swings(down_trend_htf, look=2)

    assert [(p.index, p.price) for p in swings.highs] == [(4, 110), (12, 100)]
    assert [(p.index, p.price) for p in swings.lows] == [(8, 95), (16, 90)]
    assert len(down_trend_htf) == len(DOWN_HIGHS)


def test_invalid_look_raises():
    with pytest.raises(ValueError):
        detect_swings(from_highs([1, 2, 3]), look=0)
