"""Tests for model invariants."""

import math

import pytest

from core.models import Candle, EvaluationResult, Levels, SignalState, TradeDirection
from core.helpers import is_finite_positive
from tests.candles import BASE_TS


def test_candle_rejects_inconsistent_prices():
    with pytest.raises(ValueError):
        Candle(BASE_TS, open=10.0, high=9.0, low=8.0, close=9.5)
    with pytest.raises(ValueError):
        Candle(BASE_TS, open=10.0, high=11.0, low=10.5, close=10.8)
    with pytest.raises(ValueError):
        Candle(BASE_TS, open=math.nan, high=11.0, low=9.0, close=10.0)


def test_candle_colour_is_strict():
    assert Candle(BASE_TS, 10.0, 11.0, 9.0, 10.5).is_green
    assert Candle(BASE_TS, 10.0, 11.0, 9.0, 9.5).is_red
    doji = Candle(BASE_TS, 10.0, 11.0, 9.0, 10.0)
    assert not doji.is_green and not doji.is_red


def test_direction_sides():
    assert TradeDirection.LONG.polarity == 1
    assert TradeDirection.SHORT.entry_side.value == "SELL"
    assert TradeDirection.SHORT.exit_side.value == "BUY"


def test_levels_reject_zero_risk():
    with pytest.raises(ValueError):
        Levels(TradeDirection.SHORT, entry=90.0, stop=90.0, tp1=85.0, tp2=80.0)


def test_non_trade_result_cannot_carry_levels():
    levels = Levels(TradeDirection.SHORT, entry=90.0, stop=100.0, tp1=85.0, tp2=80.0)
    with pytest.raises(ValueError):
        EvaluationResult("BTCUSDT", SignalState.SETUP_WATCH, "x", 200.0, 0.015, levels=levels)
    with pytest.raises(ValueError):
        EvaluationResult("BTCUSDT", SignalState.TRADE_AVAILABLE, "x", 200.0, 0.015)


@pytest.mark.parametrize("value,expected", [(1, True), (0.5, True), (0, False), (-1, False),
                                            (math.inf, False), (math.nan, False), (True, False), ("x", False)])
def test_is_finite_positive(value, expected):
    assert is_finite_positive(value) is expected


def test_candle_range_and_body():
    candle = Candle(BASE_TS, open=10.5, high=12.0, low=9.0, close=10.0)

    assert candle.range == 3.0
    assert candle.body == 0.5
    assert Candle(BASE_TS, 10.0, 10.0, 10.0, 10.0).range == 0.0
