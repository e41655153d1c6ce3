"""Tests for ATR and the chop gate."""

import math

import pytest

from logic.volatility import VolatilityGate, average_true_range
from tests.candles import bar


def _steady(n=20, high=102.0, low=100.0):
    return [bar(i, high, low, open_=101.0, close=101.0) for i in range(n)]


def test_atr_of_constant_ranges():
    assert average_true_range(_steady(), length=14) == pytest.approx(2.0)


def test_atr_counts_gaps_against_previous_close():
    candles = _steady(16)
    # Gap up: previous close 101, range 2 but true range 110 - 101 = 9
    candles.append(bar(16, 110.0, 108.0, open_=109.0, close=109.0))
    expected = (13 * 2.0 + 9.0) / 14
    assert average_true_range(candles, length=14) == pytest.approx(expected)


def test_atr_needs_length_plus_two_candles():
    assert average_true_range(_steady(15), length=14) is None
    assert average_true_range(_steady(16), length=14) is not None
    assert average_true_range([], length=14) is None


def test_atr_rejects_bad_length():
    with pytest.raises(ValueError):
        average_true_range(_steady(), length=0)


def test_gate_passes_volatile_market():
    reading = VolatilityGate(14, 0.0009).check(_steady())

    assert reading.passed
    assert reading.atr_pct == pytest.approx(2.0 / 101.0)
    assert reading.reason == ""
    assert reading.why[0].startswith("✔ ATR%")


def test_gate_blocks_quiet_market(flat_htf):
    reading = VolatilityGate(14, 0.0009).check(flat_htf)

    assert not reading.passed
    assert reading.reason.startswith("Chop filter: ATR too low (")
    assert reading.atr is not None


def test_gate_threshold_equality_passes():
    candles = _steady()
    pct = VolatilityGate(14, 0.0).check(candles).atr_pct

    assert VolatilityGate(14, pct).check(candles).passed
    assert not VolatilityGate(14, math.nextafter(pct, math.inf)).check(candles).passed


def test_gate_fails_on_short_history():
    reading = VolatilityGate(14, 0.0009).check(_steady(5))

    assert not reading.passed
    assert reading.atr is None
    assert "not enough history" in reading.reason
