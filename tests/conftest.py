import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tests.candles import DOWN_HIGHS, bar, from_highs  # noqa: E402


@pytest.fixture
def make_bar():
    return bar


@pytest.fixture
def down_trend_htf():
    """Swing highs 110, 100; swing lows 95, 90 -> DOWN, protected 100, reclaim 90."""
    return from_highs(DOWN_HIGHS)


@pytest.fixture
def up_trend_htf():
    """Mirror of the down series: swing lows 90, 100; swing highs 105, 110 -> UP."""
    return [bar(i, 203 - h, 200 - h) for i, h in enumerate(DOWN_HIGHS)]


@pytest.fixture
def flat_htf():
    """Tiny ranges, ATR far below the chop threshold."""
    return [bar(i, 100.01, 100.0) for i in range(30)]


@pytest.fixture
def ltf_window():
    """Build a 5m window: quiet candles between lo and hi, then (o, h, l, c) tail candles."""

    def _build(*tail, count=30, hi=95.0, lo=92.0):
        quiet = [bar(i, hi, lo, minutes=5) for i in range(count)]
        return quiet + [
            bar(count + j, h, l, open_=o, close=c, minutes=5)
            for j, (o, h, l, c) in enumerate(tail)
        ]

    return _build
