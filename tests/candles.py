"""Candle builders shared by the tests."""

from datetime import datetime, timedelta, timezone

from core.models import Candle

BASE_TS = datetime(2024, 1, 1, tzinfo=timezone.utc)

# 15m highs with a lower high (110 -> 100) and lower low (95 -> 90).
# Lows sit 3 below highs, so swing highs and lows share indices.
DOWN_HIGHS = [103, 104, 105, 106, 110, 106, 104, 102, 98, 99,
              99, 99.5, 100, 99, 97, 95, 93, 95, 97, 96]


def bar(i, high, low, open_=None, close=None, minutes=15):
    """Candle i with open/close defaulting to inside the range."""
    if open_ is None:
        open_ = low + (high - low) / 3
    if close is None:
        close = low + 2 * (high - low) / 3
    return Candle(
        timestamp=BASE_TS + timedelta(minutes=minutes * i),
        open=float(open_),
        high=float(high),
        low=float(low),
        close=float(close),
        volume=1.0,
    )


def from_highs(highs, spread=3.0, minutes=15):
    return [bar(i, h, h - spread, minutes=minutes) for i, h in enumerate(highs)]
