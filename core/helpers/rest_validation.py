"""Helpers to validate REST candle responses before evaluation."""

from datetime import datetime
from typing import Iterable, List

from core.models import Candle


def validate_candles(candles: Iterable[Candle]) -> List[Candle]:
    """Return a time-ordered list with duplicate timestamps dropped (last wins)."""
    by_ts: dict[datetime, Candle] = {}
    for candle in candles or []:
        if isinstance(candle, Candle) and isinstance(candle.timestamp, datetime):
            by_ts[candle.timestamp] = candle
    return [by_ts[ts] for ts in sorted(by_ts)]
