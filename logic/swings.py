"""
Swing (fractal) detection.

Candle i is a swing HIGH when its high is strictly above the highs of the
`look` candles on each side, and a swing LOW when its low is strictly below
their lows. Equal neighbours disqualify the candidate, so flat tops and
bottoms never produce a swing.
"""

from typing import Sequence

from core.models import Candle, SwingKind, SwingPoint, SwingSet


def detect_swings(candles: Sequence[Candle], look: int = 2) -> SwingSet:
    """Return swing highs and lows in chronological order.

    Fewer than ``2 * look + 1`` candles yields an empty SwingSet.
    """
    if look < 1:
        raise ValueError(f"look must be >= 1, got {look}")

    n = len(candles)
    if n < 2 * look + 1:
        return SwingSet()

    highs: list[SwingPoint] = []
    lows: list[SwingPoint] = []

    for i in range(look, n - look):
        candle = candles[i]
        is_high = True
        is_low = True
        for j in range(1, look + 1):
            left, right = candles[i - j], candles[i + j]
            if left.high >= candle.high or right.high >= candle.high:
                is_high = False
            if left.low <= candle.low or right.low <= candle.low:
                is_low = False
            if not is_high and not is_low:
                break

        if is_high:
            highs.append(SwingPoint(i, candle.high, candle.timestamp, SwingKind.HIGH))
        if is_low:
            lows.append(SwingPoint(i, candle.low, candle.timestamp, SwingKind.LOW))

    return SwingSet(highs=tuple(highs), lows=tuple(lows))
