"""ATR and the low-volatility (chop) gate."""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from core.helpers import trail
from core.models import Candle


def average_true_range(candles: Sequence[Candle], length: int = 14) -> Optional[float]:
    """Simple average of the last `length` true ranges.

    Needs at least ``length + 2`` candles, otherwise returns None.
    """
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")
    if candles is None or len(candles) < length + 2:
        return None

    window = candles[-(length + 1):]
    highs = np.array([c.high for c in window[1:]], dtype=float)
    lows = np.array([c.low for c in window[1:]], dtype=float)
    prev_closes = np.array([c.close for c in window[:-1]], dtype=float)

    true_ranges = np.maximum.reduce([
        highs - lows,
        np.abs(highs - prev_closes),
        np.abs(lows - prev_closes),
    ])
    atr = float(np.mean(true_ranges))
    return atr if math.isfinite(atr) else None


@dataclass(frozen=True)
class VolatilityReading:
    atr: Optional[float]
    atr_pct: Optional[float]
    passed: bool
    reason: str
    why: tuple[str, ...] = ()


class VolatilityGate:
    """Rejects markets too quiet for R-multiple targets.

    Passes when ATR / latest close >= min_atr_pct (equality passes).
    """

    def __init__(self, length: int = 14, min_atr_pct: float = 0.0009):
        self.length = length
        self.min_atr_pct = min_atr_pct

    def check(self, candles: Sequence[Candle]) -> VolatilityReading:
        threshold = f"{self.min_atr_pct * 100:.3f}%"
        atr = average_true_range(candles, self.length)
        if atr is None:
            return VolatilityReading(
                atr=None,
                atr_pct=None,
                passed=False,
                reason=f"Chop filter: not enough history for ATR({self.length}).",
                why=(trail.fail(f"ATR({self.length}) needs {self.length + 2} candles, have {len(candles or [])}"),),
            )

        last_close = candles[-1].close
        if last_close <= 0:
            return VolatilityReading(
                atr=atr,
                atr_pct=None,
                passed=False,
                reason="Chop filter: latest close is not positive.",
                why=(trail.fail(f"Latest close {last_close} <= 0"),),
            )

        atr_pct = atr / last_close
        shown = f"{atr_pct * 100:.3f}%"
        if atr_pct >= self.min_atr_pct:
            return VolatilityReading(
                atr=atr,
                atr_pct=atr_pct,
                passed=True,
                reason="",
                why=(trail.ok(f"ATR% {shown} >= {threshold}"),),
            )

        return VolatilityReading(
            atr=atr,
            atr_pct=atr_pct,
            passed=False,
            reason=f"Chop filter: ATR too low ({shown}).",
            why=(trail.fail(f"ATR% {shown} < {threshold}"),),
        )
