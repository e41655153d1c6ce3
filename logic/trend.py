"""Trend classification from swing structure."""

from core.helpers import trail
from core.helpers.trail import fmt_price
from core.models import SwingSet, TrendDirection, TrendState


def classify_trend(swings: SwingSet, timeframe: str = "15m") -> TrendState:
    """
    Classify direction from the last two swing highs and lows.

    UP needs a higher high and a higher low, DOWN a lower high and a lower
    low, both strictly. Ties and mixed structure stay NONE.
    """
    if len(swings.highs) < 2 or len(swings.lows) < 2:
        return TrendState(
            timeframe=timeframe,
            why=(trail.fail("Not enough swings yet (need 2 highs + 2 lows)."),),
        )

    prev_high, last_high = swings.highs[-2].price, swings.highs[-1].price
    prev_low, last_low = swings.lows[-2].price, swings.lows[-1].price

    higher_high = last_high > prev_high
    higher_low = last_low > prev_low
    lower_high = last_high < prev_high
    lower_low = last_low < prev_low

    highs_move = f"{fmt_price(prev_high, 2)} → {fmt_price(last_high, 2)}"
    lows_move = f"{fmt_price(prev_low, 2)} → {fmt_price(last_low, 2)}"
    detected = trail.ok(f"{timeframe} swings detected")

    if higher_high and higher_low:
        return TrendState(
            direction=TrendDirection.UP,
            protected_level=last_low,
            reclaim_level=last_high,
            timeframe=timeframe,
            why=(detected, trail.ok(f"{timeframe} HH: {highs_move}"), trail.ok(f"{timeframe} HL: {lows_move}")),
        )

    if lower_high and lower_low:
        return TrendState(
            direction=TrendDirection.DOWN,
            protected_level=last_high,
            reclaim_level=last_low,
            timeframe=timeframe,
            why=(detected, trail.ok(f"{timeframe} LH: {highs_move}"), trail.ok(f"{timeframe} LL: {lows_move}")),
        )

    return TrendState(
        timeframe=timeframe,
        why=(
            detected,
            trail.fail(f"Structure not clean (no HH+HL or LH+LL): highs {highs_move}, lows {lows_move}."),
        ),
    )
