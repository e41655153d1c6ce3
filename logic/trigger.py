"""
Two-stage sweep/confirm trigger.

Stage is inferred from the current lower-timeframe window on every call.
Nothing is remembered between calls, so a SETUP_WATCH on one poll and the
next may refer to different sweeps once price has moved.

All comparisons go through a polarity s (+1 long, -1 short): a value is
"past" a level when s * (value - level) > 0.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from core.helpers import trail
from core.helpers.trail import fmt_price
from core.logging_utils import get_logger
from core.models import Candle, TrendState, TriggerOutcome, TriggerStage

logger = get_logger(__name__)


@dataclass(frozen=True)
class _SideLabels:
    sweep_side: str    # Candle extreme that sweeps the reclaim level
    past: str          # Comparison symbol for "past the level"
    not_past: str      # Comparison symbol for invalidation
    candle: str        # Candle colour that confirms
    protected: str     # Which swing extreme is protected


_LABELS = {
    1: _SideLabels(sweep_side="high", past=">", not_past="<=", candle="green", protected="low"),
    -1: _SideLabels(sweep_side="low", past="<", not_past=">=", candle="red", protected="high"),
}


def _past(s: int, value: float, level: float) -> bool:
    return s * (value - level) > 0


class TriggerEngine:
    """Decides whether a pullback-and-reclaim continuation is actionable now."""

    def __init__(self, pullback_window: int = 24, trigger_buffer_fraction: float = 0.05, timeframe: str = "5m"):
        if pullback_window < 1:
            raise ValueError("pullback_window must be >= 1")
        self.pullback_window = pullback_window
        self.trigger_buffer_fraction = trigger_buffer_fraction
        self.timeframe = timeframe

    def evaluate(
        self,
        trend: TrendState,
        ltf_candles: Sequence[Candle],
        htf_atr: Optional[float],
    ) -> TriggerOutcome:
        s = trend.direction.polarity
        if s == 0 or trend.protected_level is None or trend.reclaim_level is None:
            return TriggerOutcome(TriggerStage.NONE, "No trend bias to trigger on.",
                                  why=(trail.fail("No directional structure"),))
        if not ltf_candles:
            return TriggerOutcome(TriggerStage.NONE, f"No {self.timeframe} candles.",
                                  why=(trail.fail(f"{self.timeframe} data missing"),))
        if htf_atr is None or not math.isfinite(htf_atr) or htf_atr < 0:
            return TriggerOutcome(TriggerStage.NONE, "ATR unavailable for trigger buffer.",
                                  why=(trail.fail("Trigger buffer needs a finite ATR"),))

        tf = self.timeframe
        labels = _LABELS[s]
        protected = trend.protected_level
        reclaim = trend.reclaim_level
        recent = ltf_candles[-self.pullback_window:]
        last = ltf_candles[-1]

        if s > 0:
            extreme = min(c.low for c in recent)
        else:
            extreme = max(c.high for c in recent)

        context = (
            trail.ok(f"{tf} data loaded"),
            trail.ok(f"Protected {labels.protected}: {fmt_price(protected)}"),
            trail.ok(f"Reclaim: {fmt_price(reclaim)}"),
        )

        # Pullback must stay on the trade side of the protected level
        if not _past(s, extreme, protected):
            logger.debug("[TRIGGER] pullback %s %s protected %s", extreme, labels.not_past, protected)
            return TriggerOutcome(
                TriggerStage.INVALIDATED,
                f"Pullback invalid: broke protected {labels.protected} ({fmt_price(protected)}).",
                why=(trail.fail(
                    f"Pullback {labels.protected} {fmt_price(extreme)} {labels.not_past} "
                    f"protected {labels.protected} {fmt_price(protected)}"
                ),),
                pullback_extreme=extreme,
            )

        buffer = htf_atr * self.trigger_buffer_fraction
        threshold = reclaim + s * buffer
        wick = last.high if s > 0 else last.low

        swept = _past(s, wick, reclaim)                       # Stage A
        close_confirm = _past(s, last.close, threshold)       # Stage B (a)
        candle_confirm = last.is_green if s > 0 else last.is_red  # Stage B (b)
        numbers = dict(pullback_extreme=extreme, trigger_buffer=buffer,
                       confirm_threshold=threshold, last_close=last.close)
        need = f"close {labels.past} {fmt_price(threshold)} AND {labels.candle} candle"

        if close_confirm and candle_confirm:
            return TriggerOutcome(
                TriggerStage.CONFIRMED,
                f"Trigger confirmed: {tf} close {fmt_price(last.close)} {labels.past} {fmt_price(threshold)}.",
                why=context + (trail.ok(f"Stage B confirm: {need}"),),
                **numbers,
            )

        if swept:
            return TriggerOutcome(
                TriggerStage.SWEPT,
                f"Reclaim swept intrabar ({tf} {labels.sweep_side} {fmt_price(wick)} {labels.past} "
                f"{fmt_price(reclaim)}). Waiting for close confirm.",
                why=context + (
                    trail.ok(f"Stage A: sweep ({labels.sweep_side} {fmt_price(wick)} {labels.past} "
                             f"reclaim {fmt_price(reclaim)})"),
                    trail.wait(f"Stage B: {need}"),
                ),
                **numbers,
            )

        return TriggerOutcome(
            TriggerStage.NONE,
            f"Waiting: {tf} close {labels.past} {fmt_price(threshold)} and {labels.candle} candle. "
            f"(close {fmt_price(last.close)})",
            why=context + (trail.wait(f"Need: {need}"),),
            **numbers,
        )
