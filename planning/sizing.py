"""Risk-based position sizing."""

import math
from decimal import Decimal, ROUND_FLOOR
from typing import Callable, Optional

from core.helpers import is_finite_positive
from core.logging_utils import get_logger
from core.models import Position

logger = get_logger(__name__)


def floor_to_step(value: float, step: float) -> float:
    """Largest multiple of step that is <= value (0.0 for non-positive input)."""
    if not math.isfinite(value) or value <= 0:
        return 0.0
    d_step = Decimal(str(step))
    units = (Decimal(str(value)) / d_step).to_integral_value(rounding=ROUND_FLOOR)
    return float(units * d_step)


def leverage_hint(notional: float, equity: float) -> str:
    ratio = notional / equity
    if ratio > 1:
        return f"{ratio:.2f}x (approx)"
    return "1x"


class PositionSizer:
    """
    Sizes a position so that a stop-out loses equity * risk_fraction.

    Quantity is floored to the instrument step. When flooring gives zero the
    size falls back to exactly one step, which can lose slightly more than
    intended; the returned Position flags this with min_step_fallback.
    """

    def __init__(self, risk_fraction: float, qty_step_for: Callable[[str], float]):
        if not 0 < risk_fraction < 1:
            raise ValueError(f"risk_fraction must be in (0, 1), got {risk_fraction}")
        self.risk_fraction = risk_fraction
        self.qty_step_for = qty_step_for

    @classmethod
    def from_config(cls, config) -> "PositionSizer":
        return cls(config.risk_fraction, config.qty_step)

    def calculate(self, symbol: str, equity: float, entry: float, stop: float) -> Optional[Position]:
        if not is_finite_positive(equity) or not is_finite_positive(entry):
            logger.debug("[SIZING] %s invalid equity=%s entry=%s", symbol, equity, entry)
            return None

        risk_amount = equity * self.risk_fraction
        stop_distance = abs(entry - stop)
        if not math.isfinite(stop_distance) or stop_distance <= 0:
            logger.debug("[SIZING] %s non-positive stop distance (entry=%s stop=%s)", symbol, entry, stop)
            return None

        loss_fraction = stop_distance / entry
        notional = risk_amount / loss_fraction
        raw_qty = notional / entry

        step = self.qty_step_for(symbol)
        quantity = floor_to_step(raw_qty, step)
        fallback = quantity <= 0
        if fallback:
            quantity = step
            logger.info(
                "[SIZING] %s raw qty %.8g below step %s; using one step (risk overshoot)",
                symbol, raw_qty, step,
            )

        return Position(
            risk_amount=risk_amount,
            stop_distance=stop_distance,
            loss_fraction=loss_fraction,
            notional=notional,
            quantity=quantity,
            qty_step=step,
            leverage_hint=leverage_hint(notional, equity),
            min_step_fallback=fallback,
        )
