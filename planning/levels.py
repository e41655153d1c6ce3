"""Entry, stop and target levels for a confirmed trigger."""

import math
from typing import Optional

from core.logging_utils import get_logger
from core.models import Levels, Partials, TradeDirection

logger = get_logger(__name__)


def build_levels(
    direction: TradeDirection,
    entry: float,
    protected_level: float,
    atr: float,
    stop_buffer_fraction: float = 0.10,
    partials: Optional[Partials] = None,
    tp1_r: float = 0.5,
    tp2_r: float = 1.0,
) -> Optional[Levels]:
    """
    Stop sits beyond the protected level by ATR * stop_buffer_fraction.
    Targets are fractions of R (entry-to-stop distance) in the trade direction.

    Returns None when R <= 0 or any level is non-finite.
    """
    s = direction.polarity
    stop = protected_level - s * atr * stop_buffer_fraction
    risk = s * (entry - stop)
    tp1 = entry + s * tp1_r * risk
    tp2 = entry + s * tp2_r * risk

    if not all(math.isfinite(v) for v in (entry, stop, risk, tp1, tp2)) or risk <= 0:
        logger.debug("[LEVELS] rejected %s entry=%s stop=%s R=%s", direction.value, entry, stop, risk)
        return None

    return Levels(
        direction=direction,
        entry=entry,
        stop=stop,
        tp1=tp1,
        tp2=tp2,
        partials=partials or Partials(),
    )
