"""Market structure: swing points and trend state."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class SwingKind(str, Enum):
    HIGH = "HIGH"
    LOW = "LOW"


class TrendDirection(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    NONE = "NONE"

    @property
    def polarity(self) -> int:
        """+1 for UP (long), -1 for DOWN (short), 0 otherwise."""
        if self is TrendDirection.UP:
            return 1
        if self is TrendDirection.DOWN:
            return -1
        return 0


@dataclass(frozen=True)
class SwingPoint:
    """Confirmed fractal extreme."""
    index: int
    price: float
    timestamp: datetime
    kind: SwingKind


@dataclass(frozen=True)
class SwingSet:
    """Swing highs and lows, each in chronological order."""
    highs: tuple[SwingPoint, ...] = ()
    lows: tuple[SwingPoint, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.highs and not self.lows


@dataclass(frozen=True)
class TrendState:
    """
    Directional bias from the last two swing highs and lows.

    protected_level must hold during a pullback; reclaim_level is the price a
    lower-timeframe close has to cross. Both are None when direction is NONE.
    """
    direction: TrendDirection = TrendDirection.NONE
    protected_level: Optional[float] = None
    reclaim_level: Optional[float] = None
    timeframe: str = ""
    why: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_bias(self) -> bool:
        return self.direction is not TrendDirection.NONE
