"""Trigger outcomes and the evaluation result card."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from core.models.structure import TrendDirection
from core.models.trade import Levels, OrderPlan, Position, _to_jsonable, maybe_dict


class TriggerStage(str, Enum):
    NONE = "NONE"                # Waiting for confirmation
    SWEPT = "SWEPT"              # Stage A only: intrabar sweep, not actionable
    CONFIRMED = "CONFIRMED"      # Stage B: close confirm + candle polarity
    INVALIDATED = "INVALIDATED"  # Pullback broke the protected level


class SignalState(str, Enum):
    NO_TRADE = "NO_TRADE"
    SETUP_WATCH = "SETUP_WATCH"
    TRADE_AVAILABLE = "TRADE_AVAILABLE"
    BLOCKED = "BLOCKED"


@dataclass(frozen=True)
class TriggerOutcome:
    """Stage inferred from the current lower-timeframe window."""
    stage: TriggerStage
    reason: str
    why: tuple[str, ...] = ()
    pullback_extreme: Optional[float] = None
    trigger_buffer: Optional[float] = None
    confirm_threshold: Optional[float] = None
    last_close: Optional[float] = None

    @property
    def is_actionable(self) -> bool:
        return self.stage is TriggerStage.CONFIRMED


@dataclass(frozen=True)
class EvaluationResult:
    """
    One evaluation of one symbol.

    levels, position and orders are either all set (TRADE_AVAILABLE) or all
    None. Any other combination is rejected at construction.
    """
    symbol: str
    state: SignalState
    reason: str
    equity: float
    risk_percent: float
    risk_mode: str = "BASE"
    trend_timeframe: str = "15m"
    trend_direction: TrendDirection = TrendDirection.NONE
    levels: Optional[Levels] = None
    position: Optional[Position] = None
    orders: Optional[OrderPlan] = None
    why: tuple[str, ...] = field(default_factory=tuple)
    gate: Optional[str] = None  # Gate that stopped evaluation, None on TRADE_AVAILABLE
    engine_version: str = ""
    as_of: Optional[datetime] = None

    def __post_init__(self):
        populated = [x is not None for x in (self.levels, self.position, self.orders)]
        if self.state is SignalState.TRADE_AVAILABLE:
            if not all(populated):
                raise ValueError("TRADE_AVAILABLE requires levels, position and orders")
        elif any(populated):
            raise ValueError(f"{self.state.value} must not carry levels, position or orders")

    @property
    def is_trade(self) -> bool:
        return self.state is SignalState.TRADE_AVAILABLE

    def to_dict(self) -> dict:
        return {
            "engineVersion": self.engine_version,
            "asOf": _to_jsonable(self.as_of),
            "symbol": self.symbol,
            "trend": {"timeframe": self.trend_timeframe, "direction": self.trend_direction.value},
            "risk": {"equity": self.equity, "mode": self.risk_mode, "riskPercent": self.risk_percent},
            "levels": maybe_dict(self.levels),
            "position": maybe_dict(self.position),
            "orders": maybe_dict(self.orders),
            "state": self.state.value,
            "reason": self.reason,
            "blockingGate": self.gate,
            "why": list(self.why),
        }
