"""Trade levels, position sizing and advisory order plan models."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Optional


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _to_jsonable(value: Any) -> Any:
    """JSON-safe copy of value; dict keys are published in camelCase."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {_camel(str(k)): _to_jsonable(v) for k, v in value.items()}
    return str(value)


class TradeDirection(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"

    @property
    def polarity(self) -> int:
        return 1 if self is TradeDirection.LONG else -1

    @property
    def entry_side(self) -> "OrderSide":
        return OrderSide.BUY if self is TradeDirection.LONG else OrderSide.SELL

    @property
    def exit_side(self) -> "OrderSide":
        return OrderSide.SELL if self is TradeDirection.LONG else OrderSide.BUY


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Partials:
    """Share of the position closed at each target; runner is the rest."""
    tp1_pct: float = 0.3
    tp2_pct: float = 0.3
    runner_pct: float = 0.4

    def __post_init__(self):
        total = self.tp1_pct + self.tp2_pct + self.runner_pct
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"partials must sum to 1.0, got {total}")


@dataclass(frozen=True)
class Levels:
    """Entry, stop and targets for a confirmed trigger."""
    direction: TradeDirection
    entry: float
    stop: float
    tp1: float
    tp2: float
    partials: Partials = field(default_factory=Partials)

    def __post_init__(self):
        if self.entry == self.stop:
            raise ValueError("entry and stop must differ")

    @property
    def risk_per_unit(self) -> float:
        """R: distance from entry to stop."""
        return abs(self.entry - self.stop)

    def to_dict(self) -> dict:
        return _to_jsonable(asdict(self))


@dataclass(frozen=True)
class Position:
    """Risk-bounded position size."""
    risk_amount: float
    stop_distance: float
    loss_fraction: float
    notional: float
    quantity: float
    qty_step: float
    leverage_hint: str
    min_step_fallback: bool = False  # Quantity forced up to one step; risk slightly exceeded

    def to_dict(self) -> dict:
        return _to_jsonable(asdict(self))


@dataclass(frozen=True)
class OrderLeg:
    """One descriptive order. Never sent anywhere."""
    name: str
    side: OrderSide
    order_type: str
    price: float
    qty_pct: float = 1.0
    reduce_only: bool = False


@dataclass(frozen=True)
class RunnerLeg:
    qty_pct: float
    plan: str = "Trail structure (next swings)"


@dataclass(frozen=True)
class OrderPlan:
    """Manual execution plan derived from levels and position."""
    symbol: str
    quantity: float
    notional: float
    entry: OrderLeg
    stop_loss: OrderLeg
    take_profits: tuple[OrderLeg, ...]
    runner: RunnerLeg
    notes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return _to_jsonable(asdict(self))


def maybe_dict(model: Optional[Any]) -> Optional[dict]:
    return model.to_dict() if model is not None else None
