"""Typed data models for the engine."""

from core.models.candle import Candle
from core.models.signal import EvaluationResult, SignalState, TriggerOutcome, TriggerStage
from core.models.structure import SwingKind, SwingPoint, SwingSet, TrendDirection, TrendState
from core.models.trade import (
    Levels,
    OrderLeg,
    OrderPlan,
    OrderSide,
    Partials,
    Position,
    RunnerLeg,
    TradeDirection,
)

__all__ = [
    "Candle",
    "EvaluationResult",
    "Levels",
    "OrderLeg",
    "OrderPlan",
    "OrderSide",
    "Partials",
    "Position",
    "RunnerLeg",
    "SignalState",
    "SwingKind",
    "SwingPoint",
    "SwingSet",
    "TradeDirection",
    "TrendDirection",
    "TrendState",
    "TriggerOutcome",
    "TriggerStage",
]
