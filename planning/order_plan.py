"""Descriptive order plan for manual execution."""

from core.models import Levels, OrderLeg, OrderPlan, Position, RunnerLeg

ADVISORY_NOTES = (
    "Set isolated margin for this symbol before entering.",
    "Confirm position mode (one-way) so reduce-only legs close this position.",
    "Stage A = sweep intrabar (watch). Stage B = close confirm (trade allowed).",
    "Use reduce-only for TP/SL if supported.",
    "Runner is manual trail.",
)


def build_order_plan(symbol: str, levels: Levels, position: Position) -> OrderPlan:
    """Map levels and position onto entry, stop, take-profit and runner legs."""
    entry_side = levels.direction.entry_side
    exit_side = levels.direction.exit_side
    partials = levels.partials

    return OrderPlan(
        symbol=symbol,
        quantity=position.quantity,
        notional=position.notional,
        entry=OrderLeg("ENTRY", entry_side, "MARKET_ON_TRIGGER", levels.entry),
        stop_loss=OrderLeg("SL", exit_side, "STOP_MARKET", levels.stop, reduce_only=True),
        take_profits=(
            OrderLeg("TP1", exit_side, "LIMIT", levels.tp1, qty_pct=partials.tp1_pct, reduce_only=True),
            OrderLeg("TP2", exit_side, "LIMIT", levels.tp2, qty_pct=partials.tp2_pct, reduce_only=True),
        ),
        runner=RunnerLeg(qty_pct=partials.runner_pct),
        notes=ADVISORY_NOTES,
    )
