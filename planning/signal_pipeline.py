"""Signal pipeline: candles in, one trade card out.

Every path returns a complete EvaluationResult. Admission problems become
BLOCKED; fetch and computation problems become NO_TRADE. Nothing raises
past ``evaluate``/``analyze``.
"""

import asyncio
from typing import List, Optional, Sequence

import httpx

from core.config import ENGINE_VERSION, settings
from core.errors import FetchError
from core.helpers import GateReason, is_finite_positive, trail, validate_candles
from core.interfaces import ICandleSource, ISymbolAllowlist
from core.logging_utils import get_logger
from core.models import (
    Candle,
    EvaluationResult,
    Levels,
    Partials,
    SignalState,
    TradeDirection,
    TrendDirection,
    TriggerStage,
)
from datafeeds.universe import StaticAllowlist
from logic.swings import detect_swings
from logic.trend import classify_trend
from logic.trigger import TriggerEngine
from logic.volatility import VolatilityGate
from planning.levels import build_levels
from planning.order_plan import build_order_plan
from planning.sizing import PositionSizer

logger = get_logger(__name__)

_STAGE_STATE = {
    TriggerStage.NONE: (SignalState.NO_TRADE, GateReason.TRIGGER),
    TriggerStage.SWEPT: (SignalState.SETUP_WATCH, GateReason.TRIGGER),
    TriggerStage.INVALIDATED: (SignalState.NO_TRADE, GateReason.PULLBACK),
}


class SignalPipeline:
    """Swings -> trend -> volatility gate -> trigger -> levels -> size -> orders."""

    def __init__(
        self,
        config=None,
        candle_source: Optional[ICandleSource] = None,
        allowlist: Optional[ISymbolAllowlist] = None,
    ):
        self.config = config or settings
        self.candle_source = candle_source
        self.allowlist = allowlist or StaticAllowlist(self.config.allowed_symbols)
        self.volatility_gate = VolatilityGate(self.config.atr_length, self.config.min_atr_pct)
        self.trigger_engine = TriggerEngine(
            pullback_window=self.config.pullback_window,
            trigger_buffer_fraction=self.config.trigger_buffer_fraction,
            timeframe=self.config.ltf_interval,
        )
        self.sizer = PositionSizer.from_config(self.config)
        self.partials = Partials(self.config.tp1_pct, self.config.tp2_pct, self.config.runner_pct)

    def _card(
        self,
        symbol: str,
        equity: float,
        state: SignalState,
        reason: str,
        why: Sequence[str],
        gate: Optional[GateReason] = None,
        direction: TrendDirection = TrendDirection.NONE,
        as_of=None,
        **analytics,
    ) -> EvaluationResult:
        result = EvaluationResult(
            symbol=symbol,
            state=state,
            reason=reason,
            equity=equity,
            risk_percent=self.config.risk_fraction,
            risk_mode=self.config.risk_mode,
            trend_timeframe=self.config.htf_interval,
            trend_direction=direction,
            why=tuple(why),
            gate=gate.value if gate is not None else None,
            engine_version=ENGINE_VERSION,
            as_of=as_of,
            **analytics,
        )
        logger.info("[PIPELINE] %s %s: %s", symbol, state.value, reason)
        return result

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def _allowed_symbols(self) -> frozenset:
        try:
            return self.allowlist.symbols()
        except Exception as e:
            logger.warning("[PIPELINE] allowlist failed, using configured universe: %s", e, exc_info=True)
            return frozenset(self.config.allowed_symbols)

    def check_admission(self, symbol: str, equity: float, allowed: frozenset) -> Optional[EvaluationResult]:
        """BLOCKED card when the request cannot be evaluated, else None."""
        if symbol not in allowed:
            return self._card(
                symbol, equity, SignalState.BLOCKED,
                "Symbol not in allowlist (linear perps).",
                [trail.fail("Symbol not allowed in universe"), trail.ok(f"Universe size: {len(allowed)}")],
                gate=GateReason.ALLOWLIST,
            )
        return self._check_equity(symbol, equity)

    def _check_equity(self, symbol: str, equity: float) -> Optional[EvaluationResult]:
        if not is_finite_positive(equity):
            return self._card(
                symbol, equity, SignalState.BLOCKED,
                f"Equity must be a finite positive number (got {equity}).",
                [trail.fail("Equity rejected")],
                gate=GateReason.ADMISSION,
            )
        return None

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(
        self,
        symbol: str,
        equity: float,
        htf_candles: Sequence[Candle],
        ltf_candles: Sequence[Candle],
    ) -> EvaluationResult:
        """Pure evaluation of one candle snapshot. Same input, same result."""
        symbol = symbol.upper()
        blocked = self._check_equity(symbol, equity)
        if blocked is not None:
            return blocked
        try:
            return self._evaluate(symbol, equity, validate_candles(htf_candles), validate_candles(ltf_candles))
        except Exception as e:
            logger.exception("[PIPELINE] %s evaluation error", symbol)
            return self._card(
                symbol, equity, SignalState.NO_TRADE,
                f"Evaluation failed: {e}",
                [trail.fail("Internal evaluation error")],
                gate=GateReason.INTERNAL,
            )

    def _evaluate(self, symbol: str, equity: float, htf: List[Candle], ltf: List[Candle]) -> EvaluationResult:
        cfg = self.config
        as_of = ltf[-1].timestamp if ltf else None
        why: List[str] = []

        def stop(state: SignalState, reason: str, gate: GateReason,
                 direction: TrendDirection = TrendDirection.NONE) -> EvaluationResult:
            return self._card(symbol, equity, state, reason, why, gate=gate, direction=direction, as_of=as_of)

        if not htf or not ltf:
            why.append(trail.fail("Candle data missing"))
            return stop(SignalState.NO_TRADE, "Empty candle data.", GateReason.FETCH)
        why.append(trail.ok(f"Data loaded ({cfg.htf_interval}/{cfg.ltf_interval})"))

        swings = detect_swings(htf, cfg.swing_look)
        trend = classify_trend(swings, cfg.htf_interval)
        logger.debug("[PIPELINE] %s swings highs=%d lows=%d trend=%s",
                     symbol, len(swings.highs), len(swings.lows), trend.direction.value)

        volatility = self.volatility_gate.check(htf)
        why.extend(volatility.why)
        if not volatility.passed:
            return stop(SignalState.NO_TRADE, volatility.reason, GateReason.CHOP)

        why.extend(trend.why)
        if not trend.has_bias:
            return stop(SignalState.NO_TRADE,
                        f"{cfg.htf_interval} structure not clean enough (stand down).",
                        GateReason.STRUCTURE)

        outcome = self.trigger_engine.evaluate(trend, ltf, volatility.atr)
        why.extend(outcome.why)
        if outcome.stage is not TriggerStage.CONFIRMED:
            state, gate = _STAGE_STATE[outcome.stage]
            return stop(state, outcome.reason, gate, trend.direction)

        direction = TradeDirection.LONG if trend.direction is TrendDirection.UP else TradeDirection.SHORT
        levels = build_levels(
            direction,
            entry=trend.reclaim_level,
            protected_level=trend.protected_level,
            atr=volatility.atr,
            stop_buffer_fraction=cfg.stop_buffer_fraction,
            partials=self.partials,
            tp1_r=cfg.tp1_r_multiple,
            tp2_r=cfg.tp2_r_multiple,
        )
        if levels is None:
            why.append(trail.fail("No valid levels (R <= 0)"))
            return stop(SignalState.NO_TRADE, "Trigger confirmed but levels are invalid.",
                        GateReason.LEVELS, trend.direction)

        return self._trade_card(symbol, equity, levels, outcome.reason, why, trend.direction, as_of)

    def _trade_card(
        self,
        symbol: str,
        equity: float,
        levels: Levels,
        reason: str,
        why: List[str],
        direction: TrendDirection,
        as_of=None,
    ) -> EvaluationResult:
        position = self.sizer.calculate(symbol, equity, levels.entry, levels.stop)
        if position is None:
            why.append(trail.fail("Position sizing failed (stop distance)"))
            return self._card(symbol, equity, SignalState.NO_TRADE,
                              "Trigger confirmed but position cannot be sized.",
                              why, gate=GateReason.SIZING, direction=direction, as_of=as_of)

        why.append(trail.ok(f"Sized: qty {position.quantity:g} ({position.leverage_hint})"))
        if position.min_step_fallback:
            why.append(trail.note("Quantity raised to one step; risk slightly above target"))

        return self._card(
            symbol, equity, SignalState.TRADE_AVAILABLE, reason, why,
            direction=direction,
            as_of=as_of,
            levels=levels,
            position=position,
            orders=build_order_plan(symbol, levels, position),
        )

    # ------------------------------------------------------------------
    # Async entry point
    # ------------------------------------------------------------------

    async def _fetch_both(self, symbol: str) -> tuple:
        cfg = self.config
        results = await asyncio.gather(
            self.candle_source.fetch_candles(symbol, cfg.htf_interval, cfg.htf_limit),
            self.candle_source.fetch_candles(symbol, cfg.ltf_interval, cfg.ltf_limit),
            return_exceptions=True,
        )
        for res in results:
            if isinstance(res, BaseException):
                raise res
        return results[0], results[1]

    async def analyze(self, symbol: str, equity: Optional[float] = None) -> EvaluationResult:
        """Admission, concurrent HTF/LTF fetch, then evaluate. Fails closed."""
        symbol = symbol.upper()
        equity = self.config.default_equity if equity is None else equity

        allowed = await asyncio.to_thread(self._allowed_symbols)
        blocked = self.check_admission(symbol, equity, allowed)
        if blocked is not None:
            return blocked

        if self.candle_source is None:
            return self._card(symbol, equity, SignalState.NO_TRADE, "No candle source configured.",
                              [trail.fail("Candle source missing")], gate=GateReason.FETCH)

        timeout = self.config.evaluation_timeout_seconds
        try:
            htf, ltf = await asyncio.wait_for(self._fetch_both(symbol), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("[PIPELINE] %s candle fetch timed out after %.1fs", symbol, timeout)
            reason = f"Data fetch failed: timed out after {timeout:g}s"
        except (FetchError, httpx.HTTPError) as e:
            logger.warning("[PIPELINE] %s candle fetch failed: %s", symbol, e)
            reason = f"Data fetch failed: {e}"
        except Exception as e:
            logger.exception("[PIPELINE] %s unexpected fetch error", symbol)
            reason = f"Data fetch failed: {e}"
        else:
            return self.evaluate(symbol, equity, htf, ltf)

        return self._card(symbol, equity, SignalState.NO_TRADE, reason,
                          [trail.fail("Candle fetch failed")], gate=GateReason.FETCH)

    def demo(self, symbol: str, equity: Optional[float] = None) -> EvaluationResult:
        """Forced SHORT trade card for checking presentation without market data."""
        symbol = symbol.upper()
        equity = self.config.default_equity if equity is None else equity
        blocked = self.check_admission(symbol, equity, self._allowed_symbols())
        if blocked is not None:
            return blocked

        levels = Levels(
            direction=TradeDirection.SHORT,
            entry=93000.0,
            stop=93600.0,
            tp1=92700.0,
            tp2=92400.0,
            partials=self.partials,
        )
        why = [
            trail.ok("DEMO MODE enabled"),
            trail.ok("Returning forced TRADE_AVAILABLE (levels+position+orders)"),
            trail.note("Drop --demo for real mode"),
        ]
        return self._trade_card(symbol, equity, levels, "DEMO MODE: Forced levels for UI verification.",
                                why, TrendDirection.DOWN)
