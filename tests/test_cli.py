"""Tests for the trade card CLI and rich panels."""

import json

from rich.console import Console

import run
from core.config import Settings
from dashboard import render_trade_card, render_universe
from planning.signal_pipeline import SignalPipeline


def _render(renderable) -> str:
    console = Console(record=True, width=120)
    console.print(renderable)
    return console.export_text()


def test_trade_card_panel_shows_levels():
    result = SignalPipeline(Settings()).demo("BTCUSDT", 200.0)
    text = _render(render_trade_card(result))

    assert "BTCUSDT" in text
    assert "TRADE_AVAILABLE" in text
    assert "93600" in text
    assert "TP1" in text
    assert "isolated margin" in text


def test_blocked_card_has_no_levels():
    result = SignalPipeline(Settings()).demo("NOPEUSDT", 200.0)
    text = _render(render_trade_card(result))

    assert "BLOCKED" in text
    assert "Symbol not in allowlist" in text
    assert "TP1" not in text


def test_universe_panel():
    assert "ETHUSDT" in _render(render_universe([{"symbol": "ETHUSDT", "rank": 2}]))
    assert "Universe empty" in _render(render_universe([]))


def test_main_demo_json(capsys):
    assert run.main(["ethusdt", "--demo", "--json", "-e", "500"]) == 0
    data = json.loads(capsys.readouterr().out)

    assert data["symbol"] == "ETHUSDT"
    assert data["state"] == "TRADE_AVAILABLE"
    assert data["risk"]["equity"] == 500.0
    assert data["levels"]["entry"] == 93000.0


def test_main_universe_json(capsys, monkeypatch):
    monkeypatch.setattr(run, "settings", Settings(GUARDIAN_ALLOWLIST="BTCUSDT,ETHUSDT", GUARDIAN_UNIVERSE_SOURCE="static"))

    assert run.main(["--universe", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)

    assert data["source"] == "static"
    assert data["top"] == [{"symbol": "BTCUSDT", "rank": 1}, {"symbol": "ETHUSDT", "rank": 2}]


def test_main_analyze_uses_pipeline(capsys, monkeypatch):
    from core.models import EvaluationResult, SignalState

    async def fake_analyze(pipeline, symbol, equity):
        return EvaluationResult(symbol=symbol, state=SignalState.NO_TRADE, reason="stub", equity=200.0,
                                risk_percent=0.015)

    monkeypatch.setattr(run, "analyze", fake_analyze)
    assert run.main(["BTCUSDT", "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["reason"] == "stub"
