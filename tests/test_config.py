"""Tests for settings and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from core.config import MAX_BACKOFF_SECONDS, TOP50_LINEAR_PERPS, Settings, backoff_delay
from core.logging_utils import get_logger, setup_logging


def test_defaults():
    cfg = Settings()

    assert cfg.htf_interval == "15m"
    assert cfg.ltf_interval == "5m"
    assert cfg.risk_fraction == 0.015
    assert cfg.min_atr_pct == 0.0009
    assert cfg.allowed_symbols[:3] == ["BTCUSDT", "ETHUSDT", "SOLUSDT"]
    assert len(Settings(GUARDIAN_ALLOWLIST=TOP50_LINEAR_PERPS).allowed_symbols) == 50


def test_env_aliases(monkeypatch):
    monkeypatch.setenv("GUARDIAN_RISK_FRACTION", "0.02")
    monkeypatch.setenv("GUARDIAN_EQUITY", "1000")
    monkeypatch.setenv("GUARDIAN_ALLOWLIST", "btcusdt, ethusdt ,,")

    cfg = Settings()

    assert cfg.risk_fraction == 0.02
    assert cfg.default_equity == 1000.0
    assert cfg.allowed_symbols == ["BTCUSDT", "ETHUSDT"]


def test_qty_step_lookup():
    cfg = Settings(qty_steps={"ethusdt": 0.01}, default_qty_step=1.0)

    assert cfg.qty_step("ETHUSDT") == 0.01
    assert cfg.qty_step("ethusdt") == 0.01
    assert cfg.qty_step("XRPUSDT") == 1.0


def test_rejects_non_positive_qty_step():
    with pytest.raises(ValidationError):
        Settings(qty_steps={"BTCUSDT": 0.0})


def test_partials_must_sum_to_one():
    with pytest.raises(ValidationError):
        Settings(tp1_pct=0.5, tp2_pct=0.5, runner_pct=0.5)


@pytest.mark.parametrize("field,value", [("risk_fraction", 0.0), ("risk_fraction", 1.5), ("swing_look", 0)])
def test_rejects_out_of_range_values(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_unknown_universe_source_rejected():
    with pytest.raises(ValidationError):
        Settings(universe_source="random")


def test_evaluation_timeout_covers_worst_case_fetch():
    cfg = Settings()

    # 3 attempts x 10s + backoff sleeps 0.5s and 1.0s
    assert cfg.fetch_budget_seconds == pytest.approx(31.5)
    assert cfg.evaluation_timeout_seconds == pytest.approx(32.5)
    assert Settings(fetch_max_retries=0).evaluation_timeout_seconds == pytest.approx(11.0)
    assert Settings(evaluation_timeout_seconds=5.0).evaluation_timeout_seconds == 5.0


def test_backoff_delay_is_capped():
    assert [backoff_delay(a, 0.5) for a in range(3)] == [0.5, 1.0, 2.0]
    assert backoff_delay(10, 0.5) == MAX_BACKOFF_SECONDS


def test_setup_logging_relevels_shared_handler():
    root = setup_logging("DEBUG")
    assert root.level == logging.DEBUG
    handlers = [h for h in root.handlers if h.name == "guardian-root-handler"]
    assert len(handlers) == 1

    setup_logging("WARNING")
    assert handlers[0].level == logging.WARNING
    assert len([h for h in root.handlers if h.name == "guardian-root-handler"]) == 1
    assert get_logger("guardian.test").name == "guardian.test"
    setup_logging("INFO")


def test_http_libraries_stay_quiet_unless_debugging():
    setup_logging("INFO")
    assert logging.getLogger("httpx").level == logging.WARNING

    setup_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.DEBUG
    setup_logging("INFO")


def test_env_log_level(monkeypatch):
    from core.logging_utils import _resolve_level

    monkeypatch.setenv("GUARDIAN_LOG_LEVEL", "error")
    assert _resolve_level(None) == logging.ERROR
    assert _resolve_level("nonsense") == logging.INFO
