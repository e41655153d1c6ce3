"""Engine configuration."""

from typing import Dict, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

ENGINE_VERSION = "FULL_STAGE_TRIGGER_V2"
MAX_BACKOFF_SECONDS = 30.0
# Slack on top of the fetch budget for parsing and evaluation
EVALUATION_SLACK_SECONDS = 1.0


def backoff_delay(attempt: int, base: float) -> float:
    """Sleep before retry number attempt + 1 (exponential, capped)."""
    return min(MAX_BACKOFF_SECONDS, base * (2 ** attempt))


# Top 50 linear perpetuals, rank order
TOP50_LINEAR_PERPS = (
    "BTCUSDT,ETHUSDT,SOLUSDT,XRPUSDT,BNBUSDT,"
    "ADAUSDT,DOGEUSDT,AVAXUSDT,LINKUSDT,TONUSDT,"
    "DOTUSDT,MATICUSDT,TRXUSDT,ATOMUSDT,LTCUSDT,"
    "BCHUSDT,ETCUSDT,UNIUSDT,APTUSDT,ARBUSDT,"
    "OPUSDT,INJUSDT,SUIUSDT,NEARUSDT,FILUSDT,"
    "IMXUSDT,TIAUSDT,SEIUSDT,RUNEUSDT,AAVEUSDT,"
    "GALAUSDT,PEPEUSDT,WIFUSDT,BONKUSDT,JUPUSDT,"
    "WLDUSDT,RNDRUSDT,FTMUSDT,XLMUSDT,EOSUSDT,"
    "KASUSDT,ICPUSDT,CRVUSDT,MKRUSDT,LDOUSDT,"
    "STXUSDT,THETAUSDT,FETUSDT,ENSUSDT,FLOWUSDT"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Data
    binance_fapi_url: str = Field(default="https://fapi.binance.com", alias="GUARDIAN_FAPI_URL")
    htf_interval: str = "15m"
    ltf_interval: str = "5m"
    htf_limit: int = Field(default=240, ge=20, le=1500)
    ltf_limit: int = Field(default=240, ge=20, le=1500)
    fetch_timeout_seconds: float = Field(default=10.0, gt=0, alias="GUARDIAN_FETCH_TIMEOUT")
    fetch_max_retries: int = Field(default=2, ge=0)
    fetch_backoff_seconds: float = Field(default=0.5, ge=0)
    evaluation_timeout_seconds: Optional[float] = Field(default=None, gt=0)  # None: fetch budget + slack

    # Structure
    swing_look: int = Field(default=2, ge=1)
    pullback_window: int = Field(default=24, ge=1)

    # Volatility gate
    atr_length: int = Field(default=14, ge=1)
    min_atr_pct: float = Field(default=0.0009, ge=0)  # 0.09%

    # Trigger / levels
    trigger_buffer_fraction: float = Field(default=0.05, ge=0)
    stop_buffer_fraction: float = Field(default=0.10, ge=0)
    tp1_r_multiple: float = 0.5
    tp2_r_multiple: float = 1.0
    tp1_pct: float = Field(default=0.3, ge=0, le=1)
    tp2_pct: float = Field(default=0.3, ge=0, le=1)
    runner_pct: float = Field(default=0.4, ge=0, le=1)

    # Risk
    risk_fraction: float = Field(default=0.015, gt=0, lt=1, alias="GUARDIAN_RISK_FRACTION")
    risk_mode: str = "BASE"
    default_equity: float = Field(default=200.0, gt=0, alias="GUARDIAN_EQUITY")
    qty_steps: Dict[str, float] = Field(
        default_factory=lambda: {"BTCUSDT": 0.001, "ETHUSDT": 0.01, "SOLUSDT": 0.1}
    )
    default_qty_step: float = Field(default=1.0, gt=0)

    # Universe
    allowlist: str = Field(default=TOP50_LINEAR_PERPS, alias="GUARDIAN_ALLOWLIST")
    universe_source: Literal["static", "exchange"] = Field(default="static", alias="GUARDIAN_UNIVERSE_SOURCE")
    universe_ttl_seconds: float = Field(default=300.0, gt=0)

    @field_validator("qty_steps")
    @classmethod
    def _positive_steps(cls, value: Dict[str, float]) -> Dict[str, float]:
        bad = [sym for sym, step in value.items() if not step > 0]
        if bad:
            raise ValueError(f"qty_steps must be positive: {', '.join(bad)}")
        return {sym.upper(): float(step) for sym, step in value.items()}

    @model_validator(mode="after")
    def _partials_sum_to_one(self) -> "Settings":
        total = self.tp1_pct + self.tp2_pct + self.runner_pct
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"tp1_pct + tp2_pct + runner_pct must equal 1.0 (got {total})")
        return self

    @model_validator(mode="after")
    def _derive_evaluation_timeout(self) -> "Settings":
        if self.evaluation_timeout_seconds is None:
            self.evaluation_timeout_seconds = self.fetch_budget_seconds + EVALUATION_SLACK_SECONDS
        return self

    @property
    def fetch_budget_seconds(self) -> float:
        """Worst case for one fetch: every attempt times out, plus the backoff sleeps."""
        attempts = self.fetch_max_retries + 1
        sleeps = sum(backoff_delay(a, self.fetch_backoff_seconds) for a in range(self.fetch_max_retries))
        return attempts * self.fetch_timeout_seconds + sleeps

    @property
    def allowed_symbols(self) -> list[str]:
        """Allowlist in rank order."""
        return [s.strip().upper() for s in self.allowlist.split(",") if s.strip()]

    def qty_step(self, symbol: str) -> float:
        return self.qty_steps.get(symbol.upper(), self.default_qty_step)


settings = Settings()
