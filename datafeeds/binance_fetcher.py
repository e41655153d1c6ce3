"""Binance USD-M futures public kline fetcher.

Read-only market data; no keys, no order endpoints.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, FrozenSet, List, Optional

import httpx

from core.config import backoff_delay
from core.errors import FetchError
from core.helpers import validate_candles
from core.logging_utils import get_logger
from core.models import Candle

logger = get_logger(__name__)

KLINES_PATH = "/fapi/v1/klines"
EXCHANGE_INFO_PATH = "/fapi/v1/exchangeInfo"
_MAX_LIMIT = 1500
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def parse_kline_row(row: Any) -> Candle:
    """[openTime, open, high, low, close, volume, ...] -> Candle."""
    if not isinstance(row, (list, tuple)) or len(row) < 5:
        raise FetchError(f"malformed kline row: {row!r}")
    try:
        ts = datetime.fromtimestamp(int(row[0]) / 1000, tz=timezone.utc)
        volume = float(row[5]) if len(row) > 5 else 0.0
        return Candle(
            timestamp=ts,
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=volume,
        )
    except (TypeError, ValueError, OverflowError) as e:
        raise FetchError(f"malformed kline row: {row!r} ({e})") from e


class BinanceFuturesClient:
    """Async candle source backed by the public futures REST API."""

    def __init__(
        self,
        base_url: str = "https://fapi.binance.com",
        timeout: float = 10.0,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        min_candles: int = 1,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.min_candles = max(1, min_candles)
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config) -> "BinanceFuturesClient":
        return cls(
            base_url=config.binance_fapi_url,
            timeout=config.fetch_timeout_seconds,
            max_retries=config.fetch_max_retries,
            backoff_base=config.fetch_backoff_seconds,
            min_candles=config.atr_length + 2,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self):
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "BinanceFuturesClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        client = await self._get_client()
        url = f"{self.base_url}{path}"
        last_error: Optional[FetchError] = None

        for attempt in range(self.max_retries + 1):
            try:
                resp = await client.get(url, params=params)
            except httpx.HTTPError as e:
                last_error = FetchError(f"Binance transport error: {e}", retryable=True)
            else:
                if resp.status_code == 200:
                    try:
                        return resp.json()
                    except ValueError as e:
                        raise FetchError(f"Binance returned invalid JSON: {e}") from e
                last_error = FetchError(
                    f"Binance HTTP {resp.status_code}",
                    status_code=resp.status_code,
                    retryable=resp.status_code in _RETRYABLE_STATUS,
                )

            if not last_error.retryable or attempt >= self.max_retries:
                break
            delay = backoff_delay(attempt, self.backoff_base)
            logger.info("[FETCH] %s attempt %d/%d failed: %s; retry in %.1fs",
                        path, attempt + 1, self.max_retries + 1, last_error, delay)
            await asyncio.sleep(delay)

        logger.warning("[FETCH] %s failed: %s", path, last_error)
        raise last_error

    async def fetch_candles(self, symbol: str, interval: str, limit: int) -> List[Candle]:
        """Oldest-to-newest candles. The last one may still be forming."""
        limit = max(1, min(int(limit), _MAX_LIMIT))
        data = await self._get_json(KLINES_PATH, {"symbol": symbol, "interval": interval, "limit": limit})
        if not isinstance(data, list):
            raise FetchError(f"Unexpected kline payload for {symbol} {interval}: {type(data).__name__}")

        candles = validate_candles(parse_kline_row(row) for row in data)
        if not candles:
            raise FetchError(f"Empty candle data for {symbol} {interval}")
        if len(candles) < self.min_candles:
            raise FetchError(
                f"Too few candles for {symbol} {interval}: {len(candles)} < {self.min_candles}"
            )
        logger.debug("[FETCH] %s %s: %d candles", symbol, interval, len(candles))
        return candles

    async def fetch_perpetual_symbols(self, quote_asset: str = "USDT") -> FrozenSet[str]:
        """Currently trading linear perpetual symbols for quote_asset."""
        data = await self._get_json(EXCHANGE_INFO_PATH)
        rows = data.get("symbols") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise FetchError("Unexpected exchangeInfo payload")
        return frozenset(
            str(row.get("symbol", "")).upper()
            for row in rows
            if isinstance(row, dict)
            and row.get("contractType") == "PERPETUAL"
            and row.get("quoteAsset") == quote_asset
            and row.get("status") == "TRADING"
        )
