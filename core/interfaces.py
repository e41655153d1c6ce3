"""Collaborator interfaces consumed by the signal pipeline."""

from typing import FrozenSet, List, Protocol

from core.models import Candle


class ICandleSource(Protocol):
    """Ordered OHLC history for a symbol/interval.

    Raises FetchError on transport failure, non-success status, or a
    malformed or too-short payload.
    """

    async def fetch_candles(self, symbol: str, interval: str, limit: int) -> List[Candle]:
        ...


class ISymbolAllowlist(Protocol):
    """Tradable symbols, consulted once before evaluation."""

    def symbols(self) -> FrozenSet[str]:
        ...
