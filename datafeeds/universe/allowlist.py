"""
Symbol allowlist (admission check before evaluation).

The static allowlist is the ranked configured universe. The exchange-backed
allowlist narrows it to symbols the venue currently lists as trading
perpetuals, refreshed through an injected TTLCache. When the venue cannot
be reached, the last cached listing is used, then the static universe, so
an allowlist failure never blocks evaluation.
"""

import asyncio
from typing import Callable, FrozenSet, Iterable, List, Optional

from core.cache import TTLCache
from core.errors import FetchError
from core.logging_utils import get_logger

logger = get_logger(__name__)

_LISTING_KEY = "perpetual_listing"


class StaticAllowlist:
    """Fixed, ranked universe."""

    def __init__(self, symbols: Iterable[str]):
        ranked: List[str] = []
        for sym in symbols:
            sym = sym.strip().upper()
            if sym and sym not in ranked:
                ranked.append(sym)
        self._ranked = tuple(ranked)
        self._set = frozenset(ranked)

    def symbols(self) -> FrozenSet[str]:
        return self._set

    def ranked(self) -> List[str]:
        return list(self._ranked)


class ExchangeAllowlist:
    """Configured universe intersected with the venue's live listing."""

    def __init__(
        self,
        universe: StaticAllowlist,
        loader: Callable[[], FrozenSet[str]],
        cache: TTLCache,
    ):
        self.universe = universe
        self.loader = loader
        self.cache = cache

    def _listing(self) -> Optional[FrozenSet[str]]:
        try:
            return self.cache.get_or_refresh(_LISTING_KEY, self.loader)
        except Exception as e:
            logger.warning("[UNIVERSE] listing unavailable, using static universe: %s", e)
            return None

    def ranked(self) -> List[str]:
        listing = self._listing()
        if listing is None:
            return self.universe.ranked()
        return [s for s in self.universe.ranked() if s in listing]

    def symbols(self) -> FrozenSet[str]:
        return frozenset(self.ranked())


def list_universe(allowlist) -> List[dict]:
    """Ranked universe as [{"symbol", "rank"}]."""
    return [{"symbol": sym, "rank": i + 1} for i, sym in enumerate(allowlist.ranked())]


def build_allowlist(config, cache: Optional[TTLCache] = None):
    """Allowlist for the configured universe source."""
    universe = StaticAllowlist(config.allowed_symbols)
    if config.universe_source != "exchange":
        return universe

    from datafeeds.binance_fetcher import BinanceFuturesClient

    async def _load() -> FrozenSet[str]:
        async with BinanceFuturesClient.from_config(config) as client:
            return await client.fetch_perpetual_symbols()

    def loader() -> FrozenSet[str]:
        listing = asyncio.run(_load())
        if not listing:
            raise FetchError("venue returned an empty perpetual listing")
        logger.info("[UNIVERSE] refreshed listing: %d perpetuals", len(listing))
        return listing

    return ExchangeAllowlist(universe, loader, cache or TTLCache(config.universe_ttl_seconds))
