"""Universe management for symbol admission."""

from datafeeds.universe.allowlist import (
    ExchangeAllowlist,
    StaticAllowlist,
    build_allowlist,
    list_universe,
)

__all__ = [
    "ExchangeAllowlist",
    "StaticAllowlist",
    "build_allowlist",
    "list_universe",
]
