"""
Dashboard module - terminal rendering of trade cards.

Read-only views built with Rich; nothing here feeds back into evaluation.
"""

from dashboard.panels import render_trade_card, render_universe

__all__ = ["render_trade_card", "render_universe"]
