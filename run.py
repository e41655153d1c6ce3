#!/usr/bin/env python3
"""
Guardian Futures Engine - trade card for one symbol.

Usage:
    python run.py                      # Analyze BTCUSDT with default equity
    python run.py ETCUSDT -e 200       # Analyze ETCUSDT for 200 USDT equity
    python run.py BTCUSDT --demo       # Forced trade card (no market data)
    python run.py --universe           # List the allowed universe
    python run.py SOLUSDT --json       # Machine-readable output

Advice only: no orders are ever sent.
"""

import argparse
import asyncio
import json
import sys

from rich.console import Console

from core.config import settings
from core.logging_utils import setup_logging
from dashboard import render_trade_card, render_universe
from datafeeds.binance_fetcher import BinanceFuturesClient
from datafeeds.universe import build_allowlist, list_universe
from planning.signal_pipeline import SignalPipeline

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='guardian',
        description='Guardian Futures Engine - stage-trigger trade cards',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py ETHUSDT -e 500        Analyze ETHUSDT for 500 USDT equity
  python run.py --universe --json     Universe as JSON
""",
    )
    parser.add_argument('symbol', nargs='?', default='BTCUSDT',
                        help='Linear perpetual symbol (default: BTCUSDT)')
    parser.add_argument('-e', '--equity', type=float, default=None,
                        help=f'Account equity in quote currency (default: {settings.default_equity:g})')
    parser.add_argument('--demo', action='store_true',
                        help='Return a forced TRADE_AVAILABLE card for UI checks')
    parser.add_argument('--universe', action='store_true',
                        help='List the allowed universe and exit')
    parser.add_argument('--json', action='store_true',
                        help='Print JSON instead of a panel')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Logging level (default: LOG_LEVEL env or INFO)')
    return parser


async def analyze(pipeline: SignalPipeline, symbol: str, equity):
    async with BinanceFuturesClient.from_config(settings) as client:
        pipeline.candle_source = client
        return await pipeline.analyze(symbol, equity)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    allowlist = build_allowlist(settings)

    if args.universe:
        rows = list_universe(allowlist)
        if args.json:
            print(json.dumps({"source": settings.universe_source, "top": rows}, indent=2))
        else:
            console.print(render_universe(rows))
        return 0

    pipeline = SignalPipeline(settings, allowlist=allowlist)
    if args.demo:
        result = pipeline.demo(args.symbol, args.equity)
    else:
        result = asyncio.run(analyze(pipeline, args.symbol, args.equity))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        console.print(render_trade_card(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
