#!/usr/bin/env python3
"""pricepath: scenario price-path forecasts from price history and social sentiment.

Usage:
    python main.py simulate TSLA                          # 30 days forward, 60 days history
    python main.py simulate NVDA --days 90 --history 120
    python main.py simulate AAPL --seed 7 --json          # reproducible, JSON output
    python main.py simulate TSLA --mode real              # live yfinance / X / Grok
    python main.py sentiment GME                          # mention bias only
    python main.py quote MSFT                             # latest price bar
"""

import argparse
import json
import sys
from dataclasses import asdict
from datetime import datetime, timedelta, timezone

from pricepath.analysis.price_paths import (
    DEFAULT_DAYS_FORWARD,
    DEFAULT_HISTORICAL_DAYS,
    MAX_MENTIONS,
    MENTION_LOOKBACK_DAYS,
    PricePathSimulator,
    mention_query,
)
from pricepath.analysis.sentiment_bias import calculate_sentiment_bias, summarize_mentions
from pricepath.config import section
from pricepath.data_sources.factory import create_sources
from pricepath.errors import PricePathError
from pricepath.models import TweetSearchParams
from pricepath.utils.logger import setup_logger

logger = setup_logger("main", section("app").get("log_level", "INFO"))


def _print_result(result) -> None:
    sim = result.simulation
    print(f"\n{'='*60}")
    print(f"  {result.ticker}  current ${result.current_price:,.2f}")
    print(f"  drift {sim.drift:+.5f}/day   vol {sim.volatility:.5f}/day "
          f"({sim.annualized_volatility:.1%} ann.)")
    print(f"  sentiment bias {result.sentiment_bias:+.2f}   "
          f"adjustment {sim.sentiment_adjustment:+.4f}   mentions {len(result.tweets)}")
    print(f"{'='*60}")
    print(f"  {'scenario':10s} {'prob':>6s} {'conf':>6s} {'final':>12s} {'return':>9s} {'band':>23s}")
    for path in result.paths:
        last = path.price_points[-1]
        band = f"{last.low:,.2f} - {last.high:,.2f}"
        print(f"  {path.scenario:10s} {path.probability:6.2f} {path.confidence:6.2f} "
              f"{last.price:12,.2f} {path.expected_return:+8.2f}% {band:>23s}")
    sig = result.signal
    print(f"\n  signal: {sig.direction.upper()} ({sig.strength}), "
          f"timeframe {sig.timeframe}, tickers {', '.join(sig.tickers)}")


# ============================================================
# COMMANDS
# ============================================================

def cmd_simulate(args):
    """Run the three-scenario simulation."""
    sources = create_sources(args.mode)
    simulator = PricePathSimulator(sources.prices, sources.tweets, sources.classifier, seed=args.seed)
    result = simulator.simulate_price_paths(args.ticker, args.days, args.history)
    if args.json:
        print(json.dumps(result.to_dict(include_tweets=args.tweets), indent=2, default=str))
    else:
        _print_result(result)


def cmd_sentiment(args):
    """Fetch recent mentions and report the sentiment bias."""
    sources = create_sources(args.mode)
    ticker = args.ticker.upper()
    tweets = sources.tweets.search_tweets(
        TweetSearchParams(
            query=mention_query(ticker),
            max_results=MAX_MENTIONS,
            start_time=datetime.now(timezone.utc) - timedelta(days=MENTION_LOOKBACK_DAYS),
        )
    )
    summary = summarize_mentions(tweets)
    summary["ticker"] = ticker
    summary["sentiment_bias"] = round(calculate_sentiment_bias(tweets), 4)
    print(json.dumps(summary, indent=2))


def cmd_quote(args):
    """Latest daily bar."""
    sources = create_sources(args.mode)
    bar = sources.prices.get_latest_price(args.ticker.upper())
    print(json.dumps(asdict(bar), indent=2, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="pricepath: scenario price-path forecasts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--mode", choices=["mock", "real"], default=None,
                        help="Data sources (default: PRICEPATH_MODE or settings.yaml)")
    sub = parser.add_subparsers(dest="command", help="Commands")

    # simulate
    p = sub.add_parser("simulate", help="Simulate bullish / base / bearish paths")
    p.add_argument("ticker")
    p.add_argument("--days", type=int, default=DEFAULT_DAYS_FORWARD,
                   help=f"Days to simulate forward (default: {DEFAULT_DAYS_FORWARD})")
    p.add_argument("--history", type=int, default=DEFAULT_HISTORICAL_DAYS,
                   help=f"Days of price history (default: {DEFAULT_HISTORICAL_DAYS})")
    p.add_argument("--seed", type=int, default=section("simulation").get("seed"),
                   help="Random seed for reproducible paths")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.add_argument("--tweets", action="store_true", help="Include mentions in JSON output")
    p.set_defaults(func=cmd_simulate)

    # sentiment
    p = sub.add_parser("sentiment", help="Mention sentiment bias")
    p.add_argument("ticker")
    p.set_defaults(func=cmd_sentiment)

    # quote
    p = sub.add_parser("quote", help="Latest price bar")
    p.add_argument("ticker")
    p.set_defaults(func=cmd_quote)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)
    try:
        args.func(args)
    except (PricePathError, ValueError) as e:
        logger.error("%s failed: %s", args.command, e)
        sys.exit(1)


if __name__ == "__main__":
    main()
