"""Market data client - daily OHLCV history and quotes.

Primary: yfinance | Fallback: TwelveData REST API
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pandas as pd
import requests as req_lib
import yfinance as yf

from pricepath.config import Keys
from pricepath.data_sources.base import PriceSource
from pricepath.errors import DataSourceError
from pricepath.models import PriceBar
from pricepath.utils.cache import DataCache
from pricepath.utils.logger import setup_logger

logger = setup_logger("market_data")

TWELVE_DATA_URL = "https://api.twelvedata.com/time_series"
_OHLCV = ["Open", "High", "Low", "Close", "Volume"]


def _fetch_twelvedata_history(ticker: str, start: datetime, end: datetime) -> pd.DataFrame:
    """Fetch daily OHLCV from TwelveData (fallback when yfinance is rate-limited).

    TwelveData free tier: 800 calls/day, 8 calls/min.
    Returns DataFrame with yfinance-compatible column names (Open, High, Low, Close, Volume).
    """
    api_key = Keys.TWELVE_DATA
    if not api_key:
        logger.debug("No TwelveData API key, skipping fallback")
        return pd.DataFrame()

    try:
        logger.info("TwelveData fallback: %s (%s -> %s)", ticker, start.date(), end.date())
        resp = req_lib.get(
            TWELVE_DATA_URL,
            params={
                "symbol": ticker,
                "interval": "1day",
                "start_date": start.strftime("%Y-%m-%d"),
                "end_date": end.strftime("%Y-%m-%d"),
                "apikey": api_key,
                "format": "JSON",
            },
            timeout=30,
        )
        data = resp.json()

        if data.get("status") == "error":
            logger.warning("TwelveData error for %s: %s", ticker, data.get("message", "unknown"))
            return pd.DataFrame()

        values = data.get("values", [])
        if not values:
            return pd.DataFrame()

        df = pd.DataFrame(values)
        df["datetime"] = pd.to_datetime(df["datetime"])
        df = df.set_index("datetime").sort_index()
        df = df.rename(columns={
            "open": "Open", "high": "High", "low": "Low",
            "close": "Close", "volume": "Volume",
        })
        for col in ["Open", "High", "Low", "Close"]:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors="coerce")
        if "Volume" in df.columns:
            df["Volume"] = pd.to_numeric(df["Volume"], errors="coerce").fillna(0).astype(int)

        logger.info("TwelveData: got %d rows for %s", len(df), ticker)
        return df

    except (req_lib.RequestException, ValueError) as e:
        logger.warning("TwelveData fetch failed for %s: %s", ticker, e)
        return pd.DataFrame()


def bars_from_frame(df: pd.DataFrame) -> list[PriceBar]:
    """Convert an OHLCV DataFrame (DatetimeIndex) into ascending PriceBars."""
    if df.empty:
        return []
    df = df.sort_index()
    df = df.dropna(subset=["Close"])
    bars = []
    for ts, row in df.iterrows():
        close = float(row["Close"])
        bars.append(
            PriceBar(
                timestamp=pd.Timestamp(ts).to_pydatetime(),
                open=float(row.get("Open", close)),
                high=float(row.get("High", close)),
                low=float(row.get("Low", close)),
                close=close,
                volume=float(row.get("Volume", 0) or 0),
            )
        )
    return bars


class MarketDataClient(PriceSource):
    """Fetch historical and current market data."""

    def __init__(self, cache: DataCache | None = None):
        self.cache = cache if cache is not None else DataCache("price_historical")

    def get_price_history(self, ticker: str, days: int) -> pd.DataFrame:
        """Daily OHLCV for the last ``days`` calendar days.

        Tries yfinance first, falls back to TwelveData if yfinance returns
        empty data (usually due to Yahoo Finance rate limiting / 429 errors).
        """
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=days)
        cache_key = f"{ticker}_{days}_{end.strftime('%Y-%m-%d')}"
        cached = self.cache.get_df(cache_key)
        if cached is not None:
            logger.info("Cache hit: %s", cache_key)
            return cached

        logger.info("Fetching price history: %s (days=%d)", ticker, days)
        try:
            df = yf.Ticker(ticker).history(
                start=start.strftime("%Y-%m-%d"),
                end=(end + timedelta(days=1)).strftime("%Y-%m-%d"),
                interval="1d",
            )
        except Exception as e:
            logger.warning("yfinance history failed for %s: %s", ticker, e)
            df = pd.DataFrame()

        if df.empty:
            df = _fetch_twelvedata_history(ticker, start, end)

        if not df.empty:
            df = df[[c for c in _OHLCV if c in df.columns]]
            self.cache.set_df(cache_key, df)
        return df

    def get_historical_prices(self, ticker: str, days: int) -> list[PriceBar]:
        df = self.get_price_history(ticker, days)
        if df.empty:
            raise DataSourceError("market_data", f"No historical data available for ticker: {ticker}")
        return bars_from_frame(df)

    def get_current_price(self, ticker: str) -> float:
        """Latest traded price via yfinance fast_info."""
        try:
            price = yf.Ticker(ticker).fast_info.last_price
        except Exception as e:
            raise DataSourceError("market_data", f"Failed to fetch current price for {ticker}: {e}") from e
        if price is None:
            raise DataSourceError("market_data", f"No price data available for ticker: {ticker}")
        return float(price)

    def get_latest_price(self, ticker: str) -> PriceBar:
        bars = self.get_historical_prices(ticker, days=7)
        if not bars:
            raise DataSourceError("market_data", f"No price data available for ticker: {ticker}")
        return bars[-1]
