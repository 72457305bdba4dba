"""Tests for pricepath.data_sources.market_data -- yfinance primary, TwelveData fallback."""

from unittest.mock import MagicMock, patch

import numpy as np
import pandas as pd
import pytest

from pricepath.config import Keys
from pricepath.data_sources.market_data import MarketDataClient, bars_from_frame
from pricepath.errors import DataSourceError
from pricepath.utils.cache import DataCache


def _ohlcv(n=30, start_price=100.0):
    dates = pd.bdate_range(end=pd.Timestamp.today().normalize(), periods=n)
    close = start_price + np.arange(n, dtype=float)
    return pd.DataFrame(
        {
            "Open": close - 0.5,
            "High": close + 1.0,
            "Low": close - 1.0,
            "Close": close,
            "Volume": np.full(n, 1_000_000.0),
            "Dividends": np.zeros(n),
        },
        index=dates,
    )


@pytest.fixture
def client(tmp_path):
    return MarketDataClient(cache=DataCache("price_historical", root=tmp_path))


class TestBarsFromFrame:

    def test_ascending_and_typed(self):
        df = _ohlcv(5).iloc[::-1]
        bars = bars_from_frame(df)
        assert [b.close for b in bars] == [100.0, 101.0, 102.0, 103.0, 104.0]
        assert bars[0].timestamp < bars[-1].timestamp
        assert bars[0].high == 101.0

    def test_drops_missing_close(self):
        df = _ohlcv(3)
        df.iloc[1, df.columns.get_loc("Close")] = np.nan
        assert len(bars_from_frame(df)) == 2

    def test_empty(self):
        assert bars_from_frame(pd.DataFrame()) == []


class TestHistoricalPrices:

    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_yfinance(self, mock_ticker, client):
        mock_ticker.return_value.history.return_value = _ohlcv(30)
        bars = client.get_historical_prices("AAPL", 45)
        assert len(bars) == 30
        assert bars[-1].close == 129.0
        mock_ticker.assert_called_once_with("AAPL")
        kwargs = mock_ticker.return_value.history.call_args.kwargs
        assert kwargs["interval"] == "1d"

    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_cached_second_call(self, mock_ticker, client):
        mock_ticker.return_value.history.return_value = _ohlcv(30)
        first = client.get_historical_prices("AAPL", 45)
        second = client.get_historical_prices("AAPL", 45)
        assert mock_ticker.return_value.history.call_count == 1
        assert [b.close for b in first] == [b.close for b in second]

    @patch("pricepath.data_sources.market_data.req_lib.get")
    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_twelvedata_fallback(self, mock_ticker, mock_get, client, monkeypatch):
        monkeypatch.setattr(Keys, "TWELVE_DATA", "test-key")
        mock_ticker.return_value.history.return_value = pd.DataFrame()
        mock_get.return_value.json.return_value = {
            "status": "ok",
            "values": [
                {"datetime": "2024-05-31", "open": "10", "high": "11", "low": "9",
                 "close": "10.5", "volume": "1000"},
                {"datetime": "2024-05-30", "open": "9", "high": "10", "low": "8",
                 "close": "9.5", "volume": "2000"},
            ],
        }
        bars = client.get_historical_prices("XYZ", 10)
        assert [b.close for b in bars] == [9.5, 10.5]
        assert mock_get.call_args.kwargs["params"]["symbol"] == "XYZ"

    @patch("pricepath.data_sources.market_data.req_lib.get")
    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_no_data_anywhere(self, mock_ticker, mock_get, client, monkeypatch):
        monkeypatch.setattr(Keys, "TWELVE_DATA", "")
        mock_ticker.return_value.history.side_effect = RuntimeError("429")
        with pytest.raises(DataSourceError, match="No historical data"):
            client.get_historical_prices("NOPE", 60)
        mock_get.assert_not_called()

    @patch("pricepath.data_sources.market_data.req_lib.get")
    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_twelvedata_error_status(self, mock_ticker, mock_get, client, monkeypatch):
        monkeypatch.setattr(Keys, "TWELVE_DATA", "test-key")
        mock_ticker.return_value.history.return_value = pd.DataFrame()
        mock_get.return_value.json.return_value = {"status": "error", "message": "bad symbol"}
        with pytest.raises(DataSourceError):
            client.get_historical_prices("NOPE", 60)


class TestQuotes:

    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_current_price(self, mock_ticker, client):
        mock_ticker.return_value.fast_info.last_price = 187.25
        assert client.get_current_price("AAPL") == 187.25

    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_current_price_missing(self, mock_ticker, client):
        mock_ticker.return_value.fast_info.last_price = None
        with pytest.raises(DataSourceError):
            client.get_current_price("AAPL")

    @patch("pricepath.data_sources.market_data.yf.Ticker")
    def test_latest_bar(self, mock_ticker, client):
        mock_ticker.return_value.history.return_value = _ohlcv(5)
        bar = client.get_latest_price("AAPL")
        assert bar.close == 104.0
