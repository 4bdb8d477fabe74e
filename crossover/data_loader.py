# crossover/data_loader.py
import logging
from typing import Dict, Iterable

import pandas as pd
import yfinance as yf

from .models import PriceSeries

logger = logging.getLogger(__name__)


class MarketDataProvider:
    """Abstract base class for market data providers."""
    def get_price_series(self, ticker: str, start: str, end: str) -> PriceSeries:
        raise NotImplementedError

    def get_multiple_price_series(self, tickers: Iterable[str], start: str, end: str) -> Dict[str, PriceSeries]:
        return {t: self.get_price_series(t, start, end) for t in tickers}


class YahooDataProvider(MarketDataProvider):
    """Daily closes from Yahoo Finance. Missing closes are kept as NaN."""

    def get_price_series(self, ticker: str, start: str, end: str) -> PriceSeries:
        data = yf.download(
            ticker,
            start=start,
            end=end,
            auto_adjust=False,
            progress=False,
        )

        # yfinance can return an empty frame without raising
        if data is None or data.empty:
            logger.warning(f"No data returned for {ticker} between {start} and {end}")
            return PriceSeries(ticker=ticker, data=pd.DataFrame(columns=["price"], index=pd.DatetimeIndex([])))

        if "Close" not in data.columns.get_level_values(0):
            logger.warning(f"'Close' column missing for {ticker}")
            return PriceSeries(ticker=ticker, data=pd.DataFrame(columns=["price"], index=pd.DatetimeIndex([])))

        close = data["Close"]
        # recent yfinance versions key columns by (field, ticker) even for one ticker
        if isinstance(close, pd.DataFrame):
            close = close.iloc[:, 0]

        if getattr(close.index, "tz", None) is not None:
            close.index = close.index.tz_convert(None)

        out = close.astype(float).to_frame("price")
        out = out[~out.index.duplicated(keep="last")].sort_index()
        return PriceSeries(ticker=ticker, data=out)
