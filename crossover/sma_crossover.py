# crossover/sma_crossover.py
from __future__ import annotations

import logging

import pandas as pd

from .errors import InvalidConfiguration
from .models import PriceSeries
from .strategie_main import BaseStrategy

logger = logging.getLogger(__name__)


class SMACrossoverStrategy(BaseStrategy):
    """
    Price vs. simple moving average:
      - Buy  when SMA > price (price below trend)
      - Sell when SMA < price
      - nothing when equal or while the SMA is still warming up
    Missing prices are forward-filled first; a leading run of missing
    prices stays missing and cannot start an average.
    """
    def __init__(self, window: int = 50):
        super().__init__(name="SMACrossover")
        self.window = int(window)

    def classify(self, price_series: PriceSeries) -> pd.DataFrame:
        if self.window <= 0:
            raise InvalidConfiguration(f"window length must be positive, got {self.window}")
        if self.window > len(price_series):
            raise InvalidConfiguration(
                f"{price_series.ticker}: window {self.window} exceeds series length {len(price_series)}"
            )

        prices = price_series.prices.ffill()
        df = price_series.data.copy()
        df["price"] = prices
        df["sma"] = prices.rolling(self.window, min_periods=self.window).mean()

        df["signal"] = 0
        valid = df["sma"].notna()
        df.loc[valid & (df["sma"] > prices), "signal"] = 1
        df.loc[valid & (df["sma"] < prices), "signal"] = -1

        logger.debug(
            f"{price_series.ticker} w={self.window}: "
            f"{int((df['signal'] > 0).sum())} raw buys, {int((df['signal'] < 0).sum())} raw sells"
        )
        return df
