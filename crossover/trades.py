# crossover/trades.py
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import InvalidSignalSequence
from .models import SignalSet, TradeInterval


def build_trade_intervals(signals: SignalSet) -> Tuple[TradeInterval, ...]:
    """Pair the i-th Buy with the i-th Sell."""
    if len(signals.buys) != len(signals.sells):
        raise InvalidSignalSequence(
            f"{len(signals.buys)} buys vs {len(signals.sells)} sells after trimming"
        )

    intervals = tuple(TradeInterval(b, s) for b, s in zip(signals.buys, signals.sells))

    prev_exit = -1
    for iv in intervals:
        if not prev_exit < iv.entry_index < iv.exit_index:
            raise InvalidSignalSequence(
                f"interval ({iv.entry_index}, {iv.exit_index}) is out of order or overlaps the previous one"
            )
        prev_exit = iv.exit_index
    return intervals


class TradeReturnCalculator:
    """
    Discrete returns inside trades.

    Each interval is its own segment: the entry bar carries NaN, so stacking
    segments never produces a return across two unrelated trades.
    """

    @staticmethod
    def interval_returns(prices: pd.Series, interval: TradeInterval) -> pd.Series:
        seg = prices.iloc[interval.entry_index: interval.exit_index + 1].astype(float)
        return seg / seg.shift(1) - 1.0

    def strategy_returns(self, prices: pd.Series, intervals: Sequence[TradeInterval]) -> pd.Series:
        if not intervals:
            return pd.Series(dtype=float, index=prices.index[:0], name="strategy_returns")
        segments = [self.interval_returns(prices, iv) for iv in intervals]
        return pd.concat(segments).rename("strategy_returns")

    @staticmethod
    def trade_multiples(prices: pd.Series, intervals: Sequence[TradeInterval]) -> np.ndarray:
        """exit price / entry price per trade."""
        values = prices.to_numpy(dtype=float)
        return np.array([values[iv.exit_index] / values[iv.entry_index] for iv in intervals], dtype=float)
