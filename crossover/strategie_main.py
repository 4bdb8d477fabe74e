# crossover/strategie_main.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence

import pandas as pd

from .models import PriceSeries, Signal, SignalKind, SignalSet


# ---------- Base class ----------
class BaseStrategy(ABC):
    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def classify(self, price_series: PriceSeries) -> pd.DataFrame:
        """
        Return a DataFrame aligned on the series with at least a 'signal' column:
          +1 = Buy, -1 = Sell, 0 = no signal.
        """
        raise NotImplementedError

    def generate_signals(self, price_series: PriceSeries) -> SignalSet:
        return self.signals_from_frame(self.classify(price_series))

    @classmethod
    def signals_from_frame(cls, df: pd.DataFrame) -> SignalSet:
        raw = [
            Signal(pos, SignalKind.BUY if s > 0 else SignalKind.SELL)
            for pos, s in enumerate(df["signal"].to_numpy())
            if s != 0
        ]
        return cls.trim(cls.deduplicate(raw))

    # ---------- helpers ----------
    @staticmethod
    def deduplicate(signals: Iterable[Signal]) -> List[Signal]:
        """Keep the first signal of every run of same-kind signals on adjacent rows."""
        out: List[Signal] = []
        prev = None
        for sig in signals:
            in_run = prev is not None and sig.kind is prev.kind and sig.index == prev.index + 1
            if not in_run:
                out.append(sig)
            prev = sig
        return out

    @staticmethod
    def trim(signals: Sequence[Signal]) -> SignalSet:
        """
        Restore strict Buy/Sell alternation:
          - Sells before the first Buy are dropped
          - a repeated kind (runs split by a no-signal row) keeps its first member
          - a trailing Buy with no later Sell is dropped
        """
        buys: List[int] = []
        sells: List[int] = []
        holding = False
        for sig in signals:
            if sig.kind is SignalKind.BUY and not holding:
                buys.append(sig.index)
                holding = True
            elif sig.kind is SignalKind.SELL and holding:
                sells.append(sig.index)
                holding = False
        if holding:
            buys.pop()
        if not buys:
            return SignalSet()
        return SignalSet(buys=tuple(buys), sells=tuple(sells))
