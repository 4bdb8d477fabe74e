# crossover/models.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any, Optional, Tuple

import pandas as pd

from .errors import InvalidConfiguration


@dataclass(frozen=True)
class PriceSeries:
    ticker: str
    data: pd.DataFrame  # columns: ['price'] at minimum, NaN where missing

    def __post_init__(self):
        if "price" not in self.data.columns:
            raise InvalidConfiguration(f"{self.ticker}: price series needs a 'price' column")
        idx = self.data.index
        if not (idx.is_unique and idx.is_monotonic_increasing):
            raise InvalidConfiguration(f"{self.ticker}: timestamps must be unique and strictly increasing")
        if getattr(idx, "tz", None) is not None:
            # wall-clock dates, so naive sub-period bounds compare cleanly
            data = self.data.copy()
            data.index = idx.tz_localize(None)
            object.__setattr__(self, "data", data)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def prices(self) -> pd.Series:
        return self.data["price"].astype(float)

    def slice(self, start, end) -> "PriceSeries":
        """Rows with start <= timestamp <= end, as a new series."""
        try:
            data = self.data.loc[pd.Timestamp(start):pd.Timestamp(end)].copy()
        except TypeError as exc:
            raise InvalidConfiguration(f"{self.ticker}: cannot slice by date ({exc})") from exc
        return PriceSeries(ticker=self.ticker, data=data)


class SignalKind(Enum):
    BUY = "Buy"
    SELL = "Sell"


@dataclass(frozen=True)
class Signal:
    index: int  # row position in the PriceSeries
    kind: SignalKind


@dataclass(frozen=True)
class SignalSet:
    """Alternating Buy/Sell positions: buys[i] < sells[i] < buys[i + 1]."""
    buys: Tuple[int, ...] = ()
    sells: Tuple[int, ...] = ()

    @property
    def empty(self) -> bool:
        return not self.buys

    @property
    def signals(self) -> Tuple[Signal, ...]:
        tagged = [Signal(i, SignalKind.BUY) for i in self.buys]
        tagged += [Signal(i, SignalKind.SELL) for i in self.sells]
        return tuple(sorted(tagged, key=lambda s: s.index))


@dataclass(frozen=True)
class TradeInterval:
    entry_index: int
    exit_index: int


@dataclass
class AssetBacktest:
    ticker: str
    window: int
    df: pd.DataFrame  # price, sma, signal, strategy_returns
    signals: SignalSet
    intervals: Tuple[TradeInterval, ...]
    returns: pd.Series  # raw strategy-return stream, NaN at every trade entry

    @property
    def realized_returns(self) -> pd.Series:
        return self.returns.dropna()


@dataclass
class PerformanceSummary:
    asset: str
    window_length: int
    period: str
    annualized_return: Optional[float] = None  # percent
    sharpe: Optional[float] = None
    sortino: Optional[float] = None
    t_statistic: Optional[float] = None
    p_value: Optional[float] = None
    bootstrap_ci: Optional[Tuple[float, float]] = None
    n_trades: int = 0
    n_observations: int = 0
    total_return: Optional[float] = None
    max_drawdown: Optional[float] = None
    annualized_volatility: Optional[float] = None
    hit_rate: Optional[float] = None
    error: Optional[str] = None  # error kind when the cell failed
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, asset: str, window_length: int, period: str, exc: Exception) -> "PerformanceSummary":
        return cls(
            asset=asset,
            window_length=window_length,
            period=period,
            error=type(exc).__name__,
            error_message=str(exc),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        ci = out.pop("bootstrap_ci")
        out["ci_low"], out["ci_high"] = ci if ci is not None else (None, None)
        return out
