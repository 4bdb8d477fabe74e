# crossover/metrics.py
from typing import Optional

import numpy as np
import pandas as pd

from .errors import InsufficientDataError


class RiskMetrics:
    """
    Risk-adjusted statistics on realized strategy returns.

    A zero denominator raises InsufficientDataError instead of returning
    +/-inf, so callers never see a silently infinite ratio.
    """
    def __init__(self, strategy_returns: pd.Series, periods_per_year: int = 252,
                 risk_free_rate: float = 0.0, mar: Optional[float] = None):
        self.returns = pd.Series(strategy_returns, dtype=float).dropna()
        self.periods_per_year = int(periods_per_year)
        self.risk_free_rate = float(risk_free_rate)
        self.mar = self.risk_free_rate / self.periods_per_year if mar is None else float(mar)

    def _require(self, n: int = 1):
        if len(self.returns) < n:
            raise InsufficientDataError(f"need at least {n} realized returns, got {len(self.returns)}")

    def volatility(self) -> float:
        self._require(2)
        r = self.returns.to_numpy()
        if np.all(r == r[0]):
            raise InsufficientDataError("returns have zero variance")
        return float(self.returns.std())

    def sharpe_ratio(self) -> float:
        excess = self.returns.mean() - self.risk_free_rate / self.periods_per_year
        return float(excess / self.volatility() * np.sqrt(self.periods_per_year))

    def downside_deviation(self) -> float:
        self._require()
        shortfall = np.minimum(self.returns.to_numpy() - self.mar, 0.0)
        return float(np.sqrt(np.mean(shortfall ** 2)))

    def sortino_ratio(self) -> float:
        dd = self.downside_deviation()
        if dd == 0:
            raise InsufficientDataError("no returns below the minimum acceptable return")
        return float((self.returns.mean() - self.mar) / dd)

    def equity_curve(self) -> pd.Series:
        self._require()
        return (1.0 + self.returns).cumprod()

    def max_drawdown(self) -> float:
        equity = self.equity_curve()
        running_max = equity.cummax().clip(lower=1.0)
        drawdown = equity / running_max - 1.0
        return float(min(drawdown.min(), 0.0))

    def total_return(self) -> float:
        return float(self.equity_curve().iloc[-1] - 1.0)

    def annualized_vol(self) -> float:
        return float(np.sqrt(self.periods_per_year) * self.volatility())


def hit_rate(trade_multiples) -> float:
    """Share of trades closed above their entry price."""
    multiples = np.asarray(trade_multiples, dtype=float)
    if multiples.size == 0:
        raise InsufficientDataError("no closed trades")
    return float(np.mean(multiples > 1.0))
