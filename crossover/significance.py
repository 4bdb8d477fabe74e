# crossover/significance.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd
from statsmodels.stats.weightstats import DescrStatsW

from .errors import InsufficientDataError


@dataclass(frozen=True)
class SignificanceResult:
    t_statistic: float
    p_value: float
    df: int
    bootstrap_ci: Tuple[float, float]
    bootstrap_means: np.ndarray


class SignificanceTester:
    """
    Is the mean realized return different from zero?

      - one-sample t-test, two-sided, n - 1 degrees of freedom
      - percentile bootstrap CI of the mean (seeded, resampling with replacement)
    """
    def __init__(self, n_resamples: int = 1000, seed: int = 42, ci_level: float = 0.95):
        self.n_resamples = int(n_resamples)
        self.seed = int(seed)
        self.ci_level = float(ci_level)

    @staticmethod
    def _clean(returns) -> np.ndarray:
        r = pd.Series(returns, dtype=float).dropna().to_numpy()
        if len(r) < 2:
            raise InsufficientDataError(f"t-test needs at least 2 observations, got {len(r)}")
        if np.all(r == r[0]):
            raise InsufficientDataError("returns have zero variance; t-statistic undefined")
        return r

    def t_test(self, returns) -> Tuple[float, float, int]:
        r = self._clean(returns)
        t_stat, p_value, dof = DescrStatsW(r).ttest_mean(0.0, alternative="two-sided")
        return float(t_stat), float(p_value), int(dof)

    def bootstrap_means(self, returns) -> np.ndarray:
        r = self._clean(returns)
        rng = np.random.default_rng(self.seed)
        idx = rng.integers(0, len(r), size=(self.n_resamples, len(r)))
        return r[idx].mean(axis=1)

    def _interval(self, means: np.ndarray) -> Tuple[float, float]:
        tail = (1.0 - self.ci_level) / 2.0 * 100.0
        lo, hi = np.percentile(means, [tail, 100.0 - tail])
        return float(lo), float(hi)

    def bootstrap_ci(self, returns) -> Tuple[float, float]:
        return self._interval(self.bootstrap_means(returns))

    def test(self, returns) -> SignificanceResult:
        t_stat, p_value, dof = self.t_test(returns)
        means = self.bootstrap_means(returns)
        return SignificanceResult(
            t_statistic=t_stat,
            p_value=p_value,
            df=dof,
            bootstrap_ci=self._interval(means),
            bootstrap_means=means,
        )
