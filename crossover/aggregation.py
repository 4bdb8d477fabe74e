# crossover/aggregation.py
from __future__ import annotations

from functools import reduce
from typing import Mapping

import numpy as np
import pandas as pd

from .errors import InsufficientDataError


class ReturnAggregator:
    """
    Multi-asset alignment of strategy-return streams.

    The forward-filled table is for side-by-side display only; statistics
    are always computed on each asset's own realized observations.
    """

    def __init__(self, periods_per_year: int = 252):
        self.ppy = int(periods_per_year)

    def align(self, streams: Mapping[str, pd.Series]) -> pd.DataFrame:
        if not streams:
            return pd.DataFrame()
        calendar = reduce(lambda a, b: a.union(b), (s.index for s in streams.values()))
        calendar = calendar.sort_values()
        return pd.DataFrame(
            {asset: s.astype(float).reindex(calendar).ffill() for asset, s in streams.items()},
            index=calendar,
        )

    def annualized_return(self, stream: pd.Series) -> float:
        """Geometric annualized return, in percent."""
        realized = stream.dropna().to_numpy(dtype=float)
        n = len(realized)
        if n == 0:
            raise InsufficientDataError("no realized returns to annualize")
        growth = float(np.prod(1.0 + realized))
        return (growth ** (self.ppy / n) - 1.0) * 100.0
