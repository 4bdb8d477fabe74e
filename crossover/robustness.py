# crossover/robustness.py
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional

import pandas as pd

from .backtesting import Backtester
from .config import BacktestConfig, SubPeriod
from .errors import InvalidConfiguration
from .models import PriceSeries, PerformanceSummary

logger = logging.getLogger(__name__)


class RobustnessRunner:
    """
    Re-runs the whole pipeline per configuration:
      • window sweep: every window on the full sample
      • sub-period sweep: one window on each calendar slice, signals built
        from the slice only

    Each cell gets a fresh Backtester run; nothing is carried between cells.
    """

    def __init__(self, config: BacktestConfig):
        config.validate()
        self.config = config

    def _backtester(self) -> Backtester:
        return Backtester(self.config)

    def run_window_sweep(self, prices: Mapping[str, PriceSeries],
                         windows: Optional[Iterable[int]] = None) -> List[PerformanceSummary]:
        windows = tuple(windows) if windows is not None else self.config.windows
        logger.info(f"Window sweep {list(windows)} over {len(prices)} assets")
        out: List[PerformanceSummary] = []
        for w in windows:
            result = self._backtester().run(prices, w, self.config.period_name)
            out.extend(result.summaries)
        return out

    def run_subperiod_sweep(self, prices: Mapping[str, PriceSeries], window: Optional[int] = None,
                            sub_periods: Optional[Iterable[SubPeriod]] = None) -> List[PerformanceSummary]:
        window = window if window is not None else self.config.windows[0]
        sub_periods = tuple(sub_periods) if sub_periods is not None else self.config.sub_periods
        logger.info(f"Sub-period sweep w={window} over {len(sub_periods)} periods")
        out: List[PerformanceSummary] = []
        for sp in sub_periods:
            try:
                sp.validate()
            except InvalidConfiguration as exc:
                logger.warning(f"Skipping sub-period {sp.name!r}: {exc}")
                out.extend(PerformanceSummary.failed(t, window, sp.name, exc) for t in prices)
                continue
            sliced, failures = {}, {}
            for t, s in prices.items():
                try:
                    sliced[t] = s.slice(sp.start, sp.end)
                except InvalidConfiguration as exc:
                    logger.warning(f"{t} {sp.name}: {exc}")
                    failures[t] = PerformanceSummary.failed(t, window, sp.name, exc)
            result = self._backtester().run(sliced, window, sp.name)
            by_asset = dict(zip(sliced, result.summaries))
            by_asset.update(failures)
            out.extend(by_asset[t] for t in prices)
        return out

    def run(self, prices: Mapping[str, PriceSeries]) -> List[PerformanceSummary]:
        """Window sweep on the full sample, then (if configured) every window on every sub-period."""
        out = self.run_window_sweep(prices)
        if self.config.sub_periods:
            for w in self.config.windows:
                out.extend(self.run_subperiod_sweep(prices, window=w))
        return out


def summaries_to_frame(summaries: Iterable[PerformanceSummary]) -> pd.DataFrame:
    rows = [s.to_dict() for s in summaries]
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows).set_index(["asset", "window_length", "period"])
