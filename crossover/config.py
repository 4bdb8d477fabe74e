# crossover/config.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubPeriod:
    name: str
    start: str
    end: str

    def validate(self) -> None:
        try:
            start, end = pd.Timestamp(self.start), pd.Timestamp(self.end)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"sub-period {self.name!r}: unparseable bounds ({exc})") from exc
        if end < start:
            raise InvalidConfiguration(
                f"sub-period {self.name!r}: end {self.end} is before start {self.start}"
            )

    def overlaps(self, other: "SubPeriod") -> bool:
        return (pd.Timestamp(self.start) <= pd.Timestamp(other.end)
                and pd.Timestamp(other.start) <= pd.Timestamp(self.end))


@dataclass(frozen=True)
class BacktestConfig:
    """
    Every knob of a backtest run. Nothing is read from the environment.

    mar is a per-period return; None means risk_free_rate / periods_per_year.
    """
    tickers: Tuple[str, ...] = ()
    windows: Tuple[int, ...] = (50,)
    risk_free_rate: float = 0.0
    mar: Optional[float] = None
    periods_per_year: int = 252
    bootstrap_reps: int = 1000
    bootstrap_seed: int = 42
    ci_level: float = 0.95
    sub_periods: Tuple[SubPeriod, ...] = ()
    period_name: str = "full"

    @property
    def per_period_mar(self) -> float:
        if self.mar is not None:
            return float(self.mar)
        return self.risk_free_rate / self.periods_per_year

    def validate(self) -> None:
        """Checks the sweep-wide settings; per-window and per-period problems surface per cell."""
        if not self.windows:
            raise InvalidConfiguration("at least one window length is required")
        if self.periods_per_year <= 0:
            raise InvalidConfiguration(f"periods_per_year must be positive, got {self.periods_per_year}")
        if self.bootstrap_reps <= 0:
            raise InvalidConfiguration(f"bootstrap_reps must be positive, got {self.bootstrap_reps}")
        if not 0.0 < self.ci_level < 1.0:
            raise InvalidConfiguration(f"ci_level must lie in (0, 1), got {self.ci_level}")

        for i, a in enumerate(self.sub_periods):
            for b in self.sub_periods[i + 1:]:
                try:
                    if a.overlaps(b):
                        logger.warning(f"Sub-periods {a.name!r} and {b.name!r} overlap")
                except (TypeError, ValueError):
                    # malformed bounds are reported by the period's own cells
                    continue


# ---------------------------------------------------------------------------
# Text parsers for the dashboard inputs
# ---------------------------------------------------------------------------
def parse_tickers(text: str) -> Tuple[str, ...]:
    tickers = tuple(t.strip().upper() for t in (text or "").split(",") if t.strip())
    if not tickers:
        raise InvalidConfiguration("no tickers given")
    return tickers


def parse_windows(text: str) -> Tuple[int, ...]:
    """'20, 50,100' -> (20, 50, 100)"""
    windows = []
    for part in (text or "").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            windows.append(int(part))
        except ValueError as exc:
            raise InvalidConfiguration(f"window length {part!r} is not an integer") from exc
    if not windows:
        raise InvalidConfiguration("no window lengths given")
    return tuple(windows)


def parse_sub_periods(text: str) -> Tuple[SubPeriod, ...]:
    """'pre:2010-01-01:2014-12-31; post:2015-01-01:2019-12-31' -> SubPeriods."""
    periods = []
    for chunk in (text or "").split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [p.strip() for p in chunk.split(":")]
        if len(parts) != 3 or not all(parts):
            raise InvalidConfiguration(f"sub-period {chunk!r} must look like name:start:end")
        periods.append(SubPeriod(*parts))
    return tuple(periods)
