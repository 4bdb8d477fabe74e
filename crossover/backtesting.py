# crossover/backtesting.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import pandas as pd

from .aggregation import ReturnAggregator
from .config import BacktestConfig
from .errors import InvalidConfiguration, InsufficientDataError
from .metrics import RiskMetrics, hit_rate
from .models import PriceSeries, AssetBacktest, PerformanceSummary
from .significance import SignificanceTester
from .sma_crossover import SMACrossoverStrategy
from .trades import build_trade_intervals, TradeReturnCalculator

logger = logging.getLogger(__name__)


@dataclass
class PortfolioBacktestResult:
    window: int
    period: str
    assets: Dict[str, AssetBacktest]
    aligned_returns: pd.DataFrame  # forward-filled on the union calendar, display only
    summaries: List[PerformanceSummary] = field(default_factory=list)


class Backtester:
    """
    One (asset set, window, period) run of the crossover pipeline:

      prices -> signals -> trade intervals -> per-trade returns
             -> aligned table + per-asset statistics

    Conventions:
      • Returns are only earned inside trades, from the bar after the Buy
        through the Sell bar.
      • No costs or slippage.
      • A failing asset is reported in its own summary; the others still run.
    """

    def __init__(self, config: Optional[BacktestConfig] = None):
        self.config = config or BacktestConfig()
        self.ppy = int(self.config.periods_per_year)
        self.aggregator = ReturnAggregator(periods_per_year=self.ppy)
        self.calculator = TradeReturnCalculator()
        self.tester = SignificanceTester(
            n_resamples=self.config.bootstrap_reps,
            seed=self.config.bootstrap_seed,
            ci_level=self.config.ci_level,
        )

    # ------------------------------------------------------------------
    # Single asset: signals, trades, raw return stream
    # ------------------------------------------------------------------
    def run_single_asset(self, price_series: PriceSeries, window: int) -> AssetBacktest:
        strategy = SMACrossoverStrategy(window=window)
        df = strategy.classify(price_series)
        signals = strategy.signals_from_frame(df)
        intervals = build_trade_intervals(signals)
        returns = self.calculator.strategy_returns(df["price"], intervals)

        df["strategy_returns"] = returns.reindex(df.index)
        logger.debug(f"{price_series.ticker} w={window}: {len(intervals)} trades, "
                     f"{int(returns.notna().sum())} realized returns")

        return AssetBacktest(
            ticker=price_series.ticker,
            window=int(window),
            df=df,
            signals=signals,
            intervals=intervals,
            returns=returns,
        )

    # ------------------------------------------------------------------
    # Statistics for one asset
    # ------------------------------------------------------------------
    def summarize(self, asset: AssetBacktest, period: str) -> PerformanceSummary:
        realized = asset.realized_returns
        annualized = self.aggregator.annualized_return(asset.returns)

        risk = RiskMetrics(
            realized,
            periods_per_year=self.ppy,
            risk_free_rate=self.config.risk_free_rate,
            mar=self.config.per_period_mar,
        )
        sig = self.tester.test(realized)
        multiples = self.calculator.trade_multiples(asset.df["price"], asset.intervals)

        return PerformanceSummary(
            asset=asset.ticker,
            window_length=asset.window,
            period=period,
            annualized_return=annualized,
            sharpe=risk.sharpe_ratio(),
            sortino=risk.sortino_ratio(),
            t_statistic=sig.t_statistic,
            p_value=sig.p_value,
            bootstrap_ci=sig.bootstrap_ci,
            n_trades=len(asset.intervals),
            n_observations=len(realized),
            total_return=risk.total_return(),
            max_drawdown=risk.max_drawdown(),
            annualized_volatility=risk.annualized_vol(),
            hit_rate=hit_rate(multiples),
        )

    # ------------------------------------------------------------------
    # Asset set
    # ------------------------------------------------------------------
    def run(self, prices: Mapping[str, PriceSeries], window: int,
            period: Optional[str] = None) -> PortfolioBacktestResult:
        period = period or self.config.period_name
        logger.info(f"Backtest window={window} period={period} on {len(prices)} assets")

        assets: Dict[str, AssetBacktest] = {}
        failures: Dict[str, PerformanceSummary] = {}
        for ticker, series in prices.items():
            try:
                assets[ticker] = self.run_single_asset(series, window)
            except InvalidConfiguration as exc:
                logger.warning(f"{ticker} w={window} {period}: {type(exc).__name__}: {exc}")
                failures[ticker] = PerformanceSummary.failed(ticker, window, period, exc)

        aligned = self.aggregator.align({t: a.returns for t, a in assets.items()})

        summaries = []
        for ticker in prices:
            if ticker in failures:
                summaries.append(failures[ticker])
                continue
            asset = assets[ticker]
            try:
                summaries.append(self.summarize(asset, period))
            except InsufficientDataError as exc:
                logger.warning(f"{ticker} w={window} {period}: {type(exc).__name__}: {exc}")
                failed = PerformanceSummary.failed(ticker, window, period, exc)
                failed.n_trades = len(asset.intervals)
                failed.n_observations = len(asset.realized_returns)
                summaries.append(failed)

        return PortfolioBacktestResult(
            window=int(window),
            period=period,
            assets=assets,
            aligned_returns=aligned,
            summaries=summaries,
        )
