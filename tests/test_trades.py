import numpy as np
import pandas as pd
import pytest

from crossover.errors import InvalidSignalSequence
from crossover.models import SignalSet, TradeInterval
from crossover.sma_crossover import SMACrossoverStrategy
from crossover.trades import build_trade_intervals, TradeReturnCalculator

from conftest import make_series, wave_prices


def test_pairs_buys_with_sells_in_order():
    intervals = build_trade_intervals(SignalSet(buys=(1, 6), sells=(4, 9)))
    assert intervals == (TradeInterval(1, 4), TradeInterval(6, 9))


def test_empty_signals_give_no_intervals():
    assert build_trade_intervals(SignalSet()) == ()


def test_mismatched_counts_raise():
    with pytest.raises(InvalidSignalSequence):
        build_trade_intervals(SignalSet(buys=(1, 2), sells=(3,)))


def test_overlapping_pairs_raise():
    with pytest.raises(InvalidSignalSequence):
        build_trade_intervals(SignalSet(buys=(1, 3), sells=(5, 7)))


def test_interval_returns_start_with_undefined_entry_bar():
    prices = pd.Series([10.0, 11.0, 12.0, 9.0, 8.0, 13.0, 14.0])
    r = TradeReturnCalculator.interval_returns(prices, TradeInterval(3, 5))
    assert np.isnan(r.iloc[0])
    assert r.iloc[1:].tolist() == pytest.approx([8 / 9 - 1, 13 / 8 - 1])


def test_no_return_across_trade_boundaries():
    prices = pd.Series([10.0, 11.0, 12.0, 13.0, 20.0, 21.0, 22.0],
                       index=pd.bdate_range("2021-01-01", periods=7))
    intervals = (TradeInterval(0, 2), TradeInterval(4, 6))
    stream = TradeReturnCalculator().strategy_returns(prices, intervals)

    assert list(stream.index) == list(prices.index[[0, 1, 2, 4, 5, 6]])
    # second trade entry would be 20 / 12 - 1 if segments were differenced as one array
    assert np.isnan(stream.loc[prices.index[4]])
    assert stream.loc[prices.index[5]] == pytest.approx(21 / 20 - 1)
    assert stream.notna().sum() == 4


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_compounding_law(seed):
    series = make_series(wave_prices(seed=seed))
    df = SMACrossoverStrategy(window=10).classify(series)
    intervals = build_trade_intervals(SMACrossoverStrategy.signals_from_frame(df))
    assert len(intervals) > 1

    calc = TradeReturnCalculator()
    prices = df["price"]
    for iv in intervals:
        r = calc.interval_returns(prices, iv).dropna()
        growth = np.prod(1 + r.to_numpy())
        assert growth == pytest.approx(prices.iloc[iv.exit_index] / prices.iloc[iv.entry_index], rel=1e-9)


def test_trade_multiples():
    prices = pd.Series([10.0, 11.0, 12.0, 9.0, 8.0, 13.0])
    multiples = TradeReturnCalculator.trade_multiples(prices, (TradeInterval(0, 2), TradeInterval(3, 4)))
    assert multiples.tolist() == pytest.approx([1.2, 8 / 9])
