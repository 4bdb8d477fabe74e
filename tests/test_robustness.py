import logging

import pandas as pd
import pytest

from crossover.config import BacktestConfig, SubPeriod
from crossover.errors import InvalidConfiguration
from crossover.models import PriceSeries
from crossover.robustness import RobustnessRunner, summaries_to_frame

from conftest import make_series, wave_prices

PERIODS = (
    SubPeriod("first", "2020-01-01", "2020-06-30"),
    SubPeriod("second", "2020-07-01", "2020-12-31"),
)


def _config(**kwargs):
    kwargs.setdefault("windows", (10, 20))
    kwargs.setdefault("bootstrap_reps", 200)
    kwargs.setdefault("sub_periods", PERIODS)
    return BacktestConfig(**kwargs)


def test_window_sweep(two_assets):
    summaries = RobustnessRunner(_config()).run_window_sweep(two_assets)
    assert [(s.asset, s.window_length) for s in summaries] == [
        ("AAA", 10), ("BBB", 10), ("AAA", 20), ("BBB", 20)]
    assert all(s.period == "full" for s in summaries)


def test_subperiod_sweep_labels_cells(two_assets):
    summaries = RobustnessRunner(_config()).run_subperiod_sweep(two_assets, window=10)
    assert [(s.asset, s.period) for s in summaries] == [
        ("AAA", "first"), ("BBB", "first"), ("AAA", "second"), ("BBB", "second")]
    assert all(s.window_length == 10 for s in summaries)


def test_subperiod_ignores_data_outside_the_slice():
    base = make_series(wave_prices(n=400), ticker="AAA")
    runner = RobustnessRunner(_config())
    before = runner.run_subperiod_sweep({"AAA": base}, window=10, sub_periods=PERIODS[1:])

    # distort everything outside the second half of 2020
    data = base.data.copy()
    outside = (data.index < "2020-07-01") | (data.index > "2020-12-31")
    data.loc[outside, "price"] *= 50
    after = runner.run_subperiod_sweep({"AAA": PriceSeries("AAA", data)}, window=10, sub_periods=PERIODS[1:])

    assert before[0].ok
    assert before[0].to_dict() == after[0].to_dict()


def test_malformed_period_does_not_stop_the_sweep(two_assets):
    periods = (SubPeriod("backwards", "2020-06-30", "2020-01-01"),) + PERIODS
    summaries = RobustnessRunner(_config()).run_subperiod_sweep(two_assets, window=10, sub_periods=periods)

    failed = [s for s in summaries if s.period == "backwards"]
    assert len(failed) == 2
    assert all(s.error == "InvalidConfiguration" for s in failed)
    assert len(summaries) == 6
    assert all(s.ok for s in summaries if s.period != "backwards")


def test_period_shorter_than_window_fails_only_that_cell(two_assets):
    tiny = (SubPeriod("tiny", "2020-01-01", "2020-01-10"),)
    summaries = RobustnessRunner(_config()).run_subperiod_sweep(two_assets, window=20, sub_periods=tiny)
    assert {s.error for s in summaries} == {"InvalidConfiguration"}


def test_run_covers_every_window_and_period(two_assets):
    config = _config()
    summaries = RobustnessRunner(config).run(two_assets)
    keys = {(s.asset, s.window_length, s.period) for s in summaries}
    assert len(summaries) == len(keys) == 2 * 2 * (1 + len(PERIODS))


def test_run_is_repeatable(two_assets):
    a = RobustnessRunner(_config()).run(two_assets)
    b = RobustnessRunner(_config()).run(two_assets)
    assert [s.to_dict() for s in a] == [s.to_dict() for s in b]


def test_invalid_config_is_rejected_up_front():
    with pytest.raises(InvalidConfiguration):
        RobustnessRunner(_config(windows=()))
    with pytest.raises(InvalidConfiguration):
        RobustnessRunner(_config(bootstrap_reps=0))


def test_overlapping_periods_are_logged(caplog):
    periods = (SubPeriod("a", "2020-01-01", "2020-06-30"), SubPeriod("b", "2020-06-01", "2020-12-31"))
    with caplog.at_level(logging.WARNING, logger="crossover.config"):
        RobustnessRunner(_config(sub_periods=periods))
    assert "overlap" in caplog.text


def test_summaries_to_frame(two_assets):
    frame = summaries_to_frame(RobustnessRunner(_config()).run_window_sweep(two_assets))
    assert frame.index.names == ["asset", "window_length", "period"]
    assert {"annualized_return", "sharpe", "sortino", "p_value", "ci_low", "ci_high", "error"} <= set(frame.columns)
    assert summaries_to_frame([]).empty


def test_timezone_aware_series_is_swept_by_calendar_date():
    idx = pd.bdate_range("2020-01-01", periods=300, tz="America/New_York")
    aware = PriceSeries("TZ", pd.DataFrame({"price": wave_prices()}, index=idx))
    naive = make_series(wave_prices(), ticker="TZ")

    runner = RobustnessRunner(_config())
    got = runner.run_subperiod_sweep({"TZ": aware}, window=10)
    expected = runner.run_subperiod_sweep({"TZ": naive}, window=10)

    assert [s.period for s in got] == ["first", "second"]
    assert all(s.ok for s in got)
    assert [s.to_dict() for s in got] == [s.to_dict() for s in expected]


def test_series_without_dates_fails_only_its_own_cells(two_assets):
    undated = PriceSeries("NODATE", pd.DataFrame({"price": wave_prices()}))
    prices = dict(two_assets, NODATE=undated)

    summaries = RobustnessRunner(_config()).run_subperiod_sweep(prices, window=10)

    assert [s.asset for s in summaries] == ["AAA", "BBB", "NODATE"] * 2
    for s in summaries:
        if s.asset == "NODATE":
            assert s.error == "InvalidConfiguration"
        else:
            assert s.ok
