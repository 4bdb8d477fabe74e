import numpy as np
import pandas as pd
import pytest

from crossover.aggregation import ReturnAggregator
from crossover.errors import InsufficientDataError


def _stream(dates, values):
    return pd.Series(values, index=pd.to_datetime(dates), dtype=float)


def test_align_builds_union_calendar_and_forward_fills():
    a = _stream(["2021-01-04", "2021-01-05", "2021-01-06"], [np.nan, 0.01, 0.02])
    b = _stream(["2021-01-05", "2021-01-07"], [np.nan, 0.05])

    aligned = ReturnAggregator().align({"A": a, "B": b})

    assert list(aligned.index) == list(pd.to_datetime(
        ["2021-01-04", "2021-01-05", "2021-01-06", "2021-01-07"]))
    assert aligned.loc["2021-01-07", "A"] == pytest.approx(0.02)
    assert np.isnan(aligned.loc["2021-01-06", "B"])
    assert aligned.loc["2021-01-07", "B"] == pytest.approx(0.05)


def test_align_does_not_touch_inputs():
    a = _stream(["2021-01-04", "2021-01-06"], [0.01, np.nan])
    ReturnAggregator().align({"A": a, "B": _stream(["2021-01-05"], [0.02])})
    assert len(a) == 2
    assert np.isnan(a.iloc[1])


def test_align_empty():
    assert ReturnAggregator().align({}).empty


def test_annualized_return_uses_realized_observations_only():
    stream = _stream(["2021-01-04", "2021-01-05", "2021-01-06"], [np.nan, 0.01, 0.02])
    expected = ((1.01 * 1.02) ** (252 / 2) - 1) * 100
    assert ReturnAggregator().annualized_return(stream) == pytest.approx(expected)


def test_annualized_return_respects_periods_per_year():
    stream = _stream(["2021-01-04", "2021-01-05"], [0.01, -0.01])
    expected = ((1.01 * 0.99) ** (12 / 2) - 1) * 100
    assert ReturnAggregator(periods_per_year=12).annualized_return(stream) == pytest.approx(expected)


def test_annualized_return_without_observations():
    with pytest.raises(InsufficientDataError):
        ReturnAggregator().annualized_return(_stream(["2021-01-04"], [np.nan]))
    with pytest.raises(InsufficientDataError):
        ReturnAggregator().annualized_return(pd.Series(dtype=float))
