import numpy as np
import pandas as pd
import pytest

from crossover.models import PriceSeries


def make_series(prices, ticker="TEST", start="2020-01-01") -> PriceSeries:
    idx = pd.bdate_range(start, periods=len(prices))
    return PriceSeries(ticker=ticker, data=pd.DataFrame({"price": prices}, index=idx, dtype=float))


def wave_prices(n=300, seed=0) -> np.ndarray:
    """Oscillating positive prices with noise, enough to produce many trades."""
    rng = np.random.default_rng(seed)
    t = np.linspace(0, 12 * np.pi, n)
    return 100 + 10 * np.sin(t) + 0.05 * np.arange(n) + rng.normal(0, 0.5, n)


@pytest.fixture
def wave_series():
    return make_series(wave_prices(), ticker="WAVE")


@pytest.fixture
def two_assets():
    return {
        "AAA": make_series(wave_prices(seed=1), ticker="AAA"),
        "BBB": make_series(wave_prices(seed=2), ticker="BBB", start="2020-01-08"),
    }
