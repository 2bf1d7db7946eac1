import numpy as np
import pandas as pd
import pytest
from simd_msts.items import CycleItem
from simd_msts.items import LocalLevelItem
from simd_msts.items import LocalLinearTrendItem
from simd_msts.items import NoiseItem
from simd_msts.items import SeasonalItem

np.random.seed(0)


def seasonality(n, s_len=12):
    freq = n / s_len

    t = np.arange(n) / n
    c1 = 1.0 * np.sin(2 * np.pi * t * freq)
    c2 = 0.4 * np.sin(2 * np.pi * 15 * t)

    noise = np.random.rand(n)

    return c1 + c2 + noise


def trend(n, steepness=1.2):
    return np.arange(n) / (n ** steepness) + np.random.rand(n) * 0.1


def create_data(first_date, last_date, level=5, period=12, steepness=0.9):

    index = pd.date_range(first_date, last_date, freq="MS")
    ts = (
        level
        + trend(index.shape[0], steepness=steepness)
        + seasonality(index.shape[0], period)
    )
    return pd.Series(ts, index=index)


@pytest.fixture(scope="module")
def ts1ts2():
    return np.stack(
        [
            create_data("2000-01-01", "2015-12-01", level=50, steepness=0.8),
            create_data("2000-01-01", "2015-12-01", level=100, steepness=2),
        ]
    )


@pytest.fixture
def bsm_items():
    return [
        LocalLinearTrendItem("llt", 0.1, 0.01, fixed_slope=True),
        SeasonalItem("seas", 12, 0.5),
        CycleItem("cycle", 0.8, 24.0, 0.2),
        NoiseItem("noise", 1.0),
    ]


@pytest.fixture
def llevel_items():
    return [LocalLevelItem("l", 0.5), NoiseItem("n", 2.0)]
