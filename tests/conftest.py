"""Pytest configuration and fixtures for all tests.

Plots render off-screen and runs never pick up MC_PORTFOLIO_* settings from
the developer's shell.
"""

import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

ENV_VARS = [
    "MC_PORTFOLIO_SEED",
    "MC_PORTFOLIO_RISK_FREE_RATE",
    "MC_PORTFOLIO_LOOKBACK_YEARS",
]


@pytest.fixture(autouse=True)
def isolate_from_env():
    """Clear MC_PORTFOLIO_* env vars before each test and restore them after."""
    original_values = {}
    for var in ENV_VARS:
        if var in os.environ:
            original_values[var] = os.environ.pop(var)

    yield

    for var in ENV_VARS:
        os.environ.pop(var, None)
    for var, value in original_values.items():
        os.environ[var] = value


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def sample_prices() -> pd.DataFrame:
    """60 months of positive prices for three tickers."""
    rng = np.random.default_rng(0)
    returns = rng.normal(0.01, 0.05, size=(60, 3))
    prices = 100 * np.cumprod(1 + returns, axis=0)
    index = pd.date_range("2020-01-31", periods=60, freq="ME", name="Date")
    return pd.DataFrame(prices, index=index, columns=["AAPL", "MSFT", "NVDA"])


@pytest.fixture
def two_asset_stats() -> tuple[pd.Series, pd.DataFrame]:
    mean = pd.Series({"A": 0.01, "B": 0.02})
    cov = pd.DataFrame(
        [[0.0004, 0.0001], [0.0001, 0.0009]], index=["A", "B"], columns=["A", "B"]
    )
    return mean, cov
