"""Defaults and environment overrides for a portfolio analysis run."""

import os
from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta

# Environment variable names
ENV_SEED = "MC_PORTFOLIO_SEED"
ENV_RISK_FREE_RATE = "MC_PORTFOLIO_RISK_FREE_RATE"
ENV_LOOKBACK_YEARS = "MC_PORTFOLIO_LOOKBACK_YEARS"

# Defaults
DEFAULT_SEED = 42
DEFAULT_RISK_FREE_RATE = 0.0
DEFAULT_LOOKBACK_YEARS = 5
DEFAULT_INTERVAL = "1mo"
DEFAULT_RETURN_METHOD = "simple"
DEFAULT_TICKERS = ("AAPL", "AMZN", "GOOG", "META", "MSFT", "NVDA", "TSLA")

# Simulation constants
TRIALS_PER_ASSET = 100
WEIGHT_DRAW_LOW = 1.0
WEIGHT_DRAW_HIGH = 10.0
VARIANCE_TOLERANCE = 1e-12

# Reporting precision
MEAN_DECIMALS = 5
COVARIANCE_DECIMALS = 8


def resolve_seed() -> int:
    """Seed from MC_PORTFOLIO_SEED, or DEFAULT_SEED."""
    seed_str = os.environ.get(ENV_SEED, "")
    return int(seed_str) if seed_str else DEFAULT_SEED


def resolve_risk_free_rate() -> float:
    """Periodic risk-free rate from MC_PORTFOLIO_RISK_FREE_RATE, or 0."""
    rate_str = os.environ.get(ENV_RISK_FREE_RATE, "")
    return float(rate_str) if rate_str else DEFAULT_RISK_FREE_RATE


def resolve_date_window(end_date: date | None = None) -> tuple[date, date]:
    """Resolve the price history window.

    Reads:
    - MC_PORTFOLIO_LOOKBACK_YEARS: number of years to look back (default: 5)

    Args:
        end_date: Last day of the window; today when omitted.

    Returns:
        Tuple of (start_date, end_date) as date objects.
    """
    lookback_str = os.environ.get(ENV_LOOKBACK_YEARS, "")
    lookback_years = int(lookback_str) if lookback_str else DEFAULT_LOOKBACK_YEARS

    if end_date is None:
        end_date = date.today()

    start_date = end_date - relativedelta(years=lookback_years)

    return start_date, end_date


@dataclass
class AnalysisConfig:
    """Parameters accepted by a full analysis run."""

    tickers: list[str]
    start: date
    end: date
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
    seed: int = DEFAULT_SEED
    n_trials: int | None = None  # None -> TRIALS_PER_ASSET * len(tickers)
    interval: str = DEFAULT_INTERVAL
    return_method: str = DEFAULT_RETURN_METHOD

    @classmethod
    def from_env(
        cls,
        tickers: list[str],
        start: date | None = None,
        end: date | None = None,
        **overrides,
    ) -> "AnalysisConfig":
        """Build a config, filling anything not given from the environment.

        A missing start date is the lookback window before the end date.
        """
        default_start, end = resolve_date_window(end)
        params = {
            "start": start or default_start,
            "end": end,
            "risk_free_rate": resolve_risk_free_rate(),
            "seed": resolve_seed(),
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(tickers=list(tickers), **params)
