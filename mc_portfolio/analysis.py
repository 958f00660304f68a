"""Entry point wiring data acquisition, estimation and simulation together."""

import logging
import numbers

import numpy as np
import pandas as pd

from mc_portfolio.config import DEFAULT_SEED, AnalysisConfig
from mc_portfolio.data import compute_returns, fetch_prices
from mc_portfolio.entities import AnalysisResult
from mc_portfolio.errors import InvalidInputError
from mc_portfolio.estimation import estimate_statistics
from mc_portfolio.optimization import simulate_portfolios

logger = logging.getLogger(__name__)


def analyze_returns(
    returns: pd.DataFrame,
    risk_free_rate: float = 0.0,
    n_trials: int | None = None,
    seed: int | np.random.Generator | None = DEFAULT_SEED,
) -> AnalysisResult:
    """Estimate statistics from a clean returns matrix and run the simulation.

    This is a pure function of its arguments; the same returns, rate, trial
    count and integer seed always give the same result.
    """
    mean_returns, covariance = estimate_statistics(returns)
    simulation = simulate_portfolios(
        mean_returns,
        covariance,
        risk_free_rate=risk_free_rate,
        n_trials=n_trials,
        seed=seed,
    )
    return AnalysisResult(
        optimal=simulation.optimal,
        simulations=simulation.table,
        mean_returns=mean_returns,
        covariance=covariance,
        risk_free_rate=risk_free_rate,
        seed=int(seed) if isinstance(seed, numbers.Integral) else None,
    )


def run_analysis(config: AnalysisConfig, prices: pd.DataFrame | None = None) -> AnalysisResult:
    """Run a full analysis for the configured tickers and date window.

    Args:
        config: Tickers, window and simulation parameters.
        prices: Pre-loaded price frame; downloaded with yfinance when omitted.

    Returns:
        AnalysisResult for the configured run.
    """
    if prices is None:
        prices = fetch_prices(config.tickers, config.start, config.end, interval=config.interval)
    elif config.tickers:
        missing = [t for t in config.tickers if t not in prices.columns]
        if missing:
            raise InvalidInputError(f"No price column for {missing}", field="tickers", value=missing)
        prices = prices[list(config.tickers)]

    returns = compute_returns(prices, method=config.return_method)
    logger.info(
        "Analysing %d assets over %d periods (rf=%s, seed=%s, trials=%s)",
        returns.shape[1],
        returns.shape[0],
        config.risk_free_rate,
        config.seed,
        config.n_trials or "default",
    )

    result = analyze_returns(
        returns,
        risk_free_rate=config.risk_free_rate,
        n_trials=config.n_trials,
        seed=config.seed,
    )
    logger.info(
        "Best of %d portfolios: trial %d, Sharpe %.4f",
        result.n_trials,
        result.optimal.trial,
        result.optimal.sharpe,
    )
    return result
