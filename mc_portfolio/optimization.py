"""
Monte Carlo search for the max-Sharpe long-only portfolio.

Random fully-invested weights are drawn in one block, every candidate is
scored analytically against the mean vector and covariance matrix, and the
best Sharpe ratio wins. Given the same inputs and seed the whole simulation
table is reproduced exactly.
"""

from __future__ import annotations

import numbers

import numpy as np
import pandas as pd

from mc_portfolio.config import (
    DEFAULT_SEED,
    TRIALS_PER_ASSET,
    VARIANCE_TOLERANCE,
    WEIGHT_DRAW_HIGH,
    WEIGHT_DRAW_LOW,
)
from mc_portfolio.entities import PortfolioCandidate, SimulationResult
from mc_portfolio.errors import (
    DivisionByZeroError,
    InsufficientDataError,
    InvalidInputError,
    NegativeVarianceError,
)

MEAN_COLUMN = "Portfolio Mean"
SIGMA_COLUMN = "Portfolio Sigma"
SHARPE_COLUMN = "Sharpe Ratio"
METRIC_COLUMNS = [MEAN_COLUMN, SIGMA_COLUMN, SHARPE_COLUMN]


# ---------------------------
# Input alignment
# ---------------------------
def _as_statistics(mean_returns, covariance) -> tuple[pd.Series, pd.DataFrame]:
    """Coerce inputs to a float Series and a covariance frame in the same asset order."""
    try:
        mu = pd.Series(mean_returns).astype(float)
        k = len(mu)
        if k < 1:
            raise InsufficientDataError("Mean vector is empty", required=1, available=0)
        if mu.index.has_duplicates:
            raise InvalidInputError("Duplicate asset labels in mean vector", field="mean_returns")

        if isinstance(covariance, pd.DataFrame):
            labels = set(mu.index)
            if (
                covariance.shape != (k, k)
                or set(covariance.index) != labels
                or set(covariance.columns) != labels
            ):
                raise InvalidInputError(
                    "Covariance matrix and mean vector cover different assets",
                    field="covariance",
                    value=list(covariance.columns),
                )
            cov = covariance.loc[mu.index, mu.index].astype(float)
        else:
            arr = np.asarray(covariance, dtype=float)
            if arr.shape != (k, k):
                raise InvalidInputError(
                    f"Covariance matrix must be {k}x{k}, got shape {arr.shape}",
                    field="covariance",
                    value=arr.shape,
                )
            cov = pd.DataFrame(arr, index=mu.index, columns=mu.index)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Non-numeric statistics: {exc}") from exc

    if not np.isfinite(mu.to_numpy()).all():
        raise InvalidInputError("Mean vector contains NaN or infinite values", field="mean_returns")
    if not np.isfinite(cov.to_numpy()).all():
        raise InvalidInputError("Covariance matrix contains NaN or infinite values", field="covariance")

    return mu, cov


def _as_rate(risk_free_rate) -> float:
    try:
        rf = float(risk_free_rate)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Risk-free rate must be a number, got {risk_free_rate!r}",
                                field="risk_free_rate", value=risk_free_rate) from exc
    if not np.isfinite(rf):
        raise InvalidInputError(f"Risk-free rate must be finite, got {rf}",
                                field="risk_free_rate", value=rf)
    return rf


def _as_generator(seed) -> np.random.Generator:
    """Per-call Generator from a non-negative integer seed, None, or an existing Generator."""
    if seed is None or isinstance(seed, np.random.Generator):
        return np.random.default_rng(seed)
    if isinstance(seed, (bool, np.bool_)) or not isinstance(seed, numbers.Integral) or seed < 0:
        raise InvalidInputError(f"Seed must be a non-negative integer or a Generator, got {seed!r}",
                                field="seed", value=seed)
    return np.random.default_rng(int(seed))


# ---------------------------
# Weights + scoring
# ---------------------------
def default_trial_count(n_assets: int) -> int:
    """Scale simulation density with the number of assets."""
    return TRIALS_PER_ASSET * n_assets


def draw_weights(n_trials: int, n_assets: int, rng: np.random.Generator) -> np.ndarray:
    """
    Draw a (n_trials, n_assets) block of long-only, fully-invested weights.
    Raw draws come from uniform[1, 10) so no asset collapses to ~0 weight;
    each row is divided by its sum.
    """
    draws = rng.uniform(WEIGHT_DRAW_LOW, WEIGHT_DRAW_HIGH, size=(n_trials, n_assets))
    return draws / draws.sum(axis=1, keepdims=True)


def _score(W: np.ndarray,
           mu: np.ndarray,
           Sigma: np.ndarray,
           rf: float,
           trials: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    exp_ret = W @ mu
    quad    = np.einsum('ij,jk,ik->i', W, Sigma, W)

    negative = quad < -VARIANCE_TOLERANCE
    if negative.any():
        i = int(np.argmax(negative))
        trial = int(trials[i]) if trials is not None else None
        raise NegativeVarianceError(
            f"Portfolio variance {quad[i]:.3e} is negative (trial {trial}); "
            "covariance matrix is not positive semi-definite",
            trial=trial,
            variance=float(quad[i]),
        )

    # rounding noise in [-tol, 0) is clamped
    vol = np.sqrt(np.clip(quad, 0.0, None))

    flat = vol == 0.0
    if flat.any():
        i = int(np.argmax(flat))
        trial = int(trials[i]) if trials is not None else None
        raise DivisionByZeroError(
            f"Portfolio volatility is zero (trial {trial}); Sharpe ratio is undefined",
            trial=trial,
        )

    sharpe = (exp_ret - rf) / vol
    return exp_ret, vol, sharpe


def portfolio_metrics(weights,
                      mean_returns,
                      covariance,
                      rf: float = 0.0) -> tuple[float, float, float]:
    """Expected return, volatility and Sharpe ratio of a single weight vector."""
    mu, cov = _as_statistics(mean_returns, covariance)

    if isinstance(weights, pd.Series):
        if set(weights.index) != set(mu.index):
            raise InvalidInputError("Weights and mean vector cover different assets", field="weights")
        weights = weights.loc[mu.index]
    w = np.asarray(weights, dtype=float)

    if w.shape != (len(mu),):
        raise InvalidInputError(f"Expected {len(mu)} weights, got shape {w.shape}", field="weights")
    if (w < 0).any() or not np.isclose(w.sum(), 1.0, atol=1e-9):
        raise InvalidInputError("Weights must be non-negative and sum to 1", field="weights", value=w.tolist())

    exp_ret, vol, sharpe = _score(w[None, :], mu.to_numpy(), cov.to_numpy(), _as_rate(rf))
    return float(exp_ret[0]), float(vol[0]), float(sharpe[0])


# ---------------------------
# Monte Carlo over weights
# ---------------------------
def simulate_portfolios(mean_returns,
                        covariance,
                        risk_free_rate: float = 0.0,
                        n_trials: int | None = None,
                        seed: int | np.random.Generator | None = DEFAULT_SEED) -> SimulationResult:
    """
    Monte Carlo search for the best-by-Sharpe long-only, fully-invested weights.

    Args:
        mean_returns: Series (or mapping / 1-d array) of mean period returns.
        covariance: K x K covariance; a labelled frame is aligned to the
            mean vector's asset order.
        risk_free_rate: Per-period risk-free rate subtracted in the Sharpe ratio.
        n_trials: Number of weight vectors; defaults to 100 per asset.
        seed: Seed or Generator for this call only. Global numpy state is
            never touched.

    Returns:
        SimulationResult with the full table in generation order and the
        optimal candidate.

    Raises:
        InvalidInputError: mismatched, non-finite or non-numeric inputs, a
            non-finite risk-free rate, a trial count that is not a positive
            integer, or a negative / non-integer seed.
        NegativeVarianceError: some candidate's variance is below -1e-12.
        DivisionByZeroError: some candidate has zero volatility.
    """
    mu, cov = _as_statistics(mean_returns, covariance)
    k = len(mu)
    rf = _as_rate(risk_free_rate)

    if n_trials is None:
        n_trials = default_trial_count(k)
    if (isinstance(n_trials, (bool, np.bool_))
            or not isinstance(n_trials, numbers.Integral)
            or n_trials < 1):
        raise InvalidInputError(f"n_trials must be a positive integer, got {n_trials!r}",
                                field="n_trials", value=n_trials)
    n_trials = int(n_trials)

    rng = _as_generator(seed)

    # 1) all draws up front, so trial i always gets row i
    W = draw_weights(n_trials, k, rng)

    # 2) analytic MV scoring
    exp_ret, vol, sharpe = _score(W, mu.to_numpy(), cov.to_numpy(), rf,
                                  trials=np.arange(n_trials))

    table = pd.DataFrame(W, columns=mu.index)
    table[MEAN_COLUMN] = exp_ret
    table[SIGMA_COLUMN] = vol
    table[SHARPE_COLUMN] = sharpe
    table.index.name = "trial"

    # 3) pick the best-by-Sharpe (argmax keeps the first maximum)
    best = int(np.argmax(sharpe))

    return SimulationResult(table=table, optimal=candidate_from_row(table, best))


# ---------------------------
# Table helpers
# ---------------------------
def candidate_from_row(table: pd.DataFrame, trial: int) -> PortfolioCandidate:
    row = table.loc[trial]
    return PortfolioCandidate(
        trial=int(trial),
        weights={asset: float(w) for asset, w in row.drop(METRIC_COLUMNS).items()},
        mean=float(row[MEAN_COLUMN]),
        sigma=float(row[SIGMA_COLUMN]),
        sharpe=float(row[SHARPE_COLUMN]),
    )


def rank_simulations(table: pd.DataFrame) -> pd.DataFrame:
    """Table sorted by Sharpe ratio, best first; equal ratios keep generation order."""
    return table.sort_values(SHARPE_COLUMN, ascending=False, kind="mergesort")
