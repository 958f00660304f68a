"""Result entities produced by a portfolio analysis run."""

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class PortfolioCandidate:
    """One simulated portfolio."""

    # Position of the trial in generation order
    trial: int

    # Asset -> weight, in asset order (sum to 1)
    weights: dict

    # Weighted sum of mean returns
    mean: float

    # sqrt(w' Cov w)
    sigma: float

    # (mean - risk_free_rate) / sigma
    sharpe: float


@dataclass(frozen=True)
class SimulationResult:
    """Output of the simulation engine."""

    # One row per trial in generation order: weight columns, then
    # "Portfolio Mean", "Portfolio Sigma", "Sharpe Ratio"
    table: pd.DataFrame

    # Row with the highest Sharpe ratio (first one on ties)
    optimal: PortfolioCandidate


@dataclass(frozen=True)
class AnalysisResult:
    """Everything a full analysis hands back to its caller."""

    optimal: PortfolioCandidate
    simulations: pd.DataFrame
    mean_returns: pd.Series
    covariance: pd.DataFrame

    # Parameters used
    risk_free_rate: float
    seed: int | None

    @property
    def n_trials(self) -> int:
        return len(self.simulations)
