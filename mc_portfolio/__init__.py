"""Monte Carlo mean-variance portfolio analysis."""

from mc_portfolio.analysis import analyze_returns, run_analysis
from mc_portfolio.config import AnalysisConfig
from mc_portfolio.entities import AnalysisResult, PortfolioCandidate, SimulationResult
from mc_portfolio.estimation import estimate_statistics
from mc_portfolio.optimization import rank_simulations, simulate_portfolios

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "PortfolioCandidate",
    "SimulationResult",
    "analyze_returns",
    "estimate_statistics",
    "rank_simulations",
    "run_analysis",
    "simulate_portfolios",
]
