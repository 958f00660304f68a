import matplotlib.pyplot as plt
import numpy as np

from mc_portfolio.entities import AnalysisResult, PortfolioCandidate
from mc_portfolio.optimization import MEAN_COLUMN, SHARPE_COLUMN, SIGMA_COLUMN


def plot_simulations(result: AnalysisResult, ax=None, show: bool = True):
    """
    MC cloud coloured by Sharpe ratio, optimal star, and the capital
    allocation line from the risk-free rate through the optimum.
    """
    table = result.simulations
    opt = result.optimal
    rf = result.risk_free_rate

    if ax is None:
        fig, ax = plt.subplots(figsize=(9, 6))
    else:
        fig = ax.figure

    # MC cloud first (underlay)
    cloud = ax.scatter(table[SIGMA_COLUMN], table[MEAN_COLUMN], c=table[SHARPE_COLUMN],
                       cmap="viridis", s=10, alpha=0.5, label="MC portfolios")
    fig.colorbar(cloud, ax=ax, label="Sharpe ratio")

    # Capital allocation line
    x_max = float(table[SIGMA_COLUMN].max()) * 1.1
    xs = np.linspace(0.0, x_max, 50)
    ax.plot(xs, rf + opt.sharpe * xs, linestyle="--", linewidth=2, color="tab:red",
            label="Capital allocation line")

    # Optimal point
    ax.scatter([opt.sigma], [opt.mean], marker="*", s=200, color="tab:red",
               label=f"Max Sharpe (SR={opt.sharpe:.2f})")

    ax.set_xlabel("Portfolio Sigma")
    ax.set_ylabel("Portfolio Mean")
    ax.set_title("Monte Carlo Portfolios")
    ax.grid(True)
    ax.legend()
    fig.tight_layout()

    if show:
        plt.show()
    return fig


def plot_weights_bar(optimal: PortfolioCandidate, ax=None, show: bool = True):
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    ax.bar([str(a) for a in optimal.weights], list(optimal.weights.values()))
    ax.tick_params(axis="x", labelrotation=45)
    ax.set_ylabel("Weight")
    ax.set_title("Optimal Portfolio Weights")
    ax.grid(axis="y")
    fig.tight_layout()

    if show:
        plt.show()
    return fig
