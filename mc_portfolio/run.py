"""
Run a Monte Carlo max-Sharpe analysis from the command line.

  mc-portfolio --tickers AAPL MSFT NVDA --start 2020-01-31 --end 2024-12-31
  mc-portfolio --prices-csv data.csv --rf 0.002 --trials 5000 --plot
"""

import argparse
import logging
import sys
from datetime import date

from mc_portfolio.analysis import run_analysis
from mc_portfolio.config import (
    DEFAULT_INTERVAL,
    DEFAULT_RETURN_METHOD,
    DEFAULT_TICKERS,
    AnalysisConfig,
)
from mc_portfolio.data import RETURN_METHODS, fetch_prices, load_price_data, save_prices
from mc_portfolio.entities import AnalysisResult
from mc_portfolio.errors import PortfolioAnalysisError
from mc_portfolio.optimization import rank_simulations
from mc_portfolio.visual import plot_simulations, plot_weights_bar

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monte Carlo search for the max-Sharpe long-only portfolio."
    )
    parser.add_argument("--tickers", nargs="+", default=None,
                        help="Asset identifiers (default: columns of --prices-csv, "
                             "else a large-cap tech basket)")
    parser.add_argument("--start", type=date.fromisoformat, default=None,
                        help="Window start YYYY-MM-DD (default: lookback from --end)")
    parser.add_argument("--end", type=date.fromisoformat, default=None,
                        help="Window end YYYY-MM-DD (default: today)")
    parser.add_argument("--rf", type=float, default=None,
                        help="Per-period risk-free rate (default: 0)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed (default: 42)")
    parser.add_argument("--trials", type=int, default=None,
                        help="Number of simulated portfolios (default: 100 x assets)")
    parser.add_argument("--interval", default=DEFAULT_INTERVAL,
                        help="yfinance bar interval, e.g. 1d, 1wk, 1mo")
    parser.add_argument("--method", choices=RETURN_METHODS, default=DEFAULT_RETURN_METHOD,
                        help="Simple or log returns")
    parser.add_argument("--prices-csv", default=None,
                        help="Read prices from this CSV instead of downloading")
    parser.add_argument("--save-prices", default=None,
                        help="Write downloaded prices to this CSV")
    parser.add_argument("--top", type=int, default=5,
                        help="Rows of the ranked simulation table to print")
    parser.add_argument("--plot", action="store_true",
                        help="Show the simulation scatter and optimal weights")
    return parser


def print_report(result: AnalysisResult, top: int) -> None:
    opt = result.optimal

    print(f"\nMonte Carlo best-by-Sharpe portfolio (trial {opt.trial} of {result.n_trials}):")
    for t, w in sorted(opt.weights.items(), key=lambda x: -x[1]):
        print(f"  {t:>6}: {w:6.2%}")
    print(f"\nExpected return : {opt.mean:8.4%}")
    print(f"Volatility      : {opt.sigma:8.4%}")
    print(f"Sharpe ratio    : {opt.sharpe:8.4f}")

    if top > 0:
        print(f"\nTop {top} simulated portfolios:")
        print(rank_simulations(result.simulations).head(top).round(4).to_string())


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    prices = load_price_data(args.prices_csv) if args.prices_csv else None
    if args.tickers:
        tickers = args.tickers
    elif prices is not None:
        tickers = list(prices.columns)
    else:
        tickers = list(DEFAULT_TICKERS)

    config = AnalysisConfig.from_env(
        tickers,
        start=args.start,
        end=args.end,
        risk_free_rate=args.rf,
        seed=args.seed,
        n_trials=args.trials,
        interval=args.interval,
        return_method=args.method,
    )

    try:
        if prices is None and args.save_prices:
            prices = fetch_prices(config.tickers, config.start, config.end, interval=config.interval)
            save_prices(prices, args.save_prices)
        result = run_analysis(config, prices=prices)
    except PortfolioAnalysisError as exc:
        logger.error("Analysis failed: %s", exc)
        return 1

    print_report(result, args.top)

    if args.plot:
        plot_simulations(result)
        plot_weights_bar(result.optimal)

    return 0


if __name__ == "__main__":   # pragma: no cover
    sys.exit(main())
