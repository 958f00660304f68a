"""Price download, CSV caching and return computation."""

import logging
from datetime import date

import numpy as np
import pandas as pd
import yfinance as yf

from mc_portfolio.config import DEFAULT_INTERVAL, DEFAULT_RETURN_METHOD
from mc_portfolio.errors import FetchError, InvalidInputError

logger = logging.getLogger(__name__)

RETURN_METHODS = ("simple", "log")


def fetch_prices(
    tickers: list[str],
    start: date | str,
    end: date | str,
    interval: str = DEFAULT_INTERVAL,
) -> pd.DataFrame:
    """Download adjusted close prices from Yahoo Finance.

    Args:
        tickers: Asset identifiers; the returned columns follow this order.
        start: First day of the window (inclusive).
        end: Last day of the window (exclusive, as yfinance treats it).
        interval: yfinance bar interval, e.g. "1d", "1wk", "1mo".

    Returns:
        DataFrame with a date index and one column per ticker. Individual
        gaps are left in place; compute_returns drops them.

    Raises:
        InvalidInputError: empty or duplicated ticker list.
        FetchError: the download failed, came back empty, or some tickers
            have no prices at all.
    """
    tickers = [t.strip().upper() for t in tickers]
    if not tickers:
        raise InvalidInputError("At least one ticker is required", field="tickers", value=tickers)
    if len(set(tickers)) != len(tickers):
        raise InvalidInputError("Tickers must be unique", field="tickers", value=tickers)

    logger.info("Downloading %s prices for %s from %s to %s", interval, tickers, start, end)
    try:
        raw = yf.download(
            tickers,
            start=str(start),
            end=str(end),
            interval=interval,
            auto_adjust=False,
            progress=False,
        )
    except Exception as exc:  # noqa: BLE001
        raise FetchError(f"yfinance download failed: {exc}", service="yfinance") from exc

    if raw is None or raw.empty:
        raise FetchError(f"No price data returned for {tickers}", service="yfinance")

    prices = raw["Adj Close"]
    if isinstance(prices, pd.Series):
        prices = prices.to_frame(name=tickers[0])

    missing = [t for t in tickers if t not in prices.columns or prices[t].isna().all()]
    if missing:
        raise FetchError(f"No prices for {missing}", service="yfinance", symbol=missing[0])

    prices = prices[tickers].sort_index()
    prices.columns.name = None
    logger.info("Downloaded %d price rows for %d tickers", len(prices), len(tickers))
    return prices


def save_prices(prices: pd.DataFrame, csv_file: str) -> None:
    prices.to_csv(csv_file)
    logger.info("Prices saved ➜ %s", csv_file)


def load_price_data(csv_file: str) -> pd.DataFrame:
    """Read a price CSV whose first column is the date index."""
    df = pd.read_csv(csv_file, index_col=0, parse_dates=True)
    return df.sort_index()


def compute_returns(prices: pd.DataFrame, method: str = DEFAULT_RETURN_METHOD) -> pd.DataFrame:
    """Period-over-period returns with every incomplete row removed.

    Args:
        prices: Price frame, date index, one column per asset.
        method: "simple" for p_t / p_{t-1} - 1, "log" for ln(p_t / p_{t-1}).

    Returns:
        Returns frame with no missing values. Any period where at least one
        asset has a gap is dropped entirely.
    """
    if method == "simple":
        returns = prices / prices.shift(1) - 1
    elif method == "log":
        returns = np.log(prices / prices.shift(1))
    else:
        raise InvalidInputError(
            f"Unknown return method {method!r}; expected one of {RETURN_METHODS}",
            field="method",
            value=method,
        )

    # first row is always empty
    returns = returns.iloc[1:].replace([np.inf, -np.inf], np.nan)
    clean = returns.dropna(how="any")

    dropped = len(returns) - len(clean)
    if dropped:
        logger.warning("Dropped %d of %d return periods with missing data", dropped, len(returns))
    return clean
