"""Sample statistics of a periodic returns matrix.

Pure functions: the caller is expected to have dropped incomplete rows
already, and anything that is not a clean numeric matrix is rejected.
"""

import numpy as np
import pandas as pd
from pandas.api.types import is_numeric_dtype

from mc_portfolio.config import COVARIANCE_DECIMALS, MEAN_DECIMALS
from mc_portfolio.errors import InsufficientDataError, InvalidInputError


def _validate_returns(returns: pd.DataFrame) -> None:
    n_periods, n_assets = returns.shape

    if n_assets < 1:
        raise InsufficientDataError(
            "Returns must cover at least one asset", required=1, available=n_assets
        )
    if n_periods < 2:
        raise InsufficientDataError(
            f"Sample covariance needs at least 2 periods, got {n_periods}",
            required=2,
            available=n_periods,
        )
    if returns.columns.has_duplicates:
        dupes = returns.columns[returns.columns.duplicated()].tolist()
        raise InvalidInputError(f"Duplicate asset labels: {dupes}", field="columns", value=dupes)

    non_numeric = [c for c in returns.columns if not is_numeric_dtype(returns[c])]
    if non_numeric:
        raise InvalidInputError(
            f"Non-numeric returns for {non_numeric}", field="returns", value=non_numeric
        )

    values = returns.to_numpy(dtype=float)
    bad = ~np.isfinite(values)
    if bad.any():
        cols = returns.columns[bad.any(axis=0)].tolist()
        raise InvalidInputError(
            f"Missing or infinite returns for {cols}; drop incomplete rows first",
            field="returns",
            value=cols,
        )


def estimate_statistics(returns: pd.DataFrame) -> tuple[pd.Series, pd.DataFrame]:
    """Reduce a returns matrix to its mean vector and covariance matrix.

    Args:
        returns: DataFrame with rows = periods, columns = asset identifiers.

    Returns:
        Tuple of (mean returns rounded to 5 digits, sample covariance with
        N-1 denominator rounded to 8 digits).

    Raises:
        InsufficientDataError: fewer than 2 periods or no assets.
        InvalidInputError: missing, infinite or non-numeric values, or
            duplicate asset labels.
    """
    if not isinstance(returns, pd.DataFrame):
        returns = pd.DataFrame(returns)

    _validate_returns(returns)

    mean_returns = returns.mean().round(MEAN_DECIMALS)
    covariance = returns.cov(ddof=1).round(COVARIANCE_DECIMALS)

    return mean_returns, covariance
