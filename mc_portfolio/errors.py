"""Custom exceptions for mc_portfolio.

Every failure the analysis can hit is a deterministic input-data problem, so
these are raised straight to the caller and never retried.
"""


class PortfolioAnalysisError(Exception):
    """Base exception for all mc_portfolio errors."""

    pass


# ============================================================================
# Data errors
# ============================================================================


class DataError(PortfolioAnalysisError):
    """Base class for data-related errors."""

    pass


class InsufficientDataError(DataError):
    """Raised when there are too few periods or assets to estimate statistics.

    Examples:
    - A single return period (sample covariance needs at least two)
    - An empty asset list
    """

    def __init__(self, message: str, required: int | None = None, available: int | None = None):
        super().__init__(message)
        self.required = required
        self.available = available


class InvalidInputError(DataError):
    """Raised when input data fails validation.

    Examples:
    - Missing or non-numeric returns reaching the estimator
    - Mean vector and covariance matrix for different assets
    - Non-positive trial count
    """

    def __init__(self, message: str, field: str | None = None, value: object = None):
        super().__init__(message)
        self.field = field
        self.value = value


class FetchError(DataError):
    """Raised when price data cannot be fetched from an external service.

    Examples:
    - Network error from yfinance
    - Ticker with no price history in the requested window
    """

    def __init__(self, message: str, service: str, symbol: str | None = None):
        super().__init__(message)
        self.service = service
        self.symbol = symbol


# ============================================================================
# Simulation errors
# ============================================================================


class SimulationError(PortfolioAnalysisError):
    """Base class for numerical errors during portfolio simulation."""

    pass


class NegativeVarianceError(SimulationError):
    """Raised when a portfolio variance is negative beyond rounding noise.

    This means the covariance matrix is not positive semi-definite, e.g. it
    was corrupted or built from degenerate data.
    """

    def __init__(self, message: str, trial: int | None = None, variance: float | None = None):
        super().__init__(message)
        self.trial = trial
        self.variance = variance


class DivisionByZeroError(SimulationError, ZeroDivisionError):
    """Raised when a portfolio has zero volatility and its Sharpe ratio is undefined."""

    def __init__(self, message: str, trial: int | None = None):
        super().__init__(message)
        self.trial = trial
