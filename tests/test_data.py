"""Tests for price download, CSV caching and return computation."""

import numpy as np
import pandas as pd
import pytest
import yfinance as yf

from mc_portfolio.data import compute_returns, fetch_prices, load_price_data, save_prices
from mc_portfolio.errors import FetchError, InvalidInputError


def _yf_frame(tickers: list[str], periods: int = 4) -> pd.DataFrame:
    """Frame shaped like a multi-ticker yf.download result."""
    index = pd.date_range("2024-01-31", periods=periods, freq="ME", name="Date")
    columns = pd.MultiIndex.from_product([["Adj Close", "Close"], tickers], names=["Price", "Ticker"])
    values = np.arange(periods * len(columns), dtype=float).reshape(periods, len(columns)) + 100
    return pd.DataFrame(values, index=index, columns=columns)


class TestFetchPrices:
    """Tests for fetch_prices."""

    def test_returns_adjusted_close_in_requested_order(self, monkeypatch):
        calls = {}

        def fake_download(tickers, **kwargs):
            calls["tickers"] = tickers
            calls.update(kwargs)
            return _yf_frame(["AAPL", "MSFT"])

        monkeypatch.setattr(yf, "download", fake_download)
        prices = fetch_prices(["msft", "AAPL"], "2024-01-01", "2024-06-01", interval="1mo")

        assert list(prices.columns) == ["MSFT", "AAPL"]
        assert len(prices) == 4
        assert calls["tickers"] == ["MSFT", "AAPL"]
        assert calls["interval"] == "1mo"
        assert calls["auto_adjust"] is False
        # Adj Close block, not Close
        assert prices["AAPL"].iloc[0] == 100.0

    def test_series_result_becomes_single_column(self, monkeypatch):
        index = pd.date_range("2024-01-31", periods=3, freq="ME")
        raw = pd.DataFrame({"Adj Close": [1.0, 2.0, 3.0], "Close": [1.0, 2.0, 3.0]}, index=index)
        monkeypatch.setattr(yf, "download", lambda *a, **k: raw)

        prices = fetch_prices(["AAPL"], "2024-01-01", "2024-04-01")

        assert list(prices.columns) == ["AAPL"]

    def test_download_failure_raises_fetch_error(self, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(yf, "download", boom)

        with pytest.raises(FetchError) as exc_info:
            fetch_prices(["AAPL"], "2024-01-01", "2024-06-01")

        assert exc_info.value.service == "yfinance"

    def test_empty_download_raises_fetch_error(self, monkeypatch):
        monkeypatch.setattr(yf, "download", lambda *a, **k: pd.DataFrame())

        with pytest.raises(FetchError):
            fetch_prices(["AAPL"], "2024-01-01", "2024-06-01")

    def test_ticker_without_prices_named(self, monkeypatch):
        raw = _yf_frame(["AAPL", "XXXX"])
        raw[("Adj Close", "XXXX")] = np.nan
        monkeypatch.setattr(yf, "download", lambda *a, **k: raw)

        with pytest.raises(FetchError) as exc_info:
            fetch_prices(["AAPL", "XXXX"], "2024-01-01", "2024-06-01")

        assert exc_info.value.symbol == "XXXX"

    def test_empty_tickers_rejected(self):
        with pytest.raises(InvalidInputError):
            fetch_prices([], "2024-01-01", "2024-06-01")

    def test_duplicate_tickers_rejected(self):
        with pytest.raises(InvalidInputError):
            fetch_prices(["AAPL", "aapl"], "2024-01-01", "2024-06-01")


class TestComputeReturns:
    """Tests for compute_returns."""

    @pytest.fixture
    def gappy_prices(self) -> pd.DataFrame:
        index = pd.date_range("2024-01-31", periods=5, freq="ME")
        return pd.DataFrame(
            {
                "A": [100.0, 110.0, 121.0, 133.1, 146.41],
                "B": [50.0, 55.0, np.nan, 60.5, 66.55],
            },
            index=index,
        )

    def test_simple_returns_drop_rows_with_gaps(self, gappy_prices):
        returns = compute_returns(gappy_prices)

        # periods 2 and 3 touch the missing B price
        assert list(returns.index) == [gappy_prices.index[1], gappy_prices.index[4]]
        np.testing.assert_allclose(returns.to_numpy(), 0.1)
        assert not returns.isna().any().any()

    def test_log_returns(self, gappy_prices):
        returns = compute_returns(gappy_prices, method="log")

        np.testing.assert_allclose(returns.to_numpy(), np.log(1.1))

    def test_first_period_dropped(self, sample_prices):
        returns = compute_returns(sample_prices)

        assert len(returns) == len(sample_prices) - 1
        assert returns.index[0] == sample_prices.index[1]

    def test_unknown_method_rejected(self, sample_prices):
        with pytest.raises(InvalidInputError):
            compute_returns(sample_prices, method="arithmetic")


class TestPriceCsv:
    """Tests for save_prices / load_price_data."""

    def test_round_trip(self, tmp_path, sample_prices):
        path = tmp_path / "prices.csv"
        save_prices(sample_prices, str(path))
        loaded = load_price_data(str(path))

        assert list(loaded.columns) == list(sample_prices.columns)
        assert list(loaded.index.strftime("%Y-%m-%d")) == list(sample_prices.index.strftime("%Y-%m-%d"))
        np.testing.assert_allclose(loaded.to_numpy(), sample_prices.to_numpy())

    def test_load_sorts_chronologically(self, tmp_path, sample_prices):
        path = tmp_path / "prices.csv"
        sample_prices.iloc[::-1].to_csv(path)

        loaded = load_price_data(str(path))

        assert loaded.index.is_monotonic_increasing
