"""Pytest configuration and shared fixtures.

This file runs BEFORE any test imports, allowing us to mock
dependencies before they are imported by the modules under test.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

# Mock network dependencies BEFORE any module imports them
sys.modules["yfinance"] = MagicMock()

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import numpy as np
import pandas as pd
import pytest

from arima_garch.errors import ModelFitError
from arima_garch.garch.models import CandidateSpec, FittedModel


def make_trending_prices(n: int = 300, seed: int = 0) -> pd.Series:
    """Prices whose log is a linear trend plus white noise.

    The level is clearly non-stationary (trend), while the first difference is
    over-differenced noise, which ADF and KPSS both call stationary.
    """
    rng = np.random.default_rng(seed)
    t = np.arange(n)
    log_prices = np.log(100.0) + 0.001 * t + 0.01 * rng.standard_normal(n)
    index = pd.bdate_range("2002-02-01", periods=n, name="date")
    return pd.Series(np.exp(log_prices), index=index, name="adj_close")


def make_garch_prices(n: int = 800, seed: int = 0) -> pd.Series:
    """Prices whose log returns follow a GARCH(1,1) with 1% daily volatility."""
    rng = np.random.default_rng(seed)
    omega, alpha, beta = 2e-6, 0.08, 0.9
    sigma2 = omega / (1.0 - alpha - beta)
    returns = np.empty(n - 1)
    for t, z in enumerate(rng.standard_normal(n - 1)):
        returns[t] = np.sqrt(sigma2) * z
        sigma2 = omega + alpha * returns[t] ** 2 + beta * sigma2
    log_prices = np.log(100.0) + np.concatenate([[0.0], np.cumsum(returns)])
    index = pd.bdate_range("2002-02-01", periods=n, name="date")
    return pd.Series(np.exp(log_prices), index=index, name="adj_close")


def write_price_csv(
path: Path, prices: pd.Series) -> Path:
    """Write prices in the Yahoo Finance export layout."""
    frame = pd.DataFrame(
        {
            "Date": prices.index.strftime("%Y-%m-%d"),
            "Open": prices.to_numpy(),
            "Close": prices.to_numpy(),
            "Adj Close": prices.to_numpy(),
            "Volume": 1000,
        }
    )
    frame.to_csv(path, index=False)
    return path


class FakeBackend:
    """StatisticalBackend returning scripted criteria and p-values.

    Residual series carry the candidate name so diagnostic_tests can look up
    the scripted Ljung-Box p-value.
    """

    def __init__(
        self,
        criteria: dict[str, float],
        lb_pvalues: dict[str, float] | None = None,
        *,
        arima_order: tuple[int, int, int] = (0, 0, 0),
        mean_forecast: float = 0.0,
        fail_on: str | None = None,
    ) -> None:
        self.criteria = criteria
        self.lb_pvalues = lb_pvalues or {}
        self.arima_order = arima_order
        self.mean_forecast = mean_forecast
        self.fail_on = fail_on
        self.fitted: list[str] = []
        self.arima_calls = 0

    def fit_variance_model(self, series: pd.Series, spec: CandidateSpec) -> FittedModel:
        if spec.name == self.fail_on:
            raise ModelFitError(f"scripted failure for {spec.name}", details=spec.orders())
        self.fitted.append(spec.name)
        rng = np.random.default_rng(len(self.fitted))
        return FittedModel(
            spec=spec,
            params={"omega": 1e-6, "alpha[1]": 0.1, "beta[1]": 0.85},
            std_resid=pd.Series(rng.standard_normal(len(series)), index=series.index, name=spec.name),
            loglikelihood=1000.0,
            num_params=4,
            nobs=len(series),
        )

    def forecast(self, fitted: FittedModel, horizon: int) -> tuple[np.ndarray, np.ndarray]:
        return np.full(horizon, self.mean_forecast), np.full(horizon, 1e-4)

    def diagnostic_tests(self, residuals: pd.Series, lags: int) -> dict[str, float]:
        return {
            "ljung_box_stat": 10.0,
            "ljung_box_p": self.lb_pvalues.get(residuals.name, 0.5),
            "jarque_bera_stat": 500.0,
            "jarque_bera_p": 1e-10,
        }

    def information_criterion(self, fitted: FittedModel, criterion: str = "aic") -> float:
        return self.criteria[fitted.spec.name]

    def auto_select_arima_order(self, series: pd.Series) -> tuple[int, int, int]:
        self.arima_calls += 1
        return self.arima_order


@pytest.fixture
def trending_prices() -> pd.Series:
    """300 business days of trending prices."""
    return make_trending_prices()


@pytest.fixture
def price_csv(tmp_path: Path, trending_prices: pd.Series) -> Path:
    """CSV file in the Yahoo Finance layout holding trending_prices."""
    return write_price_csv(tmp_path / "prices.csv", trending_prices)


@pytest.fixture
def reference_backend() -> FakeBackend:
    """Fake backend reproducing the reference AIC values of the two GARCH candidates."""
    return FakeBackend({"GARCH(1,1)": -4.9985, "GARCH(2,2)": -4.9977})
