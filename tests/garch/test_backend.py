"""Tests for the arch/statsmodels backend on simulated GARCH returns."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import numpy as np
import pandas as pd
import pytest

from arima_garch.config import PipelineConfig
from arima_garch.errors import InsufficientDataError, ModelFitError
from arima_garch.garch import ArchStatsmodelsBackend, CandidateSpec, FittedModel, StatisticalBackend


def _simulate_garch(
    n: int = 1500,
    omega: float = 2e-6,
    alpha: float = 0.08,
    beta: float = 0.9,
    seed: int = 0,
) -> pd.Series:
    """Daily-return-like GARCH(1,1) path with 1% unconditional volatility."""
    rng = np.random.default_rng(seed)
    z = rng.standard_normal(n)
    returns = np.empty(n)
    sigma2 = omega / (1.0 - alpha - beta)
    for t in range(n):
        returns[t] = np.sqrt(sigma2) * z[t]
        sigma2 = omega + alpha * returns[t] ** 2 + beta * sigma2
    index = pd.bdate_range("2002-02-04", periods=n, name="date")
    return pd.Series(returns, index=index, name="log_diff")


@pytest.fixture(scope="module")
def returns() -> pd.Series:
    return _simulate_garch()


@pytest.fixture(scope="module")
def backend() -> ArchStatsmodelsBackend:
    return ArchStatsmodelsBackend()


@pytest.fixture(scope="module")
def garch11(returns: pd.Series, backend: ArchStatsmodelsBackend) -> FittedModel:
    return backend.fit_variance_model(returns, CandidateSpec("GARCH(1,1)", distribution="normal"))


class TestFitVarianceModel:
    """Tests for fit_variance_model."""

    def test_is_a_backend(self, backend: ArchStatsmodelsBackend) -> None:
        assert isinstance(backend, StatisticalBackend)

    def test_constant_mean_fit(self, garch11: FittedModel, returns: pd.Series) -> None:
        assert garch11.nobs == len(returns)
        assert garch11.num_params == 4
        assert set(garch11.params) == {"mu", "omega", "alpha[1]", "beta[1]"}
        assert len(garch11.std_resid) == len(returns)
        assert garch11.scale == 100.0

    def test_loglikelihood_on_raw_scale(self, garch11: FittedModel) -> None:
        # About 3.2 nats per observation for 1% daily volatility
        per_obs = garch11.loglikelihood / garch11.nobs
        assert 2.5 < per_obs < 4.0

    def test_params_on_raw_scale(self, garch11: FittedModel) -> None:
        params = garch11.params
        assert 0 < params["omega"] < 1e-4
        assert abs(params["mu"]) < 1e-3
        assert 0.8 < params["alpha[1]"] + params["beta[1]"] < 1.0

    def test_aic_formula(self, garch11: FittedModel, backend: ArchStatsmodelsBackend) -> None:
        expected = (-2.0 * garch11.loglikelihood + 2.0 * 4) / garch11.nobs
        assert backend.information_criterion(garch11, "aic") == pytest.approx(expected)
        assert backend.information_criterion(garch11, "bic") == pytest.approx(garch11.bic)

    def test_unknown_criterion(self, garch11: FittedModel, backend: ArchStatsmodelsBackend) -> None:
        with pytest.raises(ValueError, match="criterion"):
            backend.information_criterion(garch11, "hqic")

    def test_ar_mean_is_fitted_jointly(
        self, returns: pd.Series, backend: ArchStatsmodelsBackend
    ) -> None:
        fitted = backend.fit_variance_model(
            returns, CandidateSpec("ARMA(1,0)+GARCH(1,1)", mean_order=(1, 0), distribution="normal")
        )
        assert "Const" in fitted.params
        assert fitted.num_params == 5
        assert set(fitted.result) == {"garch"}

        mean, variance = backend.forecast(fitted, 5)
        assert mean.shape == (5,)
        assert np.all(variance > 0)
        # One-step AR(1) mean on the raw scale
        expected = fitted.params["Const"] + fitted.params["y[1]"] * returns.iloc[-1]
        assert mean[0] == pytest.approx(expected, rel=1e-6, abs=1e-12)

    def test_arma_mean_is_fitted_in_two_steps(
        self, returns: pd.Series, backend: ArchStatsmodelsBackend
    ) -> None:
        fitted = backend.fit_variance_model(
            returns, CandidateSpec("ARMA(1,1)+GARCH(1,1)", mean_order=(1, 1), distribution="normal")
        )
        arma_keys = [k for k in fitted.params if k.startswith("arma.")]
        assert len(arma_keys) == 3
        assert "arma.sigma2" not in fitted.params
        assert fitted.num_params == 3 + len(arma_keys)
        assert set(fitted.result) == {"garch", "arma"}

        mean, variance = backend.forecast(fitted, 4)
        assert mean.shape == (4,)
        assert np.all(variance > 0)

    def test_short_series(self, backend: ArchStatsmodelsBackend) -> None:
        with pytest.raises(InsufficientDataError):
            backend.fit_variance_model(_simulate_garch(30), CandidateSpec("GARCH(1,1)"))

    def test_library_error_becomes_model_fit_error(
        self, returns: pd.Series, backend: ArchStatsmodelsBackend
    ) -> None:
        with patch("arima_garch.garch.backend.arch_model", side_effect=RuntimeError("boom")):
            with pytest.raises(ModelFitError, match="boom") as excinfo:
                backend.fit_variance_model(returns, CandidateSpec("GARCH(1,1)"))
        assert excinfo.value.details["candidate"] == "GARCH(1,1)"

    def test_non_convergence(self, returns: pd.Series, backend: ArchStatsmodelsBackend) -> None:
        fake_model = MagicMock()
        fake_model.fit.return_value.convergence_flag = 4
        with patch("arima_garch.garch.backend.arch_model", return_value=fake_model):
            with pytest.raises(ModelFitError, match="did not converge"):
                backend.fit_variance_model(returns, CandidateSpec("GARCH(1,1)"))

    def test_arma_mean_non_convergence(
        self, returns: pd.Series, backend: ArchStatsmodelsBackend
    ) -> None:
        fake_sarimax = MagicMock()
        fake_sarimax.return_value.fit.return_value.mle_retvals = {"converged": False}
        spec = CandidateSpec("ARMA(1,1)+GARCH(1,1)", mean_order=(1, 1))
        with patch("arima_garch.garch.backend.SARIMAX", fake_sarimax), patch(
            "arima_garch.garch.backend.arch_model"
        ) as fake_arch:
            with pytest.raises(ModelFitError, match="ARMA mean optimiser did not converge") as excinfo:
                backend.fit_variance_model(returns, spec)
        fake_arch.assert_not_called()
        assert excinfo.value.details["mean_order"] == (1, 1)

    def test_invalid_scale(self) -> None:
        with pytest.raises(ValueError):
            ArchStatsmodelsBackend(fit_scale=0)

    def test_from_config(self) -> None:
        config = PipelineConfig(fit_scale=10.0, arima_max_p=2, stationarity_alpha=0.01)
        backend = ArchStatsmodelsBackend.from_config(config)
        assert backend.fit_scale == 10.0
        assert backend.arima_max_p == 2
        assert backend.stationarity_alpha == 0.01

    def test_arima_search_uses_stationarity_alpha(self, returns: pd.Series) -> None:
        backend = ArchStatsmodelsBackend(arima_max_p=1, arima_max_q=1, stationarity_alpha=0.01)
        search = MagicMock()
        search.order = (1, 0, 0)
        with patch(
            "arima_garch.garch.backend.auto_select_arima_order", return_value=search
        ) as fake_search:
            assert backend.auto_select_arima_order(returns) == (1, 0, 0)
        assert fake_search.call_args.kwargs["alpha"] == 0.01
        assert backend.last_arima_search is search


class TestForecastAndDiagnostics:
    """Tests for forecast and diagnostic_tests."""

    def test_forecast_shapes(self, garch11: FittedModel, backend: ArchStatsmodelsBackend) -> None:
        mean, variance = backend.forecast(garch11, 30)
        assert mean.shape == (30,)
        assert variance.shape == (30,)
        np.testing.assert_allclose(mean, garch11.params["mu"], rtol=1e-6)
        # Variance forecasts are on the raw scale, near the 1e-4 long-run level
        assert np.all((variance > 1e-6) & (variance < 1e-2))

    def test_forecast_without_result(self, garch11: FittedModel, backend: ArchStatsmodelsBackend) -> None:
        bare = FittedModel(
            spec=garch11.spec,
            params=garch11.params,
            std_resid=garch11.std_resid,
            loglikelihood=garch11.loglikelihood,
            num_params=garch11.num_params,
            nobs=garch11.nobs,
        )
        with pytest.raises(ModelFitError) as excinfo:
            backend.forecast(bare, 5)
        assert excinfo.value.stage == "forecasting"

    def test_diagnostic_keys(self, garch11: FittedModel, backend: ArchStatsmodelsBackend) -> None:
        tests = backend.diagnostic_tests(garch11.std_resid, 20)
        assert set(tests) == {"ljung_box_stat", "ljung_box_p", "jarque_bera_stat", "jarque_bera_p"}
        # Correctly specified model: standardized residuals are white noise
        assert tests["ljung_box_p"] > 0.001


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
