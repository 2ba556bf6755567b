"""Statistical backend: the only place that talks to arch and statsmodels.

The selection policy, the transforms and the evaluation only see the
``StatisticalBackend`` protocol, so they can be exercised with a fake backend.

Mean models:
- (0, 0): constant mean, fitted jointly with the GARCH variance by arch.
- (p, 0): AR(p) mean ("ARX" in arch), fitted jointly.
- (p, q) with q > 0: arch has no MA mean, so the ARMA(p, q) mean is fitted
  with SARIMAX first and a zero-mean GARCH is fitted on its residuals.

Returns are multiplied by ``fit_scale`` before the GARCH optimisation; the
log-likelihood, parameters and forecasts are mapped back to the raw scale.
"""

from __future__ import annotations

import math
from typing import Any, Protocol, runtime_checkable
import warnings

from arch import arch_model
import numpy as np
import pandas as pd
from statsmodels.tsa.statespace.sarimax import SARIMAX

from arima_garch.constants import (
    ARIMA_OPTUNA_N_TRIALS,
    ARIMA_P_MAX,
    ARIMA_Q_MAX,
    ARIMA_SEARCH_DEFAULT,
    DEFAULT_RANDOM_STATE,
    GARCH_FIT_MAX_ITER,
    GARCH_FIT_SCALE,
    GARCH_MIN_OBSERVATIONS,
    STATIONARITY_DEFAULT_ALPHA,
    STATIONARITY_MAX_DIFFERENCE_ORDER,
)
from arima_garch.errors import InsufficientDataError, ModelFitError
from arima_garch.garch.diagnostics import jarque_bera_test, ljung_box_test
from arima_garch.garch.models import CandidateSpec, FittedModel
from arima_garch.garch.order_selection import ArimaSearchResult, auto_select_arima_order
from arima_garch.utils import (
    get_logger,
    suppress_statsmodels_warnings,
    validate_positive_int,
    validate_series,
)

logger = get_logger(__name__)

# Parameters expressed in units of the series (rescaled by 1/scale)
_LOCATION_PARAMS = ("mu", "Const")
# Parameters expressed in squared units (rescaled by 1/scale**2)
_VARIANCE_PARAMS = ("omega",)


@runtime_checkable
class StatisticalBackend(Protocol):
    """Capabilities the pipeline needs from a statistics library."""

    def fit_variance_model(self, series: pd.Series, spec: CandidateSpec) -> FittedModel: ...

    def forecast(self, fitted: FittedModel, horizon: int) -> tuple[np.ndarray, np.ndarray]: ...

    def diagnostic_tests(self, residuals: pd.Series, lags: int) -> dict[str, float]: ...

    def information_criterion(self, fitted: FittedModel, criterion: str = "aic") -> float: ...

    def auto_select_arima_order(self, series: pd.Series) -> tuple[int, int, int]: ...


def _unscale_params(params: pd.Series, scale: float) -> dict[str, float]:
    out = {}
    for name, value in params.items():
        if name in _LOCATION_PARAMS:
            value = value / scale
        elif name in _VARIANCE_PARAMS:
            value = value / scale**2
        out[str(name)] = float(value)
    return out


class ArchStatsmodelsBackend:
    """StatisticalBackend built on arch (GARCH) and statsmodels (ARIMA, tests)."""

    def __init__(
        self,
        *,
        fit_scale: float = GARCH_FIT_SCALE,
        max_iter: int = GARCH_FIT_MAX_ITER,
        min_observations: int = GARCH_MIN_OBSERVATIONS,
        arima_max_p: int = ARIMA_P_MAX,
        arima_max_q: int = ARIMA_Q_MAX,
        arima_search: str = ARIMA_SEARCH_DEFAULT,
        arima_n_trials: int = ARIMA_OPTUNA_N_TRIALS,
        random_state: int = DEFAULT_RANDOM_STATE,
        max_difference_order: int = STATIONARITY_MAX_DIFFERENCE_ORDER,
        stationarity_alpha: float = STATIONARITY_DEFAULT_ALPHA,
    ) -> None:
        if fit_scale <= 0:
            raise ValueError(f"fit_scale must be positive, got {fit_scale}")
        self.fit_scale = float(fit_scale)
        self.max_iter = max_iter
        self.min_observations = min_observations
        self.arima_max_p = arima_max_p
        self.arima_max_q = arima_max_q
        self.arima_search = arima_search
        self.arima_n_trials = arima_n_trials
        self.random_state = random_state
        self.max_difference_order = max_difference_order
        self.stationarity_alpha = stationarity_alpha
        self.last_arima_search: ArimaSearchResult | None = None

    @classmethod
    def from_config(cls, config: Any) -> ArchStatsmodelsBackend:
        """Build a backend from a PipelineConfig."""
        return cls(
            fit_scale=config.fit_scale,
            arima_max_p=config.arima_max_p,
            arima_max_q=config.arima_max_q,
            arima_search=config.arima_search,
            arima_n_trials=config.arima_n_trials,
            random_state=config.random_state,
            max_difference_order=config.max_difference_order,
            stationarity_alpha=config.stationarity_alpha,
        )

    # ------------------------------------------------------------------ fitting

    def _fit_arch(self, y: np.ndarray, spec: CandidateSpec, mean: str, lags: int) -> Any:
        p_var, q_var = spec.variance_order
        model = arch_model(
            y * self.fit_scale,
            mean=mean,
            lags=lags,
            vol="GARCH",
            p=p_var,
            q=q_var,
            dist=spec.distribution,
            rescale=False,
        )
        result = model.fit(disp="off", show_warning=False, options={"maxiter": self.max_iter})
        if result.convergence_flag != 0:
            raise ModelFitError(
                f"GARCH optimiser did not converge for {spec.name}",
                details={**spec.orders(), "convergence_flag": int(result.convergence_flag)},
            )
        return result

    def _fit_joint(self, values: pd.Series, spec: CandidateSpec) -> FittedModel:
        p_mean = spec.mean_order[0]
        mean = "Constant" if p_mean == 0 else "ARX"
        res = self._fit_arch(values.to_numpy(), spec, mean, p_mean)
        std_resid = pd.Series(np.asarray(res.std_resid, dtype=float), index=values.index)
        return FittedModel(
            spec=spec,
            params=_unscale_params(res.params, self.fit_scale),
            std_resid=std_resid.dropna(),
            loglikelihood=float(res.loglikelihood) + res.nobs * math.log(self.fit_scale),
            num_params=int(res.num_params),
            nobs=int(res.nobs),
            scale=self.fit_scale,
            result={"garch": res},
        )

    def _fit_two_step(self, values: pd.Series, spec: CandidateSpec) -> FittedModel:
        p_mean, q_mean = spec.mean_order
        arma = SARIMAX(values.to_numpy(), order=(p_mean, 0, q_mean), trend="c").fit(disp=False)
        if not (arma.mle_retvals or {}).get("converged", True):
            raise ModelFitError(
                f"ARMA mean optimiser did not converge for {spec.name}",
                details={"candidate": spec.name, **spec.orders()},
            )
        resid = np.asarray(arma.resid, dtype=float)
        res = self._fit_arch(resid, spec, "Zero", 0)
        # sigma2 of the ARMA fit is replaced by the GARCH variance
        arma_params = {
            f"arma.{name}": float(value)
            for name, value in zip(arma.param_names, np.asarray(arma.params))
            if name != "sigma2"
        }
        std_resid = pd.Series(np.asarray(res.std_resid, dtype=float), index=values.index)
        return FittedModel(
            spec=spec,
            params={**arma_params, **_unscale_params(res.params, self.fit_scale)},
            std_resid=std_resid.dropna(),
            loglikelihood=float(res.loglikelihood) + res.nobs * math.log(self.fit_scale),
            num_params=int(res.num_params) + len(arma_params),
            nobs=int(res.nobs),
            scale=self.fit_scale,
            result={"garch": res, "arma": arma},
        )

    def fit_variance_model(self, series: pd.Series, spec: CandidateSpec) -> FittedModel:
        """Fit one candidate to a stationary return series.

        Raises:
            InsufficientDataError: If the series is shorter than min_observations.
            ModelFitError: If the library raises or does not converge.
        """
        values = validate_series(series)
        if values.size < self.min_observations:
            raise InsufficientDataError(
                f"GARCH fitting needs at least {self.min_observations} observations",
                stage="model_fitting",
                details={"candidate": spec.name, "n_observations": int(values.size)},
            )

        with warnings.catch_warnings():
            suppress_statsmodels_warnings()
            try:
                if spec.mean_order[1] == 0:
                    fitted = self._fit_joint(values, spec)
                else:
                    fitted = self._fit_two_step(values, spec)
            except ModelFitError:
                raise
            except Exception as exc:
                raise ModelFitError(
                    f"Failed to fit {spec.name}: {exc}",
                    details={"candidate": spec.name, **spec.orders()},
                ) from exc

        if not math.isfinite(fitted.loglikelihood):
            raise ModelFitError(
                f"Non-finite log-likelihood for {spec.name}",
                details={"candidate": spec.name, **spec.orders()},
            )
        return fitted

    # --------------------------------------------------------------- forecasting

    def forecast(self, fitted: FittedModel, horizon: int) -> tuple[np.ndarray, np.ndarray]:
        """Return (mean, variance) forecasts for steps 1..horizon on the raw scale."""
        validate_positive_int(horizon, "horizon")
        results = fitted.result or {}
        garch = results.get("garch")
        if garch is None:
            raise ModelFitError(
                f"{fitted.spec.name} carries no fitted GARCH result to forecast from",
                stage="forecasting",
            )
        scale = fitted.scale
        garch_fc = garch.forecast(horizon=horizon, reindex=False)
        variance = np.asarray(garch_fc.variance.to_numpy()[-1], dtype=float) / scale**2
        arma = results.get("arma")
        if arma is not None:
            mean = np.asarray(arma.get_forecast(steps=horizon).predicted_mean, dtype=float)
        else:
            mean = np.asarray(garch_fc.mean.to_numpy()[-1], dtype=float) / scale
        return mean, variance

    # --------------------------------------------------------------- diagnostics

    def diagnostic_tests(self, residuals: pd.Series, lags: int) -> dict[str, float]:
        """Ljung-Box at ``lags`` and Jarque-Bera on standardized residuals."""
        lb = ljung_box_test(residuals, lags)
        jb = jarque_bera_test(residuals)
        return {
            "ljung_box_stat": lb["statistic"],
            "ljung_box_p": lb["p_value"],
            "jarque_bera_stat": jb["statistic"],
            "jarque_bera_p": jb["p_value"],
        }

    def information_criterion(self, fitted: FittedModel, criterion: str = "aic") -> float:
        """Per-observation AIC or BIC on the raw data scale."""
        if criterion == "aic":
            return fitted.aic
        if criterion == "bic":
            return fitted.bic
        raise ValueError(f"Unknown information criterion: {criterion!r}")

    def auto_select_arima_order(self, series: pd.Series) -> tuple[int, int, int]:
        """AIC-minimizing ARIMA(p, d, q) order of ``series``."""
        search = auto_select_arima_order(
            series,
            max_p=self.arima_max_p,
            max_q=self.arima_max_q,
            strategy=self.arima_search,
            n_trials=self.arima_n_trials,
            random_state=self.random_state,
            max_d=self.max_difference_order,
            alpha=self.stationarity_alpha,
        )
        self.last_arima_search = search
        return search.order
