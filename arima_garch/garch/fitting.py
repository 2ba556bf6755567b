"""Build, fit and score the candidate models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from arima_garch.constants import (
    ADEQUACY_ALPHA_DEFAULT,
    FLOAT_PRECISION_LOG,
    GARCH_CANDIDATE_ORDERS,
    GARCH_DEFAULT_CRITERION,
    GARCH_DEFAULT_DISTRIBUTION,
    LJUNG_BOX_LAGS_DEFAULT,
)
from arima_garch.garch.backend import StatisticalBackend
from arima_garch.garch.diagnostics import is_adequate
from arima_garch.garch.models import CandidateSpec, DiagnosticResult, FittedCandidate
from arima_garch.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CandidateFitResult:
    """Every fitted candidate plus the mean order found by the ARIMA search."""

    candidates: list[FittedCandidate]
    arima_order: tuple[int, int, int] | None = None


def garch_name(variance_order: tuple[int, int]) -> str:
    return f"GARCH({variance_order[0]},{variance_order[1]})"


def arma_garch_name(mean_order: tuple[int, int], variance_order: tuple[int, int]) -> str:
    return f"ARMA({mean_order[0]},{mean_order[1]})+{garch_name(variance_order)}"


def pure_garch_specs(
    orders: Sequence[tuple[int, int]] = GARCH_CANDIDATE_ORDERS,
    distribution: str = GARCH_DEFAULT_DISTRIBUTION,
) -> list[CandidateSpec]:
    """Constant-mean GARCH candidates, one per variance order, in order."""
    return [
        CandidateSpec(
            name=garch_name(tuple(order)),
            mean_order=(0, 0),
            variance_order=tuple(order),
            distribution=distribution,
        )
        for order in orders
    ]


def fit_candidate(
    series: pd.Series,
    spec: CandidateSpec,
    backend: StatisticalBackend,
    *,
    criterion: str = GARCH_DEFAULT_CRITERION,
    lags: int = LJUNG_BOX_LAGS_DEFAULT,
    alpha: float = ADEQUACY_ALPHA_DEFAULT,
) -> FittedCandidate:
    """Fit one candidate, score it and run its residual diagnostics.

    Raises:
        ModelFitError: Propagated from the backend.
    """
    logger.info("Fitting %s (distribution=%s)", spec.name, spec.distribution)
    model = backend.fit_variance_model(series, spec)
    value = backend.information_criterion(model, criterion)
    tests = backend.diagnostic_tests(model.std_resid, lags)
    diagnostics = DiagnosticResult(
        ljung_box_statistic=float(tests["ljung_box_stat"]),
        ljung_box_pvalue=float(tests["ljung_box_p"]),
        jarque_bera_statistic=float(tests["jarque_bera_stat"]),
        jarque_bera_pvalue=float(tests["jarque_bera_p"]),
        lags=lags,
    )
    adequate = is_adequate(diagnostics.ljung_box_pvalue, alpha)
    logger.info(
        "%s | %s=%.*f | Ljung-Box(%d) p=%.*f | Jarque-Bera p=%.*g | adequate=%s",
        spec.name,
        criterion.upper(),
        FLOAT_PRECISION_LOG,
        value,
        lags,
        FLOAT_PRECISION_LOG,
        diagnostics.ljung_box_pvalue,
        FLOAT_PRECISION_LOG,
        diagnostics.jarque_bera_pvalue,
        adequate,
    )
    return FittedCandidate(
        spec=spec,
        model=model,
        criterion=criterion,
        criterion_value=float(value),
        diagnostics=diagnostics,
        adequate=adequate,
    )


def fit_candidates(
    series: pd.Series,
    specs: Sequence[CandidateSpec],
    backend: StatisticalBackend,
    *,
    criterion: str = GARCH_DEFAULT_CRITERION,
    lags: int = LJUNG_BOX_LAGS_DEFAULT,
    alpha: float = ADEQUACY_ALPHA_DEFAULT,
) -> list[FittedCandidate]:
    """Fit every spec in order. The first failure aborts the run."""
    return [
        fit_candidate(series, spec, backend, criterion=criterion, lags=lags, alpha=alpha)
        for spec in specs
    ]


def _best_variance_order(candidates: Sequence[FittedCandidate]) -> tuple[int, int]:
    """Variance order of the lowest-criterion candidate, adequate ones first."""
    pool = [c for c in candidates if c.adequate] or list(candidates)
    best = min(pool, key=lambda c: c.criterion_value)
    return best.spec.variance_order


def fit_all_candidates(
    series: pd.Series,
    backend: StatisticalBackend,
    *,
    orders: Sequence[tuple[int, int]] = GARCH_CANDIDATE_ORDERS,
    distribution: str = GARCH_DEFAULT_DISTRIBUTION,
    include_arma_candidate: bool = True,
    criterion: str = GARCH_DEFAULT_CRITERION,
    lags: int = LJUNG_BOX_LAGS_DEFAULT,
    alpha: float = ADEQUACY_ALPHA_DEFAULT,
) -> CandidateFitResult:
    """Fit the pure GARCH candidates, then the combined ARMA+GARCH candidate.

    The combined candidate takes its mean order from the automatic ARIMA
    search and the variance order of the best pure candidate. It is skipped
    when the search returns a white-noise mean (p = q = 0), or when it
    differences the already stationary series again (d != 0).
    """
    kwargs = {"criterion": criterion, "lags": lags, "alpha": alpha}
    candidates = fit_candidates(series, pure_garch_specs(orders, distribution), backend, **kwargs)
    if not include_arma_candidate:
        return CandidateFitResult(candidates=candidates)

    arima_order = backend.auto_select_arima_order(series)
    p_mean, d, q_mean = arima_order
    if d != 0:
        logger.warning(
            "ARIMA search chose d=%d on an already differenced series; no ARMA+GARCH candidate", d
        )
        return CandidateFitResult(candidates=candidates, arima_order=arima_order)
    if p_mean == 0 and q_mean == 0:
        logger.info("ARIMA search returned a white-noise mean %s; no ARMA+GARCH candidate", arima_order)
        return CandidateFitResult(candidates=candidates, arima_order=arima_order)

    variance_order = _best_variance_order(candidates)
    spec = CandidateSpec(
        name=arma_garch_name((p_mean, q_mean), variance_order),
        mean_order=(p_mean, q_mean),
        variance_order=variance_order,
        distribution=distribution,
    )
    candidates.append(fit_candidate(series, spec, backend, **kwargs))
    return CandidateFitResult(candidates=candidates, arima_order=arima_order)
