"""Stationarity checks for time series (ADF + KPSS).

This module provides small, focused helpers to:
- run ADF and KPSS on a pandas Series
- combine both results into a single verdict
- persist the verdict as a JSON report

The two tests have opposite null hypotheses (ADF: unit root, KPSS:
stationary), so a series is only accepted when both agree.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Literal, TypedDict
import warnings

import numpy as np
import pandas as pd
from statsmodels.tools.sm_exceptions import InterpolationWarning
from statsmodels.tsa.stattools import adfuller, kpss

from arima_garch.constants import (
    STATIONARITY_ADF_AUTOLAG,
    STATIONARITY_DEFAULT_ALPHA,
    STATIONARITY_KPSS_REGRESSION,
    STATIONARITY_MIN_OBSERVATIONS,
)
from arima_garch.errors import InsufficientDataError
from arima_garch.path import STATIONARITY_REPORT_FILE
from arima_garch.utils import get_logger, save_json_pretty, validate_alpha, validate_series

logger = get_logger(__name__)


class StationarityTestResult(TypedDict):
    """Typed structure for a single stationarity test result."""

    statistic: float
    p_value: float
    lags: int | None
    nobs: int | None
    critical_values: dict[str, float] | None


@dataclass(frozen=True)
class StationarityReport:
    """Combined ADF + KPSS stationarity report."""

    stationary: bool
    alpha: float
    adf: StationarityTestResult
    kpss: StationarityTestResult

    @property
    def adf_pvalue(self) -> float:
        return self.adf["p_value"]

    @property
    def kpss_pvalue(self) -> float:
        return self.kpss["p_value"]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["adf_pvalue"] = self.adf_pvalue
        data["kpss_pvalue"] = self.kpss_pvalue
        return data


def _convert_test_result(
    stat: float,
    pval: float,
    lags: int | None,
    nobs: int | None,
    crit: dict[str, float] | None,
) -> StationarityTestResult:
    """Convert raw test outputs to a StationarityTestResult mapping."""
    return {
        "statistic": float(stat),
        "p_value": float(pval),
        "lags": int(lags) if lags is not None else None,
        "nobs": int(nobs) if nobs is not None else None,
        "critical_values": (
            {str(k): float(v) for k, v in crit.items()} if crit is not None else None
        ),
    }


def _checked_series(series: pd.Series) -> pd.Series:
    s = validate_series(series)
    if s.size < STATIONARITY_MIN_OBSERVATIONS:
        raise InsufficientDataError(
            f"Stationarity tests need at least {STATIONARITY_MIN_OBSERVATIONS} observations",
            stage="stationarity",
            details={"n_observations": int(s.size)},
        )
    return s


def adf_test(series: pd.Series, *, autolag: str = STATIONARITY_ADF_AUTOLAG) -> StationarityTestResult:
    """Run Augmented Dickey-Fuller test.

    The number of lags is automatically selected based on the specified criterion
    (default: AIC). The lag value in the result reflects the optimal number chosen
    for the given series, not a fixed value.

    Args:
        series: Input time series.
        autolag: Criterion for lag selection ("AIC", "BIC", "t-stat", or None).

    Returns:
        StationarityTestResult with statistic, p-value, lags (auto-selected),
        nobs, and critical values.
    """
    s = _checked_series(series)
    result = adfuller(s, autolag=autolag)
    # (adfstat, pvalue, usedlag, nobs, critvalues[, icbest])
    stat, pval, lags, nobs, crit = result[0], result[1], result[2], result[3], result[4]
    lags_int = int(lags) if isinstance(lags, (int, np.integer)) else None
    nobs_int = int(nobs) if isinstance(nobs, (int, np.integer)) else None
    crit_dict = {str(k): float(v) for k, v in crit.items()} if isinstance(crit, dict) else None
    return _convert_test_result(float(stat), float(pval), lags_int, nobs_int, crit_dict)


def kpss_test(
    series: pd.Series,
    *,
    regression: Literal["c", "ct"] = STATIONARITY_KPSS_REGRESSION,
) -> StationarityTestResult:
    """Run KPSS test for (trend-)stationarity.

    The p-value is interpolated from a table bounded to [0.01, 0.1]; values
    outside that range are clipped by statsmodels.

    Args:
        series: Input time series.
        regression: "c" (level) or "ct" (trend).

    Returns:
        StationarityTestResult with statistic, p-value, lags (auto-calculated),
        nobs and critical values.
    """
    s = _checked_series(series)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", category=InterpolationWarning)
        stat, pval, lags, crit = kpss(s, regression=regression, nlags="auto")
    return _convert_test_result(stat, pval, lags, s.size, crit)


def _determine_stationarity(
    adf_res: StationarityTestResult,
    kpss_res: StationarityTestResult,
    alpha: float,
) -> bool:
    """Determine stationarity verdict from ADF and KPSS test results.

    Rule of thumb:
    - ADF p < alpha (reject unit root)
    - KPSS p > alpha (do not reject stationarity)

    => stationary = True, otherwise False.
    """
    adf_rejects_unit_root = adf_res["p_value"] < alpha
    kpss_p = kpss_res["p_value"]
    kpss_accepts_stationarity = np.isnan(kpss_p) or kpss_p > alpha
    return bool(adf_rejects_unit_root and kpss_accepts_stationarity)


def evaluate_stationarity(
    series: pd.Series,
    *,
    alpha: float = STATIONARITY_DEFAULT_ALPHA,
) -> StationarityReport:
    """Combine ADF and KPSS into a single verdict.

    Rule: ADF p < alpha AND KPSS p > alpha => stationary = True.

    Args:
        series: Input time series.
        alpha: Significance level in (0, 1).

    Returns:
        StationarityReport with combined verdict and test results.

    Raises:
        ValueError: If alpha is not in (0, 1).
        InsufficientDataError: If the series is too short to test.
    """
    validate_alpha(alpha, "alpha")
    adf_res = adf_test(series)
    kpss_res = kpss_test(series)

    stationary = _determine_stationarity(adf_res, kpss_res, alpha)
    logger.info(
        "ADF stat=%.4f p=%.4g | KPSS stat=%.4f p=%.4g | stationary=%s (alpha=%.3f)",
        adf_res["statistic"],
        adf_res["p_value"],
        kpss_res["statistic"],
        kpss_res["p_value"],
        stationary,
        alpha,
    )
    return StationarityReport(stationary=stationary, alpha=float(alpha), adf=adf_res, kpss=kpss_res)


def test_stationarity(
    series: pd.Series,
    *,
    alpha: float = STATIONARITY_DEFAULT_ALPHA,
) -> StationarityReport:
    """Alias of ``evaluate_stationarity`` exposing adf_pvalue / kpss_pvalue."""
    return evaluate_stationarity(series, alpha=alpha)


# Not a pytest test function
test_stationarity.__test__ = False  # type: ignore[attr-defined]


def save_stationarity_report(
    report: StationarityReport,
    out_path: Path | None = None,
    *,
    extra: dict | None = None,
) -> Path:
    """Persist report as JSON.

    Args:
        report: StationarityReport to serialize.
        out_path: Optional override for the output path. If None,
            STATIONARITY_REPORT_FILE is used.
        extra: Additional top-level keys (e.g. the differencing order).

    Returns:
        Path to the written JSON file.
    """
    target = Path(out_path) if out_path is not None else STATIONARITY_REPORT_FILE
    payload = report.to_dict()
    if extra:
        payload.update(extra)
    save_json_pretty(payload, target)
    logger.info("Saved stationarity report: %s", target)
    return target
