"""Residual diagnostics deciding candidate adequacy.

- Ljung-Box on standardized residuals: H0 "no autocorrelation up to lag".
  A candidate is adequate iff this null is not rejected (p > alpha).
- Jarque-Bera: H0 "residuals are normal". Reported only; heavy tails are
  expected for daily returns and never disqualify a candidate.
"""

from __future__ import annotations

from typing import Any, Iterable

import numpy as np
from scipy import stats
from statsmodels.stats.diagnostic import acorr_ljungbox

from arima_garch.constants import ADEQUACY_ALPHA_DEFAULT, LJUNG_BOX_LAGS_DEFAULT
from arima_garch.errors import InsufficientDataError
from arima_garch.garch.models import DiagnosticResult, as_float_array
from arima_garch.utils import get_logger, validate_alpha, validate_positive_int

logger = get_logger(__name__)


def ljung_box_test(residuals: Iterable[float], lags: int = LJUNG_BOX_LAGS_DEFAULT) -> dict[str, Any]:
    """Run Ljung-Box at a single lag and return statistic and p-value.

    Raises:
        ValueError: If lags < 1.
        InsufficientDataError: If there are not more finite residuals than lags.
    """
    validate_positive_int(lags, "lags")
    res = as_float_array(list(residuals))
    if res.size <= lags:
        raise InsufficientDataError(
            f"Ljung-Box at lag {lags} needs more than {lags} residuals",
            stage="diagnostics",
            details={"n_residuals": int(res.size)},
        )
    lb = acorr_ljungbox(res, lags=[lags], return_df=True)
    return {
        "statistic": float(lb["lb_stat"].iloc[-1]),
        "p_value": float(lb["lb_pvalue"].iloc[-1]),
        "lags": int(lags),
        "n": int(res.size),
    }


def ljung_box(residuals: Iterable[float], lag: int = LJUNG_BOX_LAGS_DEFAULT) -> float:
    """Ljung-Box p-value at ``lag``."""
    return ljung_box_test(residuals, lag)["p_value"]


def jarque_bera_test(residuals: Iterable[float]) -> dict[str, float]:
    """Jarque-Bera test for normality of residuals.

    H0: Residuals are normally distributed
    H1: Residuals are not normally distributed

    Returns:
        Dict with statistic, p_value, skewness, kurtosis (excess), n. All NaN
        when fewer than 3 finite residuals are available.
    """
    res = as_float_array(list(residuals))
    if res.size < 3:
        return {
            "statistic": float("nan"),
            "p_value": float("nan"),
            "skewness": float("nan"),
            "kurtosis": float("nan"),
            "n": int(res.size),
        }
    jb_result = stats.jarque_bera(res)
    return {
        "statistic": float(jb_result[0]),
        "p_value": float(jb_result[1]),
        "skewness": float(stats.skew(res)),
        "kurtosis": float(stats.kurtosis(res, fisher=True)),
        "n": int(res.size),
    }


def jarque_bera(residuals: Iterable[float]) -> float:
    """Jarque-Bera p-value."""
    return jarque_bera_test(residuals)["p_value"]


def is_adequate(ljung_box_pvalue: float, alpha: float = ADEQUACY_ALPHA_DEFAULT) -> bool:
    """Return True iff the Ljung-Box null is not rejected.

    Strict inequality: a p-value equal to alpha rejects. NaN is never adequate.
    """
    validate_alpha(alpha, "alpha")
    if ljung_box_pvalue is None or np.isnan(ljung_box_pvalue):
        return False
    return bool(ljung_box_pvalue > alpha)


def run_diagnostics(
    residuals: Iterable[float],
    lags: int = LJUNG_BOX_LAGS_DEFAULT,
) -> DiagnosticResult:
    """Run both residual tests and bundle them."""
    values = as_float_array(list(residuals))
    lb = ljung_box_test(values, lags)
    jb = jarque_bera_test(values)
    return DiagnosticResult(
        ljung_box_statistic=lb["statistic"],
        ljung_box_pvalue=lb["p_value"],
        jarque_bera_statistic=jb["statistic"],
        jarque_bera_pvalue=jb["p_value"],
        lags=lags,
    )
