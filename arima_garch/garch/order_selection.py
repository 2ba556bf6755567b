"""Order identification helpers.

- Automatic ARIMA mean-order search minimizing AIC, either exhaustively
  (grid) or with an Optuna TPE sampler.
- Extended autocorrelation (EACF) table used to eyeball ARMA orders of the
  absolute returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
import warnings

import numpy as np
import optuna
import pandas as pd
from statsmodels.tsa.statespace.sarimax import SARIMAX
from statsmodels.tsa.stattools import acf

from arima_garch.constants import (
    ARIMA_OPTUNA_N_TRIALS,
    ARIMA_P_MAX,
    ARIMA_Q_MAX,
    ARIMA_SEARCH_DEFAULT,
    ARIMA_SEARCH_STRATEGIES,
    DEFAULT_RANDOM_STATE,
    EACF_AR_MAX,
    EACF_MA_MAX,
    STATIONARITY_DEFAULT_ALPHA,
    STATIONARITY_MAX_DIFFERENCE_ORDER,
)
from arima_garch.errors import InsufficientDataError, ModelFitError
from arima_garch.stationarity_check.transforms import determine_difference_order
from arima_garch.utils import get_logger, suppress_statsmodels_warnings, validate_series

logger = get_logger(__name__)


@dataclass(frozen=True)
class ArimaSearchResult:
    """Best ARIMA order and the AIC of every evaluated order."""

    order: tuple[int, int, int]
    aic: float
    strategy: str
    evaluated: list[dict[str, Any]] = field(default_factory=list)


def fit_arima_aic(values: np.ndarray, order: tuple[int, int, int]) -> float:
    """Fit SARIMAX(p, d, q) and return its AIC, +inf when the fit fails.

    A constant is included only when d == 0.
    """
    trend = "c" if order[1] == 0 else "n"
    with warnings.catch_warnings():
        suppress_statsmodels_warnings()
        warnings.filterwarnings("ignore", category=RuntimeWarning)
        try:
            fitted = SARIMAX(values, order=order, trend=trend).fit(disp=False)
        except (ValueError, np.linalg.LinAlgError) as exc:
            logger.warning("ARIMA%s evaluation error: %s", order, exc)
            return float("inf")
    aic = float(fitted.aic)
    return aic if np.isfinite(aic) else float("inf")


def _best(evaluated: list[dict[str, Any]], strategy: str) -> ArimaSearchResult:
    finite = [row for row in evaluated if np.isfinite(row["aic"])]
    if not finite:
        raise ModelFitError(
            "Automatic ARIMA search found no order that could be fitted",
            details={"strategy": strategy, "n_evaluated": len(evaluated)},
        )
    # Ties keep the first (smallest) order evaluated
    best = min(finite, key=lambda row: row["aic"])
    order = (int(best["p"]), int(best["d"]), int(best["q"]))
    logger.info("Best ARIMA%s by AIC=%.4f (%s search)", order, best["aic"], strategy)
    return ArimaSearchResult(order=order, aic=float(best["aic"]), strategy=strategy, evaluated=evaluated)


def grid_search_arima_order(
    values: np.ndarray,
    *,
    d: int,
    max_p: int = ARIMA_P_MAX,
    max_q: int = ARIMA_Q_MAX,
) -> ArimaSearchResult:
    """Evaluate every (p, d, q) with p <= max_p and q <= max_q."""
    evaluated = []
    for p in range(max_p + 1):
        for q in range(max_q + 1):
            aic = fit_arima_aic(values, (p, d, q))
            logger.debug("ARIMA(%d,%d,%d) AIC=%.4f", p, d, q, aic)
            evaluated.append({"p": p, "d": d, "q": q, "aic": aic})
    return _best(evaluated, "grid")


def _prepare_optuna(seed: int = DEFAULT_RANDOM_STATE) -> optuna.Study:
    """Create an Optuna study for minimization with a seeded TPE sampler."""
    sampler = optuna.samplers.TPESampler(seed=seed)
    return optuna.create_study(direction="minimize", sampler=sampler)


def optuna_search_arima_order(
    values: np.ndarray,
    *,
    d: int,
    max_p: int = ARIMA_P_MAX,
    max_q: int = ARIMA_Q_MAX,
    n_trials: int = ARIMA_OPTUNA_N_TRIALS,
    seed: int = DEFAULT_RANDOM_STATE,
) -> ArimaSearchResult:
    """Search (p, q) with Optuna's TPE sampler; d is fixed."""
    optuna.logging.set_verbosity(optuna.logging.WARNING)
    study = _prepare_optuna(seed)
    cache: dict[tuple[int, int], float] = {}

    def objective(trial: optuna.Trial) -> float:
        p = trial.suggest_int("p", 0, max_p)
        q = trial.suggest_int("q", 0, max_q)
        if (p, q) not in cache:
            cache[(p, q)] = fit_arima_aic(values, (p, d, q))
        logger.debug("Trial %d | ARIMA(%d,%d,%d) AIC=%.4f", trial.number, p, d, q, cache[(p, q)])
        return cache[(p, q)]

    study.optimize(objective, n_trials=n_trials)
    evaluated = [{"p": p, "d": d, "q": q, "aic": aic} for (p, q), aic in sorted(cache.items())]
    return _best(evaluated, "optuna")


def auto_select_arima_order(
    series: pd.Series,
    *,
    max_p: int = ARIMA_P_MAX,
    max_q: int = ARIMA_Q_MAX,
    strategy: str = ARIMA_SEARCH_DEFAULT,
    n_trials: int = ARIMA_OPTUNA_N_TRIALS,
    random_state: int = DEFAULT_RANDOM_STATE,
    max_d: int = STATIONARITY_MAX_DIFFERENCE_ORDER,
    alpha: float = STATIONARITY_DEFAULT_ALPHA,
) -> ArimaSearchResult:
    """Pick an ARIMA(p, d, q) order for ``series`` by minimizing AIC.

    The differencing order d is chosen first with the ADF/KPSS rule at
    ``alpha``, then (p, q) is searched with d fixed.

    Raises:
        ValueError: If strategy is unknown.
        NonStationaryError: If no d up to max_d is stationary.
        ModelFitError: If no order could be fitted.
    """
    if strategy not in ARIMA_SEARCH_STRATEGIES:
        raise ValueError(f"strategy must be one of {ARIMA_SEARCH_STRATEGIES}, got {strategy!r}")
    clean = validate_series(series)
    d = determine_difference_order(clean, max_order=max_d, alpha=alpha)
    values = clean.to_numpy()
    logger.info(
        "Searching ARIMA(p,%d,q) with p<=%d, q<=%d on %d observations (%s)",
        d,
        max_p,
        max_q,
        values.size,
        strategy,
    )
    if strategy == "optuna":
        return optuna_search_arima_order(
            values, d=d, max_p=max_p, max_q=max_q, n_trials=n_trials, seed=random_state
        )
    return grid_search_arima_order(values, d=d, max_p=max_p, max_q=max_q)


# ============================================================================
# EACF
# ============================================================================


@dataclass(frozen=True)
class EacfTable:
    """Extended sample autocorrelations and their significance symbols.

    Rows are AR orders, columns MA orders. A symbol is "x" when the absolute
    value exceeds 2 / sqrt(n - ar - ma), "o" otherwise. The top-left corner of
    a triangle of "o" suggests an ARMA order.
    """

    values: pd.DataFrame
    symbols: pd.DataFrame

    def format(self) -> str:
        header = "AR/MA " + " ".join(f"{c:>2}" for c in self.symbols.columns)
        rows = [
            f"{idx:>5} " + " ".join(f"{s:>2}" for s in row)
            for idx, row in zip(self.symbols.index, self.symbols.to_numpy())
        ]
        return "\n".join([header, *rows])

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbols": ["".join(row) for row in self.symbols.to_numpy()],
            "values": self.values.to_numpy().tolist(),
        }


def _lagged(x: np.ndarray, lags: int) -> np.ndarray:
    """Matrix whose column i-1 is x lagged by i (NaN-padded)."""
    out = np.full((x.size, lags), np.nan)
    for i in range(1, lags + 1):
        out[i:, i - 1] = x[:-i]
    return out


def _ar_filter(z: np.ndarray, phi: np.ndarray) -> np.ndarray:
    k = phi.size
    if k == 0:
        return z
    return z[k:] - _lagged(z, k)[k:] @ phi


def eacf(
    series: pd.Series,
    *,
    ar_max: int = EACF_AR_MAX,
    ma_max: int = EACF_MA_MAX,
) -> EacfTable:
    """Compute the extended autocorrelation table (Tsay & Tiao iterated regressions).

    For AR order k and MA order j, the AR coefficients come from the j-th
    iterated regression of z_t on its k lags and j lags of the previous
    regression's residuals. The entry is the lag j+1 autocorrelation of the
    series filtered by those AR coefficients.

    Raises:
        InsufficientDataError: If the series is too short for the table.
    """
    z = validate_series(series).to_numpy()
    n = z.size
    min_obs = ar_max + 2 * ma_max + 2
    if n <= min_obs:
        raise InsufficientDataError(
            f"EACF({ar_max},{ma_max}) needs more than {min_obs} observations",
            stage="model_fitting",
            details={"n_observations": n},
        )
    z = z - z.mean()

    values = np.empty((ar_max + 1, ma_max + 1))
    symbols = np.empty((ar_max + 1, ma_max + 1), dtype=object)
    for k in range(ar_max + 1):
        z_lags = _lagged(z, k)
        prev_resid = np.full(n, np.nan)
        for j in range(ma_max + 1):
            if k == 0:
                w = z
            else:
                design = z_lags if j == 0 else np.hstack([z_lags, _lagged(prev_resid, j)])
                rows = np.all(np.isfinite(design), axis=1)
                coef, *_ = np.linalg.lstsq(design[rows], z[rows], rcond=None)
                prev_resid = np.full(n, np.nan)
                prev_resid[rows] = z[rows] - design[rows] @ coef
                w = _ar_filter(z, coef[:k])
            rho = float(acf(w, nlags=j + 1, fft=False)[j + 1])
            values[k, j] = rho
            symbols[k, j] = "x" if abs(rho) > 2.0 / np.sqrt(n - k - j) else "o"

    index = pd.Index(range(ar_max + 1), name="ar")
    columns = pd.Index(range(ma_max + 1), name="ma")
    return EacfTable(
        values=pd.DataFrame(values, index=index, columns=columns),
        symbols=pd.DataFrame(symbols, index=index, columns=columns),
    )
