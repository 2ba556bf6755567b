"""Candidate specifications and fitted-model containers."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any

import numpy as np
import pandas as pd

from arima_garch.constants import GARCH_DEFAULT_DISTRIBUTION, GARCH_SUPPORTED_DISTRIBUTIONS
from arima_garch.utils import validate_order_pair


@dataclass(frozen=True)
class CandidateSpec:
    """A named (mean order, variance order, distribution) parameterization.

    A mean order of (0, 0) means a constant-mean (pure GARCH) candidate.
    """

    name: str
    mean_order: tuple[int, int] = (0, 0)
    variance_order: tuple[int, int] = (1, 1)
    distribution: str = GARCH_DEFAULT_DISTRIBUTION

    def __post_init__(self) -> None:
        object.__setattr__(self, "mean_order", validate_order_pair(self.mean_order, "mean order"))
        object.__setattr__(
            self, "variance_order", validate_order_pair(self.variance_order, "variance order")
        )
        if self.variance_order[0] < 1:
            raise ValueError(
                f"Variance order {self.variance_order} needs at least one ARCH term (p >= 1)"
            )
        if self.distribution not in GARCH_SUPPORTED_DISTRIBUTIONS:
            raise ValueError(
                f"distribution must be one of {GARCH_SUPPORTED_DISTRIBUTIONS}, "
                f"got {self.distribution!r}"
            )

    @property
    def is_pure_garch(self) -> bool:
        return self.mean_order == (0, 0)

    def orders(self) -> dict[str, tuple[int, int]]:
        return {"mean_order": self.mean_order, "variance_order": self.variance_order}


@dataclass(frozen=True)
class FittedModel:
    """Output of a backend fit, on the scale of the input series.

    ``loglikelihood`` is always expressed for the unscaled series even when the
    optimiser worked on a rescaled copy. ``result`` holds the library objects
    needed for forecasting and is excluded from comparisons.
    """

    spec: CandidateSpec
    params: dict[str, float]
    std_resid: pd.Series
    loglikelihood: float
    num_params: int
    nobs: int
    scale: float = 1.0
    result: Any = field(default=None, repr=False, compare=False)

    @property
    def aic(self) -> float:
        """Per-observation AIC: (-2 logL + 2k) / n."""
        return (-2.0 * self.loglikelihood + 2.0 * self.num_params) / self.nobs

    @property
    def bic(self) -> float:
        """Per-observation BIC: (-2 logL + k log n) / n."""
        return (-2.0 * self.loglikelihood + self.num_params * math.log(self.nobs)) / self.nobs


@dataclass(frozen=True)
class DiagnosticResult:
    """Residual tests of one fitted candidate."""

    ljung_box_statistic: float
    ljung_box_pvalue: float
    jarque_bera_statistic: float
    jarque_bera_pvalue: float
    lags: int


@dataclass(frozen=True)
class FittedCandidate:
    """A CandidateSpec once fitted, scored and diagnosed."""

    spec: CandidateSpec
    model: FittedModel
    criterion: str
    criterion_value: float
    diagnostics: DiagnosticResult
    adequate: bool

    @property
    def name(self) -> str:
        return self.spec.name

    def summary(self) -> dict[str, Any]:
        """Flat row for candidate tables and JSON reports."""
        return {
            "name": self.spec.name,
            "mean_order": list(self.spec.mean_order),
            "variance_order": list(self.spec.variance_order),
            "distribution": self.spec.distribution,
            "criterion": self.criterion,
            "criterion_value": self.criterion_value,
            "loglikelihood": self.model.loglikelihood,
            "num_params": self.model.num_params,
            "nobs": self.model.nobs,
            "ljung_box_pvalue": self.diagnostics.ljung_box_pvalue,
            "jarque_bera_pvalue": self.diagnostics.jarque_bera_pvalue,
            "adequate": self.adequate,
            "params": {k: float(v) for k, v in self.model.params.items()},
        }


def as_float_array(values: Any) -> np.ndarray:
    """Flat float array without NaN values."""
    arr = np.asarray(values, dtype=float).ravel()
    return arr[np.isfinite(arr)]
