"""Multi-step forecasts and their mapping back to prices.

Forecasts come out of the model in log-differenced space. Undoing the
differencing integrates them forward from the last observed level(s), and
exponentiating undoes the log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from arima_garch.errors import ModelFitError
from arima_garch.garch.backend import StatisticalBackend
from arima_garch.garch.models import FittedCandidate, FittedModel
from arima_garch.utils import get_logger, validate_positive_int

logger = get_logger(__name__)


@dataclass(frozen=True)
class Forecast:
    """Mean and variance forecasts in transformed (log-differenced) space."""

    mean: np.ndarray
    variance: np.ndarray
    model_name: str

    @property
    def horizon(self) -> int:
        return int(self.mean.size)

    def to_frame(self, index: pd.Index | None = None) -> pd.DataFrame:
        frame = pd.DataFrame({"mean": self.mean, "variance": self.variance})
        if index is not None:
            frame.index = index
        return frame


def forecast(
    selected: FittedCandidate | FittedModel,
    horizon: int,
    backend: StatisticalBackend,
) -> Forecast:
    """Forecast ``horizon`` steps ahead from the end of the fitted sample.

    Raises:
        ValueError: If horizon < 1.
        ModelFitError: If the backend returns the wrong length or non-finite values.
    """
    validate_positive_int(horizon, "horizon")
    model = selected.model if isinstance(selected, FittedCandidate) else selected
    mean, variance = backend.forecast(model, horizon)
    mean = np.asarray(mean, dtype=float).ravel()
    variance = np.asarray(variance, dtype=float).ravel()
    if mean.size != horizon or variance.size != horizon:
        raise ModelFitError(
            f"Backend returned {mean.size} means and {variance.size} variances for horizon {horizon}",
            stage="forecasting",
            details={"candidate": model.spec.name},
        )
    if not (np.all(np.isfinite(mean)) and np.all(np.isfinite(variance))):
        raise ModelFitError(
            "Non-finite forecast values",
            stage="forecasting",
            details={"candidate": model.spec.name},
        )
    logger.info(
        "Forecast %d steps with %s: mean[0]=%.6f variance[0]=%.3e",
        horizon,
        model.spec.name,
        mean[0],
        variance[0],
    )
    return Forecast(mean=mean, variance=variance, model_name=model.spec.name)


def _as_anchors(anchor: float | Sequence[float]) -> tuple[float, ...]:
    if np.ndim(anchor) == 0:
        return (float(anchor),)
    return tuple(float(a) for a in anchor)


def undo_difference(
    diffs: Sequence[float] | np.ndarray,
    anchor: float | Sequence[float],
    *,
    include_anchor: bool = False,
) -> np.ndarray:
    """Integrate differenced values forward from their anchor(s).

    Args:
        diffs: Values of the differenced series following the anchor.
        anchor: Last level before ``diffs``. For higher-order differencing,
            the last value of each level differenced 0, 1, ..., d-1 times.
            An empty sequence means no differencing.
        include_anchor: Prepend the level-0 anchor to the result.

    Returns:
        Reconstructed levels, ``len(diffs)`` long (one more with the anchor).
    """
    anchors = _as_anchors(anchor)
    level = np.asarray(diffs, dtype=float).ravel()
    for value in reversed(anchors):
        level = value + np.cumsum(level)
    if include_anchor and anchors:
        level = np.concatenate([[anchors[0]], level])
    return level


def invert_transform(
    mean_forecast: Sequence[float] | np.ndarray,
    last_observed_log_price: float | Sequence[float],
) -> np.ndarray:
    """Map log-differenced forecasts to prices: undo differencing, then exp."""
    return np.exp(undo_difference(mean_forecast, last_observed_log_price))
