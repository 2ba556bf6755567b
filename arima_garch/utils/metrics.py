"""Forecast-error metrics.

Provides residual, RMSE and MAE helpers shared by the evaluation stage and
the tests.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

__all__ = [
    "compute_residuals",
    "compute_rmse",
    "compute_mae",
]

ArrayLike = np.ndarray | pd.Series | Iterable[float]


def _as_float_array(values: ArrayLike) -> np.ndarray:
    """Convert an array, Series or iterable to a flat float array."""
    if isinstance(values, (np.ndarray, pd.Series)):
        return np.asarray(values, dtype=float).ravel()
    return np.asarray(list(values), dtype=float).ravel()


def compute_residuals(y_true: ArrayLike, y_pred: ArrayLike) -> np.ndarray:
    """Return residuals y_true - y_pred as numpy array.

    Args:
        y_true: Actual values (array or Series).
        y_pred: Predicted values (array or Series).

    Returns:
        Residuals as numpy array (y_true - y_pred).

    Raises:
        ValueError: If the inputs have different lengths or are empty.

    Examples:
        >>> compute_residuals([1.0, 2.0, 3.0], [1.1, 1.9, 3.2])
        array([-0.1,  0.1, -0.2])
    """
    yt = _as_float_array(y_true)
    yp = _as_float_array(y_pred)
    if yt.shape != yp.shape:
        raise ValueError(f"Length mismatch: y_true has {yt.size} values, y_pred has {yp.size}")
    if yt.size == 0:
        raise ValueError("Cannot compute residuals of empty inputs")
    return yt - yp


def compute_rmse(y_true: ArrayLike, y_pred: ArrayLike) -> float:
    """Root-mean-square error between two equal-length sequences.

    Symmetric in its arguments: rmse(a, b) == rmse(b, a).
    """
    residuals = compute_residuals(y_true, y_pred)
    return float(np.sqrt(np.mean(residuals**2)))


def compute_mae(y_true: ArrayLike, y_pred: ArrayLike) -> float:
    """Mean absolute error between two equal-length sequences."""
    residuals = compute_residuals(y_true, y_pred)
    return float(np.mean(np.abs(residuals)))
