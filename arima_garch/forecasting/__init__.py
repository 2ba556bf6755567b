"""Forecasting, inverse transforms and holdout evaluation."""

from __future__ import annotations

from arima_garch.forecasting.evaluation import (
    EvaluationResult,
    evaluate,
    forecast_frame,
    save_forecast_outputs,
)
from arima_garch.forecasting.forecaster import (
    Forecast,
    forecast,
    invert_transform,
    undo_difference,
)

__all__ = [
    "EvaluationResult",
    "Forecast",
    "evaluate",
    "forecast",
    "forecast_frame",
    "invert_transform",
    "save_forecast_outputs",
    "undo_difference",
]
