"""Forecast accuracy against the holdout prices."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from arima_garch.constants import EVALUATION_FILE, FORECAST_FILE
from arima_garch.forecasting.forecaster import Forecast
from arima_garch.utils import (
    compute_mae,
    compute_rmse,
    get_logger,
    save_dataframe_csv,
    save_json_pretty,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    """RMSE and MAE of a price forecast with the aligned series."""

    rmse: float
    mae: float
    price_forecast: pd.Series
    actual: pd.Series

    def to_dict(self) -> dict[str, Any]:
        return {
            "rmse": self.rmse,
            "mae": self.mae,
            "horizon": int(self.actual.size),
            "start": self.actual.index[0],
            "end": self.actual.index[-1],
        }


def evaluate(price_forecast: pd.Series | np.ndarray, test: pd.Series) -> EvaluationResult:
    """Score a price forecast against the holdout series elementwise.

    Raises:
        ValueError: If the lengths differ or the inputs are empty.
    """
    predicted = np.asarray(price_forecast, dtype=float).ravel()
    actual = pd.Series(test, dtype=float)
    if predicted.size != actual.size:
        raise ValueError(
            f"Length mismatch: forecast has {predicted.size} values, test has {actual.size}"
        )
    rmse = compute_rmse(actual.to_numpy(), predicted)
    mae = compute_mae(actual.to_numpy(), predicted)
    logger.info("Holdout RMSE=%.4f MAE=%.4f over %d days", rmse, mae, actual.size)
    return EvaluationResult(
        rmse=rmse,
        mae=mae,
        price_forecast=pd.Series(predicted, index=actual.index, name="forecast_price"),
        actual=actual.rename("actual_price"),
    )


def forecast_frame(fc: Forecast, evaluation: EvaluationResult) -> pd.DataFrame:
    """date, forecast_price, actual_price, mean, variance."""
    frame = pd.DataFrame(
        {
            "date": evaluation.actual.index,
            "forecast_price": evaluation.price_forecast.to_numpy(),
            "actual_price": evaluation.actual.to_numpy(),
            "mean": fc.mean,
            "variance": fc.variance,
        }
    )
    frame["date"] = pd.to_datetime(frame["date"]).dt.strftime("%Y-%m-%d")
    return frame


def save_forecast_outputs(
    fc: Forecast,
    evaluation: EvaluationResult,
    *,
    forecast_file: Path | str = FORECAST_FILE,
    evaluation_file: Path | str = EVALUATION_FILE,
) -> tuple[Path, Path]:
    """Write the forecast CSV and the evaluation JSON."""
    csv_path = save_dataframe_csv(forecast_frame(fc, evaluation), forecast_file)
    json_path = save_json_pretty({"model": fc.model_name, **evaluation.to_dict()}, evaluation_file)
    logger.info("Saved evaluation: %s", json_path)
    return csv_path, json_path
