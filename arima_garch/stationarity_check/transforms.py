"""Log and differencing transforms turning prices into a stationary series.

The transformed training series keeps everything needed to map forecasts back
to prices: the differencing order and the last value of every intermediate
differencing level ("anchors").
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from arima_garch.constants import (
    STATIONARITY_DEFAULT_ALPHA,
    STATIONARITY_MAX_DIFFERENCE_ORDER,
    STATIONARITY_MIN_OBSERVATIONS,
)
from arima_garch.errors import DataFormatError, InsufficientDataError, NonStationaryError
from arima_garch.stationarity_check.stationarity_check import (
    StationarityReport,
    evaluate_stationarity,
)
from arima_garch.utils import get_logger, save_dataframe_csv, validate_alpha

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransformedSeries:
    """Log-differenced training series.

    Attributes:
        values: Differenced log prices; ``len(train) - order`` observations.
        order: Number of differencing passes applied.
        anchors: Last value of the log series differenced 0, 1, ..., order-1
            times. Integrating a forecast starts from these.
        last_log_value: Last observed log price of the training series.
        report: ADF/KPSS verdict on ``values``.
    """

    values: pd.Series
    order: int
    anchors: tuple[float, ...]
    last_log_value: float
    report: StationarityReport | None = None

    def __len__(self) -> int:
        return len(self.values)


def log_transform(series: pd.Series) -> pd.Series:
    """Return the elementwise natural log of a price series.

    Raises:
        DataFormatError: If any price is non-positive, NaN or infinite.
    """
    values = pd.Series(series, dtype=float)
    arr = values.to_numpy()
    bad = ~np.isfinite(arr) | (arr <= 0)
    if bad.any():
        examples = [
            f"{idx}: {val}" for idx, val in values[bad].head(5).items()
        ]
        raise DataFormatError(
            "Log transform requires strictly positive, finite prices",
            stage="stationarity",
            details={"n_invalid": int(bad.sum()), "examples": examples},
        )
    return np.log(values)


def difference(series: pd.Series, order: int = 1) -> pd.Series:
    """Apply ``order`` passes of first differencing.

    Each pass drops the first observation, so the result is ``order`` points
    shorter than the input. Order 0 returns a copy of the input.

    Raises:
        ValueError: If order is negative.
        InsufficientDataError: If the series has no more than ``order`` points.
    """
    if isinstance(order, bool) or order < 0:
        raise ValueError(f"order must be a non-negative integer, got {order!r}")
    if len(series) <= order:
        raise InsufficientDataError(
            f"Cannot difference {len(series)} observations {order} time(s)",
            stage="stationarity",
            details={"n_observations": len(series), "order": order},
        )
    result = pd.Series(series, dtype=float).copy()
    for _ in range(order):
        result = result.diff().iloc[1:]
    return result


def _anchors(log_series: pd.Series, order: int) -> tuple[float, ...]:
    level = log_series
    anchors = []
    for _ in range(order):
        anchors.append(float(level.iloc[-1]))
        level = level.diff().iloc[1:]
    return tuple(anchors)


def determine_difference_order(
    series: pd.Series,
    *,
    max_order: int = STATIONARITY_MAX_DIFFERENCE_ORDER,
    alpha: float = STATIONARITY_DEFAULT_ALPHA,
) -> int:
    """Return the smallest differencing order after which the series is stationary.

    Orders 0..max_order are tried in turn with the ADF+KPSS rule. Orders that
    would leave too few observations to test are not tried.

    Args:
        series: Series to examine (log prices in this pipeline).
        max_order: Largest order to try.
        alpha: Significance level of both tests.

    Raises:
        NonStationaryError: If no order up to max_order is stationary.
    """
    validate_alpha(alpha, "alpha")
    tried: dict[int, dict[str, float]] = {}
    for order in range(max_order + 1):
        if len(series) - order < STATIONARITY_MIN_OBSERVATIONS:
            break
        report = evaluate_stationarity(difference(series, order), alpha=alpha)
        tried[order] = {"adf_p": report.adf_pvalue, "kpss_p": report.kpss_pvalue}
        if report.stationary:
            logger.info("Selected differencing order d=%d", order)
            return order
    raise NonStationaryError(
        f"No differencing order up to {max_order} yields a stationary series",
        details={"tried": tried, "alpha": alpha},
    )


def make_stationary(
    train: pd.Series,
    order: int | None = None,
    *,
    max_order: int = STATIONARITY_MAX_DIFFERENCE_ORDER,
    alpha: float = STATIONARITY_DEFAULT_ALPHA,
) -> TransformedSeries:
    """Log-transform and difference the training prices.

    Args:
        train: Training PriceSeries.
        order: Fixed differencing order, or None to choose it with
            ``determine_difference_order``.
        max_order: Upper bound for the automatic choice.
        alpha: Significance level of the acceptance test.

    Returns:
        TransformedSeries carrying the stationarity report of the result.

    Raises:
        DataFormatError: If a price is non-positive.
        NonStationaryError: If the transformed series fails ADF p < alpha and
            KPSS p > alpha.
    """
    log_prices = log_transform(train)
    if order is None:
        order = determine_difference_order(log_prices, max_order=max_order, alpha=alpha)

    values = difference(log_prices, order)
    report = evaluate_stationarity(values, alpha=alpha)
    if not report.stationary:
        raise NonStationaryError(
            f"Series differenced {order} time(s) is not stationary",
            details={
                "order": order,
                "adf_pvalue": report.adf_pvalue,
                "kpss_pvalue": report.kpss_pvalue,
                "alpha": alpha,
            },
        )
    logger.info("Transformed training series: %d -> %d observations (d=%d)", len(train), len(values), order)
    return TransformedSeries(
        values=values.rename("log_diff"),
        order=order,
        anchors=_anchors(log_prices, order),
        last_log_value=float(log_prices.iloc[-1]),
        report=report,
    )


def save_transformed_series(transformed: TransformedSeries, output_file: Path | str) -> Path:
    """Write the transformed series as CSV (date, log_diff)."""
    frame = transformed.values.rename("log_diff").rename_axis("date").reset_index()
    return save_dataframe_csv(frame, output_file)
