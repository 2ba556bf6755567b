"""Stationarity (ADF/KPSS) checks and log/difference transforms."""

from __future__ import annotations

from arima_garch.stationarity_check.stationarity_check import (
    StationarityReport,
    StationarityTestResult,
    _determine_stationarity,
    adf_test,
    evaluate_stationarity,
    kpss_test,
    save_stationarity_report,
    test_stationarity,
)
from arima_garch.stationarity_check.transforms import (
    TransformedSeries,
    determine_difference_order,
    difference,
    log_transform,
    make_stationary,
    save_transformed_series,
)

__all__ = [
    "StationarityReport",
    "StationarityTestResult",
    "TransformedSeries",
    "_determine_stationarity",
    "adf_test",
    "determine_difference_order",
    "difference",
    "evaluate_stationarity",
    "kpss_test",
    "log_transform",
    "make_stationary",
    "save_stationarity_report",
    "save_transformed_series",
    "test_stationarity",
]
