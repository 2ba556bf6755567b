"""Utility functions for validation, I/O, metrics and library housekeeping.

This package provides modular utilities organized by functionality:
- validation: file, DataFrame, Series and parameter validation
- io: file I/O operations (CSV, JSON)
- metrics: residuals and forecast-error metrics
- statsmodels_utils: warning filters for statsmodels/arch fitting
"""

from __future__ import annotations

# Import get_logger from config_logging so modules import it from one place
from arima_garch.config_logging import get_logger

# I/O utilities
from arima_garch.utils.io import (
    ensure_output_dir,
    load_csv_file,
    load_json_data,
    save_dataframe_csv,
    save_json_pretty,
    to_jsonable,
)

# Metrics utilities
from arima_garch.utils.metrics import compute_mae, compute_residuals, compute_rmse

# Statsmodels utilities
from arima_garch.utils.statsmodels_utils import suppress_statsmodels_warnings

# Validation utilities
from arima_garch.utils.validation import (
    validate_alpha,
    validate_file_exists,
    validate_order_pair,
    validate_positive_int,
    validate_required_columns,
    validate_series,
)

__all__ = [
    # get_logger from config_logging
    "get_logger",
    # Validation
    "validate_alpha",
    "validate_file_exists",
    "validate_order_pair",
    "validate_positive_int",
    "validate_required_columns",
    "validate_series",
    # I/O
    "ensure_output_dir",
    "load_csv_file",
    "load_json_data",
    "save_dataframe_csv",
    "save_json_pretty",
    "to_jsonable",
    # Metrics
    "compute_mae",
    "compute_residuals",
    "compute_rmse",
    # Statsmodels
    "suppress_statsmodels_warnings",
]
