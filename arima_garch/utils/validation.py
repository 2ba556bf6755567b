"""Validation utilities for files, DataFrames, series and parameters.

This module provides validation functions for:
- File existence validation
- DataFrame validation (required columns)
- Series validation (finite float values)
- Parameter validation (significance levels, counts, model orders)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

__all__ = [
    "validate_file_exists",
    "validate_required_columns",
    "validate_series",
    "validate_alpha",
    "validate_positive_int",
    "validate_order_pair",
]


def validate_file_exists(file_path: Path, file_name: str | None = None) -> None:
    """Validate that a file exists.

    Args:
        file_path: Path to the file to check.
        file_name: Optional name of the file for error message.
            If None, uses the file path.

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path.exists():
        if file_name is None:
            file_name = str(file_path)
        msg = f"{file_name} not found: {file_path}"
        raise FileNotFoundError(msg)


def validate_required_columns(
    df: pd.DataFrame,
    required_columns: set[str] | list[str],
    df_name: str = "DataFrame",
) -> None:
    """Validate that DataFrame contains required columns.

    Args:
        df: DataFrame to validate.
        required_columns: Set or list of required column names.
        df_name: Name of the DataFrame for error messages. Default is 'DataFrame'.

    Raises:
        KeyError: If any required column is missing.
    """
    required_set = set(required_columns)
    missing_columns = required_set - set(df.columns)
    if missing_columns:
        msg = f"Missing required columns in {df_name}: {sorted(missing_columns)}"
        raise KeyError(msg)


def validate_series(series: pd.Series) -> pd.Series:
    """Return a clean float Series with NaN values removed.

    Used by every statistical test and fitting routine so they all see the
    same finite observations.

    Args:
        series: Input time series.

    Returns:
        Cleaned Series with NaN values removed and converted to float.

    Raises:
        ValueError: If series is None, empty after dropna, or contains infinities.

    Examples:
        >>> series = pd.Series([1.0, 2.0, np.nan, 3.0])
        >>> len(validate_series(series))
        3
    """
    if series is None:
        raise ValueError("series is None")
    s = pd.Series(series).dropna().astype(float)
    if s.empty:
        raise ValueError("series is empty after dropna")
    if not np.all(np.isfinite(s.to_numpy())):
        raise ValueError("series contains infinite values")
    return s


def validate_alpha(alpha: float, name: str = "alpha") -> None:
    """Validate that a significance level lies strictly between 0 and 1.

    Raises:
        ValueError: If alpha is not in (0, 1).
    """
    if not 0 < alpha < 1:
        raise ValueError(f"{name} must be in (0, 1), got {alpha}")


def validate_positive_int(value: int, name: str) -> None:
    """Validate that value is an integer >= 1.

    Raises:
        ValueError: If value is not a positive integer.
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def validate_order_pair(order: tuple[int, int], name: str = "order") -> tuple[int, int]:
    """Validate a (p, q) model order and return it as a tuple of ints.

    Raises:
        ValueError: If order is not two non-negative integers.
    """
    values = tuple(order)
    if len(values) != 2:
        raise ValueError(f"Invalid {name}: {order}. Must be a (p, q) pair")
    if any(isinstance(x, bool) or not isinstance(x, (int, np.integer)) or x < 0 for x in values):
        raise ValueError(f"Invalid {name}: {order}. All values must be non-negative integers")
    return int(values[0]), int(values[1])
