"""I/O utilities for loading and saving data files.

This module provides functions for:
- Loading raw CSV files
- Saving DataFrames as CSV
- JSON file operations (numpy-aware serialization)
- File system utilities (ensure directories exist)
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
import json
import math
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from arima_garch.config_logging import get_logger
from arima_garch.constants import JSON_INDENT
from arima_garch.utils.validation import validate_file_exists, validate_required_columns

__all__ = [
    "ensure_output_dir",
    "load_csv_file",
    "save_dataframe_csv",
    "load_json_data",
    "save_json_pretty",
    "to_jsonable",
]


def ensure_output_dir(path: Path) -> None:
    """Ensure parent directory exists for a given path.

    Args:
        path: File path whose parent directory should be created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def load_csv_file(
    csv_path: Path | str,
    *,
    required_columns: list[str] | set[str] | None = None,
) -> pd.DataFrame:
    """Load a CSV file without any type coercion.

    Date parsing and numeric conversion are left to the caller so that
    malformed values can be reported with domain-specific errors.

    Args:
        csv_path: Path to CSV file.
        required_columns: Columns that must exist (raises KeyError if missing).

    Returns:
        DataFrame with loaded data.

    Raises:
        FileNotFoundError: If file does not exist.
        ValueError: If the file is empty.
        KeyError: If required columns are missing.
    """
    logger = get_logger(__name__)
    path_obj = Path(csv_path)
    validate_file_exists(path_obj, "Data file")

    logger.info(f"Loading dataset from {path_obj}")
    try:
        df = pd.read_csv(path_obj, dtype=str, keep_default_na=True)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"Dataset is empty: {path_obj}") from e
    if df.empty:
        raise ValueError(f"Dataset is empty: {path_obj}")
    if required_columns is not None:
        validate_required_columns(df, required_columns, df_name=path_obj.name)
    return df


def save_dataframe_csv(df: pd.DataFrame, output_file: Path | str, *, index: bool = False) -> Path:
    """Save DataFrame to CSV, creating parent directories.

    Args:
        df: DataFrame to save.
        output_file: Target CSV path.
        index: Whether to write the index.

    Returns:
        Path to the written file.
    """
    logger = get_logger(__name__)
    output_path = Path(output_file)
    ensure_output_dir(output_path)
    df.to_csv(output_path, index=index)
    logger.info(f"Saved to CSV: {output_path}")
    return output_path


def load_json_data(
    path: Path | str,
    *,
    required_keys: list[str] | None = None,
) -> dict[str, Any]:
    """Load JSON file with validation of required keys.

    Args:
        path: Path to JSON file.
        required_keys: Keys that must exist in the loaded dict.

    Returns:
        Loaded dictionary.

    Raises:
        FileNotFoundError: If file doesn't exist.
        KeyError: If required keys are missing.
        json.JSONDecodeError: If file is not valid JSON.
    """
    path_obj = Path(path)
    validate_file_exists(path_obj, "JSON file")

    with open(path_obj) as f:
        data = json.load(f)

    if required_keys is not None:
        missing_keys = set(required_keys) - set(data.keys())
        if missing_keys:
            msg = f"Missing required keys in {path_obj.name}: {sorted(missing_keys)}"
            raise KeyError(msg)

    return data


def to_jsonable(value: Any) -> Any:
    """Recursively convert numpy/pandas/dataclass values into JSON-safe objects.

    Non-finite floats become None so the output stays strict JSON.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, pd.Series):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, np.ndarray):
        return [to_jsonable(v) for v in value.tolist()]
    if isinstance(value, (pd.Timestamp, np.datetime64)):
        return pd.Timestamp(value).strftime("%Y-%m-%d")
    if isinstance(value, (np.bool_, bool)):
        return bool(value)
    if isinstance(value, (np.integer,)):
        return int(value)
    if isinstance(value, (np.floating, float)):
        f = float(value)
        return f if math.isfinite(f) else None
    if isinstance(value, Path):
        return str(value)
    return value


def save_json_pretty(
    data: dict | list,
    output_path: Path | str,
    *,
    indent: int = JSON_INDENT,
    sort_keys: bool = False,
) -> Path:
    """Save JSON with pretty formatting and automatic directory creation.

    Args:
        data: Dictionary or list to save as JSON.
        output_path: Path to save JSON file.
        indent: Indentation level for pretty printing.
        sort_keys: If True, sort dictionary keys alphabetically.

    Returns:
        Path to the written file.

    Examples:
        >>> save_json_pretty({"rmse": 0.2264}, "results/forecast/evaluation.json")
    """
    path_obj = Path(output_path)
    ensure_output_dir(path_obj)

    with open(path_obj, "w") as f:
        json.dump(to_jsonable(data), f, indent=indent, sort_keys=sort_keys)
    return path_obj
