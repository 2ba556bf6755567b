"""Load a dated adjusted-close price series from a CSV file."""

from __future__ import annotations

import warnings
from pathlib import Path

import pandas as pd

from arima_garch.constants import (
    DEFAULT_DATE_COLUMN,
    DEFAULT_PRICE_COLUMN,
    PRICE_INDEX_NAME,
    PRICE_SERIES_NAME,
)
from arima_garch.errors import DataFormatError
from arima_garch.utils import get_logger, load_csv_file

logger = get_logger(__name__)

_MAX_REPORTED_ROWS = 5


def _bad_rows(mask: pd.Series, values: pd.Series) -> list[str]:
    """Return a short sample of offending raw values for error messages."""
    return [str(v) for v in values[mask].head(_MAX_REPORTED_ROWS).tolist()]


def _wall_time(value: object) -> pd.Timestamp:
    """Parse one date, dropping any UTC offset but keeping the local wall time."""
    if pd.isna(value):
        return pd.NaT
    ts = pd.to_datetime(value, errors="coerce")
    if ts is pd.NaT or ts.tzinfo is None:
        return ts
    return ts.tz_localize(None)


def _parse_dates(raw: pd.Series, column: str) -> pd.Series:
    """Parse a date column, failing on any unparsable value.

    UTC offsets are dropped. Rows whose offsets differ (a tz-aware export
    spanning a DST change) are parsed one by one.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", FutureWarning)
            parsed = pd.to_datetime(raw, errors="coerce")
    except ValueError:
        parsed = None
    if parsed is None or not pd.api.types.is_datetime64_any_dtype(parsed):
        parsed = pd.to_datetime(raw.map(_wall_time), errors="coerce")
    unparsable = parsed.isna() & raw.notna()
    if raw.isna().any() or unparsable.any():
        raise DataFormatError(
            f"Column '{column}' contains missing or unparsable dates",
            details={
                "rows": int(unparsable.sum() + raw.isna().sum()),
                "examples": _bad_rows(unparsable, raw),
            },
        )
    if getattr(parsed.dt, "tz", None) is not None:
        parsed = parsed.dt.tz_localize(None)
    return parsed


def _parse_prices(raw: pd.Series, column: str) -> pd.Series:
    """Parse a price column, failing on any non-numeric value."""
    parsed = pd.to_numeric(raw, errors="coerce")
    non_numeric = parsed.isna() & raw.notna()
    if non_numeric.any():
        raise DataFormatError(
            f"Column '{column}' contains non-numeric values",
            details={"rows": int(non_numeric.sum()), "examples": _bad_rows(non_numeric, raw)},
        )
    return parsed.astype(float)


def price_series_from_frame(
    df: pd.DataFrame,
    *,
    date_column: str = DEFAULT_DATE_COLUMN,
    price_column: str = DEFAULT_PRICE_COLUMN,
) -> pd.Series:
    """Build a PriceSeries from a DataFrame with raw date and price columns.

    Rows with an empty price cell are dropped with a warning (Yahoo exports
    mark non-trading rows as "null"); anything else that is not a number is
    an error.

    Args:
        df: DataFrame holding at least date_column and price_column.
        date_column: Name of the date column.
        price_column: Name of the adjusted-close column.

    Returns:
        Float Series named "adj_close" with a strictly increasing
        DatetimeIndex named "date".

    Raises:
        DataFormatError: If a column is missing, a date is unparsable, a price
            is non-numeric, dates repeat, or no rows remain.
    """
    missing = [c for c in (date_column, price_column) if c not in df.columns]
    if missing:
        raise DataFormatError(
            f"Missing required columns: {missing}",
            details={"available": list(map(str, df.columns))},
        )

    dates = _parse_dates(df[date_column], date_column)
    prices = _parse_prices(df[price_column], price_column)

    series = pd.Series(prices.to_numpy(), index=pd.DatetimeIndex(dates), name=PRICE_SERIES_NAME)
    series.index.name = PRICE_INDEX_NAME

    n_missing = int(series.isna().sum())
    if n_missing:
        logger.warning("Dropping %d rows with empty '%s' values", n_missing, price_column)
        series = series.dropna()
    if series.empty:
        raise DataFormatError(f"No usable rows in column '{price_column}'")

    duplicated = series.index.duplicated()
    if duplicated.any():
        raise DataFormatError(
            "Duplicate dates in price history",
            details={"examples": [d.strftime("%Y-%m-%d") for d in series.index[duplicated][:5]]},
        )
    return series.sort_index()


def load_price_series(
    data_file: Path | str,
    *,
    date_column: str = DEFAULT_DATE_COLUMN,
    price_column: str = DEFAULT_PRICE_COLUMN,
) -> pd.Series:
    """Load the adjusted-close price series from a CSV file.

    Args:
        data_file: CSV path (e.g. a Yahoo Finance export).
        date_column: Name of the date column. Defaults to "Date".
        price_column: Name of the adjusted-close column. Defaults to "Adj Close".

    Returns:
        PriceSeries (see ``price_series_from_frame``).

    Raises:
        FileNotFoundError: If data_file does not exist.
        DataFormatError: If the content is malformed.
    """
    try:
        df = load_csv_file(data_file)
    except ValueError as exc:
        raise DataFormatError(str(exc), details={"file": str(data_file)}) from exc

    series = price_series_from_frame(df, date_column=date_column, price_column=price_column)
    logger.info(
        "Loaded %d prices from %s (%s -> %s)",
        len(series),
        data_file,
        series.index[0].date(),
        series.index[-1].date(),
    )
    return series
