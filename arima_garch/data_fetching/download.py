"""Download functions for fetching daily price history from yfinance."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd
import yfinance as yf

from arima_garch.constants import (
    DATA_FETCH_END_DATE,
    DATA_FETCH_START_DATE,
    DATA_FETCH_TICKER,
    DEFAULT_PRICE_COLUMN,
    NORMALIZED_DATE_COLUMN,
    PRICE_HISTORY_FILE,
)
from arima_garch.utils import get_logger, save_dataframe_csv

logger = get_logger(__name__)


def get_date_range() -> tuple[datetime, datetime]:
    """Return the configured historical download window."""
    return DATA_FETCH_START_DATE, DATA_FETCH_END_DATE


def _validate_ticker_input(ticker: str) -> None:
    """Validate ticker symbol input.

    Raises:
        ValueError: If ticker is empty or only whitespace.
    """
    if not ticker or not ticker.strip():
        raise ValueError("Ticker symbol must be a non-empty string")


def _validate_date_range(start_date: datetime, end_date: datetime) -> None:
    """Validate the date range for download.

    Raises:
        ValueError: If start_date >= end_date.
    """
    if start_date >= end_date:
        msg = f"Invalid date range: start_date {start_date} >= end_date {end_date}"
        raise ValueError(msg)


def _download_yfinance_data(
    ticker: str,
    start_date: datetime,
    end_date: datetime,
) -> pd.DataFrame:
    """Download raw OHLC data from yfinance, keeping the adjusted close.

    ``auto_adjust=False`` keeps the "Adj Close" column, which is the series the
    pipeline models. yfinance treats ``end`` as exclusive, so one day is added.

    Returns:
        DataFrame with OHLC columns, "Adj Close" and a Date column.
    """
    hist = yf.download(
        ticker,
        start=start_date,
        end=end_date + pd.Timedelta(days=1),
        progress=False,
        auto_adjust=False,
        actions=False,
    )
    if hist is None:
        return pd.DataFrame()
    hist = hist.copy()

    # Handle MultiIndex columns from yf.download() (e.g., ('Adj Close', 'AAPL'))
    if isinstance(hist.columns, pd.MultiIndex):
        hist.columns = hist.columns.get_level_values(0)

    if NORMALIZED_DATE_COLUMN not in hist.columns:
        hist[NORMALIZED_DATE_COLUMN] = hist.index
    hist = hist.reset_index(drop=True)
    return hist


def _is_valid_price_history(hist: pd.DataFrame, ticker: str) -> bool:
    """Check that downloaded data is non-empty and exposes the adjusted close."""
    if hist.empty:
        logger.warning("Empty data received for ticker %s", ticker)
        return False
    if DEFAULT_PRICE_COLUMN not in hist.columns:
        logger.warning("No '%s' column in data for ticker %s", DEFAULT_PRICE_COLUMN, ticker)
        return False
    return True


def download_price_history(
    ticker: str = DATA_FETCH_TICKER,
    start_date: datetime = DATA_FETCH_START_DATE,
    end_date: datetime = DATA_FETCH_END_DATE,
) -> pd.DataFrame | None:
    """Download and validate daily price history for one ticker.

    Args:
        ticker: Ticker symbol (default AAPL).
        start_date: First day of the window (inclusive).
        end_date: Last day of the window (inclusive).

    Returns:
        DataFrame with ``Date`` and ``Adj Close`` columns (plus OHLCV),
        sorted by date, or None when the download is empty or fails.

    Raises:
        ValueError: If the ticker is blank or the date range is inverted.
    """
    _validate_ticker_input(ticker)
    _validate_date_range(start_date, end_date)

    try:
        hist = _download_yfinance_data(ticker, start_date, end_date)
    except Exception as exc:  # yfinance raises a wide variety of network errors
        logger.error("Error downloading data for ticker %s: %s", ticker, exc)
        return None

    if not _is_valid_price_history(hist, ticker):
        return None

    dates = pd.to_datetime(hist[NORMALIZED_DATE_COLUMN])
    if dates.dt.tz is not None:
        dates = dates.dt.tz_localize(None)
    hist[NORMALIZED_DATE_COLUMN] = dates
    hist = hist.sort_values(NORMALIZED_DATE_COLUMN).reset_index(drop=True)
    logger.info(
        "Downloaded %d rows of data for %s between %s and %s",
        len(hist),
        ticker,
        start_date.date(),
        end_date.date(),
    )
    return hist


def fetch_and_save(
    ticker: str = DATA_FETCH_TICKER,
    start_date: datetime = DATA_FETCH_START_DATE,
    end_date: datetime = DATA_FETCH_END_DATE,
    output_file: Path | str = PRICE_HISTORY_FILE,
) -> Path:
    """Download the price history and write it as the pipeline's input CSV.

    Returns:
        Path of the written CSV.

    Raises:
        RuntimeError: If no data could be downloaded.
    """
    hist = download_price_history(ticker, start_date, end_date)
    if hist is None:
        raise RuntimeError(f"No price history downloaded for {ticker}")
    columns = [NORMALIZED_DATE_COLUMN] + [c for c in hist.columns if c != NORMALIZED_DATE_COLUMN]
    out = hist[columns].copy()
    out[NORMALIZED_DATE_COLUMN] = out[NORMALIZED_DATE_COLUMN].dt.strftime("%Y-%m-%d")
    return save_dataframe_csv(out, output_file)
