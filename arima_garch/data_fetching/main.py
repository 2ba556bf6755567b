"""CLI entry point for data_fetching module."""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
import sys

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from arima_garch.constants import (
    DATA_FETCH_END_DATE,
    DATA_FETCH_START_DATE,
    DATA_FETCH_TICKER,
    PRICE_HISTORY_FILE,
)
from arima_garch.data_fetching.download import fetch_and_save
from arima_garch.utils import get_logger

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Download daily price history from Yahoo Finance")
    parser.add_argument("--ticker", default=DATA_FETCH_TICKER, help="Ticker symbol")
    parser.add_argument(
        "--start",
        type=datetime.fromisoformat,
        default=DATA_FETCH_START_DATE,
        help="First day (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--end",
        type=datetime.fromisoformat,
        default=DATA_FETCH_END_DATE,
        help="Last day (YYYY-MM-DD)",
    )
    parser.add_argument("--output", type=Path, default=PRICE_HISTORY_FILE, help="Output CSV")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main CLI function to fetch the price history."""
    args = parse_args(argv)
    logger.info("=" * 60)
    logger.info("DATA FETCHING: %s %s -> %s", args.ticker, args.start.date(), args.end.date())
    logger.info("=" * 60)
    try:
        path = fetch_and_save(args.ticker, args.start, args.end, args.output)
    except Exception as exc:  # surface early during CLI use
        logger.error("Data fetching failed: %s", exc, exc_info=True)
        raise
    logger.info("Price history written to %s", path)


if __name__ == "__main__":
    main()
