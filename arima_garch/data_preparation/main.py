"""CLI entry point for data_preparation module."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from arima_garch.constants import (
    DEFAULT_DATE_COLUMN,
    DEFAULT_PRICE_COLUMN,
    HOLDOUT_HORIZON_DEFAULT,
    PRICE_HISTORY_FILE,
    PRICE_SPLIT_FILE,
)
from arima_garch.data_preparation.data_loading import load_price_series
from arima_garch.data_preparation.split import save_split, split_train_test
from arima_garch.utils import get_logger

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Load the price history and split off the holdout")
    parser.add_argument("--data-file", type=Path, default=PRICE_HISTORY_FILE, help="Input CSV")
    parser.add_argument("--date-column", default=DEFAULT_DATE_COLUMN)
    parser.add_argument("--price-column", default=DEFAULT_PRICE_COLUMN)
    parser.add_argument("--holdout", type=int, default=HOLDOUT_HORIZON_DEFAULT)
    parser.add_argument("--output", type=Path, default=PRICE_SPLIT_FILE, help="Split CSV")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main CLI function to load and split the price series."""
    args = parse_args(argv)
    logger.info("=" * 60)
    logger.info("DATA PREPARATION")
    logger.info("=" * 60)
    try:
        series = load_price_series(
            args.data_file, date_column=args.date_column, price_column=args.price_column
        )
        split = split_train_test(series, horizon=args.holdout)
        save_split(split, args.output)
    except Exception as exc:  # surface early during CLI use
        logger.error("Data preparation failed: %s", exc, exc_info=True)
        raise


if __name__ == "__main__":
    main()
