"""CLI entry point for stationarity_check module."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Ensure project root on path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from arima_garch.cli import add_config_arguments, config_from_args
from arima_garch.constants import PRICE_SPLIT_FILE, STATIONARITY_REPORT_FILE, TRANSFORMED_SERIES_FILE
from arima_garch.data_preparation.split import load_split
from arima_garch.pipeline import results_path
from arima_garch.stationarity_check.stationarity_check import save_stationarity_report
from arima_garch.stationarity_check.transforms import make_stationary, save_transformed_series
from arima_garch.utils import get_logger

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Log-difference the training prices and test stationarity")
    parser.add_argument("--split-file", type=Path, default=PRICE_SPLIT_FILE)
    add_config_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run stationarity checks on the training prices and save a JSON report."""
    args = parse_args(argv)
    config = config_from_args(args)
    logger.info("=" * 60)
    logger.info("STATIONARITY CHECK (ADF + KPSS)")
    logger.info("=" * 60)
    try:
        split = load_split(args.split_file)
        transformed = make_stationary(
            split.train,
            config.difference_order,
            max_order=config.max_difference_order,
            alpha=config.stationarity_alpha,
        )
        save_stationarity_report(
            transformed.report,
            results_path(config.output_dir, STATIONARITY_REPORT_FILE),
            extra={"difference_order": transformed.order},
        )
        save_transformed_series(transformed, results_path(config.output_dir, TRANSFORMED_SERIES_FILE))
    except Exception as exc:  # surface early during CLI use
        logger.error("Stationarity check failed: %s", exc, exc_info=True)
        raise


if __name__ == "__main__":
    main()
