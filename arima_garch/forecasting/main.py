"""CLI entry point for forecasting module."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from arima_garch.cli import add_config_arguments, config_from_args
from arima_garch.constants import (
    EVALUATION_FILE,
    FORECAST_FILE,
    GARCH_MODEL_FILE,
    GARCH_MODEL_METADATA_FILE,
    PRICE_SPLIT_FILE,
)
from arima_garch.data_preparation.split import load_split
from arima_garch.forecasting.evaluation import evaluate, save_forecast_outputs
from arima_garch.forecasting.forecaster import forecast, invert_transform
from arima_garch.garch.backend import ArchStatsmodelsBackend
from arima_garch.garch.persistence import load_selected_model
from arima_garch.pipeline import results_path
from arima_garch.stationarity_check.transforms import make_stationary
from arima_garch.utils import get_logger

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Forecast the holdout with the selected model")
    parser.add_argument("--split-file", type=Path, default=PRICE_SPLIT_FILE)
    add_config_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Forecast the holdout horizon, map it back to prices and score it."""
    args = parse_args(argv)
    config = config_from_args(args)
    logger.info("=" * 60)
    logger.info("FORECAST AND EVALUATION")
    logger.info("=" * 60)
    try:
        split = load_split(args.split_file)
        selected, metadata = load_selected_model(
            model_file=results_path(config.output_dir, GARCH_MODEL_FILE),
            metadata_file=results_path(config.output_dir, GARCH_MODEL_METADATA_FILE),
        )
        transformed = make_stationary(
            split.train,
            metadata.get("difference_order", config.difference_order),
            max_order=config.max_difference_order,
            alpha=config.stationarity_alpha,
        )
        fc = forecast(selected, len(split.test), ArchStatsmodelsBackend.from_config(config))
        evaluation = evaluate(invert_transform(fc.mean, transformed.anchors), split.test)
        save_forecast_outputs(
            fc,
            evaluation,
            forecast_file=results_path(config.output_dir, FORECAST_FILE),
            evaluation_file=results_path(config.output_dir, EVALUATION_FILE),
        )
    except Exception as exc:  # surface early during CLI use
        logger.error("Forecasting failed: %s", exc, exc_info=True)
        raise
    logger.info("RMSE: %.4f", evaluation.rmse)


if __name__ == "__main__":
    main()
