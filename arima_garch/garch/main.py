"""CLI entry point for garch module."""

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
from arima_garch.config import PipelineConfig
from arima_garch.constants import (
    GARCH_CANDIDATES_FILE,
    GARCH_MODEL_FILE,
    GARCH_MODEL_METADATA_FILE,
    PRICE_SPLIT_FILE,
    STATIONARITY_REPORT_FILE,
)
from arima_garch.data_preparation.split import load_split
from arima_garch.garch.backend import ArchStatsmodelsBackend
from arima_garch.garch.persistence import save_selected_model
from arima_garch.pipeline import fit_and_select, results_path
from arima_garch.stationarity_check.transforms import make_stationary
from arima_garch.utils import get_logger, load_json_data, save_json_pretty

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Fit, diagnose and select GARCH candidates")
    parser.add_argument("--split-file", type=Path, default=PRICE_SPLIT_FILE)
    add_config_arguments(parser)
    return parser.parse_args(argv)


def _difference_order(config: PipelineConfig) -> int | None:
    """Differencing order saved by the stationarity stage, else the configured one."""
    report_file = results_path(config.output_dir, STATIONARITY_REPORT_FILE)
    if not report_file.exists():
        return config.difference_order
    order = int(load_json_data(report_file, required_keys=["difference_order"])["difference_order"])
    logger.info("Using d=%d from %s", order, report_file)
    return order


def main(
argv: list[str] | None = None) -> None:
    """Fit every candidate on the transformed training series and save the selected one."""
    args = parse_args(argv)
    config = config_from_args(args)
    logger.info("=" * 60)
    logger.info("GARCH CANDIDATE FITTING AND SELECTION")
    logger.info("=" * 60)
    try:
        split = load_split(args.split_file)
        transformed = make_stationary(
            split.train,
            _difference_order(config),
            max_order=config.max_difference_order,
            alpha=config.stationarity_alpha,
        )
        backend = ArchStatsmodelsBackend.from_config(config)
        table, candidates, arima_order, selected = fit_and_select(transformed, config, backend)
        save_json_pretty(
            [c.summary() for c in candidates],
            results_path(config.output_dir, GARCH_CANDIDATES_FILE),
        )
        save_selected_model(
            selected,
            {
                "config": config.to_dict(),
                "difference_order": transformed.order,
                "arima_order": list(arima_order) if arima_order else None,
                "eacf_abs_returns": table.to_dict(),
                "candidates": [c.summary() for c in candidates],
            },
            model_file=results_path(config.output_dir, GARCH_MODEL_FILE),
            metadata_file=results_path(config.output_dir, GARCH_MODEL_METADATA_FILE),
        )
    except Exception as exc:  # surface early during CLI use
        logger.error("GARCH stage failed: %s", exc, exc_info=True)
        raise


if __name__ == "__main__":
    main()
