"""Global main entry point running the whole forecasting pipeline.

Stages, in order:
1. Data preparation (load the price history, split off the holdout)
2. Stationarity (log + differencing, ADF/KPSS)
3. GARCH (EACF, candidate fitting, diagnostics, selection)
4. Forecast and evaluation (inverse transform, RMSE against the holdout)

The optional data fetching step is run separately with
``python -m arima_garch.data_fetching.main``.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from arima_garch.cli import add_config_arguments, config_from_args
from arima_garch.pipeline import run_pipeline, save_pipeline_outputs
from arima_garch.utils import get_logger

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Run the ARIMA/GARCH forecasting pipeline")
    add_config_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> float:
    """Run every stage, write the artifacts and return the holdout RMSE."""
    args = parse_args(argv)
    config = config_from_args(args)
    try:
        result = run_pipeline(config)
        save_pipeline_outputs(result)
    except KeyboardInterrupt:
        logger.error("=" * 80)
        logger.error("PIPELINE INTERRUPTED BY USER")
        logger.error("=" * 80)
        sys.exit(130)  # Standard exit code for SIGINT
    except Exception as exc:
        logger.error("=" * 80)
        logger.error("PIPELINE FAILED: %s", exc, exc_info=True)
        logger.error("=" * 80)
        raise

    logger.info("=" * 80)
    logger.info("Selected model: %s", result.selected.name)
    logger.info("Holdout RMSE: %.4f", result.rmse)
    logger.info("ALL STAGES COMPLETED SUCCESSFULLY")
    logger.info("=" * 80)
    return result.rmse


if __name__ == "__main__":
    main()
