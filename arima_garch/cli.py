"""Command-line options shared by the entry points."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from arima_garch.config import PipelineConfig, load_config
from arima_garch.config_logging import setup_logging
from arima_garch.constants import (
    ARIMA_SEARCH_STRATEGIES,
    GARCH_SUPPORTED_CRITERIA,
    GARCH_SUPPORTED_DISTRIBUTIONS,
)


def _order(text: str) -> tuple[int, int]:
    """Parse "p,q" into a (p, q) pair."""
    try:
        p, q = (int(part) for part in text.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected 'p,q', got {text!r}") from exc
    return p, q


def add_config_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add ``--config``, ``--log-level`` and one override flag per setting.

    Every override defaults to None so unset flags keep the configured value.
    """
    parser.add_argument("--config", type=Path, help="JSON file with PipelineConfig fields")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--data-file", type=Path)
    parser.add_argument("--date-column")
    parser.add_argument("--price-column")
    parser.add_argument("--holdout", type=int)
    parser.add_argument("--difference-order", type=int)
    parser.add_argument(
        "--auto-difference",
        action="store_true",
        help="Choose the differencing order with ADF/KPSS",
    )
    parser.add_argument("--max-difference-order", type=int)
    parser.add_argument("--stationarity-alpha", type=float)
    parser.add_argument(
        "--candidate-order",
        dest="candidate_orders",
        type=_order,
        action="append",
        help="Variance order 'p,q'; repeat for several candidates",
    )
    parser.add_argument("--distribution", choices=GARCH_SUPPORTED_DISTRIBUTIONS)
    parser.add_argument(
        "--no-arma-candidate",
        dest="include_arma_candidate",
        action="store_const",
        const=False,
        help="Skip the ARMA+GARCH candidate",
    )
    parser.add_argument("--criterion", choices=GARCH_SUPPORTED_CRITERIA)
    parser.add_argument("--ljung-box-lags", type=int)
    parser.add_argument("--adequacy-alpha", type=float)
    parser.add_argument("--arima-search", choices=ARIMA_SEARCH_STRATEGIES)
    parser.add_argument("--arima-n-trials", type=int)
    parser.add_argument("--random-state", type=int)
    parser.add_argument("--output-dir", type=Path)
    return parser


def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    """Configure logging, load the config file and apply the CLI overrides."""
    setup_logging(args.log_level, force=args.log_level is not None)
    config = load_config(args.config)
    overrides = {
        "data_file": args.data_file,
        "date_column": args.date_column,
        "price_column": args.price_column,
        "holdout": args.holdout,
        "difference_order": args.difference_order,
        "max_difference_order": args.max_difference_order,
        "stationarity_alpha": args.stationarity_alpha,
        "candidate_orders": tuple(args.candidate_orders) if args.candidate_orders else None,
        "distribution": args.distribution,
        "include_arma_candidate": args.include_arma_candidate,
        "criterion": args.criterion,
        "ljung_box_lags": args.ljung_box_lags,
        "adequacy_alpha": args.adequacy_alpha,
        "arima_search": args.arima_search,
        "arima_n_trials": args.arima_n_trials,
        "random_state": args.random_state,
        "output_dir": args.output_dir,
    }
    config = config.with_overrides(**overrides)
    if args.auto_difference:
        config = config_with_auto_difference(config)
    return config


def config_with_auto_difference(config: PipelineConfig) -> PipelineConfig:
    """Copy of config choosing the differencing order automatically."""
    return replace(config, difference_order=None)
