"""File and directory paths for the ARIMA/GARCH forecasting project."""

from __future__ import annotations

from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# ============================================================================
# BASE DIRECTORIES
# ============================================================================

DATA_DIR = PROJECT_ROOT / "data"
RESULTS_DIR = PROJECT_ROOT / "results"

# ============================================================================
# DATA PIPELINE - File paths
# ============================================================================

# Raw price history (Yahoo Finance export layout)
PRICE_HISTORY_FILE = DATA_DIR / "aapl_prices.csv"
PRICE_SPLIT_FILE = DATA_DIR / "aapl_prices_split.csv"

# ============================================================================
# RESULTS DIRECTORIES - Organized by pipeline stage
# ============================================================================

STATIONARITY_RESULTS_DIR = RESULTS_DIR / "stationarity"
STATIONARITY_REPORT_FILE = STATIONARITY_RESULTS_DIR / "stationarity_report.json"
TRANSFORMED_SERIES_FILE = STATIONARITY_RESULTS_DIR / "transformed_train.csv"

GARCH_RESULTS_DIR = RESULTS_DIR / "garch"
GARCH_MODEL_FILE = GARCH_RESULTS_DIR / "model.joblib"
GARCH_MODEL_METADATA_FILE = GARCH_RESULTS_DIR / "model_metadata.json"
GARCH_CANDIDATES_FILE = GARCH_RESULTS_DIR / "candidates.json"

FORECAST_RESULTS_DIR = RESULTS_DIR / "forecast"
FORECAST_FILE = FORECAST_RESULTS_DIR / "forecast.csv"
EVALUATION_FILE = FORECAST_RESULTS_DIR / "evaluation.json"

PIPELINE_REPORT_FILE = RESULTS_DIR / "pipeline_report.json"
