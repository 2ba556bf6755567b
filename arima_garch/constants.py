"""Constants for the ARIMA/GARCH forecasting project."""

from __future__ import annotations

from datetime import datetime

# Re-export paths from path.py so stage modules import from one place
from arima_garch.path import (  # noqa: F401
    DATA_DIR,
    EVALUATION_FILE,
    FORECAST_FILE,
    FORECAST_RESULTS_DIR,
    GARCH_CANDIDATES_FILE,
    GARCH_MODEL_FILE,
    GARCH_MODEL_METADATA_FILE,
    GARCH_RESULTS_DIR,
    PIPELINE_REPORT_FILE,
    PRICE_HISTORY_FILE,
    PRICE_SPLIT_FILE,
    PROJECT_ROOT,
    RESULTS_DIR,
    STATIONARITY_REPORT_FILE,
    STATIONARITY_RESULTS_DIR,
    TRANSFORMED_SERIES_FILE,
)

# ============================================================================
# DATA FETCHING
# ============================================================================

DATA_FETCH_TICKER: str = "AAPL"
DATA_FETCH_START_DATE: datetime = datetime(2002, 2, 1)
DATA_FETCH_END_DATE: datetime = datetime(2017, 1, 31)
NORMALIZED_DATE_COLUMN: str = "Date"

# ============================================================================
# DATA LOADING & SPLIT
# ============================================================================

DEFAULT_DATE_COLUMN: str = "Date"
DEFAULT_PRICE_COLUMN: str = "Adj Close"
PRICE_SERIES_NAME: str = "adj_close"
PRICE_INDEX_NAME: str = "date"

HOLDOUT_HORIZON_DEFAULT: int = 30

# Dataset split labels
TRAIN_SPLIT_LABEL: str = "train"
TEST_SPLIT_LABEL: str = "test"

# ============================================================================
# STATIONARITY
# ============================================================================

STATIONARITY_DEFAULT_ALPHA: float = 0.05
STATIONARITY_MAX_DIFFERENCE_ORDER: int = 2
STATIONARITY_ADF_AUTOLAG: str = "AIC"
STATIONARITY_KPSS_REGRESSION: str = "c"
# Fewer points than this make ADF/KPSS meaningless
STATIONARITY_MIN_OBSERVATIONS: int = 10

# ============================================================================
# MODEL FITTING
# ============================================================================

# Variance-model candidates (p_var, q_var); EACF of |returns| suggested these
GARCH_CANDIDATE_ORDERS: tuple[tuple[int, int], ...] = ((1, 1), (2, 2))
GARCH_DEFAULT_DISTRIBUTION: str = "skewt"
GARCH_SUPPORTED_DISTRIBUTIONS: tuple[str, ...] = ("normal", "t", "skewt", "ged")
GARCH_SUPPORTED_CRITERIA: tuple[str, ...] = ("aic", "bic")
GARCH_DEFAULT_CRITERION: str = "aic"
GARCH_INCLUDE_ARMA_CANDIDATE: bool = True
# Log-returns are multiplied by this factor before optimisation; the
# likelihood is mapped back to the raw scale afterwards.
GARCH_FIT_SCALE: float = 100.0
GARCH_FIT_MAX_ITER: int = 1000
GARCH_MIN_OBSERVATIONS: int = 50

# Residual diagnostics
LJUNG_BOX_LAGS_DEFAULT: int = 20
ADEQUACY_ALPHA_DEFAULT: float = 0.05

# ARIMA mean-model order search
ARIMA_P_MAX: int = 5
ARIMA_Q_MAX: int = 5
ARIMA_SEARCH_STRATEGIES: tuple[str, ...] = ("grid", "optuna")
ARIMA_SEARCH_DEFAULT: str = "grid"
ARIMA_OPTUNA_N_TRIALS: int = 30
DEFAULT_RANDOM_STATE: int = 42

# EACF table dimensions
EACF_AR_MAX: int = 7
EACF_MA_MAX: int = 13

# ============================================================================
# I/O
# ============================================================================

JSON_INDENT: int = 2
FLOAT_PRECISION_LOG: int = 4
