"""Pipeline configuration.

Defaults come from ``arima_garch.constants``. A configuration can be loaded
from a JSON file and individual values overridden from the command line.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

from arima_garch.constants import (
    ADEQUACY_ALPHA_DEFAULT,
    ARIMA_OPTUNA_N_TRIALS,
    ARIMA_P_MAX,
    ARIMA_Q_MAX,
    ARIMA_SEARCH_DEFAULT,
    ARIMA_SEARCH_STRATEGIES,
    DEFAULT_DATE_COLUMN,
    DEFAULT_PRICE_COLUMN,
    DEFAULT_RANDOM_STATE,
    GARCH_CANDIDATE_ORDERS,
    GARCH_DEFAULT_CRITERION,
    GARCH_DEFAULT_DISTRIBUTION,
    GARCH_FIT_SCALE,
    GARCH_INCLUDE_ARMA_CANDIDATE,
    GARCH_SUPPORTED_CRITERIA,
    GARCH_SUPPORTED_DISTRIBUTIONS,
    HOLDOUT_HORIZON_DEFAULT,
    LJUNG_BOX_LAGS_DEFAULT,
    PRICE_HISTORY_FILE,
    RESULTS_DIR,
    STATIONARITY_DEFAULT_ALPHA,
    STATIONARITY_MAX_DIFFERENCE_ORDER,
)
from arima_garch.utils import (
    get_logger,
    load_json_data,
    validate_alpha,
    validate_order_pair,
    validate_positive_int,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    """Every tunable of a pipeline run.

    Attributes:
        data_file: CSV with the price history.
        date_column: Name of the date column in data_file.
        price_column: Name of the adjusted-close column in data_file.
        holdout: Number of trailing observations held out for evaluation.
        difference_order: Fixed differencing order, or None to choose it
            with repeated ADF/KPSS testing.
        max_difference_order: Upper bound for the automatic choice.
        stationarity_alpha: Significance level of the ADF/KPSS verdict.
        candidate_orders: Variance-model (p, q) orders of the pure GARCH candidates.
        distribution: Innovation distribution passed to the GARCH fitter.
        include_arma_candidate: Also fit an ARMA+GARCH candidate whose mean
            order comes from the automatic ARIMA search.
        criterion: Information criterion used for selection ("aic" or "bic").
        ljung_box_lags: Lag of the Ljung-Box adequacy test.
        adequacy_alpha: Ljung-Box significance level; adequate iff p > alpha.
        arima_max_p: Largest AR order of the ARIMA search.
        arima_max_q: Largest MA order of the ARIMA search.
        arima_search: "grid" (exhaustive) or "optuna" (TPE sampler).
        arima_n_trials: Number of Optuna trials when arima_search="optuna".
        random_state: Seed for the Optuna sampler.
        fit_scale: Multiplier applied to returns before GARCH optimisation.
        output_dir: Directory receiving reports, forecasts and the model.
    """

    data_file: Path = PRICE_HISTORY_FILE
    date_column: str = DEFAULT_DATE_COLUMN
    price_column: str = DEFAULT_PRICE_COLUMN
    holdout: int = HOLDOUT_HORIZON_DEFAULT
    difference_order: int | None = 1
    max_difference_order: int = STATIONARITY_MAX_DIFFERENCE_ORDER
    stationarity_alpha: float = STATIONARITY_DEFAULT_ALPHA
    candidate_orders: tuple[tuple[int, int], ...] = GARCH_CANDIDATE_ORDERS
    distribution: str = GARCH_DEFAULT_DISTRIBUTION
    include_arma_candidate: bool = GARCH_INCLUDE_ARMA_CANDIDATE
    criterion: str = GARCH_DEFAULT_CRITERION
    ljung_box_lags: int = LJUNG_BOX_LAGS_DEFAULT
    adequacy_alpha: float = ADEQUACY_ALPHA_DEFAULT
    arima_max_p: int = ARIMA_P_MAX
    arima_max_q: int = ARIMA_Q_MAX
    arima_search: str = ARIMA_SEARCH_DEFAULT
    arima_n_trials: int = ARIMA_OPTUNA_N_TRIALS
    random_state: int = DEFAULT_RANDOM_STATE
    fit_scale: float = GARCH_FIT_SCALE
    output_dir: Path = field(default=RESULTS_DIR)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_file", Path(self.data_file))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(
            self,
            "candidate_orders",
            tuple(validate_order_pair(tuple(o), "candidate order") for o in self.candidate_orders),
        )
        self._validate()

    def _validate(self) -> None:
        """Reject inconsistent values early, before any data is read."""
        validate_positive_int(self.holdout, "holdout")
        validate_positive_int(self.max_difference_order, "max_difference_order")
        validate_positive_int(self.ljung_box_lags, "ljung_box_lags")
        validate_positive_int(self.arima_n_trials, "arima_n_trials")
        validate_alpha(self.stationarity_alpha, "stationarity_alpha")
        validate_alpha(self.adequacy_alpha, "adequacy_alpha")
        if self.difference_order is not None and (
            self.difference_order < 0 or self.difference_order > self.max_difference_order
        ):
            raise ValueError(
                f"difference_order must be in [0, {self.max_difference_order}] or None, "
                f"got {self.difference_order}"
            )
        if not self.candidate_orders:
            raise ValueError("candidate_orders must contain at least one (p, q) order")
        for p_var, q_var in self.candidate_orders:
            if p_var < 1:
                raise ValueError(
                    f"Variance order ({p_var},{q_var}) needs at least one ARCH term (p >= 1)"
                )
        if self.distribution not in GARCH_SUPPORTED_DISTRIBUTIONS:
            raise ValueError(
                f"distribution must be one of {GARCH_SUPPORTED_DISTRIBUTIONS}, "
                f"got {self.distribution!r}"
            )
        if self.criterion not in GARCH_SUPPORTED_CRITERIA:
            raise ValueError(
                f"criterion must be one of {GARCH_SUPPORTED_CRITERIA}, got {self.criterion!r}"
            )
        if self.arima_search not in ARIMA_SEARCH_STRATEGIES:
            raise ValueError(
                f"arima_search must be one of {ARIMA_SEARCH_STRATEGIES}, "
                f"got {self.arima_search!r}"
            )
        if self.arima_max_p < 0 or self.arima_max_q < 0:
            raise ValueError("arima_max_p and arima_max_q must be non-negative")
        if self.fit_scale <= 0:
            raise ValueError(f"fit_scale must be positive, got {self.fit_scale}")

    def with_overrides(self, **overrides: Any) -> PipelineConfig:
        """Return a copy with the non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise KeyError(f"Unknown configuration keys: {sorted(unknown)}")
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view of the configuration."""
        data = asdict(self)
        data["data_file"] = str(self.data_file)
        data["output_dir"] = str(self.output_dir)
        data["candidate_orders"] = [list(order) for order in self.candidate_orders]
        return data


def config_from_mapping(values: Mapping[str, Any]) -> PipelineConfig:
    """Build a PipelineConfig from a plain mapping (e.g. parsed JSON).

    Unlike ``with_overrides``, explicit nulls are kept, so
    ``{"difference_order": null}`` selects the automatic differencing order.

    Raises:
        KeyError: If the mapping contains unknown keys.
    """
    unknown = set(values) - {f.name for f in fields(PipelineConfig)}
    if unknown:
        raise KeyError(f"Unknown configuration keys: {sorted(unknown)}")
    return PipelineConfig(**dict(values))


def load_config(path: Path | str | None = None) -> PipelineConfig:
    """Load a configuration file, or return the defaults when path is None.

    Args:
        path: Optional JSON file whose keys are PipelineConfig field names.

    Returns:
        Validated PipelineConfig.
    """
    if path is None:
        return PipelineConfig()
    data = load_json_data(path)
    logger.info("Loaded pipeline configuration from %s", path)
    return config_from_mapping(data)
