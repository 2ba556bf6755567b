"""End-to-end run: load, split, transform, fit, select, forecast, evaluate."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from arima_garch.config import PipelineConfig
from arima_garch.constants import (
    EVALUATION_FILE,
    FORECAST_FILE,
    GARCH_CANDIDATES_FILE,
    GARCH_MODEL_FILE,
    GARCH_MODEL_METADATA_FILE,
    PIPELINE_REPORT_FILE,
    RESULTS_DIR,
    STATIONARITY_REPORT_FILE,
    TRANSFORMED_SERIES_FILE,
)
from arima_garch.data_preparation import SplitResult, load_price_series, split_train_test
from arima_garch.forecasting import (
    EvaluationResult,
    Forecast,
    evaluate,
    forecast,
    invert_transform,
    save_forecast_outputs,
)
from arima_garch.garch import (
    ArchStatsmodelsBackend,
    EacfTable,
    FittedCandidate,
    StatisticalBackend,
    eacf,
    fit_all_candidates,
    save_selected_model,
    select_best_candidate,
)
from arima_garch.stationarity_check import (
    TransformedSeries,
    make_stationary,
    save_stationarity_report,
    save_transformed_series,
)
from arima_garch.utils import get_logger, save_json_pretty

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Every stage output of one run."""

    config: PipelineConfig
    split: SplitResult
    transformed: TransformedSeries
    eacf: EacfTable
    candidates: list[FittedCandidate]
    arima_order: tuple[int, int, int] | None
    selected: FittedCandidate
    forecast: Forecast
    evaluation: EvaluationResult

    @property
    def rmse(self) -> float:
        return self.evaluation.rmse

    def report(self) -> dict[str, Any]:
        """Machine-readable summary of the run."""
        stationarity = self.transformed.report.to_dict() if self.transformed.report else None
        return {
            "config": self.config.to_dict(),
            "split": {
                "n_train": len(self.split.train),
                "n_test": len(self.split.test),
                "train_start": self.split.train.index[0],
                "train_end": self.split.train.index[-1],
                "test_start": self.split.test.index[0],
                "test_end": self.split.test.index[-1],
            },
            "stationarity": {"difference_order": self.transformed.order, "report": stationarity},
            "eacf_abs_returns": self.eacf.to_dict(),
            "arima_order": list(self.arima_order) if self.arima_order else None,
            "candidates": [c.summary() for c in self.candidates],
            "selected": self.selected.name,
            "forecast": {"mean": self.forecast.mean, "variance": self.forecast.variance},
            "evaluation": self.evaluation.to_dict(),
        }


def fit_and_select(
    transformed: TransformedSeries,
    config: PipelineConfig,
    backend: StatisticalBackend,
) -> tuple[EacfTable, list[FittedCandidate], tuple[int, int, int] | None, FittedCandidate]:
    """EACF, candidate fitting and selection on the transformed training series."""
    table = eacf(transformed.values.abs())
    logger.info("EACF of |returns|:\n%s", table.format())

    fit_result = fit_all_candidates(
        transformed.values,
        backend,
        orders=config.candidate_orders,
        distribution=config.distribution,
        include_arma_candidate=config.include_arma_candidate,
        criterion=config.criterion,
        lags=config.ljung_box_lags,
        alpha=config.adequacy_alpha,
    )
    selected = select_best_candidate(fit_result.candidates)
    return table, fit_result.candidates, fit_result.arima_order, selected


def run_pipeline(
    config: PipelineConfig | None = None,
    backend: StatisticalBackend | None = None,
) -> PipelineResult:
    """Run every stage once and return their outputs.

    Args:
        config: Pipeline configuration; defaults to ``PipelineConfig()``.
        backend: Statistical backend; defaults to ``ArchStatsmodelsBackend``
            built from the configuration.

    Raises:
        PipelineError: Any stage failure (see ``arima_garch.errors``).
    """
    config = config or PipelineConfig()
    backend = backend or ArchStatsmodelsBackend.from_config(config)

    logger.info("=" * 60)
    logger.info("ARIMA/GARCH PIPELINE")
    logger.info("=" * 60)

    series = load_price_series(
        config.data_file, date_column=config.date_column, price_column=config.price_column
    )
    split = split_train_test(series, horizon=config.holdout)
    transformed = make_stationary(
        split.train,
        config.difference_order,
        max_order=config.max_difference_order,
        alpha=config.stationarity_alpha,
    )
    table, candidates, arima_order, selected = fit_and_select(transformed, config, backend)

    fc = forecast(selected, len(split.test), backend)
    price_forecast = invert_transform(fc.mean, transformed.anchors)
    evaluation = evaluate(price_forecast, split.test)
    logger.info("RMSE of %s over the %d-day holdout: %.4f", selected.name, len(split.test), evaluation.rmse)

    return PipelineResult(
        config=config,
        split=split,
        transformed=transformed,
        eacf=table,
        candidates=candidates,
        arima_order=arima_order,
        selected=selected,
        forecast=fc,
        evaluation=evaluation,
    )


def results_path(output_dir: Path, default_path: Path) -> Path:
    """Map a default results path into output_dir, keeping its layout."""
    return output_dir / default_path.relative_to(RESULTS_DIR)


def save_pipeline_outputs(result: PipelineResult, output_dir: Path | str | None = None) -> dict[str, Path]:
    """Write every artifact of a run under output_dir.

    Returns:
        Mapping of artifact name to written path.
    """
    out = Path(output_dir) if output_dir is not None else result.config.output_dir
    paths: dict[str, Path] = {}
    if result.transformed.report is not None:
        paths["stationarity_report"] = save_stationarity_report(
            result.transformed.report,
            results_path(out, STATIONARITY_REPORT_FILE),
            extra={"difference_order": result.transformed.order},
        )
    paths["transformed_series"] = save_transformed_series(
        result.transformed, results_path(out, TRANSFORMED_SERIES_FILE)
    )
    paths["candidates"] = save_json_pretty(
        [c.summary() for c in result.candidates], results_path(out, GARCH_CANDIDATES_FILE)
    )
    paths["model"], paths["model_metadata"] = save_selected_model(
        result.selected,
        {
            "config": result.config.to_dict(),
            "difference_order": result.transformed.order,
            "arima_order": list(result.arima_order) if result.arima_order else None,
            "candidates": [c.summary() for c in result.candidates],
        },
        model_file=results_path(out, GARCH_MODEL_FILE),
        metadata_file=results_path(out, GARCH_MODEL_METADATA_FILE),
    )
    paths["forecast"], paths["evaluation"] = save_forecast_outputs(
        result.forecast,
        result.evaluation,
        forecast_file=results_path(out, FORECAST_FILE),
        evaluation_file=results_path(out, EVALUATION_FILE),
    )
    paths["report"] = save_json_pretty(result.report(), results_path(out, PIPELINE_REPORT_FILE))
    logger.info("Saved pipeline report: %s", paths["report"])
    return paths
