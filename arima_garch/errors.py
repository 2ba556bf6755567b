"""Error kinds raised by the forecasting pipeline.

Every error is terminal for a run. Each one records the pipeline stage that
failed and a small mapping of context (candidate name, orders, sizes) so the
operator can adjust inputs and rerun.
"""

from __future__ import annotations

from typing import Any, Mapping


class PipelineError(Exception):
    """Base class for pipeline failures."""

    default_stage: str = "pipeline"

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.details: dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return f"[{self.stage}] {self.message}"
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"[{self.stage}] {self.message} ({context})"


class DataFormatError(PipelineError, ValueError):
    """Malformed input: missing columns, unparsable dates, non-numeric or non-positive prices."""

    default_stage = "data_loading"


class InsufficientDataError(PipelineError, ValueError):
    """Series shorter than the holdout horizon or a required lag."""

    default_stage = "split"


class NonStationaryError(PipelineError, ValueError):
    """No differencing order up to the configured maximum yields a stationary series."""

    default_stage = "stationarity"


class ModelFitError(PipelineError, RuntimeError):
    """The external estimation library failed or did not converge."""

    default_stage = "model_fitting"


class NoAdequateCandidateError(PipelineError, RuntimeError):
    """Every fitted candidate rejects the Ljung-Box no-autocorrelation null."""

    default_stage = "model_selection"


__all__ = [
    "PipelineError",
    "DataFormatError",
    "InsufficientDataError",
    "NonStationaryError",
    "ModelFitError",
    "NoAdequateCandidateError",
]
