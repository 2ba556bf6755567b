"""Pick the selected model among fitted candidates."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from arima_garch.errors import NoAdequateCandidateError
from arima_garch.garch.models import FittedCandidate
from arima_garch.utils import get_logger

logger = get_logger(__name__)


def select_best_candidate(candidates: Sequence[FittedCandidate]) -> FittedCandidate:
    """Return the adequate candidate with the lowest information criterion.

    Ties go to the candidate listed first.

    Raises:
        ValueError: If no candidates are given.
        NoAdequateCandidateError: If no candidate passes the Ljung-Box check.
    """
    if not candidates:
        raise ValueError("No candidates to select from")
    adequate = [c for c in candidates if c.adequate]
    if not adequate:
        raise NoAdequateCandidateError(
            "No candidate passes the Ljung-Box adequacy check",
            details={c.name: c.diagnostics.ljung_box_pvalue for c in candidates},
        )
    # min() keeps the first of equal values
    best = min(adequate, key=lambda c: c.criterion_value)
    logger.info(
        "Selected %s (%s=%.4f) among %d adequate of %d candidates",
        best.name,
        best.criterion.upper(),
        best.criterion_value,
        len(adequate),
        len(candidates),
    )
    return best


def candidate_table(candidates: Sequence[FittedCandidate]) -> pd.DataFrame:
    """One row per candidate (no parameter columns), in fitting order."""
    rows = [{k: v for k, v in c.summary().items() if k != "params"} for c in candidates]
    return pd.DataFrame(rows)
