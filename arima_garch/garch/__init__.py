"""GARCH candidate fitting, diagnostics and selection."""

from __future__ import annotations

from arima_garch.garch.backend import ArchStatsmodelsBackend, StatisticalBackend
from arima_garch.garch.diagnostics import (
    is_adequate,
    jarque_bera,
    jarque_bera_test,
    ljung_box,
    ljung_box_test,
    run_diagnostics,
)
from arima_garch.garch.fitting import (
    CandidateFitResult,
    fit_all_candidates,
    fit_candidate,
    fit_candidates,
    pure_garch_specs,
)
from arima_garch.garch.models import CandidateSpec, DiagnosticResult, FittedCandidate, FittedModel
from arima_garch.garch.order_selection import (
    ArimaSearchResult,
    EacfTable,
    auto_select_arima_order,
    eacf,
)
from arima_garch.garch.persistence import load_selected_model, save_selected_model
from arima_garch.garch.selection import candidate_table, select_best_candidate

__all__ = [
    "ArchStatsmodelsBackend",
    "ArimaSearchResult",
    "CandidateFitResult",
    "CandidateSpec",
    "DiagnosticResult",
    "EacfTable",
    "FittedCandidate",
    "FittedModel",
    "StatisticalBackend",
    "auto_select_arima_order",
    "candidate_table",
    "eacf",
    "fit_all_candidates",
    "fit_candidate",
    "fit_candidates",
    "is_adequate",
    "jarque_bera",
    "jarque_bera_test",
    "ljung_box",
    "ljung_box_test",
    "load_selected_model",
    "pure_garch_specs",
    "run_diagnostics",
    "save_selected_model",
    "select_best_candidate",
]
