"""Tests for saving and loading the selected model."""

from __future__ import annotations

import dataclasses
import json
import sys
import threading
from pathlib import Path

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import numpy as np
import pandas as pd
import pytest

from conftest import FakeBackend

from arima_garch.garch import (
    FittedCandidate,
    fit_all_candidates,
    load_selected_model,
    save_selected_model,
    select_best_candidate,
)


@pytest.fixture
def selected(reference_backend: FakeBackend) -> FittedCandidate:
    returns = pd.Series(0.01 * np.random.default_rng(0).standard_normal(100))
    result = fit_all_candidates(returns, reference_backend)
    return select_best_candidate(result.candidates)


class TestSelectedModelPersistence:
    """Tests for save_selected_model / load_selected_model."""

    def test_round_trip(self, tmp_path: Path, selected: FittedCandidate) -> None:
        model_file = tmp_path / "garch" / "model.joblib"
        metadata_file = tmp_path / "garch" / "model_metadata.json"
        save_selected_model(
            selected,
            {"difference_order": 1, "arima_order": (0, 0, 0)},
            model_file=model_file,
            metadata_file=metadata_file,
        )

        loaded, metadata = load_selected_model(model_file=model_file, metadata_file=metadata_file)
        assert loaded.name == "GARCH(1,1)"
        assert loaded.criterion_value == pytest.approx(-4.9985)
        assert loaded.model.params == selected.model.params
        assert metadata["difference_order"] == 1
        assert metadata["arima_order"] == [0, 0, 0]
        assert metadata["selected"]["name"] == "GARCH(1,1)"

    def test_metadata_is_strict_json(self, tmp_path: Path, selected: FittedCandidate) -> None:
        _, metadata_file = save_selected_model(
            selected,
            {"note": float("nan")},
            model_file=tmp_path / "m.joblib",
            metadata_file=tmp_path / "m.json",
        )
        text = metadata_file.read_text()
        assert "NaN" not in text
        assert json.loads(text)["note"] is None

    def test_missing_files(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_selected_model(model_file=tmp_path / "m.joblib", metadata_file=tmp_path / "m.json")

    def test_unpicklable_model(self, tmp_path: Path, selected: FittedCandidate) -> None:
        broken_model = dataclasses.replace(selected.model, result=threading.Lock())
        broken = dataclasses.replace(selected, model=broken_model)
        with pytest.raises(RuntimeError, match="Failed to save selected model"):
            save_selected_model(
                broken, {}, model_file=tmp_path / "m.joblib", metadata_file=tmp_path / "m.json"
            )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
