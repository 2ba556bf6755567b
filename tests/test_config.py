"""Unit tests for PipelineConfig, config loading and error kinds."""

from __future__ import annotations

import json
import sys
from pathlib import Path

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from arima_garch.config import PipelineConfig, config_from_mapping, load_config
from arima_garch.errors import (
    DataFormatError,
    InsufficientDataError,
    ModelFitError,
    NoAdequateCandidateError,
    NonStationaryError,
    PipelineError,
)


class TestPipelineConfig:
    """Tests for PipelineConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = PipelineConfig()
        assert config.holdout == 30
        assert config.difference_order == 1
        assert config.candidate_orders == ((1, 1), (2, 2))
        assert config.distribution == "skewt"
        assert config.criterion == "aic"
        assert config.ljung_box_lags == 20
        assert config.adequacy_alpha == 0.05

    def test_paths_are_converted(self) -> None:
        config = PipelineConfig(data_file="prices.csv", output_dir="out")  # type: ignore[arg-type]
        assert config.data_file == Path("prices.csv")
        assert config.output_dir == Path("out")

    def test_orders_are_normalized_to_tuples(self) -> None:
        config = PipelineConfig(candidate_orders=[[1, 1], [2, 1]])  # type: ignore[arg-type]
        assert config.candidate_orders == ((1, 1), (2, 1))

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"holdout": 0},
            {"stationarity_alpha": 1.0},
            {"adequacy_alpha": 0.0},
            {"difference_order": 3},
            {"difference_order": -1},
            {"candidate_orders": ()},
            {"candidate_orders": ((0, 1),)},
            {"distribution": "cauchy"},
            {"criterion": "hqic"},
            {"arima_search": "random"},
            {"fit_scale": 0.0},
        ],
    )
    def test_invalid_values_raise(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            PipelineConfig(**kwargs)

    def test_with_overrides_ignores_none(self) -> None:
        config = PipelineConfig().with_overrides(holdout=20, criterion=None)
        assert config.holdout == 20
        assert config.criterion == "aic"

    def test_with_overrides_unknown_key(self) -> None:
        with pytest.raises(KeyError, match="Unknown configuration keys"):
            PipelineConfig().with_overrides(horizon=20)

    def test_to_dict_is_json_serializable(self) -> None:
        data = PipelineConfig().to_dict()
        assert data["candidate_orders"] == [[1, 1], [2, 2]]
        json.dumps(data)


class TestLoadConfig:
    """Tests for config_from_mapping and load_config."""

    def test_explicit_null_selects_automatic_differencing(self) -> None:
        config = config_from_mapping({"difference_order": None})
        assert config.difference_order is None

    def test_unknown_keys_raise(self) -> None:
        with pytest.raises(KeyError):
            config_from_mapping({"not_a_field": 1})

    def test_load_from_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"holdout": 10, "candidate_orders": [[1, 1]]}))
        config = load_config(path)
        assert config.holdout == 10
        assert config.candidate_orders == ((1, 1),)

    def test_load_none_returns_defaults(self) -> None:
        assert load_config(None) == PipelineConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")


class TestErrors:
    """Tests for the error hierarchy."""

    @pytest.mark.parametrize(
        ("error_cls", "base", "stage"),
        [
            (DataFormatError, ValueError, "data_loading"),
            (InsufficientDataError, ValueError, "split"),
            (NonStationaryError, ValueError, "stationarity"),
            (ModelFitError, RuntimeError, "model_fitting"),
            (NoAdequateCandidateError, RuntimeError, "model_selection"),
        ],
    )
    def test_hierarchy_and_default_stage(self, error_cls: type, base: type, stage: str) -> None:
        err = error_cls("boom")
        assert isinstance(err, PipelineError)
        assert isinstance(err, base)
        assert err.stage == stage

    def test_str_includes_stage_and_details(self) -> None:
        err = ModelFitError("failed", details={"candidate": "GARCH(1,1)"})
        assert str(err) == "[model_fitting] failed (candidate='GARCH(1,1)')"

    def test_stage_override(self) -> None:
        err = InsufficientDataError("short", stage="diagnostics")
        assert str(err) == "[diagnostics] short"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
