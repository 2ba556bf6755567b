"""End-to-end tests of the pipeline, the stage CLIs and the global entry point."""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import numpy as np
import pandas as pd
import pytest

from conftest import FakeBackend, make_garch_prices, write_price_csv

from arima_garch import main_global
from arima_garch.cli import config_from_args
from arima_garch.config import PipelineConfig
from arima_garch.data_preparation.main import main as preparation_main
from arima_garch.errors import NoAdequateCandidateError
from arima_garch.forecasting.main import main as forecasting_main
from arima_garch.garch.main import main as garch_main
from arima_garch.pipeline import results_path, run_pipeline, save_pipeline_outputs
from arima_garch.path import RESULTS_DIR, STATIONARITY_REPORT_FILE
from arima_garch.stationarity_check.main import main as stationarity_main


@pytest.fixture
def config(price_csv: Path, tmp_path: Path) -> PipelineConfig:
    return PipelineConfig(data_file=price_csv, output_dir=tmp_path / "results")


class TestRunPipeline:
    """Tests for run_pipeline with a scripted backend."""

    def test_selects_garch11_and_scores_holdout(
        self, config: PipelineConfig, reference_backend: FakeBackend, trending_prices: pd.Series
    ) -> None:
        result = run_pipeline(config, reference_backend)

        assert len(result.split.train) == 270
        assert len(result.split.test) == 30
        assert result.transformed.order == 1
        assert result.selected.name == "GARCH(1,1)"
        assert result.arima_order == (0, 0, 0)
        assert result.forecast.horizon == 30
        assert result.eacf.symbols.shape == (8, 14)

        # Zero mean forecast keeps the last training price
        last_train = trending_prices.iloc[269]
        np.testing.assert_allclose(result.evaluation.price_forecast.to_numpy(), last_train)
        expected = np.sqrt(np.mean((trending_prices.iloc[270:].to_numpy() - last_train) ** 2))
        assert result.rmse == pytest.approx(expected)

    def test_auto_difference(self, config: PipelineConfig, reference_backend: FakeBackend) -> None:
        auto = config.with_overrides(holdout=20)
        result = run_pipeline(replace(auto, difference_order=None), reference_backend)
        assert result.transformed.order == 1
        assert len(result.split.test) == 20

    def test_no_adequate_candidate_is_terminal(self, config: PipelineConfig) -> None:
        backend = FakeBackend(
            {"GARCH(1,1)": -5.0, "GARCH(2,2)": -4.9},
            lb_pvalues={"GARCH(1,1)": 0.0, "GARCH(2,2)": 0.0},
        )
        with pytest.raises(NoAdequateCandidateError):
            run_pipeline(config, backend)

    def test_save_outputs(self, config: PipelineConfig, reference_backend: FakeBackend) -> None:
        result = run_pipeline(config, reference_backend)
        paths = save_pipeline_outputs(result)

        assert set(paths) == {
            "stationarity_report",
            "transformed_series",
            "candidates",
            "model",
            "model_metadata",
            "forecast",
            "evaluation",
            "report",
        }
        assert all(p.exists() for p in paths.values())
        assert all(config.output_dir in p.parents for p in paths.values())

        report = json.loads(paths["report"].read_text())
        assert report["selected"] == "GARCH(1,1)"
        assert report["stationarity"]["difference_order"] == 1
        assert report["evaluation"]["rmse"] == pytest.approx(result.rmse)
        assert len(report["forecast"]["mean"]) == 30
        assert [c["name"] for c in json.loads(paths["candidates"].read_text())] == [
            "GARCH(1,1)",
            "GARCH(2,2)",
        ]

    def test_results_path(self, tmp_path: Path) -> None:
        assert results_path(tmp_path, STATIONARITY_REPORT_FILE) == (
            tmp_path / STATIONARITY_REPORT_FILE.relative_to(RESULTS_DIR)
        )


class TestRunPipelineWithArchBackend:
    """run_pipeline with the real arch/statsmodels backend."""

    def test_end_to_end(self, tmp_path: Path) -> None:
        prices = make_garch_prices(800)
        config = PipelineConfig(
            data_file=write_price_csv(tmp_path / "garch_prices.csv", prices),
            output_dir=tmp_path / "results",
            distribution="normal",
            arima_max_p=1,
            arima_max_q=1,
            stationarity_alpha=0.01,
            adequacy_alpha=0.01,
        )
        result = run_pipeline(config)

        assert result.transformed.order == 1
        assert result.arima_order is not None
        assert result.arima_order[1] == 0
        names = [c.name for c in result.candidates]
        assert names[:2] == ["GARCH(1,1)", "GARCH(2,2)"]
        assert result.selected.adequate
        assert result.selected.name in names
        assert result.forecast.horizon == 30
        assert np.all(result.forecast.variance > 0)
        assert len(result.evaluation.price_forecast) == 30
        assert np.isfinite(result.rmse)
        assert result.rmse > 0

        paths = save_pipeline_outputs(result)
        assert paths["model"].exists()


class TestStageEntryPoints:
    """The per-stage CLIs chained through their files."""

    def test_stages_chain(self, tmp_path: Path, price_csv: Path) -> None:
        split_file = tmp_path / "split.csv"
        out = tmp_path / "results"
        common = ["--split-file", str(split_file), "--output-dir", str(out)]

        preparation_main(["--data-file", str(price_csv), "--output", str(split_file)])
        stationarity_main(["--split-file", str(split_file), "--output-dir", str(out)])
        assert json.loads((out / "stationarity" / "stationarity_report.json").read_text())[
            "difference_order"
        ] == 1

        with patch("arima_garch.garch.main.ArchStatsmodelsBackend") as backend_cls:
            backend_cls.from_config.return_value = FakeBackend(
                {"GARCH(1,1)": -4.9985, "GARCH(2,2)": -4.9977}
            )
            garch_main(common)
        metadata = json.loads((out / "garch" / "model_metadata.json").read_text())
        assert metadata["selected"]["name"] == "GARCH(1,1)"
        assert metadata["difference_order"] == 1

        with patch("arima_garch.forecasting.main.ArchStatsmodelsBackend") as backend_cls:
            backend_cls.from_config.return_value = FakeBackend({})
            forecasting_main(common)
        evaluation = json.loads((out / "forecast" / "evaluation.json").read_text())
        assert evaluation["model"] == "GARCH(1,1)"
        assert evaluation["horizon"] == 30
        assert evaluation["rmse"] > 0


    def test_garch_stage_reuses_saved_difference_order(
        self, tmp_path: Path, price_csv: Path
    ) -> None:
        split_file = tmp_path / "split.csv"
        out = tmp_path / "results"
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"difference_order": 2, "output_dir": str(out)}))

        preparation_main(["--data-file", str(price_csv), "--output", str(split_file)])
        stationarity_main(["--split-file", str(split_file), "--config", str(config_file)])
        report = json.loads((out / "stationarity" / "stationarity_report.json").read_text())
        assert report["difference_order"] == 2

        with patch("arima_garch.garch.main.ArchStatsmodelsBackend") as backend_cls:
            backend_cls.from_config.return_value = FakeBackend(
                {"GARCH(1,1)": -4.9985, "GARCH(2,2)": -4.9977}
            )
            garch_main(["--split-file", str(split_file), "--output-dir", str(out)])
        metadata = json.loads((out / "garch" / "model_metadata.json").read_text())
        assert metadata["difference_order"] == 2
        assert metadata["config"]["difference_order"] == 1


class TestCli:
    """Tests for config_from_args and main_global.main."""

    def test_overrides(self) -> None:
        args = main_global.parse_args(
            [
                "--auto-difference",
                "--candidate-order",
                "1,1",
                "--candidate-order",
                "1,2",
                "--no-arma-candidate",
                "--holdout",
                "20",
            ]
        )
        config = config_from_args(args)
        assert config.difference_order is None
        assert config.candidate_orders == ((1, 1), (1, 2))
        assert config.include_arma_candidate is False
        assert config.holdout == 20
        assert config.criterion == "aic"

    def test_config_file_then_flags(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"holdout": 10, "distribution": "t"}))
        config = config_from_args(main_global.parse_args(["--config", str(path), "--holdout", "15"]))
        assert config.holdout == 15
        assert config.distribution == "t"
        assert config.difference_order == 1

    def test_bad_order(self) -> None:
        with pytest.raises(SystemExit):
            main_global.parse_args(["--candidate-order", "1"])

    @patch("arima_garch.main_global.save_pipeline_outputs")
    @patch("arima_garch.main_global.run_pipeline")
    def test_main_returns_rmse(self, mock_run, mock_save) -> None:
        mock_run.return_value = MagicMock(rmse=0.2264)
        assert main_global.main(["--holdout", "30"]) == 0.2264
        mock_save.assert_called_once_with(mock_run.return_value)
        assert mock_run.call_args.args[0].holdout == 30

    @patch("arima_garch.main_global.run_pipeline", side_effect=NoAdequateCandidateError("none"))
    def test_main_propagates_errors(self, mock_run) -> None:
        with pytest.raises(NoAdequateCandidateError):
            main_global.main([])

    @patch("arima_garch.main_global.run_pipeline", side_effect=KeyboardInterrupt)
    def test_main_interrupted(self, mock_run) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main_global.main([])
        assert excinfo.value.code == 130


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
