"""Tests for the train/holdout split."""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path for direct execution
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import numpy as np
import pandas as pd
import pytest

from arima_garch.data_preparation import load_split, save_split, split_to_frame, split_train_test
from arima_garch.errors import InsufficientDataError


class TestSplitTrainTest:
    """Tests for split_train_test."""

    def test_sizes_and_order(self, trending_prices: pd.Series) -> None:
        split = split_train_test(trending_prices, horizon=30)

        assert len(split.train) == 270
        assert len(split.test) == 30
        assert split.n_total == 300
        assert split.train.index[-1] < split.test.index[0]
        pd.testing.assert_series_equal(split.combined(), trending_prices, check_freq=False)

    def test_default_horizon(self, trending_prices: pd.Series) -> None:
        assert split_train_test(trending_prices).horizon == 30

    def test_horizon_one(self, trending_prices: pd.Series) -> None:
        split = split_train_test(trending_prices, horizon=1)
        assert split.test.index[0] == trending_prices.index[-1]

    def test_series_too_short(self, trending_prices: pd.Series) -> None:
        with pytest.raises(InsufficientDataError) as excinfo:
            split_train_test(trending_prices.iloc[:30], horizon=30)
        assert excinfo.value.details == {"n_observations": 30, "horizon": 30}

    @pytest.mark.parametrize("horizon", [0, -5])
    def test_invalid_horizon(self, trending_prices: pd.Series, horizon: int) -> None:
        with pytest.raises(ValueError):
            split_train_test(trending_prices, horizon=horizon)

    def test_parts_are_copies(self, trending_prices: pd.Series) -> None:
        split = split_train_test(trending_prices, horizon=10)
        split.train.iloc[0] = -1.0
        assert trending_prices.iloc[0] > 0


class TestSplitPersistence:
    """Tests for split CSV round trip."""

    def test_frame_layout(self, trending_prices: pd.Series) -> None:
        frame = split_to_frame(split_train_test(trending_prices, horizon=5))
        assert list(frame.columns) == ["date", "adj_close", "split"]
        assert (frame["split"] == "test").sum() == 5

    def test_save_and_load(self, tmp_path: Path, trending_prices: pd.Series) -> None:
        split = split_train_test(trending_prices, horizon=5)
        path = save_split(split, tmp_path / "split.csv")
        loaded = load_split(path)

        assert loaded.horizon == 5
        assert list(loaded.test.index) == list(split.test.index)
        assert list(loaded.train.index) == list(split.train.index)
        np.testing.assert_allclose(loaded.train.to_numpy(), split.train.to_numpy(), rtol=1e-12)

    def test_load_without_test_rows(self, tmp_path: Path) -> None:
        path = tmp_path / "split.csv"
        path.write_text("date,adj_close,split\n2002-02-01,1.0,train\n")
        with pytest.raises(InsufficientDataError):
            load_split(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
