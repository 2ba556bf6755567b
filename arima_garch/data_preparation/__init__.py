"""Loading of the price history and train/holdout split."""

from __future__ import annotations

from arima_garch.data_preparation.data_loading import load_price_series, price_series_from_frame
from arima_garch.data_preparation.split import (
    SplitResult,
    load_split,
    save_split,
    split_to_frame,
    split_train_test,
)

__all__ = [
    "SplitResult",
    "load_price_series",
    "load_split",
    "price_series_from_frame",
    "save_split",
    "split_to_frame",
    "split_train_test",
]
