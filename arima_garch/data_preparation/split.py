"""Train/holdout split of a price series.

The holdout is a fixed-size suffix: the last ``horizon`` observations are
kept aside for forecast evaluation and everything before them is training
data. No shuffling, no gap, no overlap.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from arima_garch.constants import (
    HOLDOUT_HORIZON_DEFAULT,
    PRICE_INDEX_NAME,
    PRICE_SERIES_NAME,
    TEST_SPLIT_LABEL,
    TRAIN_SPLIT_LABEL,
)
from arima_garch.errors import InsufficientDataError
from arima_garch.utils import (
    get_logger,
    load_csv_file,
    save_dataframe_csv,
    validate_positive_int,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class SplitResult:
    """Training prefix and holdout suffix of a PriceSeries."""

    train: pd.Series
    test: pd.Series
    horizon: int

    @property
    def n_total(self) -> int:
        return len(self.train) + len(self.test)

    def combined(self) -> pd.Series:
        """Return train followed by test (the original series)."""
        return pd.concat([self.train, self.test])


def split_train_test(series: pd.Series, horizon: int = HOLDOUT_HORIZON_DEFAULT) -> SplitResult:
    """Split a series into ``train`` (first N-H points) and ``test`` (last H points).

    Args:
        series: PriceSeries ordered by date.
        horizon: Holdout size H.

    Returns:
        SplitResult with copies of both parts.

    Raises:
        ValueError: If horizon < 1.
        InsufficientDataError: If len(series) <= horizon.
    """
    validate_positive_int(horizon, "horizon")
    n = len(series)
    if n <= horizon:
        raise InsufficientDataError(
            f"Series has {n} observations, need more than the holdout horizon {horizon}",
            details={"n_observations": n, "horizon": horizon},
        )

    train = series.iloc[: n - horizon].copy()
    test = series.iloc[n - horizon :].copy()
    logger.info(
        "Split %d observations: train=%d (%s -> %s), test=%d (%s -> %s)",
        n,
        len(train),
        _fmt_date(train.index[0]),
        _fmt_date(train.index[-1]),
        len(test),
        _fmt_date(test.index[0]),
        _fmt_date(test.index[-1]),
    )
    return SplitResult(train=train, test=test, horizon=horizon)


def _fmt_date(value: object) -> str:
    if isinstance(value, pd.Timestamp):
        return value.strftime("%Y-%m-%d")
    return str(value)


def split_to_frame(split: SplitResult) -> pd.DataFrame:
    """Return a long DataFrame with date, price and split label columns."""
    frames = []
    for label, part in ((TRAIN_SPLIT_LABEL, split.train), (TEST_SPLIT_LABEL, split.test)):
        frame = part.rename(PRICE_SERIES_NAME).rename_axis(PRICE_INDEX_NAME).reset_index()
        frame["split"] = label
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


def save_split(split: SplitResult, output_file: Path | str) -> Path:
    """Persist a split as CSV (date, adj_close, split)."""
    return save_dataframe_csv(split_to_frame(split), output_file)


def load_split(input_file: Path | str) -> SplitResult:
    """Load a split written by ``save_split``.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If the split columns are missing.
        InsufficientDataError: If either part is empty.
    """
    df = load_csv_file(
        input_file, required_columns=[PRICE_INDEX_NAME, PRICE_SERIES_NAME, "split"]
    )
    df[PRICE_INDEX_NAME] = pd.to_datetime(df[PRICE_INDEX_NAME])
    df[PRICE_SERIES_NAME] = df[PRICE_SERIES_NAME].astype(float)
    df = df.sort_values(PRICE_INDEX_NAME)

    parts = {}
    for label in (TRAIN_SPLIT_LABEL, TEST_SPLIT_LABEL):
        part = df[df["split"] == label].set_index(PRICE_INDEX_NAME)[PRICE_SERIES_NAME]
        if part.empty:
            raise InsufficientDataError(f"No '{label}' rows in {input_file}")
        parts[label] = part
    return SplitResult(
        train=parts[TRAIN_SPLIT_LABEL],
        test=parts[TEST_SPLIT_LABEL],
        horizon=len(parts[TEST_SPLIT_LABEL]),
    )
