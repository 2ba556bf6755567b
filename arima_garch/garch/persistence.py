"""Save and load the selected model."""

from __future__ import annotations

from pathlib import Path
import pickle
from typing import Any

import joblib

from arima_garch.garch.models import FittedCandidate
from arima_garch.path import GARCH_MODEL_FILE, GARCH_MODEL_METADATA_FILE
from arima_garch.utils import (
    ensure_output_dir,
    get_logger,
    load_json_data,
    save_json_pretty,
    validate_file_exists,
)

logger = get_logger(__name__)


def save_selected_model(
    selected: FittedCandidate,
    metadata: dict[str, Any],
    *,
    model_file: Path | str = GARCH_MODEL_FILE,
    metadata_file: Path | str = GARCH_MODEL_METADATA_FILE,
) -> tuple[Path, Path]:
    """Persist the selected candidate with joblib and its metadata as JSON.

    Raises:
        RuntimeError: If saving fails.
    """
    model_path = Path(model_file)
    metadata_path = Path(metadata_file)
    try:
        ensure_output_dir(model_path)
        joblib.dump(selected, model_path)
        logger.info("Saved selected model: %s", model_path)
        save_json_pretty({"selected": selected.summary(), **metadata}, metadata_path)
        logger.info("Saved model metadata: %s", metadata_path)
    except (OSError, TypeError, pickle.PicklingError) as e:
        msg = f"Failed to save selected model: {e}"
        logger.error(msg)
        raise RuntimeError(msg) from e
    return model_path, metadata_path


def load_selected_model(
    *,
    model_file: Path | str = GARCH_MODEL_FILE,
    metadata_file: Path | str = GARCH_MODEL_METADATA_FILE,
) -> tuple[FittedCandidate, dict[str, Any]]:
    """Load a model written by ``save_selected_model``.

    Raises:
        FileNotFoundError: If either file is missing.
    """
    model_path = Path(model_file)
    metadata_path = Path(metadata_file)
    validate_file_exists(model_path, "Selected model file")
    validate_file_exists(metadata_path, "Model metadata file")

    selected = joblib.load(model_path)
    logger.info("Loaded selected model: %s", model_path)
    metadata = load_json_data(metadata_path)
    return selected, metadata
