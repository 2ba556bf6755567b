"""Logging configuration for the project."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "ARIMA_GARCH_LOG_LEVEL"


def _resolve_level(level: int | str | None) -> int:
    """Resolve a logging level from an int, a level name or the environment."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, logging.INFO)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        return resolved
    return int(level)


def setup_logging(level: int | str | None = None, *, force: bool = False) -> None:
    """Configure logging for the project.

    Args:
        level: Logging level or level name. Falls back to the
            ARIMA_GARCH_LOG_LEVEL environment variable, then INFO.
        force: Replace handlers installed by a previous configuration.
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=_resolve_level(level),
        format=log_format,
        datefmt=date_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=force,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        setup_logging()
    return logger
