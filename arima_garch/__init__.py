"""ARIMA/GARCH forecasting pipeline for daily stock prices."""

from __future__ import annotations

__version__ = "0.1.0"
