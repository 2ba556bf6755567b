"""Download of the reference price history from Yahoo Finance."""

from __future__ import annotations

from arima_garch.data_fetching.download import download_price_history, fetch_and_save

__all__ = ["download_price_history", "fetch_and_save"]
