"""Warning filters for statsmodels and arch model fitting.

Fitting dozens of SARIMAX/GARCH models during an order search floods the log
with index, frequency and convergence chatter. Genuine failures still surface
as exceptions and are converted to ModelFitError by the callers.
"""

from __future__ import annotations

import warnings

__all__ = ["suppress_statsmodels_warnings"]


def suppress_statsmodels_warnings() -> None:
    """Suppress common statsmodels/arch warnings emitted during fitting.

    Warning categories suppressed:
        - UserWarning from the statsmodels and arch modules
        - No supported index available warnings
        - Date index has been provided warnings
        - Frequency information warnings
        - Non-stationary / non-invertible starting parameter warnings

    Examples:
        >>> suppress_statsmodels_warnings()
        >>> model = SARIMAX(data, order=(1, 0, 1), trend="c")
        >>> results = model.fit(disp=False)
    """
    warnings.filterwarnings("ignore", category=UserWarning, module="statsmodels")
    warnings.filterwarnings("ignore", category=UserWarning, module="arch")
    warnings.filterwarnings("ignore", message=".*No supported index is available.*")
    warnings.filterwarnings("ignore", message=".*date index has been provided.*")
    warnings.filterwarnings("ignore", message=".*frequency information.*")
    warnings.filterwarnings("ignore", message=".*Non-stationary starting.*")
    warnings.filterwarnings("ignore", message=".*Non-invertible starting.*")
