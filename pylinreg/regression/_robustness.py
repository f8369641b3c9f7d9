"""
Bootstrap summary statistics.

Turns the successful replicate estimates of one coefficient into a
RobustnessSummary. Percentiles are read by index from the sorted
estimates, without interpolation.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from pylinreg.core.compute.tolerances import (
    BOOTSTRAP_HIGH_QUANTILE,
    BOOTSTRAP_LOW_QUANTILE,
)
from pylinreg.regression._common import RobustnessSummary


def _at(values: np.ndarray, position: float, fallback: float) -> float:
    idx = math.floor(len(values) * position)
    if 0 <= idx < len(values):
        return float(values[idx])
    return fallback


def summarize_replicates(
    name: str,
    original: float,
    estimates: ArrayLike,
) -> RobustnessSummary:
    """
    Summarize the bootstrap estimates of one coefficient.

    Args:
        name: Coefficient name
        original: Estimate from the full-sample fit
        estimates: Estimates from the successful replicates (any order)

    Returns:
        RobustnessSummary. With no estimates, every statistic is 0.0 so a
        failed overlay never blocks the main result.
    """
    values = np.sort(np.asarray(estimates, dtype=np.float64))
    if values.size == 0:
        return RobustnessSummary(
            name=name,
            original=float(original),
            mean=0.0,
            median=0.0,
            min=0.0,
            max=0.0,
            low_ci=0.0,
            high_ci=0.0,
            n_successful=0,
        )

    lo = float(values[0])
    hi = float(values[-1])
    return RobustnessSummary(
        name=name,
        original=float(original),
        mean=float(np.mean(values)),
        median=float(values[len(values) // 2]),
        min=lo,
        max=hi,
        low_ci=_at(values, BOOTSTRAP_LOW_QUANTILE, lo),
        high_ci=_at(values, BOOTSTRAP_HIGH_QUANTILE, hi),
        n_successful=int(values.size),
    )
