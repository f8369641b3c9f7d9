"""
Common data structures for regression.

LinearParams, RobustnessParams and RegressionParams are the parameter
payloads wrapped by Result[P]; the smaller records (Coefficient,
Prediction, ...) are what consumers such as chart renderers read.
Everything here is immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np
from numpy.typing import NDArray


def _readonly(arr: NDArray) -> NDArray:
    out = np.array(arr, dtype=np.float64)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload of the OLS backend.

    xtx_inverse is the (X'X)^-1 the coefficients were solved with; the
    coefficient covariance is MSE * xtx_inverse.
    """
    coefficients: NDArray[np.floating[Any]]
    xtx_inverse: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    rss: float
    tss: float
    df_residual: int


@dataclass(frozen=True)
class Coefficient:
    """One row of the coefficient table, in design-matrix column order."""
    name: str
    estimate: float
    standard_error: float
    t_stat: float
    confidence_interval: tuple[float, float]
    vif: float | None = None


@dataclass(frozen=True)
class Prediction:
    """Fitted value for one clean row (target on the transformed scale)."""
    actual: float
    predicted: float
    residual: float
    category_labels: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CorrelationMatrix:
    """Pearson correlations between the non-intercept design columns."""
    names: tuple[str, ...]
    matrix: NDArray[np.floating[Any]]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'matrix', _readonly(self.matrix))

    def get(self, a: str, b: str) -> float:
        """Correlation between two named columns."""
        return float(self.matrix[self.names.index(a), self.names.index(b)])


@dataclass(frozen=True)
class RobustnessSummary:
    """
    Bootstrap distribution of one coefficient.

    low_ci / high_ci are the empirical 2.5th / 97.5th percentiles.
    All fields are 0.0 when no replicate succeeded (n_successful == 0).
    """
    name: str
    original: float
    mean: float
    median: float
    min: float
    max: float
    low_ci: float
    high_ci: float
    n_successful: int


@dataclass(frozen=True)
class RobustnessParams:
    """
    Parameter payload of the bootstrap backend.

    replicates holds one row per successful replicate (all k coefficients).
    """
    summaries: tuple[RobustnessSummary, ...]
    replicates: NDArray[np.floating[Any]]
    iterations: int
    n_successful: int
    n_dropped: int


@dataclass(frozen=True)
class ResidualDiagnostics:
    """
    Residual views used by diagnostic plots.

    standardized: residual / RMSE, in row order
    qq_theoretical / qq_sample: normal Q-Q pairs (sample sorted ascending)
    scale_location: sqrt(|standardized|), in row order
    outliers: row indices with |standardized| above the threshold
    """
    standardized: NDArray[np.floating[Any]]
    qq_theoretical: NDArray[np.floating[Any]]
    qq_sample: NDArray[np.floating[Any]]
    scale_location: NDArray[np.floating[Any]]
    outliers: tuple[int, ...]
    threshold: float


@dataclass(frozen=True)
class RegressionParams:
    """Parameter payload of a complete regression run."""
    coefficients: tuple[Coefficient, ...]
    r_squared: float
    adjusted_r_squared: float
    rmse: float
    mse: float
    sse: float
    sst: float
    observations: int
    predictions: tuple[Prediction, ...]
    correlation: CorrelationMatrix
    robustness: tuple[RobustnessSummary, ...]
    reference_levels: Mapping[str, str | None]
    critical_value: float
