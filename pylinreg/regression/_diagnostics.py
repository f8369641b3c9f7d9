"""
Regression diagnostics.

Goodness of fit, the coefficient table (standard errors, t statistics,
confidence intervals), the correlation matrix of the predictors, VIFs,
and residual views for plotting.

Notes:
- The default 95% interval uses the fixed normal critical value 1.96
  rather than a t quantile; ci_method='t' opts into the t quantile.
- VIF is read off the diagonal of the inverse correlation matrix
  instead of fitting one auxiliary regression per predictor. The two
  are algebraically identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pylinreg.core.compute.linalg import invert
from pylinreg.core.compute.tolerances import (
    CI_CRITICAL_VALUE,
    CI_LEVEL,
    OUTLIER_THRESHOLD,
    VARIANCE_TOLERANCE,
)
from pylinreg.regression._common import (
    Coefficient,
    Prediction,
    ResidualDiagnostics,
)


@dataclass(frozen=True)
class FitStatistics:
    sst: float
    sse: float
    r_squared: float
    adjusted_r_squared: float
    mse: float
    rmse: float


def fit_statistics(
    y: NDArray[np.floating[Any]],
    residuals: NDArray[np.floating[Any]],
    n: int,
    k: int,
) -> FitStatistics:
    """
    SST, SSE, R², adjusted R², MSE and RMSE.

    R² = 1 - SSE/SST; adjusted R² = 1 - (1 - R²)(n - 1)/(n - k);
    MSE = SSE/(n - k). A constant target (range below VARIANCE_TOLERANCE,
    so SST is zero up to rounding) has R² 1.0 when SSE is at rounding level
    and 0.0 otherwise, and adjusted R² equals R².
    """
    sst = float(np.sum((y - np.mean(y)) ** 2))
    sse = float(residuals @ residuals)
    constant = y.size == 0 or float(np.ptp(y)) < VARIANCE_TOLERANCE
    if constant:
        r2 = 1.0 if sse <= VARIANCE_TOLERANCE ** 2 * n else 0.0
        adj = r2
    else:
        r2 = 1.0 - sse / sst
        adj = 1.0 - (1.0 - r2) * (n - 1) / (n - k)
    mse = sse / (n - k)
    return FitStatistics(
        sst=sst,
        sse=sse,
        r_squared=r2,
        adjusted_r_squared=adj,
        mse=mse,
        rmse=float(np.sqrt(mse)),
    )


def critical_value(ci_method: str, df_residual: int) -> float:
    """Two-sided 95% critical value: fixed normal 1.96, or the t quantile."""
    if ci_method == 'normal':
        return CI_CRITICAL_VALUE
    if ci_method == 't':
        return float(sp_stats.t.ppf(0.5 + CI_LEVEL / 2.0, df_residual))
    raise ValueError(f"Unknown ci_method: {ci_method!r}")


def coefficient_table(
    coefficients: NDArray[np.floating[Any]],
    xtx_inverse: NDArray[np.floating[Any]],
    mse: float,
    names: Sequence[str],
    vifs: NDArray[np.floating[Any]],
    crit: float,
) -> tuple[Coefficient, ...]:
    """
    One Coefficient per design column.

    Covariance is MSE * (X'X)^-1. A t statistic that is not finite
    (zero standard error on an exact fit) is reported as NaN.
    """
    variances = mse * np.diag(xtx_inverse)
    with np.errstate(invalid='ignore', divide='ignore'):
        se = np.sqrt(variances)
        t = coefficients / se
    t = np.where(np.isfinite(t), t, np.nan)

    table = []
    for i, name in enumerate(names):
        beta = float(coefficients[i])
        half = crit * float(se[i])
        table.append(Coefficient(
            name=name,
            estimate=beta,
            standard_error=float(se[i]),
            t_stat=float(t[i]),
            confidence_interval=(beta - half, beta + half),
            vif=None if i == 0 else float(vifs[i - 1]),
        ))
    return tuple(table)


def _column_std(X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Sample standard deviation (divisor n - 1) of each column."""
    n = X.shape[0]
    if n < 2:
        return np.zeros(X.shape[1])
    centered = X - X.mean(axis=0)
    return np.sqrt(np.sum(centered ** 2, axis=0) / (n - 1))


def correlation_matrix(X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Pearson correlation of the columns of X.

    Uses the sample covariance (divisor n - 1). A column whose standard
    deviation is below VARIANCE_TOLERANCE has NaN in its whole row and
    column, diagonal included.
    """
    n, p = X.shape
    if p == 0:
        return np.empty((0, 0))

    std = _column_std(X)
    valid = std >= VARIANCE_TOLERANCE

    R = np.full((p, p), np.nan)
    if valid.any():
        Z = (X[:, valid] - X[:, valid].mean(axis=0)) / std[valid]
        sub = Z.T @ Z / (n - 1)
        np.fill_diagonal(sub, 1.0)
        R[np.ix_(valid, valid)] = sub
    return R


def variance_inflation_factors(X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    VIF of each column of X (intercept excluded by the caller).

    VIF_j is the j-th diagonal element of the inverse correlation matrix
    of the nonzero-variance columns. Zero-variance columns get inf; if the
    restricted correlation matrix is singular, every column gets inf.
    """
    p = X.shape[1]
    vifs = np.full(p, np.inf)
    if p == 0:
        return vifs

    valid = np.flatnonzero(_column_std(X) >= VARIANCE_TOLERANCE)
    if valid.size == 0:
        return vifs

    outcome = invert(correlation_matrix(X[:, valid]), name='correlation matrix')
    if not outcome.ok:
        return vifs
    vifs[valid] = np.diag(outcome.value)
    return vifs


def build_predictions(
    y: NDArray[np.floating[Any]],
    fitted: NDArray[np.floating[Any]],
    category_labels: Sequence[Mapping[str, str]],
) -> tuple[Prediction, ...]:
    """One Prediction per clean row, input order preserved."""
    return tuple(
        Prediction(
            actual=float(y[i]),
            predicted=float(fitted[i]),
            residual=float(y[i] - fitted[i]),
            category_labels=category_labels[i],
        )
        for i in range(len(y))
    )


def residual_diagnostics(
    residuals: NDArray[np.floating[Any]],
    rmse: float,
    threshold: float = OUTLIER_THRESHOLD,
) -> ResidualDiagnostics:
    """
    Standardized residuals, normal Q-Q pairs and scale-location values.

    Residuals are standardized by RMSE. An exact fit (RMSE == 0) gives
    all-zero standardized residuals. Q-Q plotting positions are
    (i + 0.5) / n.
    """
    residuals = np.asarray(residuals, dtype=np.float64)
    n = residuals.size
    if rmse > 0:
        standardized = residuals / rmse
    else:
        standardized = np.zeros(n)

    positions = (np.arange(n) + 0.5) / n
    qq_theoretical = sp_stats.norm.ppf(positions)
    qq_sample = np.sort(standardized)
    scale_location = np.sqrt(np.abs(standardized))
    outliers = tuple(int(i) for i in np.flatnonzero(np.abs(standardized) > threshold))

    for arr in (standardized, qq_theoretical, qq_sample, scale_location):
        arr.setflags(write=False)

    return ResidualDiagnostics(
        standardized=standardized,
        qq_theoretical=qq_theoretical,
        qq_sample=qq_sample,
        scale_location=scale_location,
        outliers=outliers,
        threshold=threshold,
    )
