"""
CPU backend for linear regression via the normal equations.

Solves beta = (X'X)^-1 X'y with the Gauss-Jordan kernel. The inverse of
X'X is kept alongside the coefficients; the diagnostics reuse it for the
coefficient covariance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from pylinreg.core.compute.linalg import invert, multiply, transpose
from pylinreg.core.compute.timing import Timer
from pylinreg.core.exceptions import SingularMatrixError
from pylinreg.core.result import Outcome, Result
from pylinreg.regression._common import LinearParams
from pylinreg.regression.design import INTERCEPT, RegressionDesign


@dataclass(frozen=True)
class OLSFit:
    """Coefficients and the (X'X)^-1 they were computed from."""
    coefficients: NDArray[np.floating[Any]]
    xtx_inverse: NDArray[np.floating[Any]]


def _explain_singularity(
    error: Exception,
    column_names: Sequence[str] | None,
) -> Exception:
    """Attach the implicated column and remedy to a kernel failure."""
    if not isinstance(error, SingularMatrixError):
        return error
    implicated: tuple[str, ...] = ()
    where = ''
    idx = error.pivot_index
    if column_names is not None and idx is not None and 0 <= idx < len(column_names):
        implicated = (column_names[idx],)
        if column_names[idx] != INTERCEPT:
            where = f" Elimination failed at column {column_names[idx]!r}."
    return SingularMatrixError(
        f"Cannot invert X'X: the predictors are perfectly collinear (for "
        f"example A = 2B or A + B = C).{where} Remove a highly correlated "
        f"variable and retry.",
        matrix_name="X'X",
        pivot_index=idx,
        variables=implicated,
    )


def solve_ols(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    column_names: Sequence[str] | None = None,
) -> Outcome[OLSFit]:
    """
    Ordinary least squares via the normal equations.

    Args:
        X: Design matrix (n x k), intercept included
        y: Response (n,)
        column_names: Used to name the implicated column on failure

    Returns:
        Outcome holding an OLSFit, or a SingularMatrixError. Never raises
        for singular input, so resampling loops can simply skip failures.
    """
    Xt = transpose(X)
    XtX = multiply(Xt, X)
    Xty = Xt @ np.asarray(y, dtype=np.float64)
    return (
        invert(XtX, name="X'X")
        .map(lambda inv: OLSFit(coefficients=inv @ Xty, xtx_inverse=inv))
        .map_error(lambda err: _explain_singularity(err, column_names))
    )


class CPUNormalEquationsBackend:
    """
    CPU backend using the normal equations.

    Implements the Backend protocol for RegressionDesign -> LinearParams.
    Deterministic: identical designs give identical results.
    """

    @property
    def name(self) -> str:
        return 'cpu_normal_equations'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Fit OLS and compute residuals and sums of squares.

        Raises:
            SingularMatrixError: If X'X has no usable pivot for some column
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, k = design.n, design.k

        with timer.section('solve'):
            fit = solve_ols(X, y, design.column_names).unwrap()

        with timer.section('residuals'):
            fitted_values = X @ fit.coefficients
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            tss = float(np.sum((y - np.mean(y)) ** 2))

        timer.stop()

        params = LinearParams(
            coefficients=fit.coefficients,
            xtx_inverse=fit.xtx_inverse,
            fitted_values=fitted_values,
            residuals=residuals,
            rss=rss,
            tss=tss,
            df_residual=n - k,
        )

        return Result(
            params=params,
            info={'method': 'normal_equations', 'n': n, 'k': k},
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
