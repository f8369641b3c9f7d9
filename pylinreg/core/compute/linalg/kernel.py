"""
Dense matrix kernel: transpose, multiply, Gauss-Jordan inverse.

The inverse is explicit Gauss-Jordan elimination. A pivot is usable
when its magnitude reaches PIVOT_TOLERANCE; a column with no usable
pivot at or below the diagonal makes the matrix singular.

The kernel knows nothing about regression. Callers attach meaning to
a failure (which variable, what to do about it).
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinreg.core.compute.tolerances import PIVOT_TOLERANCE
from pylinreg.core.exceptions import DimensionError, SingularMatrixError
from pylinreg.core.result import Outcome
from pylinreg.core.validation import check_2d, check_array, check_square


def transpose(m: ArrayLike) -> NDArray[np.floating[Any]]:
    """Transpose of a 2D matrix (a copy, never a view of the input)."""
    arr = check_array(m, 'm')
    check_2d(arr, 'm')
    return np.ascontiguousarray(arr.T)


def multiply(a: ArrayLike, b: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Matrix product a @ b.

    Raises:
        DimensionError: If either operand is not 2D or inner dimensions differ
    """
    left = check_array(a, 'a')
    right = check_array(b, 'b')
    check_2d(left, 'a')
    check_2d(right, 'b')
    if left.shape[1] != right.shape[0]:
        raise DimensionError(
            f"Cannot multiply {left.shape} by {right.shape}: inner dimensions "
            f"{left.shape[1]} and {right.shape[0]} differ"
        )
    return left @ right


def invert(
    m: ArrayLike,
    *,
    name: str = 'matrix',
    tol: float = PIVOT_TOLERANCE,
) -> Outcome[NDArray[np.floating[Any]]]:
    """
    Invert a square matrix by Gauss-Jordan elimination.

    For each column i the diagonal entry is the pivot. If its magnitude
    is below `tol`, the first lower row whose entry in column i exceeds
    `tol` is swapped in (in both the working matrix and the identity).
    If there is none, elimination stops.

    Args:
        m: Square matrix
        name: Matrix description carried by the failure
        tol: Pivot magnitude threshold

    Returns:
        Outcome holding the inverse, or a SingularMatrixError with
        `pivot_index` set to the column that had no usable pivot

    Raises:
        DimensionError: If m is not square (a caller bug, not a data issue)
    """
    work = check_array(m, name).astype(np.float64, copy=True)
    check_square(work, name)

    n = work.shape[0]
    inv = np.eye(n, dtype=np.float64)

    for i in range(n):
        if abs(work[i, i]) < tol:
            candidates = np.nonzero(np.abs(work[i + 1:, i]) > tol)[0]
            if candidates.size == 0:
                return Outcome.failure(SingularMatrixError(
                    f"{name} is singular: no usable pivot for column {i}",
                    matrix_name=name,
                    pivot_index=i,
                ))
            r = i + 1 + int(candidates[0])
            work[[i, r]] = work[[r, i]]
            inv[[i, r]] = inv[[r, i]]

        pivot = work[i, i]
        work[i] /= pivot
        inv[i] /= pivot

        factors = work[:, i].copy()
        factors[i] = 0.0
        work -= np.outer(factors, work[i])
        inv -= np.outer(factors, inv[i])

    return Outcome.success(inv)


def inverse(
    m: ArrayLike,
    *,
    name: str = 'matrix',
    tol: float = PIVOT_TOLERANCE,
) -> NDArray[np.floating[Any]]:
    """
    Raising form of invert().

    Raises:
        SingularMatrixError: If no usable pivot exists for some column
    """
    return invert(m, name=name, tol=tol).unwrap()
