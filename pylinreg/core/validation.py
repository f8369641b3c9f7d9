"""
Input validation utilities for pylinreg.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter or variable names included in all error messages
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinreg.core.compute.tolerances import EQUALITY_TOLERANCE, VARIANCE_TOLERANCE
from pylinreg.core.exceptions import (
    ConstantVariableError,
    DimensionError,
    DuplicateVariableError,
    InsufficientSampleSizeError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float numpy array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is a square matrix.

    Raises:
        DimensionError: If array is not 2D or not square
    """
    check_2d(array, name)
    if array.shape[0] != array.shape[1]:
        raise DimensionError(
            f"{name}: expected square matrix, got shape {array.shape}"
        )


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_sample_size(n_observations: int, n_parameters: int) -> None:
    """
    Verify there are more observations than parameters (n > k).

    Raises:
        InsufficientSampleSizeError: If n <= k
    """
    if n_observations <= n_parameters:
        raise InsufficientSampleSizeError(
            f"Insufficient sample size: {n_observations} valid rows for "
            f"{n_parameters} parameters (intercept included). The number of "
            f"rows must exceed the number of parameters; add data or remove "
            f"variables.",
            n_observations=n_observations,
            n_parameters=n_parameters,
        )


def check_no_constant_columns(
    X: NDArray[np.floating[Any]],
    columns: Sequence[str],
    variables: Sequence[str],
) -> None:
    """
    Verify no column is constant.

    A column whose range is below VARIANCE_TOLERANCE is parallel to the
    intercept and makes X'X singular.

    Args:
        X: 2D array, one column per entry of `columns`
        columns: Column names for error messages
        variables: Source variable of each column

    Raises:
        ConstantVariableError: Naming the first constant column's variable
    """
    if X.shape[0] == 0:
        return
    ranges = np.ptp(X, axis=0)
    for j in range(X.shape[1]):
        if ranges[j] < VARIANCE_TOLERANCE:
            raise ConstantVariableError(
                f"Variable {variables[j]!r} is constant (every selected row has "
                f"the value {X[0, j]:g}). A constant variable is collinear with "
                f"the intercept; remove it from the model.",
                variable=variables[j],
                column=columns[j],
                value=float(X[0, j]),
            )


def check_no_duplicate_columns(
    X: NDArray[np.floating[Any]],
    columns: Sequence[str],
    variables: Sequence[str],
) -> None:
    """
    Verify no two columns are identical within EQUALITY_TOLERANCE.

    Raises:
        DuplicateVariableError: Naming the first duplicated pair found
    """
    p = X.shape[1]
    for i in range(p):
        for j in range(i + 1, p):
            if np.all(np.abs(X[:, i] - X[:, j]) < EQUALITY_TOLERANCE):
                raise DuplicateVariableError(
                    f"Variables {variables[i]!r} and {variables[j]!r} hold "
                    f"identical data. Duplicated variables are perfectly "
                    f"collinear; remove one of them.",
                    variables=(variables[i], variables[j]),
                    columns=(columns[i], columns[j]),
                )


def check_unique_column_names(
    columns: Sequence[str],
    variables: Sequence[str | None],
) -> None:
    """
    Verify no two design columns share a name.

    A dummy column '<var>_<level>' can coincide with a numeric feature of
    that name, and 'ln_x' can come from either a raw feature 'ln_x' or a
    log-transformed 'x'.

    Args:
        columns: Design column names
        variables: Source variable of each column (None for the intercept)

    Raises:
        ValidationError: Naming the column and both source variables
    """
    first: dict[str, int] = {}
    for j, name in enumerate(columns):
        if name not in first:
            first[name] = j
            continue
        i = first[name]
        a = variables[i] if variables[i] is not None else columns[i]
        b = variables[j] if variables[j] is not None else columns[j]
        raise ValidationError(
            f"Variables {a!r} and {b!r} both produce the design column "
            f"{name!r}. Rename one of them."
        )
