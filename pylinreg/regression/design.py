"""
Regression Design.

Design turns clean rows plus a configuration into the numeric problem:
an intercept-prefixed design matrix X, its column names, and the
(transformed) target vector y. It knows it's building a regression;
DataSource doesn't.

Categorical encoding: the distinct string values of a categorical
variable are sorted lexicographically, the first one becomes the
reference level (absorbed into the intercept, no column), and every
other level gets a 0/1 indicator column named '<var>_<level>'. The
chosen reference levels are kept on the design so consumers can render
them without re-deriving the level lists.

Structural problems that would otherwise surface as an anonymous
singular matrix deep in the solver are rejected here, by name:
constant numeric columns, duplicated numeric columns, and n <= k.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinreg.core.datasource import Row
from pylinreg.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_no_constant_columns,
    check_no_duplicate_columns,
    check_sample_size,
    check_unique_column_names,
)
from pylinreg.regression._preprocess import to_number
from pylinreg.regression.config import RegressionConfig, VariableConfig

INTERCEPT = 'Intercept'


def apply_transform(
    values: NDArray[np.floating[Any]],
    log_transform: bool,
    log_plus_one: bool,
) -> NDArray[np.floating[Any]]:
    """Identity, ln(x) or ln(1 + x)."""
    if not log_transform:
        return values
    if log_plus_one:
        return np.log1p(values)
    return np.log(values)


def categorical_levels(values: Sequence[str]) -> tuple[str, ...]:
    """Distinct levels in sorted order; the first is the reference."""
    return tuple(sorted(set(values)))


@dataclass(frozen=True)
class RegressionDesign:
    """
    Regression design matrix specification.

    Immutable after construction; X and y are read-only arrays.

    Construction:
        RegressionDesign.build(clean_rows, config)        # from rows
        RegressionDesign.from_arrays(X, y, names=[...])   # numeric features only

    Attributes:
        X: Design matrix (n x k), column 0 all ones
        y: Transformed target (n,)
        column_names: k names, 'Intercept' first
        column_variables: Source variable per column (None for intercept)
        reference_levels: Categorical variable -> reference level
            (None if the variable had no levels)
        category_labels: Per row, categorical variable -> level
        warnings: Non-fatal issues found while encoding
    """
    X: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]
    column_names: tuple[str, ...]
    column_variables: tuple[str | None, ...]
    reference_levels: Mapping[str, str | None] = field(default_factory=dict)
    category_labels: tuple[Mapping[str, str], ...] = ()
    warnings: tuple[str, ...] = ()

    @classmethod
    def build(cls, rows: Sequence[Row], config: RegressionConfig) -> RegressionDesign:
        """
        Build the design from rows that already passed filter_rows().

        Raises:
            ValidationError: Two variables produce the same column name
            ConstantVariableError: A numeric column is constant
            DuplicateVariableError: Two numeric columns are identical
            InsufficientSampleSizeError: n <= k
        """
        n = len(rows)

        y_raw = np.array([to_number(row[config.target]) for row in rows], dtype=np.float64)
        y = apply_transform(y_raw, config.target_log_transform, config.target_log_plus_one)

        columns: list[NDArray] = [np.ones(n, dtype=np.float64)]
        names: list[str] = [INTERCEPT]
        variables: list[str | None] = [None]
        numeric_idx: list[int] = []
        reference_levels: dict[str, str | None] = {}
        notes: list[str] = []

        for f in config.features:
            if f.is_categorical:
                labels = [str(row[f.name]) for row in rows]
                levels = categorical_levels(labels)
                reference_levels[f.name] = levels[0] if levels else None
                if len(levels) <= 1:
                    msg = (
                        f"Categorical variable {f.name!r} has a single level "
                        f"({levels[0] if levels else 'none'}) and contributes no columns"
                    )
                    warnings.warn(msg, RuntimeWarning, stacklevel=2)
                    notes.append(msg)
                for level in levels[1:]:
                    columns.append(np.array([lab == level for lab in labels], dtype=np.float64))
                    names.append(f"{f.name}_{level}")
                    variables.append(f.name)
            else:
                raw = np.array([to_number(row[f.name]) for row in rows], dtype=np.float64)
                numeric_idx.append(len(columns))
                columns.append(apply_transform(raw, f.log_transform, f.log_plus_one))
                names.append(f.column_name)
                variables.append(f.name)

        check_unique_column_names(names, variables)
        X = np.column_stack(columns) if n else np.empty((0, len(columns)))

        numeric_X = X[:, numeric_idx]
        numeric_names = [names[j] for j in numeric_idx]
        numeric_vars = [variables[j] for j in numeric_idx]
        check_no_constant_columns(numeric_X, numeric_names, numeric_vars)
        check_no_duplicate_columns(numeric_X, numeric_names, numeric_vars)
        check_sample_size(n, X.shape[1])

        category_labels = tuple(
            MappingProxyType({f.name: str(row[f.name]) for f in config.categorical_features})
            for row in rows
        )

        return cls._freeze(
            X, y, names, variables,
            reference_levels=reference_levels,
            category_labels=category_labels,
            notes=notes,
        )

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        *,
        names: Sequence[str] | None = None,
    ) -> RegressionDesign:
        """
        Build a design from numeric feature columns (no intercept column).

        The intercept is prepended. Every column is treated as a numeric
        variable and goes through the same pre-fit checks as build().
        """
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        check_2d(X_arr, 'X')
        check_1d(y_arr, 'y')
        check_finite(X_arr, 'X')
        check_finite(y_arr, 'y')
        check_consistent_length(X_arr, y_arr, names=('X', 'y'))

        p = X_arr.shape[1]
        if names is None:
            names = [f"x{j + 1}" for j in range(p)]
        elif len(names) != p:
            raise ValueError(f"Got {len(names)} names for {p} columns")
        names = list(names)

        check_unique_column_names([INTERCEPT, *names], [None, *names])
        check_no_constant_columns(X_arr, names, names)
        check_no_duplicate_columns(X_arr, names, names)
        check_sample_size(X_arr.shape[0], p + 1)

        full = np.column_stack([np.ones(X_arr.shape[0]), X_arr])
        return cls._freeze(full, y_arr, [INTERCEPT, *names], [None, *names])

    @classmethod
    def _freeze(
        cls,
        X: NDArray,
        y: NDArray,
        names: Sequence[str],
        variables: Sequence[str | None],
        *,
        reference_levels: Mapping[str, str | None] | None = None,
        category_labels: tuple[Mapping[str, str], ...] | None = None,
        notes: Sequence[str] = (),
    ) -> RegressionDesign:
        X = np.array(X, dtype=np.float64)
        y = np.array(y, dtype=np.float64)
        X.setflags(write=False)
        y.setflags(write=False)
        if category_labels is None:
            category_labels = tuple(MappingProxyType({}) for _ in range(X.shape[0]))
        return cls(
            X=X,
            y=y,
            column_names=tuple(names),
            column_variables=tuple(variables),
            reference_levels=MappingProxyType(dict(reference_levels or {})),
            category_labels=category_labels,
            warnings=tuple(notes),
        )

    # === Properties ===

    @property
    def n(self) -> int:
        """Number of observations."""
        return self.X.shape[0]

    @property
    def k(self) -> int:
        """Number of parameters, intercept included."""
        return self.X.shape[1]

    @property
    def feature_names(self) -> tuple[str, ...]:
        """Column names without the intercept."""
        return self.column_names[1:]

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Compute X'X."""
        return self.X.T @ self.X

    def Xty(self) -> NDArray[np.floating[Any]]:
        """Compute X'y."""
        return self.X.T @ self.y

    def variables_for(self, columns: Sequence[int]) -> tuple[str, ...]:
        """Distinct source variables of the given column indices."""
        out: list[str] = []
        for j in columns:
            var = self.column_variables[j] if 0 <= j < self.k else None
            if var is not None and var not in out:
                out.append(var)
        return tuple(out)
