"""
Exception hierarchy for pylinreg.

All exceptions inherit from PyLinRegError to allow catching any
library-specific error. The regression engine has no partial fit: the
caller's only recourse is to change the configuration and retry, so
every exception names the offending variable(s) where they are known.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

from __future__ import annotations


class PyLinRegError(Exception):
    """Base exception for all pylinreg errors."""
    pass


class ValidationError(PyLinRegError):
    """
    Input validation failed.

    Raised when user-provided inputs or configuration fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class EmptyDatasetError(ValidationError):
    """
    No rows survived preprocessing.

    Attributes:
        target: Name of the target variable
        transformed: Names of variables that carry a log transform. These
            are the usual culprits: a zero or negative value under ln()
            removes the row.
        n_input: Number of rows before filtering
    """

    def __init__(
        self,
        message: str,
        target: str | None = None,
        transformed: tuple[str, ...] = (),
        n_input: int | None = None,
    ):
        super().__init__(message)
        self.target = target
        self.transformed = tuple(transformed)
        self.n_input = n_input


class InsufficientSampleSizeError(ValidationError):
    """
    Too few observations for the number of parameters (n <= k).

    Attributes:
        n_observations: Rows remaining after cleaning
        n_parameters: Design matrix columns, intercept included
    """

    def __init__(self, message: str, n_observations: int, n_parameters: int):
        super().__init__(message)
        self.n_observations = n_observations
        self.n_parameters = n_parameters


class ConstantVariableError(ValidationError):
    """
    A numeric variable has zero variance across the clean rows.

    A constant column is collinear with the intercept.

    Attributes:
        variable: The constant variable
        column: The design matrix column built from it
        value: The constant value
    """

    def __init__(
        self,
        message: str,
        variable: str,
        column: str | None = None,
        value: float | None = None,
    ):
        super().__init__(message)
        self.variable = variable
        self.column = column
        self.value = value

    @property
    def variables(self) -> tuple[str, ...]:
        return (self.variable,)


class DuplicateVariableError(ValidationError):
    """
    Two numeric variables are identical on every clean row.

    Attributes:
        variables: The pair of duplicated variables, in configuration order
        columns: The design matrix columns built from them
    """

    def __init__(
        self,
        message: str,
        variables: tuple[str, str],
        columns: tuple[str, str] | None = None,
    ):
        super().__init__(message)
        self.variables = tuple(variables)
        self.columns = tuple(columns) if columns is not None else None


class NumericalError(PyLinRegError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a matrix operation requires invertibility but no usable
    pivot exists for some column during elimination.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Column at which elimination found no usable pivot
        variables: Variables implicated in the failure, when known
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        variables: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.variables = tuple(variables)
