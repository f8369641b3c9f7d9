"""
Core infrastructure for pylinreg.

Shared abstractions used by the regression engine.

Key components:
    result: Generic Result[P] envelope and Outcome value-or-error type
    exceptions: Exception hierarchy
    validation: Input validators
    datasource: Immutable row snapshot
    compute: Timing, tolerances, matrix kernel
"""

from pylinreg.core.result import Result, Outcome
from pylinreg.core.datasource import DataSource
from pylinreg.core.exceptions import (
    PyLinRegError,
    ValidationError,
    DimensionError,
    EmptyDatasetError,
    InsufficientSampleSizeError,
    ConstantVariableError,
    DuplicateVariableError,
    NumericalError,
    SingularMatrixError,
)

__all__ = [
    # Data
    "DataSource",
    # Result
    "Result",
    "Outcome",
    # Exceptions
    "PyLinRegError",
    "ValidationError",
    "DimensionError",
    "EmptyDatasetError",
    "InsufficientSampleSizeError",
    "ConstantVariableError",
    "DuplicateVariableError",
    "NumericalError",
    "SingularMatrixError",
]
