"""
pylinreg: multiple linear regression engine.

Fits OLS models on tabular rows with categorical one-hot encoding,
logarithmic transforms, multicollinearity diagnostics (correlation
matrix, VIF) and bootstrap coefficient robustness.

Submodules:
    core: Row snapshot, exceptions, result envelope, matrix kernel
    regression: Preprocessing, design, solver, diagnostics, bootstrap
"""

__version__ = "0.1.0"

from pylinreg.core.datasource import DataSource
from pylinreg.core.exceptions import (
    PyLinRegError,
    ValidationError,
    EmptyDatasetError,
    InsufficientSampleSizeError,
    ConstantVariableError,
    DuplicateVariableError,
    SingularMatrixError,
)
from pylinreg.regression import (
    RegressionConfig,
    RegressionSolution,
    VariableConfig,
    fit,
    perform_regression,
)

__all__ = [
    "__version__",
    "DataSource",
    "perform_regression",
    "fit",
    "RegressionConfig",
    "VariableConfig",
    "RegressionSolution",
    "PyLinRegError",
    "ValidationError",
    "EmptyDatasetError",
    "InsufficientSampleSizeError",
    "ConstantVariableError",
    "DuplicateVariableError",
    "SingularMatrixError",
]
