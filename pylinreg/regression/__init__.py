"""
Multiple linear regression with categorical encoding, log transforms,
multicollinearity diagnostics and bootstrap robustness.

Public API:
    perform_regression(rows, target, features, ...) -> RegressionSolution
    fit(rows, config) -> RegressionSolution

Both entry points handle:
    - Row filtering (missing values, log transform domains)
    - Design construction (one-hot encoding with a sorted reference level)
    - OLS via the normal equations
    - Diagnostics (R², standard errors, CIs, correlation matrix, VIF)
    - Bootstrap robustness of each coefficient

Example:
    >>> from pylinreg.regression import perform_regression, VariableConfig
    >>> result = perform_regression(rows, 'y', [VariableConfig.numeric('x')])
    >>> print(result.equation)
    >>> print(result.summary())
"""

from pylinreg.regression._common import (
    Coefficient,
    CorrelationMatrix,
    Prediction,
    ResidualDiagnostics,
    RobustnessSummary,
)
from pylinreg.regression._preprocess import filter_rows
from pylinreg.regression.config import RegressionConfig, VariableConfig
from pylinreg.regression.design import RegressionDesign
from pylinreg.regression.solution import RegressionSolution
from pylinreg.regression.solvers import fit, perform_regression

__all__ = [
    "perform_regression",
    "fit",
    "filter_rows",
    "RegressionConfig",
    "VariableConfig",
    "RegressionDesign",
    "RegressionSolution",
    "Coefficient",
    "CorrelationMatrix",
    "Prediction",
    "ResidualDiagnostics",
    "RobustnessSummary",
]
