"""
Regression backends.

Available backends:
    CPUNormalEquationsBackend: OLS via the Gauss-Jordan normal equations
    CPUBootstrapBackend: Case-resampling bootstrap of the OLS coefficients
"""

from pylinreg.regression.backends.bootstrap import CPUBootstrapBackend
from pylinreg.regression.backends.cpu import (
    CPUNormalEquationsBackend,
    OLSFit,
    solve_ols,
)

__all__ = [
    "CPUBootstrapBackend",
    "CPUNormalEquationsBackend",
    "OLSFit",
    "solve_ols",
]
