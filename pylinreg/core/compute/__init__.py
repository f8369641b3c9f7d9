"""
Shared compute infrastructure for pylinreg.

This module provides timing utilities, numerical tolerances and the
dense matrix kernel used by the regression backends.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
regression/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical thresholds that define error behavior
    linalg: Transpose, multiply, Gauss-Jordan inverse
"""

from pylinreg.core.compute.timing import Timer

__all__ = [
    "Timer",
]
