"""
Linear algebra kernels for pylinreg.

All functions take array-likes, return NumPy float64 arrays, and never
mutate their inputs. Inversion reports singularity through an Outcome
instead of raising, so callers decide what a failure means.
"""

from pylinreg.core.compute.linalg.kernel import (
    inverse,
    invert,
    multiply,
    transpose,
)

__all__ = [
    "inverse",
    "invert",
    "multiply",
    "transpose",
]
