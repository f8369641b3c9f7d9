"""
Result containers shared by every pylinreg computation.

Result is the standardized envelope a backend returns: parameter payload
plus info, timing, warnings and provenance. Outcome is the value-or-error
type threaded upward from the matrix kernel, so every layer handles a
singular matrix the same way instead of catching and re-deriving messages.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (rows dropped, dropped replicates)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

P = TypeVar('P')  # Parameter payload type
T = TypeVar('T')
U = TypeVar('U')


def _default_provenance() -> dict[str, str]:
    """Versions that influence numerical output."""
    import numpy as np
    from pylinreg import __version__

    return {
        'pylinreg_version': __version__,
        'python_version': platform.python_version(),
        'numpy_version': np.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (coefficients, bootstrap summaries)
        info: Structured metadata (method, rows dropped, replicates dropped)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Library and interpreter versions

    Examples:
        >>> Result(
        ...     params=LinearParams(coefficients=beta, ...),
        ...     info={'method': 'normal_equations'},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_normal_equations'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Either a computed value or the error that prevented it.

    Construct via Outcome.success() / Outcome.failure(). Exactly one of
    value and error is set.

    Examples:
        >>> out = invert(XtX)
        >>> if out.ok:
        ...     XtX_inv = out.value
        >>> XtX_inv = invert(XtX).unwrap()   # raises the carried error
    """
    value: T | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("Outcome requires exactly one of value or error")

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> Outcome[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value

    def map(self, fn: Callable[[T], U]) -> Outcome[U]:
        """Apply fn to a successful value; failures pass through unchanged."""
        if self.error is not None:
            return Outcome(error=self.error)
        return Outcome(value=fn(self.value))

    def map_error(self, fn: Callable[[Exception], Exception]) -> Outcome[T]:
        """Replace the carried error (e.g. to add domain context)."""
        if self.error is None:
            return self
        return Outcome(error=fn(self.error))
