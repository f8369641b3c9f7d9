"""
Execution timing utilities.

Per-stage wall-clock timing for a regression run. Results land in
Result.timing so slow stages (usually the bootstrap) are visible to
callers that impose their own deadline.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating stage timer.

    Usage:
        timer = Timer()
        timer.start()

        with timer.section('design'):
            design = RegressionDesign.build(rows, config)

        with timer.section('bootstrap'):
            robustness = backend.solve(...)

        timer.stop()
        timer.result()
        # {'total_seconds': 0.05, 'design': 0.01, 'bootstrap': 0.04}
    """

    def __init__(self) -> None:
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        """Start the overall timer."""
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        """Stop the overall timer."""
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named section. Repeated sections accumulate.

        The elapsed time is recorded even when the body raises.
        """
        begin = time.perf_counter()
        try:
            yield
        finally:
            self._sections[name] = (
                self._sections.get(name, 0.0) + time.perf_counter() - begin
            )

    def result(self) -> dict[str, float]:
        """
        Get timing results.

        Returns:
            Dictionary with 'total_seconds' and all section timings

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}

