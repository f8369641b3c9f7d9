"""
CPU backend for bootstrap coefficient robustness.

Case resampling: each replicate draws n row indices uniformly with
replacement and refits OLS on the resampled (X, y). A replicate whose
resampled X'X is singular (typically a rare categorical level that
vanished from the resample) is dropped, not retried, and the summaries
are computed over the replicates that succeeded.

All index draws happen up front from one seeded generator, so the result
depends only on the seed and never on n_jobs. Replicates only read the
shared X and y.
"""

from __future__ import annotations

import warnings
from typing import Any, Sequence

import numpy as np
from joblib import Parallel, delayed
from numpy.typing import NDArray

from pylinreg.core.compute.timing import Timer
from pylinreg.core.compute.tolerances import bootstrap_iterations
from pylinreg.core.result import Result
from pylinreg.regression._common import RobustnessParams
from pylinreg.regression._robustness import summarize_replicates
from pylinreg.regression.backends.cpu import solve_ols
from pylinreg.regression.design import RegressionDesign


class CPUBootstrapBackend:
    """
    CPU backend for the case-resampling bootstrap of OLS coefficients.

    Args:
        iterations: Replicate count; None picks 50 for n <= 2000, else 20
        seed: Seed for numpy.random.default_rng; None draws fresh entropy
        n_jobs: Worker threads (joblib); 1 runs sequentially
    """

    def __init__(
        self,
        iterations: int | None = None,
        seed: int | None = None,
        n_jobs: int = 1,
    ):
        self.iterations = iterations
        self.seed = seed
        self.n_jobs = n_jobs

    @property
    def name(self) -> str:
        return 'cpu_bootstrap'

    def solve(
        self,
        design: RegressionDesign,
        estimates: Sequence[float],
    ) -> Result[RobustnessParams]:
        """
        Run the bootstrap and summarize every non-intercept coefficient.

        Args:
            design: The design the main fit used
            estimates: Full-sample coefficients, one per design column

        Returns:
            Result[RobustnessParams]; info reports successful and dropped
            replicate counts
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, k = design.n, design.k
        B = self.iterations if self.iterations is not None else bootstrap_iterations(n)

        rng = np.random.default_rng(self.seed)
        with timer.section('resample'):
            indices = rng.integers(0, n, size=(B, n))

        def _refit(idx: NDArray[np.intp]) -> NDArray[np.floating[Any]] | None:
            outcome = solve_ols(X[idx], y[idx])
            return outcome.value.coefficients if outcome.ok else None

        with timer.section('bootstrap_replicates'):
            if self.n_jobs == 1 or B <= 1:
                fits = [_refit(idx) for idx in indices]
            else:
                fits = Parallel(n_jobs=self.n_jobs, prefer="threads")(
                    delayed(_refit)(idx) for idx in indices
                )

        successful = [beta for beta in fits if beta is not None]
        replicates = np.vstack(successful) if successful else np.empty((0, k))
        replicates.setflags(write=False)
        n_dropped = B - len(successful)

        with timer.section('summary_statistics'):
            summaries = tuple(
                summarize_replicates(design.column_names[j], estimates[j], replicates[:, j])
                for j in range(1, k)
            )

        timer.stop()

        notes: list[str] = []
        if n_dropped:
            msg = (
                f"{n_dropped} of {B} bootstrap replicates had a singular X'X "
                f"and were dropped; robustness summaries use the remaining "
                f"{len(successful)}"
            )
            warnings.warn(msg, RuntimeWarning, stacklevel=2)
            notes.append(msg)

        params = RobustnessParams(
            summaries=summaries,
            replicates=replicates,
            iterations=B,
            n_successful=len(successful),
            n_dropped=n_dropped,
        )

        return Result(
            params=params,
            info={
                'iterations': B,
                'successful': len(successful),
                'dropped': n_dropped,
                'seed': self.seed,
                'n_jobs': self.n_jobs,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(notes),
        )
