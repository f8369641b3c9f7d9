"""
Regression solution types.

RegressionSolution is what perform_regression() returns: an immutable
wrapper over Result[RegressionParams] with accessors for every consumer
of a run (tables, charts, the narrative summarizer).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np

from pylinreg.core.compute.tolerances import SIGNIFICANCE_T_THRESHOLD
from pylinreg.core.result import Result
from pylinreg.regression._common import (
    Coefficient,
    CorrelationMatrix,
    Prediction,
    RegressionParams,
    ResidualDiagnostics,
    RobustnessSummary,
)
from pylinreg.regression._diagnostics import residual_diagnostics

if TYPE_CHECKING:
    from pylinreg.regression.design import RegressionDesign


def format_equation(coefficients: tuple[Coefficient, ...], precision: int = 4) -> str:
    """'Y = b0 + b1*name1 - b2*name2' with fixed decimals."""
    if not coefficients:
        return "Y ="
    parts = [f"{coefficients[0].estimate:.{precision}f}"]
    for c in coefficients[1:]:
        sign = '-' if c.estimate < 0 else '+'
        parts.append(f"{sign} {abs(c.estimate):.{precision}f}*{c.name}")
    return "Y = " + " ".join(parts)


@dataclass(frozen=True)
class RegressionSolution:
    """
    User-facing regression results.

    Wraps the Result envelope and the design it was fitted on.
    """
    _result: Result[RegressionParams]
    _design: 'RegressionDesign'

    @property
    def params(self) -> RegressionParams:
        return self._result.params

    @property
    def design(self) -> 'RegressionDesign':
        return self._design

    @property
    def coefficients(self) -> tuple[Coefficient, ...]:
        return self.params.coefficients

    def coefficient(self, name: str) -> Coefficient:
        """Look up a coefficient by design column name."""
        for c in self.params.coefficients:
            if c.name == name:
                return c
        raise KeyError(
            f"No coefficient {name!r}. Available: {[c.name for c in self.params.coefficients]}"
        )

    @property
    def estimates(self) -> np.ndarray:
        return np.array([c.estimate for c in self.params.coefficients])

    @property
    def standard_errors(self) -> np.ndarray:
        return np.array([c.standard_error for c in self.params.coefficients])

    @property
    def t_statistics(self) -> np.ndarray:
        return np.array([c.t_stat for c in self.params.coefficients])

    @property
    def r_squared(self) -> float:
        return self.params.r_squared

    @property
    def adjusted_r_squared(self) -> float:
        return self.params.adjusted_r_squared

    @property
    def rmse(self) -> float:
        return self.params.rmse

    @property
    def mse(self) -> float:
        return self.params.mse

    @property
    def observations(self) -> int:
        return self.params.observations

    @property
    def predictions(self) -> tuple[Prediction, ...]:
        return self.params.predictions

    @property
    def residuals(self) -> np.ndarray:
        return np.array([p.residual for p in self.params.predictions])

    @property
    def correlation_matrix(self) -> CorrelationMatrix:
        return self.params.correlation

    @property
    def robustness(self) -> tuple[RobustnessSummary, ...]:
        return self.params.robustness

    @property
    def reference_levels(self) -> dict[str, str | None]:
        """Reference level of each categorical variable (no indicator column)."""
        return dict(self.params.reference_levels)

    @property
    def critical_value(self) -> float:
        return self.params.critical_value

    @property
    def equation(self) -> str:
        return format_equation(self.params.coefficients)

    def residual_diagnostics(self) -> ResidualDiagnostics:
        """Standardized residuals, Q-Q pairs, scale-location and outliers."""
        return residual_diagnostics(self.residuals, self.rmse)

    def narrative_summary(self) -> dict[str, Any]:
        """
        The small, JSON-ready digest handed to a narrative generator.

        A coefficient is marked significant when |t| > 2.
        """
        return {
            'r2': self.r_squared,
            'adjusted_r2': self.adjusted_r_squared,
            'rmse': self.rmse,
            'observations': self.observations,
            'coefficients': [
                {
                    'name': c.name,
                    'value': c.estimate,
                    't_stat': None if math.isnan(c.t_stat) else c.t_stat,
                    'significant': (
                        not math.isnan(c.t_stat)
                        and abs(c.t_stat) > SIGNIFICANCE_T_THRESHOLD
                    ),
                }
                for c in self.params.coefficients
            ],
        }

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def provenance(self) -> dict[str, str]:
        return self._result.provenance

    def summary(self) -> str:
        """Generate a fixed-width text summary."""
        lines = [
            "Linear Regression Results",
            "=" * 78,
            f"Observations: {self.observations}",
            f"Parameters: {len(self.coefficients)}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"RMSE: {self.rmse:.6f}",
            "",
            "Coefficients:",
            "-" * 78,
            f"{'Name':<24} {'Estimate':>12} {'Std.Error':>12} {'t value':>10} "
            f"{'95% CI':>16}",
            "-" * 78,
        ]
        for c in self.coefficients:
            lo, hi = c.confidence_interval
            t_str = f"{c.t_stat:10.3f}" if not math.isnan(c.t_stat) else f"{'NA':>10}"
            lines.append(
                f"{c.name:<24} {c.estimate:12.6f} {c.standard_error:12.6f} "
                f"{t_str} [{lo:.4g}, {hi:.4g}]"
            )
        lines.append("-" * 78)

        if self.reference_levels:
            refs = ", ".join(
                f"{var}={level}" for var, level in self.reference_levels.items()
            )
            lines.append(f"Reference levels: {refs}")

        lines.append(f"Equation: {self.equation}")
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"RegressionSolution(n={self.observations}, k={len(self.coefficients)}, "
            f"r_squared={self.r_squared:.4f})"
        )
