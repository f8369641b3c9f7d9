"""
Solver dispatch for regression.

This module provides the public entry points, perform_regression() and
fit(), and chains the stages of a run:

    rows -> filter_rows -> RegressionDesign -> OLS backend
         -> diagnostics -> bootstrap backend -> RegressionSolution

Each call is a pure function of (rows, configuration). Failures raise a
typed PyLinRegError; there is no partial result.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence, Union, TYPE_CHECKING

from pylinreg.core.compute.timing import Timer
from pylinreg.core.datasource import DataSource
from pylinreg.core.result import Result
from pylinreg.regression._common import CorrelationMatrix, RegressionParams
from pylinreg.regression._diagnostics import (
    build_predictions,
    coefficient_table,
    correlation_matrix,
    critical_value,
    fit_statistics,
    variance_inflation_factors,
)
from pylinreg.regression._preprocess import filter_rows
from pylinreg.regression.backends.bootstrap import CPUBootstrapBackend
from pylinreg.regression.backends.cpu import CPUNormalEquationsBackend
from pylinreg.regression.config import CIMethod, RegressionConfig, VariableConfig
from pylinreg.regression.design import RegressionDesign
from pylinreg.regression.solution import RegressionSolution

if TYPE_CHECKING:
    import pandas as pd

RowsLike = Union[DataSource, 'pd.DataFrame', Iterable[Mapping[str, Any]]]


def perform_regression(
    rows: RowsLike,
    target: str,
    features: Sequence[VariableConfig],
    target_log_transform: bool = False,
    target_log_plus_one: bool = False,
    *,
    bootstrap_iterations: int | None = None,
    seed: int | None = None,
    n_jobs: int = 1,
    ci_method: CIMethod = 'normal',
) -> RegressionSolution:
    """
    Fit a multiple linear regression with diagnostics and bootstrap robustness.

    Args:
        rows: DataSource, pandas DataFrame, or iterable of row mappings
        target: Target column name
        features: Feature configurations, in design-matrix order
        target_log_transform: Fit ln(y) (rows with y <= 0 are dropped)
        target_log_plus_one: Fit ln(1 + y) instead (rows with y <= -1 dropped)
        bootstrap_iterations: Replicate count; None = 50 if n <= 2000 else 20
        seed: Bootstrap seed for reproducible robustness summaries
        n_jobs: Bootstrap worker threads
        ci_method: 'normal' (critical value 1.96) or 't'

    Returns:
        RegressionSolution

    Raises:
        ValidationError: Invalid configuration
        EmptyDatasetError: No row survives preprocessing
        ConstantVariableError: A numeric feature is constant
        DuplicateVariableError: Two numeric features are identical
        InsufficientSampleSizeError: n <= k
        SingularMatrixError: X'X cannot be inverted

    Example:
        >>> from pylinreg import perform_regression, VariableConfig
        >>> rows = [{'price': 310, 'area': 70, 'city': 'A'}, ...]
        >>> result = perform_regression(
        ...     rows, 'price',
        ...     [VariableConfig.numeric('area', log=True),
        ...      VariableConfig.categorical('city')],
        ...     target_log_transform=True,
        ...     seed=0,
        ... )
        >>> print(result.summary())
    """
    config = RegressionConfig(
        target=target,
        features=tuple(features),
        target_log_transform=target_log_transform,
        target_log_plus_one=target_log_plus_one,
        bootstrap_iterations=bootstrap_iterations,
        seed=seed,
        n_jobs=n_jobs,
        ci_method=ci_method,
    )
    return fit(rows, config)


def fit(rows: RowsLike, config: RegressionConfig) -> RegressionSolution:
    """
    Run a regression described by a RegressionConfig.

    See perform_regression() for arguments, return value and errors.
    """
    timer = Timer()
    timer.start()

    # === Preprocess ===
    source = DataSource.build(rows)
    with timer.section('preprocess'):
        clean = filter_rows(source.rows, config)

    # === Construct Design ===
    with timer.section('design'):
        design = RegressionDesign.build(clean, config)

    # === Solve ===
    ols = CPUNormalEquationsBackend()
    with timer.section('solve'):
        linear = ols.solve(design).params

    # === Diagnostics ===
    n, k = design.n, design.k
    with timer.section('diagnostics'):
        stats = fit_statistics(design.y, linear.residuals, n, k)
        crit = critical_value(config.ci_method, n - k)
        features = design.X[:, 1:]
        vifs = variance_inflation_factors(features)
        coefficients = coefficient_table(
            linear.coefficients,
            linear.xtx_inverse,
            stats.mse,
            design.column_names,
            vifs,
            crit,
        )
        correlation = CorrelationMatrix(
            names=design.feature_names,
            matrix=correlation_matrix(features),
        )
        predictions = build_predictions(
            design.y, linear.fitted_values, design.category_labels
        )

    # === Robustness ===
    bootstrap = CPUBootstrapBackend(
        iterations=config.bootstrap_iterations,
        seed=config.seed,
        n_jobs=config.n_jobs,
    )
    with timer.section('bootstrap'):
        robust = bootstrap.solve(design, linear.coefficients)

    timer.stop()

    params = RegressionParams(
        coefficients=coefficients,
        r_squared=stats.r_squared,
        adjusted_r_squared=stats.adjusted_r_squared,
        rmse=stats.rmse,
        mse=stats.mse,
        sse=stats.sse,
        sst=stats.sst,
        observations=n,
        predictions=predictions,
        correlation=correlation,
        robustness=robust.params.summaries,
        reference_levels=MappingProxyType(dict(design.reference_levels)),
        critical_value=crit,
    )

    info: dict[str, Any] = {
        'method': 'normal_equations',
        'target': config.target,
        'rows_input': len(source),
        'rows_dropped': len(source) - n,
        'n': n,
        'k': k,
        'df_residual': n - k,
        'ci_method': config.ci_method,
        'critical_value': crit,
        'bootstrap': robust.info,
    }

    result = Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name=ols.name,
        warnings=design.warnings + robust.warnings,
    )
    return RegressionSolution(_result=result, _design=design)
