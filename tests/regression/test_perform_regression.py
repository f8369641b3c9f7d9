"""
End-to-end tests for perform_regression() and fit().

Tests the complete pipeline: row filtering, design construction, OLS,
diagnostics, bootstrap robustness, and solution accessors.
"""

import math

import numpy as np
import pandas as pd
import pytest

from pylinreg import (
    ConstantVariableError,
    DataSource,
    DuplicateVariableError,
    EmptyDatasetError,
    InsufficientSampleSizeError,
    PyLinRegError,
    RegressionConfig,
    RegressionSolution,
    SingularMatrixError,
    VariableConfig,
    fit,
    perform_regression,
)

X1_X2 = [VariableConfig('x1'), VariableConfig('x2')]


# ═══════════════════════════════════════════════════════════════════════
# Exact fits
# ═══════════════════════════════════════════════════════════════════════


class TestExactFit:

    def test_coefficients_recovered(self, exact_rows):
        result = perform_regression(exact_rows, 'y', X1_X2, seed=0)
        assert isinstance(result, RegressionSolution)
        np.testing.assert_allclose(result.estimates, [3.0, 2.0, -1.0], atol=1e-6)
        assert [c.name for c in result.coefficients] == ['Intercept', 'x1', 'x2']

    def test_perfect_r_squared(self, exact_rows):
        result = perform_regression(exact_rows, 'y', X1_X2, seed=0)
        assert result.r_squared == pytest.approx(1.0)
        assert result.rmse == pytest.approx(0.0, abs=1e-6)

    def test_equation(self, exact_rows):
        result = perform_regression(exact_rows, 'y', X1_X2, seed=0)
        assert result.equation == "Y = 3.0000 + 2.0000*x1 - 1.0000*x2"

    def test_predictions_in_row_order(self, exact_rows):
        result = perform_regression(exact_rows, 'y', X1_X2, seed=0)
        assert [p.actual for p in result.predictions] == [r['y'] for r in exact_rows]
        for p in result.predictions:
            assert p.predicted == pytest.approx(p.actual, abs=1e-6)


# ═══════════════════════════════════════════════════════════════════════
# Noisy fits and diagnostics
# ═══════════════════════════════════════════════════════════════════════


class TestNoisyFit:

    def test_estimates_close_to_truth(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        np.testing.assert_allclose(result.estimates, [1.0, 2.0, -0.5], atol=0.2)

    def test_fit_statistics(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        assert 0.0 <= result.r_squared <= 1.0
        assert result.adjusted_r_squared <= result.r_squared
        assert result.mse == pytest.approx(result.rmse ** 2)
        assert result.observations == 80

    def test_standard_errors_match_textbook(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        X = result.design.X
        cov = result.mse * np.linalg.inv(X.T @ X)
        np.testing.assert_allclose(result.standard_errors, np.sqrt(np.diag(cov)), rtol=1e-8)
        np.testing.assert_allclose(result.t_statistics,
                                   result.estimates / result.standard_errors)

    def test_confidence_intervals(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        for c in result.coefficients:
            lo, hi = c.confidence_interval
            assert lo == pytest.approx(c.estimate - 1.96 * c.standard_error)
            assert hi == pytest.approx(c.estimate + 1.96 * c.standard_error)

    def test_t_critical_value(self, noisy_rows):
        normal = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        t = perform_regression(noisy_rows, 'y', X1_X2, seed=0, ci_method='t')
        assert t.critical_value > normal.critical_value == 1.96
        assert t.info['ci_method'] == 't'

    def test_correlation_matrix(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        corr = result.correlation_matrix
        assert corr.names == ('x1', 'x2')
        assert corr.get('x1', 'x1') == 1.0
        assert corr.get('x1', 'x2') == pytest.approx(corr.get('x2', 'x1'))
        x1 = [r['x1'] for r in noisy_rows]
        x2 = [r['x2'] for r in noisy_rows]
        assert corr.get('x1', 'x2') == pytest.approx(np.corrcoef(x1, x2)[0, 1])

    def test_vif_near_one_for_independent_features(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        assert result.coefficient('Intercept').vif is None
        for name in ('x1', 'x2'):
            assert result.coefficient(name).vif == pytest.approx(1.0, abs=0.2)

    def test_residual_diagnostics(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        d = result.residual_diagnostics()
        np.testing.assert_allclose(d.standardized, result.residuals / result.rmse)
        assert len(d.qq_theoretical) == 80


# ═══════════════════════════════════════════════════════════════════════
# Categorical and log-transformed variables
# ═══════════════════════════════════════════════════════════════════════


class TestCategorical:

    def test_dummy_columns(self, categorical_rows):
        result = perform_regression(
            categorical_rows, 'y',
            [VariableConfig('x'), VariableConfig.categorical('group')],
            seed=0,
        )
        names = [c.name for c in result.coefficients]
        assert names == ['Intercept', 'x', 'group_B', 'group_C']
        assert result.reference_levels == {'group': 'A'}
        assert result.coefficient('group_B').estimate == pytest.approx(1.5, abs=0.3)
        assert result.coefficient('group_C').estimate == pytest.approx(-2.0, abs=0.3)
        assert result.predictions[0].category_labels == {'group': 'A'}

    def test_summary_lists_reference(self, categorical_rows):
        result = perform_regression(
            categorical_rows, 'y',
            [VariableConfig('x'), VariableConfig.categorical('group')],
            seed=0,
        )
        assert "Reference levels: group=A" in result.summary()


class TestLogTransforms:

    def test_log_log_elasticity(self, rng):
        area = rng.uniform(30, 200, size=60)
        price = 5.0 * area ** 1.2 * np.exp(0.05 * rng.standard_normal(60))
        rows = [{'price': float(p), 'area': float(a)} for p, a in zip(price, area)]
        rows.append({'price': 0.0, 'area': 50.0})
        rows.append({'price': 100.0, 'area': -3.0})
        result = perform_regression(
            rows, 'price', [VariableConfig.numeric('area', log=True)],
            target_log_transform=True, seed=0,
        )
        assert result.observations == 60
        assert result.info['rows_dropped'] == 2
        assert result.coefficient('ln_area').estimate == pytest.approx(1.2, abs=0.05)
        assert result.coefficients[0].estimate == pytest.approx(math.log(5.0), abs=0.3)

    def test_all_rows_removed(self):
        rows = [{'y': -1.0, 'x': float(i)} for i in range(5)]
        with pytest.raises(EmptyDatasetError, match="Log-transformed"):
            perform_regression(rows, 'y', [VariableConfig('x')], target_log_transform=True)


# ═══════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════


class TestErrors:

    def test_duplicate_variables(self, exact_rows):
        rows = [{**r, 'x1b': r['x1']} for r in exact_rows]
        with pytest.raises(DuplicateVariableError) as info:
            perform_regression(rows, 'y', [VariableConfig('x1'), VariableConfig('x1b')])
        assert set(info.value.variables) == {'x1', 'x1b'}

    def test_constant_variable(self, exact_rows):
        rows = [{**r, 'c': 1.0} for r in exact_rows]
        with pytest.raises(ConstantVariableError):
            perform_regression(rows, 'y', [VariableConfig('x1'), VariableConfig('c')])

    def test_insufficient_rows(self, exact_rows):
        with pytest.raises(InsufficientSampleSizeError):
            perform_regression(exact_rows[:2], 'y', [VariableConfig('x1')])

    def test_collinear_combination(self, collinear_rows):
        features = [VariableConfig('x1'), VariableConfig('x2'), VariableConfig('x3')]
        with pytest.raises(SingularMatrixError) as info:
            perform_regression(collinear_rows, 'y', features)
        assert isinstance(info.value, PyLinRegError)
        assert info.value.variables


# ═══════════════════════════════════════════════════════════════════════
# Robustness, inputs and metadata
# ═══════════════════════════════════════════════════════════════════════


class TestRobustnessAndMetadata:

    def test_robustness_per_feature(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=3)
        assert [s.name for s in result.robustness] == ['x1', 'x2']
        for s in result.robustness:
            assert s.original == result.coefficient(s.name).estimate
            assert s.low_ci <= s.median <= s.high_ci
            assert s.n_successful == 50
        assert result.info['bootstrap']['iterations'] == 50

    def test_seed_reproducible(self, noisy_rows):
        a = perform_regression(noisy_rows, 'y', X1_X2, seed=9)
        b = perform_regression(noisy_rows, 'y', X1_X2, seed=9)
        assert a.robustness == b.robustness

    def test_explicit_iterations(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0, bootstrap_iterations=7)
        assert result.robustness[0].n_successful == 7

    def test_intercept_only(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', [], seed=0)
        assert result.estimates[0] == pytest.approx(np.mean([r['y'] for r in noisy_rows]))
        assert result.robustness == ()
        assert result.r_squared == pytest.approx(0.0, abs=1e-12)

    def test_dataframe_and_datasource_inputs(self, noisy_rows):
        base = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        from_df = perform_regression(pd.DataFrame(noisy_rows), 'y', X1_X2, seed=0)
        from_ds = fit(DataSource.from_records(noisy_rows),
                      RegressionConfig('y', tuple(X1_X2), seed=0))
        np.testing.assert_allclose(from_df.estimates, base.estimates)
        np.testing.assert_allclose(from_ds.estimates, base.estimates)

    def test_info_and_timing(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        assert result.info['method'] == 'normal_equations'
        assert result.info['n'] == 80
        assert result.info['k'] == 3
        assert result.backend_name == 'cpu_normal_equations'
        for stage in ('preprocess', 'design', 'solve', 'diagnostics', 'bootstrap'):
            assert stage in result.timing
        assert 'pylinreg_version' in result.provenance

    def test_narrative_summary(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        digest = result.narrative_summary()
        assert digest['observations'] == 80
        assert digest['r2'] == result.r_squared
        by_name = {c['name']: c for c in digest['coefficients']}
        assert by_name['x1']['significant'] is True
        assert by_name['x1']['t_stat'] == result.coefficient('x1').t_stat

    def test_narrative_nan_t(self):
        rows = [{'y': 4.0} for _ in range(4)]
        result = perform_regression(rows, 'y', [], seed=0)
        digest = result.narrative_summary()
        assert digest['coefficients'][0]['t_stat'] is None
        assert digest['coefficients'][0]['significant'] is False

    def test_summary_and_repr(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        text = result.summary()
        assert "R-squared" in text
        assert "Equation: Y =" in text
        assert "Backend: cpu_normal_equations" in text
        assert repr(result).startswith("RegressionSolution(n=80, k=3")

    def test_unknown_coefficient(self, noisy_rows):
        result = perform_regression(noisy_rows, 'y', X1_X2, seed=0)
        with pytest.raises(KeyError):
            result.coefficient('x9')


# ═══════════════════════════════════════════════════════════════════════
# Degenerate targets and bootstrap agreement with analytic intervals
# ═══════════════════════════════════════════════════════════════════════


class TestConstantTarget:

    def test_inexact_constant_target(self, rng):
        rows = [
            {'y': 0.1, 'x1': float(a), 'x2': float(b)}
            for a, b in rng.standard_normal((20, 2))
        ]
        result = perform_regression(rows, 'y', X1_X2, seed=0)
        assert result.r_squared == 1.0
        assert result.adjusted_r_squared == 1.0
        assert result.coefficient('Intercept').estimate == pytest.approx(0.1)


class TestBootstrapAgreement:

    def test_median_inside_normal_interval(self):
        hits = 0
        total = 0
        for trial in range(10):
            gen = np.random.default_rng(100 + trial)
            x1 = gen.standard_normal(500)
            x2 = gen.standard_normal(500)
            y = 1.0 + 2.0 * x1 - 0.5 * x2 + gen.standard_normal(500)
            rows = [
                {'y': float(y[i]), 'x1': float(x1[i]), 'x2': float(x2[i])}
                for i in range(500)
            ]
            result = perform_regression(rows, 'y', X1_X2, seed=trial)
            assert result.info['bootstrap']['iterations'] == 50
            for s in result.robustness:
                lo, hi = result.coefficient(s.name).confidence_interval
                hits += lo <= s.median <= hi
                total += 1
        assert total == 20
        assert hits >= 18
