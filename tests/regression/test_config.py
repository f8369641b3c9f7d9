"""
Tests for VariableConfig and RegressionConfig validation.
"""

import pytest

from pylinreg.core.exceptions import ValidationError
from pylinreg.regression.config import (
    RegressionConfig,
    VariableConfig,
    transform_prefix,
)


class TestVariableConfig:

    def test_numeric_defaults(self):
        v = VariableConfig('area')
        assert v.kind == 'numeric'
        assert not v.is_categorical
        assert v.column_name == 'area'

    @pytest.mark.parametrize("log,plus_one,expected", [
        (False, False, 'area'),
        (True, False, 'ln_area'),
        (True, True, 'ln1p_area'),
    ])
    def test_column_name_prefix(self, log, plus_one, expected):
        assert VariableConfig('area', log_transform=log, log_plus_one=plus_one).column_name == expected

    def test_numeric_factory_plus_one_implies_log(self):
        v = VariableConfig.numeric('rooms', plus_one=True)
        assert v.log_transform and v.log_plus_one

    def test_categorical_factory(self):
        assert VariableConfig.categorical('city').is_categorical

    def test_plus_one_requires_log(self):
        with pytest.raises(ValidationError, match="requires log_transform"):
            VariableConfig('x', log_plus_one=True)

    def test_categorical_cannot_be_logged(self):
        with pytest.raises(ValidationError, match="cannot be log transformed"):
            VariableConfig('city', 'categorical', log_transform=True)

    def test_unknown_kind(self):
        with pytest.raises(ValidationError, match="unknown kind"):
            VariableConfig('x', 'ordinal')

    def test_empty_name(self):
        with pytest.raises(ValidationError):
            VariableConfig('')

    def test_transform_prefix(self):
        assert transform_prefix(False, True) == ''


class TestRegressionConfig:

    def test_features_coerced_to_tuple(self):
        cfg = RegressionConfig('y', [VariableConfig('a'), VariableConfig.categorical('g')])
        assert isinstance(cfg.features, tuple)
        assert [f.name for f in cfg.numeric_features] == ['a']
        assert [f.name for f in cfg.categorical_features] == ['g']

    def test_intercept_only_allowed(self):
        assert RegressionConfig('y').features == ()

    def test_duplicate_feature(self):
        with pytest.raises(ValidationError, match="more than once"):
            RegressionConfig('y', (VariableConfig('a'), VariableConfig('a', log_transform=True)))

    def test_target_as_feature(self):
        with pytest.raises(ValidationError, match="target cannot also be a feature"):
            RegressionConfig('y', (VariableConfig('y'),))

    def test_rejects_non_variable_config(self):
        with pytest.raises(ValidationError, match="VariableConfig"):
            RegressionConfig('y', ('a',))

    def test_target_plus_one_requires_log(self):
        with pytest.raises(ValidationError):
            RegressionConfig('y', target_log_plus_one=True)

    def test_negative_iterations(self):
        with pytest.raises(ValidationError, match="bootstrap_iterations"):
            RegressionConfig('y', bootstrap_iterations=-1)

    def test_zero_jobs(self):
        with pytest.raises(ValidationError, match="n_jobs"):
            RegressionConfig('y', n_jobs=0)

    def test_unknown_ci_method(self):
        with pytest.raises(ValidationError, match="ci_method"):
            RegressionConfig('y', ci_method='bca')

    def test_transformed_variables(self):
        cfg = RegressionConfig(
            'price',
            (VariableConfig.numeric('area', log=True), VariableConfig('rooms')),
            target_log_transform=True,
        )
        assert cfg.transformed_variables == ('price', 'area')
