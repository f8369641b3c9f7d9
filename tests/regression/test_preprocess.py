"""
Tests for row filtering.
"""

import math

import pytest

from pylinreg.core.exceptions import EmptyDatasetError
from pylinreg.regression._preprocess import (
    filter_rows,
    in_log_domain,
    is_missing,
    to_number,
)
from pylinreg.regression.config import RegressionConfig, VariableConfig


class TestCellHelpers:

    @pytest.mark.parametrize("value", [None, '', '   ', math.nan])
    def test_missing(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, 0.0, 'A', False])
    def test_not_missing(self, value):
        assert not is_missing(value)

    def test_to_number(self):
        assert to_number(' 3.5 ') == 3.5
        assert to_number(2) == 2.0
        assert to_number('abc') is None
        assert to_number(math.inf) is None
        assert to_number(None) is None

    def test_log_domain(self):
        assert in_log_domain(0.5, plus_one=False)
        assert not in_log_domain(0.0, plus_one=False)
        assert in_log_domain(-0.5, plus_one=True)
        assert not in_log_domain(-1.0, plus_one=True)


class TestFilterRows:

    def test_drops_missing_target_and_features(self):
        rows = [
            {'y': 1.0, 'x': 2.0, 'g': 'A'},
            {'y': None, 'x': 2.0, 'g': 'A'},
            {'y': 1.0, 'x': '', 'g': 'A'},
            {'y': 1.0, 'x': 2.0, 'g': None},
            {'y': 3.0, 'x': 4.0, 'g': 'B'},
        ]
        cfg = RegressionConfig('y', (VariableConfig('x'), VariableConfig.categorical('g')))
        clean = filter_rows(rows, cfg)
        assert [r['y'] for r in clean] == [1.0, 3.0]
        assert clean[0] is rows[0]

    def test_log_filter_removes_exactly_failing_rows(self):
        rows = [{'y': float(v), 'x': float(v) + 10} for v in [-2, -1, 0, 0.5, 1, 3]]
        cfg = RegressionConfig('y', (VariableConfig('x'),), target_log_transform=True)
        assert [r['y'] for r in filter_rows(rows, cfg)] == [0.5, 1.0, 3.0]

    def test_log_plus_one_filter(self):
        rows = [{'y': 1.0, 'x': float(v)} for v in [-2, -1, -0.5, 0]]
        cfg = RegressionConfig('y', (VariableConfig.numeric('x', plus_one=True),))
        assert [r['x'] for r in filter_rows(rows, cfg)] == [-0.5, 0.0]

    def test_non_numeric_feature_dropped(self):
        rows = [{'y': 1.0, 'x': 'n/a'}, {'y': 2.0, 'x': '4'}]
        cfg = RegressionConfig('y', (VariableConfig('x'),))
        assert len(filter_rows(rows, cfg)) == 1

    def test_empty_result_mentions_log_variables(self):
        rows = [{'price': 0.0, 'area': 50.0}, {'price': -1.0, 'area': 60.0}]
        cfg = RegressionConfig(
            'price',
            (VariableConfig.numeric('area', log=True),),
            target_log_transform=True,
        )
        with pytest.raises(EmptyDatasetError, match="Log-transformed") as info:
            filter_rows(rows, cfg)
        assert info.value.transformed == ('price', 'area')
        assert info.value.n_input == 2
        assert info.value.target == 'price'

    def test_empty_result_without_transform(self):
        with pytest.raises(EmptyDatasetError, match="missing or non-numeric"):
            filter_rows([{'y': None}], RegressionConfig('y'))
