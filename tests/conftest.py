"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def exact_rows():
    """Rows satisfying y = 3 + 2*x1 - x2 exactly."""
    data = [(1.0, 4.0), (2.0, 1.0), (3.0, 5.0), (4.0, 2.0), (5.0, 7.0), (6.0, 3.0)]
    return [
        {'y': 3.0 + 2.0 * x1 - x2, 'x1': x1, 'x2': x2}
        for x1, x2 in data
    ]


@pytest.fixture
def noisy_rows(rng):
    """Rows with y = 1 + 2*x1 - 0.5*x2 + noise, n = 80."""
    n = 80
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    y = 1.0 + 2.0 * x1 - 0.5 * x2 + rng.standard_normal(n) * 0.3
    return [
        {'y': float(y[i]), 'x1': float(x1[i]), 'x2': float(x2[i])}
        for i in range(n)
    ]


@pytest.fixture
def categorical_rows(rng):
    """Rows with a three-level categorical effect on top of one slope."""
    n = 60
    shift = {'A': 0.0, 'B': 1.5, 'C': -2.0}
    levels = ['A', 'B', 'C']
    rows = []
    for i in range(n):
        level = levels[i % 3]
        x = float(rng.uniform(0, 10))
        y = 2.0 + 0.8 * x + shift[level] + float(rng.standard_normal()) * 0.2
        rows.append({'y': y, 'x': x, 'group': level})
    return rows


@pytest.fixture
def collinear_rows(rng):
    """Rows where x3 = x1 + x2 exactly (no pair is identical)."""
    n = 40
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    y = rng.standard_normal(n)
    return [
        {'y': float(y[i]), 'x1': float(x1[i]), 'x2': float(x2[i]),
         'x3': float(x1[i] + x2[i])}
        for i in range(n)
    ]
