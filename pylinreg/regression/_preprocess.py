"""
Row filtering for regression.

Keeps the rows that are usable for every participating column and drops
the rest, preserving input order. Invalid transform domains (ln of a
zero or negative value) are not errors here: such rows are removed, and
if nothing survives the caller gets an EmptyDatasetError explaining why.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Iterable

from pylinreg.core.datasource import Row
from pylinreg.core.exceptions import EmptyDatasetError
from pylinreg.regression.config import RegressionConfig


def is_missing(value: Any) -> bool:
    """None, blank strings and float NaN count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    if isinstance(value, Real):
        return math.isnan(float(value))
    return False


def to_number(value: Any) -> float | None:
    """
    Convert a cell to a finite float.

    Returns None for missing, unparseable or infinite values.
    """
    if is_missing(value):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def in_log_domain(x: float, plus_one: bool) -> bool:
    """ln(x) needs x > 0; ln(1 + x) needs x > -1."""
    return x > -1.0 if plus_one else x > 0.0


def row_is_valid(row: Row, config: RegressionConfig) -> bool:
    """Whether a single row can enter the model."""
    y = to_number(row.get(config.target))
    if y is None:
        return False
    if config.target_log_transform and not in_log_domain(y, config.target_log_plus_one):
        return False

    for f in config.features:
        value = row.get(f.name)
        if is_missing(value):
            return False
        if f.is_categorical:
            continue
        x = to_number(value)
        if x is None:
            return False
        if f.log_transform and not in_log_domain(x, f.log_plus_one):
            return False
    return True


def filter_rows(rows: Iterable[Row], config: RegressionConfig) -> tuple[Row, ...]:
    """
    Rows valid for every participating column, in input order.

    Raises:
        EmptyDatasetError: If no row survives
    """
    rows = tuple(rows)
    clean = tuple(row for row in rows if row_is_valid(row, config))

    if not clean:
        transformed = config.transformed_variables
        if transformed:
            hint = (
                f" Log-transformed variables {list(transformed)} are a likely "
                f"cause: ln(x) drops rows where x <= 0 and ln(1+x) drops rows "
                f"where x <= -1. Check for zero or negative values."
            )
        else:
            hint = (
                " No log transform is configured, so check for missing or "
                "non-numeric values in the target and numeric features."
            )
        raise EmptyDatasetError(
            f"No valid rows remain after removing missing values and invalid "
            f"log transform domains ({len(rows)} rows in, 0 out).{hint}",
            target=config.target,
            transformed=transformed,
            n_input=len(rows),
        )
    return clean
