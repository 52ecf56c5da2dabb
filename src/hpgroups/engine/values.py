"""
Column value helpers.

A resolved column value is either a scalar (bool, float or str) or the
``MISSING`` sentinel. Comparisons here are type-aware: ``True`` never equals
``1.0`` and mixed runtime types never raise.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import Enum
from typing import Any

from hpgroups.models import DataType, HParamValue

__all__ = [
    "MISSING",
    "ColumnValue",
    "Missing",
    "canonical_value",
    "infer_data_type",
    "sort_key",
    "value_matches_type",
]


class Missing(Enum):
    """The explicit "no value" state of a column."""

    MISSING = "missing"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = Missing.MISSING

ColumnValue = HParamValue | Missing


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def value_matches_type(value: Any, data_type: DataType) -> bool:
    """Check whether a scalar value belongs to a declared data type."""
    if data_type == DataType.BOOL:
        return isinstance(value, bool)
    if data_type == DataType.FLOAT64:
        return _is_number(value)
    return isinstance(value, str)


def infer_data_type(values: Iterable[Any]) -> DataType:
    """Infer the data type of an undeclared hyperparameter from its observed values.

    Returns BOOL or FLOAT64 when every value has that type, STRING otherwise.
    """
    observed = list(values)
    if observed and all(isinstance(v, bool) for v in observed):
        return DataType.BOOL
    if observed and all(_is_number(v) for v in observed):
        return DataType.FLOAT64
    return DataType.STRING


def canonical_value(value: HParamValue) -> tuple:
    """Return a hashable, type-tagged form of a scalar for exact equality."""
    if isinstance(value, bool):
        return ("b", value)
    if _is_number(value):
        number = float(value)
        if math.isnan(number):
            return ("f", "nan")
        # Adding 0.0 folds -0.0 into 0.0
        return ("f", number + 0.0)
    return ("s", str(value))


def sort_key(value: HParamValue) -> tuple:
    """Return a totally ordered key for a present value.

    Booleans sort before numbers and numbers before strings; NaN sorts
    after every other number.
    """
    if isinstance(value, bool):
        return (0, 0, value)
    if _is_number(value):
        number = float(value)
        if math.isnan(number):
            return (1, 1, 0.0)
        return (1, 0, number)
    return (2, 0, str(value))
