"""
Sort Engine - orders session groups by a chain of column comparators.

The group name is always the least significant key, so the order is total.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import cmp_to_key

from hpgroups.models import ColParams, SortOrder

from .resolver import ResolvedGroup
from .values import MISSING, sort_key


def _compare(left, right) -> int:
    return (left > right) - (left < right)


def sort_groups(groups: Iterable[ResolvedGroup], col_params: Sequence[ColParams]) -> list[ResolvedGroup]:
    """Sort groups by the columns whose order is not UNSPECIFIED.

    Columns earlier in ``col_params`` are more significant. Missing values
    go first or last as each column asks, whatever its direction.

    Args:
        groups: Resolved groups, columns aligned with col_params
        col_params: Column parameters from the request

    Returns:
        New list of groups in sorted order
    """
    keys = [
        (index, params.order == SortOrder.DESC, params.missing_values_first)
        for index, params in enumerate(col_params)
        if params.order != SortOrder.UNSPECIFIED
    ]

    def compare(left: ResolvedGroup, right: ResolvedGroup) -> int:
        for index, descending, missing_first in keys:
            left_value = left.columns[index]
            right_value = right.columns[index]

            if left_value is MISSING or right_value is MISSING:
                if left_value is right_value:
                    continue
                missing_side = -1 if missing_first else 1
                return missing_side if left_value is MISSING else -missing_side

            result = _compare(sort_key(left_value), sort_key(right_value))
            if result:
                return -result if descending else result

        return _compare(left.name, right.name)

    return sorted(groups, key=cmp_to_key(compare))
