"""
Filter Engine - keeps the session groups whose column values pass every filter.

Predicates are built once per request from ColParams. Building rejects
filters incompatible with the column's type; evaluating never raises.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from hpgroups.exceptions import QueryConfigError
from hpgroups.models import ColParams, DataType, DiscreteFilter, HParamValue, Interval, IntervalFilter, RegexpFilter

from .resolver import ResolvedGroup
from .values import MISSING, ColumnValue, canonical_value, value_matches_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnyValue:
    """Admits every present value."""

    def matches(self, value: HParamValue) -> bool:
        return True


@dataclass(frozen=True)
class RegexpMatch:
    """Admits strings in which the pattern is found anywhere."""

    pattern: re.Pattern[str]

    def matches(self, value: HParamValue) -> bool:
        return isinstance(value, str) and self.pattern.search(value) is not None


@dataclass(frozen=True)
class IntervalMatch:
    """Admits numbers inside a closed interval."""

    interval: Interval

    def matches(self, value: HParamValue) -> bool:
        return value_matches_type(value, DataType.FLOAT64) and value in self.interval


@dataclass(frozen=True)
class DiscreteMatch:
    """Admits values equal, type included, to one of the allowed values."""

    allowed: frozenset[tuple]

    def matches(self, value: HParamValue) -> bool:
        return canonical_value(value) in self.allowed


ValueTest = AnyValue | RegexpMatch | IntervalMatch | DiscreteMatch


@dataclass(frozen=True)
class ColumnPredicate:
    """Admission test for one column.

    A missing value is admitted unless missing values are excluded. A present
    value is admitted when it passes the value test.
    """

    exclude_missing: bool = False
    test: ValueTest = AnyValue()

    @property
    def is_trivial(self) -> bool:
        """True when the predicate admits every value."""
        return not self.exclude_missing and isinstance(self.test, AnyValue)

    def admits(self, value: ColumnValue) -> bool:
        if value is MISSING:
            return not self.exclude_missing
        return self.test.matches(value)


def build_predicate(params: ColParams, data_type: DataType, field: str) -> ColumnPredicate:
    """Build the predicate of a column, validating the filter against the column type.

    Args:
        params: Column parameters from the request
        data_type: Type of the column
        field: Request field name used in error messages

    Returns:
        ColumnPredicate for the column

    Raises:
        QueryConfigError: If the filter does not apply to the column type or
            the regular expression is invalid
    """
    column_filter = params.filter
    exclude_missing = params.exclude_missing_values

    if column_filter is None:
        return ColumnPredicate(exclude_missing=exclude_missing)

    if isinstance(column_filter, RegexpFilter):
        if data_type != DataType.STRING:
            raise QueryConfigError(field, f"regexp filter requires a string column, {params.column} is {data_type.value}")
        try:
            pattern = re.compile(column_filter.regexp)
        except re.error as e:
            raise QueryConfigError(field, f"invalid regexp {column_filter.regexp!r}: {e}") from None
        return ColumnPredicate(exclude_missing=exclude_missing, test=RegexpMatch(pattern))

    if isinstance(column_filter, IntervalFilter):
        if data_type != DataType.FLOAT64:
            raise QueryConfigError(field, f"interval filter requires a numeric column, {params.column} is {data_type.value}")
        return ColumnPredicate(exclude_missing=exclude_missing, test=IntervalMatch(column_filter.interval))

    if isinstance(column_filter, DiscreteFilter):
        for value in column_filter.values:
            if not value_matches_type(value, data_type):
                raise QueryConfigError(field, f"discrete value {value!r} does not match {params.column} of type {data_type.value}")
        allowed = frozenset(canonical_value(value) for value in column_filter.values)
        return ColumnPredicate(exclude_missing=exclude_missing, test=DiscreteMatch(allowed))

    raise TypeError(f"Unknown filter kind: {type(column_filter).__name__}")


def filter_groups(groups: Iterable[ResolvedGroup], predicates: Sequence[ColumnPredicate]) -> list[ResolvedGroup]:
    """Keep the groups whose every column passes its predicate.

    Args:
        groups: Resolved groups
        predicates: One predicate per column, aligned with ResolvedGroup.columns

    Returns:
        Admitted groups, in input order
    """
    active = [(index, predicate) for index, predicate in enumerate(predicates) if not predicate.is_trivial]
    groups = list(groups)
    if not active:
        return groups

    admitted = [group for group in groups if all(predicate.admits(group.columns[index]) for index, predicate in active)]
    logger.debug(f"Filters admitted {len(admitted)} of {len(groups)} groups")
    return admitted
