"""
hpgroups engine module

Provides the session group query pipeline and the snapshot it runs on.
"""

from .aggregator import aggregate_group, aggregate_groups, select_representative
from .cache import AggregationCache
from .cancellation import CancellationToken
from .engine import SessionGroupEngine
from .filters import AnyValue, ColumnPredicate, DiscreteMatch, IntervalMatch, RegexpMatch, build_predicate, filter_groups
from .grouper import GroupedSessions, canonical_key, group_sessions
from .paginator import paginate
from .resolver import ResolvedGroup, resolve_column, resolve_groups
from .snapshot import ExperimentSnapshot
from .sorting import sort_groups
from .validation import QueryPlan, validate_request
from .values import MISSING, Missing

__all__ = [
    "MISSING",
    "AggregationCache",
    "AnyValue",
    "CancellationToken",
    "ColumnPredicate",
    "DiscreteMatch",
    "ExperimentSnapshot",
    "GroupedSessions",
    "IntervalMatch",
    "Missing",
    "QueryPlan",
    "RegexpMatch",
    "ResolvedGroup",
    "SessionGroupEngine",
    "aggregate_group",
    "aggregate_groups",
    "build_predicate",
    "canonical_key",
    "filter_groups",
    "group_sessions",
    "paginate",
    "resolve_column",
    "resolve_groups",
    "select_representative",
    "sort_groups",
    "validate_request",
]
