"""
Request validation.

Turns a ListSessionGroupsRequest into a QueryPlan, rejecting malformed
requests before any pipeline stage runs.
"""

from __future__ import annotations

from dataclasses import dataclass

from hpgroups.config import EngineSettings
from hpgroups.exceptions import QueryConfigError
from hpgroups.models import (
    AggregationType,
    ColParams,
    DataType,
    HParamColumn,
    ListSessionGroupsRequest,
    MetricColumn,
    MetricName,
)

from .filters import ColumnPredicate, build_predicate
from .snapshot import ExperimentSnapshot


@dataclass(frozen=True)
class QueryPlan:
    """A validated request."""

    col_params: tuple[ColParams, ...]
    predicates: tuple[ColumnPredicate, ...]
    aggregation_type: AggregationType
    aggregation_metric: MetricName | None
    start_index: int
    slice_size: int


def _column_type(snapshot: ExperimentSnapshot, column: MetricColumn | HParamColumn, field: str) -> DataType:
    if isinstance(column, MetricColumn):
        if not snapshot.has_metric(column.metric):
            raise QueryConfigError(field, f"unknown metric '{column.metric}'")
        return DataType.FLOAT64
    if isinstance(column, HParamColumn):
        data_type = snapshot.hparam_type(column.hparam)
        if data_type is None:
            raise QueryConfigError(field, f"unknown hparam '{column.hparam}'")
        return data_type
    raise TypeError(f"Unknown column kind: {type(column).__name__}")


def validate_request(snapshot: ExperimentSnapshot, request: ListSessionGroupsRequest, settings: EngineSettings) -> QueryPlan:
    """Validate a request against a snapshot.

    Args:
        snapshot: Snapshot the request will run against
        request: Request to validate
        settings: Engine settings (slice size defaults and limits)

    Returns:
        QueryPlan with the resolved slice size and compiled filter predicates

    Raises:
        QueryConfigError: If any request field is invalid
    """
    if request.start_index < 0:
        raise QueryConfigError("start_index", f"must be non-negative, got {request.start_index}")

    slice_size = request.slice_size if request.slice_size is not None else settings.default_slice_size
    if slice_size < 0:
        raise QueryConfigError("slice_size", f"must be non-negative, got {slice_size}")
    if slice_size > settings.max_slice_size:
        raise QueryConfigError("slice_size", f"must not exceed {settings.max_slice_size}, got {slice_size}")

    aggregation_metric = None
    if request.aggregation_type != AggregationType.AVG:
        if request.aggregation_metric is None:
            raise QueryConfigError("aggregation_metric", f"required for {request.aggregation_type.value} aggregation")
        if not snapshot.has_metric(request.aggregation_metric):
            raise QueryConfigError("aggregation_metric", f"unknown metric '{request.aggregation_metric}'")
        aggregation_metric = request.aggregation_metric

    predicates = []
    for index, params in enumerate(request.col_params):
        data_type = _column_type(snapshot, params.column, f"col_params[{index}].column")
        predicates.append(build_predicate(params, data_type, f"col_params[{index}].filter"))

    return QueryPlan(
        col_params=tuple(request.col_params),
        predicates=tuple(predicates),
        aggregation_type=request.aggregation_type,
        aggregation_metric=aggregation_metric,
        start_index=request.start_index,
        slice_size=slice_size,
    )
