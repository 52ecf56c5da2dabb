"""
Column Resolver - maps each (group, column) pair to a value or MISSING.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from hpgroups.models import HParamColumn, MetricColumn, MetricName, MetricValue, SessionGroup

from .grouper import GroupedSessions
from .values import MISSING, ColumnValue


@dataclass(frozen=True)
class ResolvedGroup:
    """A session group with its aggregated metrics and resolved column values.

    ``columns`` is aligned with the request's col_params.
    """

    group: GroupedSessions
    metrics: Mapping[MetricName, MetricValue]
    columns: tuple[ColumnValue, ...]

    @property
    def name(self) -> str:
        return self.group.name

    def to_model(self) -> SessionGroup:
        return SessionGroup(
            name=self.group.name,
            hparams=dict(self.group.hparams),
            metric_values=list(self.metrics.values()),
            sessions=list(self.group.sessions),
        )


def resolve_column(column: MetricColumn | HParamColumn, group: GroupedSessions, metrics: Mapping[MetricName, MetricValue]) -> ColumnValue:
    """Resolve one column of a group."""
    if isinstance(column, HParamColumn):
        return group.hparams.get(column.hparam, MISSING)
    if isinstance(column, MetricColumn):
        metric_value = metrics.get(column.metric)
        return MISSING if metric_value is None else metric_value.value
    raise TypeError(f"Unknown column kind: {type(column).__name__}")


def resolve_groups(
    groups: Iterable[GroupedSessions],
    aggregated: Mapping[str, Mapping[MetricName, MetricValue]],
    columns: Sequence[MetricColumn | HParamColumn],
) -> list[ResolvedGroup]:
    """Resolve the requested columns of every group.

    Args:
        groups: Session groups
        aggregated: Aggregated metrics keyed by group name
        columns: Requested columns, in request order

    Returns:
        One ResolvedGroup per input group, in input order
    """
    resolved = []
    for group in groups:
        metrics = aggregated.get(group.name, {})
        resolved.append(
            ResolvedGroup(
                group=group,
                metrics=metrics,
                columns=tuple(resolve_column(column, group, metrics) for column in columns),
            )
        )
    return resolved
