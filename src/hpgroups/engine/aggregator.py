"""
Aggregator - computes the metric values of each session group.

AVG averages each member's latest value of a metric. MIN, MAX and MEDIAN
pick a representative session ranked by the aggregation metric and report
that session's latest values for every metric.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping

from hpgroups.models import AggregationType, MetricName, MetricValue, Session

from .grouper import GroupedSessions
from .snapshot import ExperimentSnapshot

logger = logging.getLogger(__name__)

GroupMetrics = Mapping[MetricName, MetricValue]


def _ordered(values: Iterable[MetricValue], metric_order: Mapping[MetricName, int]) -> dict[MetricName, MetricValue]:
    """Order metric values by the snapshot's metric display order."""
    ordered = sorted(values, key=lambda v: (metric_order.get(v.name, len(metric_order)), v.name.group, v.name.tag))
    return {value.name: value for value in ordered}


def average_metrics(group: GroupedSessions, snapshot: ExperimentSnapshot) -> list[MetricValue]:
    """Average each session's latest value of every metric reported in the group.

    Sessions that never reported a metric do not count towards its average.
    The training step is the truncated mean of the latest steps.
    """
    per_metric: dict[MetricName, list[MetricValue]] = {}
    for session in group.sessions:
        for name, metric_value in snapshot.latest_metric_values(session.name).items():
            per_metric.setdefault(name, []).append(metric_value)

    averaged = []
    for name, values in per_metric.items():
        count = len(values)
        averaged.append(
            MetricValue(
                name=name,
                value=sum(v.value for v in values) / count,
                training_step=int(sum(v.training_step for v in values) / count),
                wall_time_secs=sum(v.wall_time_secs for v in values) / count,
            )
        )
    return averaged


def select_representative(
    group: GroupedSessions,
    snapshot: ExperimentSnapshot,
    aggregation_type: AggregationType,
    aggregation_metric: MetricName,
) -> Session | None:
    """Pick the session whose aggregation metric is minimal, maximal or median.

    Sessions without a (non-NaN) latest value of the aggregation metric are
    left out of the ranking. Ties are broken by session name. For an even
    number of ranked sessions MEDIAN picks the lower middle one.

    Returns:
        The representative session, or None when no session can be ranked
    """
    ranked: list[tuple[float, str, Session]] = []
    for session in group.sessions:
        metric_value = snapshot.latest_metric_values(session.name).get(aggregation_metric)
        if metric_value is None or math.isnan(metric_value.value):
            continue
        ranked.append((metric_value.value, session.name, session))

    if not ranked:
        return None

    if aggregation_type == AggregationType.MAX:
        return min(ranked, key=lambda item: (-item[0], item[1]))[2]

    ranked.sort(key=lambda item: (item[0], item[1]))
    if aggregation_type == AggregationType.MIN:
        return ranked[0][2]
    if aggregation_type == AggregationType.MEDIAN:
        return ranked[(len(ranked) - 1) // 2][2]
    raise ValueError(f"No representative session for aggregation type {aggregation_type.value}")


def aggregate_group(
    group: GroupedSessions,
    snapshot: ExperimentSnapshot,
    aggregation_type: AggregationType,
    aggregation_metric: MetricName | None = None,
) -> dict[MetricName, MetricValue]:
    """Compute the metric values of one group.

    Args:
        group: Session group
        snapshot: Snapshot the group was built from
        aggregation_type: Aggregation mode
        aggregation_metric: Ranking metric, required unless aggregation_type is AVG

    Returns:
        Mapping of metric name to aggregated value in metric display order.
        Metrics no member reported are absent.
    """
    metric_order = {name: index for index, name in enumerate(snapshot.metric_names)}

    if aggregation_type == AggregationType.AVG:
        return _ordered(average_metrics(group, snapshot), metric_order)

    if aggregation_metric is None:
        raise ValueError(f"{aggregation_type.value} aggregation requires an aggregation metric")

    representative = select_representative(group, snapshot, aggregation_type, aggregation_metric)
    if representative is None:
        logger.debug(f"No session of group {group.name[:12]} reports {aggregation_metric}; its metrics are missing")
        return {}
    return _ordered(snapshot.latest_metric_values(representative.name).values(), metric_order)


def aggregate_groups(
    groups: Iterable[GroupedSessions],
    snapshot: ExperimentSnapshot,
    aggregation_type: AggregationType,
    aggregation_metric: MetricName | None = None,
) -> dict[str, GroupMetrics]:
    """Aggregate every group, keyed by group name."""
    return {group.name: aggregate_group(group, snapshot, aggregation_type, aggregation_metric) for group in groups}
