"""
hpgroups data models package.

This package contains the experiment, session and request models shared by
the query engine and the CLI.
"""

from hpgroups.models.experiment import (
    DatasetType,
    DataType,
    DiscreteDomain,
    Experiment,
    HParamInfo,
    HParamValue,
    Interval,
    IntervalDomain,
    MetricInfo,
    MetricName,
)
from hpgroups.models.request import (
    AggregationType,
    ColParams,
    DiscreteFilter,
    HParamColumn,
    IntervalFilter,
    ListMetricEvalsRequest,
    ListMetricEvalsResponse,
    ListSessionGroupsRequest,
    ListSessionGroupsResponse,
    MetricColumn,
    RegexpFilter,
    SortOrder,
)
from hpgroups.models.session import MetricValue, Session, SessionGroup, SessionStatus
from hpgroups.models.snapshot import SnapshotPayload

__all__ = [
    "AggregationType",
    "ColParams",
    "DataType",
    "DatasetType",
    "DiscreteDomain",
    "DiscreteFilter",
    "Experiment",
    "HParamColumn",
    "HParamInfo",
    "HParamValue",
    "Interval",
    "IntervalDomain",
    "IntervalFilter",
    "ListMetricEvalsRequest",
    "ListMetricEvalsResponse",
    "ListSessionGroupsRequest",
    "ListSessionGroupsResponse",
    "MetricColumn",
    "MetricInfo",
    "MetricName",
    "MetricValue",
    "RegexpFilter",
    "Session",
    "SessionGroup",
    "SessionStatus",
    "SnapshotPayload",
    "SortOrder",
]
