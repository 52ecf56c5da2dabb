"""
Request and response models of the session group API.

Column, filter and domain selections are tagged variants: each concept is a
union of small models discriminated by a ``kind`` field.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from hpgroups.models.experiment import HParamValue, Interval, MetricName
from hpgroups.models.session import MetricValue, SessionGroup

__all__ = [
    "AggregationType",
    "ColParams",
    "Column",
    "ColumnFilter",
    "DiscreteFilter",
    "HParamColumn",
    "IntervalFilter",
    "ListMetricEvalsRequest",
    "ListMetricEvalsResponse",
    "ListSessionGroupsRequest",
    "ListSessionGroupsResponse",
    "MetricColumn",
    "RegexpFilter",
    "SortOrder",
]


class SortOrder(Enum):
    """Sort direction of a column."""

    UNSPECIFIED = "unspecified"
    ASC = "asc"
    DESC = "desc"


class AggregationType(Enum):
    """How metric values are aggregated across the sessions of a group."""

    AVG = "avg"
    MEDIAN = "median"
    MIN = "min"
    MAX = "max"


class MetricColumn(BaseModel):
    """A column holding the aggregated value of a metric."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["metric"] = "metric"
    metric: MetricName

    def __str__(self) -> str:
        return f"metric '{self.metric}'"


class HParamColumn(BaseModel):
    """A column holding the value of a hyperparameter."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["hparam"] = "hparam"
    hparam: str

    def __str__(self) -> str:
        return f"hparam '{self.hparam}'"


Column = Annotated[MetricColumn | HParamColumn, Field(discriminator="kind")]


class RegexpFilter(BaseModel):
    """Admits string values the regular expression partially matches."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["regexp"] = "regexp"
    regexp: str


class IntervalFilter(BaseModel):
    """Admits numeric values inside a closed interval."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["interval"] = "interval"
    interval: Interval


class DiscreteFilter(BaseModel):
    """Admits values from an explicit set."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["discrete"] = "discrete"
    values: list[HParamValue]


ColumnFilter = Annotated[RegexpFilter | IntervalFilter | DiscreteFilter, Field(discriminator="kind")]


class ColParams(BaseModel):
    """Sorting and filtering parameters for one column.

    Columns whose ``order`` is UNSPECIFIED do not take part in sorting. The
    ``filter`` subset never contains the missing value; missing values are
    admitted unless ``exclude_missing_values`` is set.
    """

    model_config = ConfigDict(frozen=True)

    column: Column
    order: SortOrder = SortOrder.UNSPECIFIED
    missing_values_first: bool = False
    filter: ColumnFilter | None = None
    exclude_missing_values: bool = False


class ListSessionGroupsRequest(BaseModel):
    """Parameters for listing session groups."""

    model_config = ConfigDict(frozen=True)

    col_params: list[ColParams] = []
    aggregation_type: AggregationType = AggregationType.AVG
    aggregation_metric: MetricName | None = None
    start_index: int = 0
    slice_size: int | None = None


class ListSessionGroupsResponse(BaseModel):
    """A slice of the filtered and sorted session groups."""

    session_groups: list[SessionGroup] = []
    total_size: int = 0


class ListMetricEvalsRequest(BaseModel):
    """Parameters for reading one metric series of one session."""

    model_config = ConfigDict(frozen=True)

    session_name: str
    metric_name: MetricName


class ListMetricEvalsResponse(BaseModel):
    """The metric series of a session, sorted by training step."""

    metric_evals: list[MetricValue] = []
