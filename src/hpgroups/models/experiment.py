"""
Experiment description models.

An experiment declares the hyperparameters and metrics its sessions report.
These records are immutable once they describe an experiment.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "DataType",
    "DatasetType",
    "DiscreteDomain",
    "Domain",
    "Experiment",
    "HParamInfo",
    "HParamValue",
    "Interval",
    "IntervalDomain",
    "MetricInfo",
    "MetricName",
]

# A scalar hyperparameter value. bool comes first so that True is never read as 1.0.
HParamValue = bool | float | str


class DataType(Enum):
    """Data type of a hyperparameter column."""

    STRING = "string"
    BOOL = "bool"
    FLOAT64 = "float64"


class DatasetType(Enum):
    """Dataset a metric is computed on."""

    UNKNOWN = "unknown"
    TRAINING = "training"
    VALIDATION = "validation"


class Interval(BaseModel):
    """The closed interval [min_value, max_value] of the real line."""

    model_config = ConfigDict(frozen=True)

    min_value: float
    max_value: float

    @model_validator(mode="after")
    def check_bounds(self) -> "Interval":
        if self.min_value > self.max_value:
            raise ValueError(f"min_value ({self.min_value}) is greater than max_value ({self.max_value})")
        return self

    def __contains__(self, value: float) -> bool:
        return self.min_value <= value <= self.max_value


class DiscreteDomain(BaseModel):
    """An explicit set of values a hyperparameter can hold."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["discrete"] = "discrete"
    values: list[HParamValue]


class IntervalDomain(BaseModel):
    """A real interval a numeric hyperparameter is taken from."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["interval"] = "interval"
    interval: Interval


Domain = Annotated[DiscreteDomain | IntervalDomain, Field(discriminator="kind")]


class HParamInfo(BaseModel):
    """Information about one hyperparameter used in the experiment."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str = ""
    description: str = ""
    type: DataType = DataType.STRING
    domain: Domain | None = None

    @model_validator(mode="after")
    def check_domain(self) -> "HParamInfo":
        if isinstance(self.domain, IntervalDomain) and self.type != DataType.FLOAT64:
            raise ValueError(f"Interval domain of hparam '{self.name}' requires a float64 type, got {self.type.value}")
        return self


class MetricName(BaseModel):
    """Identifies a metric by a (group, tag) pair of opaque strings."""

    model_config = ConfigDict(frozen=True)

    group: str = ""
    tag: str

    def __str__(self) -> str:
        return f"{self.group}/{self.tag}" if self.group else self.tag


class MetricInfo(BaseModel):
    """Information about one metric used in the experiment."""

    model_config = ConfigDict(frozen=True)

    name: MetricName
    display_name: str = ""
    description: str = ""
    dataset_type: DatasetType = DatasetType.UNKNOWN


class Experiment(BaseModel):
    """A hyperparameter-tuning experiment."""

    model_config = ConfigDict(frozen=True)

    description: str = ""
    user: str = ""
    time_created_secs: float = 0.0
    hparam_infos: list[HParamInfo] = []
    metric_infos: list[MetricInfo] = []
