"""
Session and session group models.

A session is one training run: a set of hyperparameter values and the
metric evaluations it reported. A session group is the set of sessions
sharing the same hyperparameter values.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from hpgroups.models.experiment import HParamValue, MetricName

__all__ = ["MetricValue", "Session", "SessionGroup", "SessionStatus"]


class SessionStatus(Enum):
    """Session status enumeration."""

    UNKNOWN = "unknown"
    SUCCESS = "success"
    FAILURE = "failure"
    RUNNING = "running"


class MetricValue(BaseModel):
    """A metric evaluated at a given training step."""

    model_config = ConfigDict(frozen=True)

    name: MetricName
    value: float
    training_step: int = 0
    wall_time_secs: float = 0.0


class Session(BaseModel):
    """A single training session.

    ``metric_values`` is kept in arrival order. When several observations
    share a (metric, training_step) pair the last one wins.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    start_time_secs: float = 0.0
    end_time_secs: float = 0.0
    status: SessionStatus = SessionStatus.UNKNOWN
    model_uri: str = ""
    monitor_url: str = ""
    hparams: dict[str, HParamValue] = {}
    metric_values: list[MetricValue] = []


class SessionGroup(BaseModel):
    """Sessions sharing the same hyperparameter values, with aggregated metrics."""

    name: str
    hparams: dict[str, HParamValue] = {}
    metric_values: list[MetricValue] = []
    sessions: list[Session] = []
    monitor_url: str = ""

    def metric_value(self, name: MetricName) -> MetricValue | None:
        """Return the aggregated value of a metric, or None if the group has none."""
        for metric_value in self.metric_values:
            if metric_value.name == name:
                return metric_value
        return None
