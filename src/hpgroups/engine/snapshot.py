"""
ExperimentSnapshot - an immutable view of one experiment handed to each query.

The ingestion side publishes a new snapshot whenever its data changes and
never mutates a published one. Queries running against the same snapshot
therefore share it without locking.
"""

from __future__ import annotations

import hashlib
from collections import defaultdict
from collections.abc import Iterable, Mapping
from types import MappingProxyType

import polars as pl

from hpgroups.exceptions import SessionNotFoundError
from hpgroups.logger import logger
from hpgroups.models import DataType, Experiment, HParamValue, MetricName, MetricValue, Session, SnapshotPayload

from .values import infer_data_type, value_matches_type

_OBSERVATION_SCHEMA = {
    "session": pl.Utf8,
    "group": pl.Utf8,
    "tag": pl.Utf8,
    "value": pl.Float64,
    "step": pl.Int64,
    "wall_time": pl.Float64,
}

_SERIES_KEY = ["session", "group", "tag"]


def _build_observation_frame(sessions: Iterable[Session]) -> pl.DataFrame:
    """Build the long observation frame of all sessions in arrival order.

    Observations sharing a (session, metric, step) key are collapsed to the
    last one to arrive.

    Args:
        sessions: Sessions of the snapshot

    Returns:
        DataFrame with columns session, group, tag, value, step, wall_time
    """
    columns: dict[str, list] = {key: [] for key in _OBSERVATION_SCHEMA}
    for session in sessions:
        for metric_value in session.metric_values:
            columns["session"].append(session.name)
            columns["group"].append(metric_value.name.group)
            columns["tag"].append(metric_value.name.tag)
            columns["value"].append(metric_value.value)
            columns["step"].append(metric_value.training_step)
            columns["wall_time"].append(metric_value.wall_time_secs)

    df = pl.DataFrame(columns, schema=_OBSERVATION_SCHEMA)
    return df.unique(subset=[*_SERIES_KEY, "step"], keep="last", maintain_order=True)


def _latest_by_session(observations: pl.DataFrame) -> dict[str, dict[MetricName, MetricValue]]:
    """Pick each session's observation at the highest training step of every metric."""
    latest = observations.sort("step", maintain_order=True).group_by(_SERIES_KEY, maintain_order=True).last()

    names: dict[tuple[str, str], MetricName] = {}
    result: dict[str, dict[MetricName, MetricValue]] = defaultdict(dict)
    for row in latest.iter_rows(named=True):
        key = (row["group"], row["tag"])
        name = names.get(key)
        if name is None:
            name = names[key] = MetricName(group=row["group"], tag=row["tag"])
        result[row["session"]][name] = MetricValue(
            name=name,
            value=row["value"],
            training_step=row["step"],
            wall_time_secs=row["wall_time"],
        )
    return dict(result)


class ExperimentSnapshot:
    """An immutable experiment with its sessions and precomputed metric views.

    A session whose name repeats an earlier one is dropped with a warning, so
    every view of the snapshot sees each session name once.

    Attributes:
        experiment: The experiment description
        sessions: The sessions, in arrival order
        fingerprint: sha256 of the experiment and sessions; keys the
            aggregation cache
        version: Label of this snapshot. Defaults to the fingerprint.
    """

    def __init__(self, experiment: Experiment, sessions: Iterable[Session], version: str | None = None) -> None:
        self.experiment = experiment

        self._sessions_by_name: dict[str, Session] = {}
        for session in sessions:
            if session.name in self._sessions_by_name:
                logger.warning(f"Duplicate session name '{session.name}'; keeping the first session with this name")
                continue
            self._sessions_by_name[session.name] = session
        self.sessions: tuple[Session, ...] = tuple(self._sessions_by_name.values())

        self.fingerprint = self._fingerprint()
        self.version = version if version is not None else self.fingerprint

        self._observations = _build_observation_frame(self.sessions)
        self._latest = _latest_by_session(self._observations)
        self._hparam_types = self._collect_hparam_types()
        self._metric_names = self._collect_metric_names()

    @classmethod
    def from_payload(cls, payload: SnapshotPayload) -> ExperimentSnapshot:
        """Create a snapshot from its JSON interchange form."""
        return cls(payload.experiment, payload.sessions, version=payload.version)

    def _fingerprint(self) -> str:
        digest = hashlib.sha256(self.experiment.model_dump_json().encode("utf-8"))
        for session in self.sessions:
            digest.update(session.model_dump_json().encode("utf-8"))
        return digest.hexdigest()

    def _collect_hparam_types(self) -> dict[str, DataType]:
        """Map every known hparam to its type.

        Declared hparams use their declared type. Undeclared ones are tolerated
        and typed from their observed values.
        """
        types = {info.name: info.type for info in self.experiment.hparam_infos}
        undeclared: dict[str, list[HParamValue]] = defaultdict(list)
        mismatched: set[str] = set()

        for session in self.sessions:
            for name, value in session.hparams.items():
                declared = types.get(name)
                if declared is None:
                    undeclared[name].append(value)
                elif not value_matches_type(value, declared) and name not in mismatched:
                    mismatched.add(name)
                    logger.warning(
                        f"Session '{session.name}' reports hparam '{name}' as {type(value).__name__}, declared as {declared.value}"
                    )

        for name, values in undeclared.items():
            inferred = infer_data_type(values)
            logger.warning(f"Hparam '{name}' is not declared in the experiment; treating it as {inferred.value}")
            types[name] = inferred

        return types

    def _collect_metric_names(self) -> tuple[MetricName, ...]:
        """List declared metrics followed by undeclared observed ones, sorted by (group, tag)."""
        declared = [info.name for info in self.experiment.metric_infos]
        known = set(declared)
        undeclared = {name for values in self._latest.values() for name in values if name not in known}
        for name in sorted(undeclared, key=lambda n: (n.group, n.tag)):
            logger.warning(f"Metric '{name}' is not declared in the experiment")
        return (*declared, *sorted(undeclared, key=lambda n: (n.group, n.tag)))

    @property
    def metric_names(self) -> tuple[MetricName, ...]:
        """All known metrics in display order."""
        return self._metric_names

    def hparam_type(self, name: str) -> DataType | None:
        """Return the type of a hparam, or None if no declaration or session knows it."""
        return self._hparam_types.get(name)

    def has_metric(self, name: MetricName) -> bool:
        return name in self._metric_names

    def session(self, name: str) -> Session:
        """Get a session by name.

        Raises:
            SessionNotFoundError: If no session has this name
        """
        try:
            return self._sessions_by_name[name]
        except KeyError:
            raise SessionNotFoundError(f"Session '{name}' not found") from None

    def latest_metric_values(self, session_name: str) -> Mapping[MetricName, MetricValue]:
        """Return the latest observation of every metric a session reported."""
        return MappingProxyType(self._latest.get(session_name, {}))

    def metric_evals(self, session_name: str, metric: MetricName) -> list[MetricValue]:
        """Return a session's full series for one metric, sorted by training step.

        Raises:
            SessionNotFoundError: If no session has this name
        """
        self.session(session_name)

        df = self._observations.filter(
            (pl.col("session") == session_name) & (pl.col("group") == metric.group) & (pl.col("tag") == metric.tag)
        ).sort("step")

        return [
            MetricValue(
                name=metric,
                value=row["value"],
                training_step=row["step"],
                wall_time_secs=row["wall_time"],
            )
            for row in df.iter_rows(named=True)
        ]

    def __len__(self) -> int:
        return len(self.sessions)

    def __repr__(self) -> str:
        return f"ExperimentSnapshot(version={self.version!r}, sessions={len(self.sessions)})"
