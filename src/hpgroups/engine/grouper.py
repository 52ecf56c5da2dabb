"""
Grouper - partitions sessions into session groups.

Two sessions land in the same group exactly when their canonical
hyperparameter keys are equal.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from hpgroups.models import HParamInfo, HParamValue, Session

from .snapshot import ExperimentSnapshot
from .values import canonical_value

logger = logging.getLogger(__name__)

# Marks a declared hparam the session does not report
_UNSET = ("u",)


@dataclass(frozen=True)
class GroupedSessions:
    """Sessions sharing one canonical hyperparameter key."""

    name: str
    hparams: Mapping[str, HParamValue]
    sessions: tuple[Session, ...]


def canonical_key(session: Session, hparam_infos: Sequence[HParamInfo]) -> tuple:
    """Build the grouping key of a session.

    The key lists every declared hparam in declaration order, followed by
    (name, value) pairs of undeclared hparams sorted by name.

    Args:
        session: Session to key
        hparam_infos: Declared hparams of the experiment

    Returns:
        Hashable tuple of type-tagged values
    """
    declared = [info.name for info in hparam_infos]
    components: list = [canonical_value(session.hparams[name]) if name in session.hparams else _UNSET for name in declared]

    declared_names = set(declared)
    for name in sorted(session.hparams):
        if name not in declared_names:
            components.append((name, canonical_value(session.hparams[name])))

    return tuple(components)


def group_name(key: tuple) -> str:
    """Derive a stable group name from a canonical key."""
    return hashlib.sha256(json.dumps(key).encode("utf-8")).hexdigest()


def group_sessions(snapshot: ExperimentSnapshot) -> list[GroupedSessions]:
    """Partition the snapshot's sessions by canonical hyperparameter key.

    Groups keep the order in which their first session appears.
    """
    hparam_infos = snapshot.experiment.hparam_infos
    buckets: dict[tuple, list[Session]] = {}
    for session in snapshot.sessions:
        buckets.setdefault(canonical_key(session, hparam_infos), []).append(session)

    groups = [
        GroupedSessions(name=group_name(key), hparams=dict(members[0].hparams), sessions=tuple(members)) for key, members in buckets.items()
    ]
    logger.debug(f"Grouped {len(snapshot.sessions)} sessions into {len(groups)} groups")
    return groups
