"""
JSON interchange form of an experiment snapshot.
"""

from pydantic import BaseModel

from hpgroups.models.experiment import Experiment
from hpgroups.models.session import Session


class SnapshotPayload(BaseModel):
    """An experiment and its sessions as published by the ingestion side."""

    version: str | None = None
    experiment: Experiment = Experiment()
    sessions: list[Session] = []
