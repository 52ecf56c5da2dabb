"""
hpgroups - Session group query engine for hyperparameter-tuning experiments.

Groups the sessions of an experiment by hyperparameter values, aggregates
their metrics, then filters, sorts and paginates the groups.

Examples:
    >>> from hpgroups import ExperimentSnapshot, SessionGroupEngine
    >>> from hpgroups.models import ListSessionGroupsRequest
    >>> snapshot = ExperimentSnapshot(experiment, sessions)
    >>> response = SessionGroupEngine().list_session_groups(snapshot, ListSessionGroupsRequest())
    >>> response.total_size
    2
"""

from hpgroups.engine import MISSING, CancellationToken, ExperimentSnapshot, SessionGroupEngine
from hpgroups.exceptions import QueryCancelledError, QueryConfigError, SessionNotFoundError

__version__ = "0.1.0"
__all__ = [
    "MISSING",
    "CancellationToken",
    "ExperimentSnapshot",
    "QueryCancelledError",
    "QueryConfigError",
    "SessionGroupEngine",
    "SessionNotFoundError",
]
