"""
SessionGroupEngine - runs the session group query pipeline.

Grouper -> Aggregator -> Column Resolver -> Filter Engine -> Sort Engine -> Paginator.
Each stage is a pure function of the snapshot and the validated request.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from hpgroups.config import EngineSettings, get_settings
from hpgroups.models import (
    ListMetricEvalsRequest,
    ListMetricEvalsResponse,
    ListSessionGroupsRequest,
    ListSessionGroupsResponse,
)

from .aggregator import GroupMetrics, aggregate_groups
from .cache import AggregationCache
from .cancellation import CancellationToken
from .filters import filter_groups
from .grouper import GroupedSessions, group_sessions
from .paginator import paginate
from .resolver import resolve_groups
from .snapshot import ExperimentSnapshot
from .sorting import sort_groups
from .validation import QueryPlan, validate_request

logger = logging.getLogger(__name__)


class SessionGroupEngine:
    """Query engine for session groups.

    The engine holds no per-query state. Its aggregation cache is shared by
    all queries and keyed by snapshot content, so one engine can serve
    concurrent queries against any number of snapshots.
    """

    def __init__(self, settings: EngineSettings | None = None) -> None:
        """Initialize the engine.

        Args:
            settings: Engine settings. Defaults to settings read from the environment.
        """
        self.settings = settings if settings is not None else get_settings()
        self.cache = AggregationCache(self.settings.aggregation_cache_size)

    def _default_token(self) -> CancellationToken:
        if self.settings.query_timeout_secs is not None:
            return CancellationToken.with_timeout(self.settings.query_timeout_secs)
        return CancellationToken()

    def _aggregate(self, snapshot: ExperimentSnapshot, groups: list[GroupedSessions], plan: QueryPlan) -> Mapping[str, GroupMetrics]:
        key = AggregationCache.make_key(snapshot.fingerprint, plan.aggregation_type, plan.aggregation_metric)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Aggregation cache hit for snapshot {snapshot.version[:12]}")
            return cached

        aggregated = aggregate_groups(groups, snapshot, plan.aggregation_type, plan.aggregation_metric)
        return self.cache.put(key, aggregated)

    def list_session_groups(
        self,
        snapshot: ExperimentSnapshot,
        request: ListSessionGroupsRequest,
        token: CancellationToken | None = None,
    ) -> ListSessionGroupsResponse:
        """List the session groups of a snapshot.

        Args:
            snapshot: Experiment snapshot to query
            request: Columns, filters, sort keys, aggregation and slice to return
            token: Optional cancellation token checked between stages

        Returns:
            ListSessionGroupsResponse with the requested slice and the
            number of groups that passed the filters

        Raises:
            QueryConfigError: If the request is malformed
            QueryCancelledError: If the token is cancelled or its deadline passes
        """
        plan = validate_request(snapshot, request, self.settings)
        if token is None:
            token = self._default_token()

        token.check("group")
        groups = group_sessions(snapshot)

        token.check("aggregate")
        aggregated = self._aggregate(snapshot, groups, plan)

        token.check("resolve")
        resolved = resolve_groups(groups, aggregated, [params.column for params in plan.col_params])

        token.check("filter")
        filtered = filter_groups(resolved, plan.predicates)

        token.check("sort")
        ordered = sort_groups(filtered, plan.col_params)

        token.check("paginate")
        page, total_size = paginate(ordered, plan.start_index, plan.slice_size)

        logger.debug(f"Snapshot {snapshot.version[:12]}: {len(groups)} groups, {total_size} after filtering, returning {len(page)}")
        return ListSessionGroupsResponse(
            session_groups=[group.to_model() for group in page],
            total_size=total_size,
        )

    def list_metric_evals(self, snapshot: ExperimentSnapshot, request: ListMetricEvalsRequest) -> ListMetricEvalsResponse:
        """Read the full series of one metric for one session.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        return ListMetricEvalsResponse(metric_evals=snapshot.metric_evals(request.session_name, request.metric_name))
