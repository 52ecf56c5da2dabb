"""
End-to-end tests for SessionGroupEngine
"""

import pytest

from hpgroups.config import EngineSettings
from hpgroups.engine import CancellationToken, ExperimentSnapshot, SessionGroupEngine
from hpgroups.exceptions import QueryCancelledError, QueryConfigError, SessionNotFoundError
from hpgroups.models import (
    AggregationType,
    ColParams,
    HParamColumn,
    Interval,
    IntervalFilter,
    ListMetricEvalsRequest,
    ListSessionGroupsRequest,
    MetricColumn,
    MetricName,
    SortOrder,
)

ACCURACY = MetricName(tag="accuracy")
LOSS = MetricName(group="train", tag="loss")


@pytest.fixture
def engine():
    return SessionGroupEngine(EngineSettings())


def _accuracy_desc(**kwargs):
    return ColParams(column=MetricColumn(metric=ACCURACY), order=SortOrder.DESC, **kwargs)


def test_avg_sorted_by_accuracy_desc(engine, lr_snapshot):
    request = ListSessionGroupsRequest(col_params=[_accuracy_desc()], slice_size=10)

    response = engine.list_session_groups(lr_snapshot, request)

    assert response.total_size == 2
    first, second = response.session_groups
    assert first.hparams == {"lr": 0.2}
    assert first.metric_value(ACCURACY).value == pytest.approx(0.95)
    assert [s.name for s in first.sessions] == ["S3"]
    assert second.hparams == {"lr": 0.1}
    assert second.metric_value(ACCURACY).value == pytest.approx(0.85)
    assert [s.name for s in second.sessions] == ["S1", "S2"]


def test_interval_filter_on_accuracy(engine, lr_snapshot):
    col = ColParams(column=MetricColumn(metric=ACCURACY), filter=IntervalFilter(interval=Interval(min_value=0.9, max_value=1.0)))

    response = engine.list_session_groups(lr_snapshot, ListSessionGroupsRequest(col_params=[col]))

    assert response.total_size == 1
    assert response.session_groups[0].hparams == {"lr": 0.2}


def test_max_aggregation_uses_representative(engine, lr_snapshot):
    request = ListSessionGroupsRequest(
        col_params=[ColParams(column=HParamColumn(hparam="lr"), order=SortOrder.ASC)],
        aggregation_type=AggregationType.MAX,
        aggregation_metric=ACCURACY,
    )

    response = engine.list_session_groups(lr_snapshot, request)

    assert response.session_groups[0].metric_value(ACCURACY).value == 0.9
    assert response.session_groups[1].metric_value(ACCURACY).value == 0.95


def test_every_session_appears_once(engine, lr_snapshot):
    response = engine.list_session_groups(lr_snapshot, ListSessionGroupsRequest())

    names = [s.name for g in response.session_groups for s in g.sessions]
    assert sorted(names) == ["S1", "S2", "S3"]


def test_default_order_is_by_group_name(engine, lr_snapshot):
    response = engine.list_session_groups(lr_snapshot, ListSessionGroupsRequest())

    names = [g.name for g in response.session_groups]
    assert names == sorted(names)


@pytest.mark.parametrize("start_index", [0, 1, 2, 5])
def test_total_size_independent_of_slice(engine, lr_snapshot, start_index):
    request = ListSessionGroupsRequest(col_params=[_accuracy_desc()], start_index=start_index, slice_size=1)

    response = engine.list_session_groups(lr_snapshot, request)

    assert response.total_size == 2
    assert len(response.session_groups) == (1 if start_index < 2 else 0)


def test_exclude_missing_values(engine, lr_experiment, make_session):
    snapshot = ExperimentSnapshot(
        lr_experiment,
        [
            make_session("a", {"lr": 0.1}, {ACCURACY: 0.5, LOSS: 1.0}),
            make_session("b", {"lr": 0.2}, {ACCURACY: 0.6}),
        ],
    )
    col = ColParams(column=MetricColumn(metric=LOSS), exclude_missing_values=True)

    response = engine.list_session_groups(snapshot, ListSessionGroupsRequest(col_params=[col]))

    assert [g.hparams["lr"] for g in response.session_groups] == [0.1]


def test_results_are_idempotent(engine, lr_snapshot):
    request = ListSessionGroupsRequest(col_params=[_accuracy_desc()])

    first = engine.list_session_groups(lr_snapshot, request)
    second = engine.list_session_groups(lr_snapshot, request)

    assert first == second


def test_aggregation_cached_per_snapshot_version(engine, lr_experiment, make_session):
    old = ExperimentSnapshot(lr_experiment, [make_session("a", {"lr": 0.1}, {ACCURACY: 0.5})])
    new = ExperimentSnapshot(lr_experiment, [make_session("a", {"lr": 0.1}, {ACCURACY: [(0, 0.5), (1, 0.7)]})])
    request = ListSessionGroupsRequest(col_params=[_accuracy_desc()])

    assert engine.list_session_groups(old, request).session_groups[0].metric_value(ACCURACY).value == 0.5
    assert engine.list_session_groups(new, request).session_groups[0].metric_value(ACCURACY).value == 0.7
    assert len(engine.cache) == 2


def test_shared_version_label_does_not_share_cache_entries(engine, lr_experiment, make_session):
    first = ExperimentSnapshot(lr_experiment, [make_session("a", {"lr": 0.1}, {ACCURACY: 0.5})], version="v1")
    second = ExperimentSnapshot(lr_experiment, [make_session("b", {"lr": 0.3}, {ACCURACY: 0.9})], version="v1")
    request = ListSessionGroupsRequest(col_params=[_accuracy_desc()])

    engine.list_session_groups(first, request)
    response = engine.list_session_groups(second, request)

    (group,) = response.session_groups
    assert group.hparams == {"lr": 0.3}
    assert group.metric_value(ACCURACY).value == 0.9
    assert len(engine.cache) == 2


def test_config_error_raised_before_running(engine, lr_snapshot):
    token = CancellationToken()
    token.cancel()

    with pytest.raises(QueryConfigError):
        engine.list_session_groups(lr_snapshot, ListSessionGroupsRequest(start_index=-1), token=token)


def test_cancelled_query_raises(engine, lr_snapshot):
    token = CancellationToken()
    token.cancel()

    with pytest.raises(QueryCancelledError) as exc_info:
        engine.list_session_groups(lr_snapshot, ListSessionGroupsRequest(), token=token)

    assert exc_info.value.stage == "group"


def test_empty_snapshot(engine, lr_experiment):
    response = engine.list_session_groups(ExperimentSnapshot(lr_experiment, []), ListSessionGroupsRequest())

    assert response.session_groups == []
    assert response.total_size == 0


def test_list_metric_evals(engine, lr_experiment, make_session):
    snapshot = ExperimentSnapshot(lr_experiment, [make_session("a", {"lr": 0.1}, {ACCURACY: [(3, 0.3), (1, 0.1)]})])

    response = engine.list_metric_evals(snapshot, ListMetricEvalsRequest(session_name="a", metric_name=ACCURACY))

    assert [e.training_step for e in response.metric_evals] == [1, 3]
    with pytest.raises(SessionNotFoundError):
        engine.list_metric_evals(snapshot, ListMetricEvalsRequest(session_name="b", metric_name=ACCURACY))
