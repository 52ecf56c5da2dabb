"""
Tests for the Column Resolver
"""

from hpgroups.engine import MISSING, ExperimentSnapshot, aggregate_groups, group_sessions, resolve_column, resolve_groups
from hpgroups.models import AggregationType, HParamColumn, MetricColumn, MetricName

ACCURACY = MetricName(tag="accuracy")
LOSS = MetricName(group="train", tag="loss")


def _resolved(snapshot, columns):
    groups = group_sessions(snapshot)
    aggregated = aggregate_groups(groups, snapshot, AggregationType.AVG)
    return resolve_groups(groups, aggregated, columns)


def test_hparam_and_metric_columns(lr_snapshot):
    resolved = _resolved(lr_snapshot, [HParamColumn(hparam="lr"), MetricColumn(metric=ACCURACY)])

    assert resolved[1].columns == (0.2, 0.95)
    assert resolved[0].columns[0] == 0.1


def test_missing_values(lr_snapshot):
    resolved = _resolved(lr_snapshot, [HParamColumn(hparam="optimizer"), MetricColumn(metric=LOSS)])

    assert all(r.columns == (MISSING, MISSING) for r in resolved)


def test_missing_is_not_none_or_zero(lr_snapshot):
    group = group_sessions(lr_snapshot)[0]

    value = resolve_column(MetricColumn(metric=LOSS), group, {})

    assert value is MISSING
    assert value is not None
    assert value != 0


def test_to_model_shares_sessions(lr_snapshot):
    resolved = _resolved(lr_snapshot, [])

    model = resolved[0].to_model()

    assert model.name == resolved[0].name
    assert model.hparams == {"lr": 0.1}
    assert model.sessions[0] is lr_snapshot.sessions[0]
    assert model.metric_value(ACCURACY) is not None
    assert model.metric_value(LOSS) is None
