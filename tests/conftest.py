"""
Pytest configuration and shared fixtures.
"""

import pytest

from hpgroups.config import reset_settings
from hpgroups.engine import ExperimentSnapshot
from hpgroups.models import DataType, Experiment, HParamInfo, MetricInfo, MetricName, MetricValue, Session

ACCURACY = MetricName(tag="accuracy")
LOSS = MetricName(group="train", tag="loss")


@pytest.fixture(autouse=True)
def clean_env_for_tests(monkeypatch):
    """Clean environment variables for test isolation.

    Clears every HPGROUPS_* variable and the cached settings so each test
    starts from the defaults.
    """
    for name in (
        "HPGROUPS_AGGREGATION_CACHE_SIZE",
        "HPGROUPS_DEFAULT_SLICE_SIZE",
        "HPGROUPS_MAX_SLICE_SIZE",
        "HPGROUPS_QUERY_TIMEOUT_SECS",
        "HPGROUPS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_session():
    """Factory for sessions.

    ``metrics`` maps a MetricName to a single value (reported at step 0) or
    to a list of (step, value) pairs in arrival order.
    """

    def _make(name, hparams=None, metrics=None, **kwargs):
        metric_values = []
        for metric_name, series in (metrics or {}).items():
            if not isinstance(series, list):
                series = [(0, series)]
            for step, value in series:
                metric_values.append(MetricValue(name=metric_name, value=value, training_step=step, wall_time_secs=1000.0 + step))
        return Session(name=name, hparams=hparams or {}, metric_values=metric_values, **kwargs)

    return _make


@pytest.fixture
def lr_experiment():
    """Experiment with a float hparam 'lr', a string hparam 'optimizer' and two metrics."""
    return Experiment(
        hparam_infos=[
            HParamInfo(name="lr", type=DataType.FLOAT64),
            HParamInfo(name="optimizer", type=DataType.STRING),
        ],
        metric_infos=[MetricInfo(name=ACCURACY), MetricInfo(name=LOSS)],
    )


@pytest.fixture
def lr_snapshot(lr_experiment, make_session):
    """S1(lr=0.1, acc=0.9), S2(lr=0.1, acc=0.8), S3(lr=0.2, acc=0.95)."""
    sessions = [
        make_session("S1", {"lr": 0.1}, {ACCURACY: 0.9}),
        make_session("S2", {"lr": 0.1}, {ACCURACY: 0.8}),
        make_session("S3", {"lr": 0.2}, {ACCURACY: 0.95}),
    ]
    return ExperimentSnapshot(lr_experiment, sessions)
