"""
Sample script that simulates a small hyperparameter sweep and queries it.

Each hyperparameter combination is trained with three seeds, so every
session group holds three sessions. The snapshot is written to
sweep_snapshot.json for use with the hpgroups CLI.
"""

import itertools
import math
import random
from pathlib import Path

from hpgroups import ExperimentSnapshot, SessionGroupEngine
from hpgroups.models import (
    AggregationType,
    ColParams,
    DataType,
    Experiment,
    HParamColumn,
    HParamInfo,
    ListSessionGroupsRequest,
    MetricColumn,
    MetricInfo,
    MetricName,
    MetricValue,
    Session,
    SessionStatus,
    SnapshotPayload,
    SortOrder,
)

ACCURACY = MetricName(group="validation", tag="accuracy")
LOSS = MetricName(group="train", tag="loss")


def simulate_session(name: str, hparams: dict, total_steps: int, seed: int) -> Session:
    """
    Simulate one training session.

    Args:
        name: Session name
        hparams: Hyperparameter values
        total_steps: Number of evaluation steps
        seed: Random seed for noise

    Returns:
        Session with accuracy and loss series
    """
    rng = random.Random(seed)
    speed = hparams["learning_rate"] * (1.5 if hparams["optimizer"] == "adam" else 1.0)
    metric_values = []
    for step in range(total_steps):
        progress = 1.0 - math.exp(-speed * 40 * (step + 1) / total_steps)
        accuracy = max(0.0, min(1.0, 0.5 + 0.45 * progress + rng.gauss(0, 0.01)))
        loss = max(0.01, 1.2 * (1.0 - progress) + rng.gauss(0, 0.02))
        wall_time = 1_700_000_000.0 + step * 30
        metric_values.append(MetricValue(name=ACCURACY, value=accuracy, training_step=step, wall_time_secs=wall_time))
        metric_values.append(MetricValue(name=LOSS, value=loss, training_step=step, wall_time_secs=wall_time))

    return Session(
        name=name,
        start_time_secs=1_700_000_000.0,
        end_time_secs=1_700_000_000.0 + total_steps * 30,
        status=SessionStatus.SUCCESS,
        hparams=hparams,
        metric_values=metric_values,
    )


def main() -> None:
    """Main function: simulate the sweep and print the best groups."""
    experiment = Experiment(
        description="Learning rate / optimizer sweep",
        hparam_infos=[
            HParamInfo(name="learning_rate", type=DataType.FLOAT64),
            HParamInfo(name="optimizer", type=DataType.STRING),
        ],
        metric_infos=[MetricInfo(name=ACCURACY), MetricInfo(name=LOSS)],
    )

    sessions = []
    for index, (learning_rate, optimizer) in enumerate(itertools.product([0.001, 0.01, 0.1], ["adam", "sgd"])):
        for seed in range(3):
            name = f"{optimizer}_lr{learning_rate}_seed{seed}"
            hparams = {"learning_rate": learning_rate, "optimizer": optimizer}
            sessions.append(simulate_session(name, hparams, total_steps=50, seed=index * 10 + seed))

    payload = SnapshotPayload(experiment=experiment, sessions=sessions)
    output = Path("sweep_snapshot.json")
    output.write_text(payload.model_dump_json(indent=2))
    print(f"Wrote {len(sessions)} sessions to {output}")

    snapshot = ExperimentSnapshot.from_payload(payload)
    engine = SessionGroupEngine()

    request = ListSessionGroupsRequest(
        col_params=[
            ColParams(column=MetricColumn(metric=ACCURACY), order=SortOrder.DESC),
            ColParams(column=HParamColumn(hparam="optimizer")),
        ],
        aggregation_type=AggregationType.MEDIAN,
        aggregation_metric=ACCURACY,
        slice_size=3,
    )
    response = engine.list_session_groups(snapshot, request)

    print(f"Top {len(response.session_groups)} of {response.total_size} groups by median validation accuracy:")
    for group in response.session_groups:
        accuracy = group.metric_value(ACCURACY)
        print(f"  {group.hparams}: accuracy={accuracy.value:.3f} ({len(group.sessions)} sessions)")


if __name__ == "__main__":
    main()
