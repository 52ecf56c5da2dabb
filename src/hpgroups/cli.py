#!/usr/bin/env python3
"""
hpgroups CLI tool

Command line interface for querying session groups of an experiment snapshot
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from hpgroups.config import get_settings
from hpgroups.engine import ExperimentSnapshot, SessionGroupEngine
from hpgroups.exceptions import QueryConfigError, SessionNotFoundError
from hpgroups.logger import logger, setup_logger
from hpgroups.models import ListMetricEvalsRequest, ListSessionGroupsRequest, MetricName, SnapshotPayload


def load_snapshot(path: str) -> ExperimentSnapshot:
    """
    Load an experiment snapshot from a JSON file

    Args:
        path: Path to a JSON file holding a SnapshotPayload

    Returns:
        ExperimentSnapshot built from the file
    """
    payload = SnapshotPayload.model_validate_json(Path(path).read_text())
    return ExperimentSnapshot.from_payload(payload)


def load_request(path: str | None) -> ListSessionGroupsRequest:
    """
    Load a session group request from a JSON file

    Args:
        path: Path to a JSON file, or None for the default request

    Returns:
        ListSessionGroupsRequest
    """
    if path is None:
        return ListSessionGroupsRequest()
    return ListSessionGroupsRequest.model_validate_json(Path(path).read_text())


def run_list_groups(snapshot_path: str, request_path: str | None = None) -> None:
    """
    Print the session groups of a snapshot as JSON

    Args:
        snapshot_path: Snapshot JSON file
        request_path: Request JSON file (default: all groups, AVG aggregation)
    """
    snapshot = load_snapshot(snapshot_path)
    request = load_request(request_path)
    response = SessionGroupEngine().list_session_groups(snapshot, request)
    print(response.model_dump_json(indent=2))


def run_metric_evals(snapshot_path: str, session: str, tag: str, group: str = "") -> None:
    """
    Print one metric series of one session as JSON

    Args:
        snapshot_path: Snapshot JSON file
        session: Session name
        tag: Metric tag
        group: Metric group
    """
    snapshot = load_snapshot(snapshot_path)
    request = ListMetricEvalsRequest(session_name=session, metric_name=MetricName(group=group, tag=tag))
    response = SessionGroupEngine().list_metric_evals(snapshot, request)
    print(response.model_dump_json(indent=2))


def main(argv: list[str] | None = None) -> None:
    """
    CLI main entry point
    """
    parser = argparse.ArgumentParser(description="Session group query tool")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level for messages on stderr (default: HPGROUPS_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    groups_parser = subparsers.add_parser("list-groups", help="List session groups of a snapshot")
    groups_parser.add_argument("snapshot", help="Snapshot JSON file")
    groups_parser.add_argument("--request", default=None, help="Request JSON file (default: all groups, AVG aggregation)")

    evals_parser = subparsers.add_parser("metric-evals", help="Show one metric series of one session")
    evals_parser.add_argument("snapshot", help="Snapshot JSON file")
    evals_parser.add_argument("--session", required=True, help="Session name")
    evals_parser.add_argument("--tag", required=True, help="Metric tag")
    evals_parser.add_argument("--group", default="", help="Metric group (default: empty)")

    args = parser.parse_args(argv)

    try:
        setup_logger(args.log_level or get_settings().log_level)
        if args.command == "list-groups":
            run_list_groups(args.snapshot, args.request)
        elif args.command == "metric-evals":
            run_metric_evals(args.snapshot, args.session, args.tag, args.group)
        else:
            parser.print_help()
    except QueryConfigError as e:
        print(f"Error: invalid request field {e.field}: {e.message}")
        sys.exit(1)
    except (ValidationError, SessionNotFoundError, OSError) as e:
        logger.debug(f"{args.command} failed: {type(e).__name__}")
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
