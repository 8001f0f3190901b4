#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""
Query the TMS checks of a Pingdom account. Results are written to stdout as JSON.
The API token is read from the environment variable PINGDOM_API_TOKEN unless
given with --token.
"""

import argparse
import dataclasses
import json
import os
import sys
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pydantic
import requests

from pingdom_api.client import Client
from pingdom_api.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ENV_API_TOKEN,
    ENV_BASE_URL,
    ENV_TIMEOUT,
)
from pingdom_api.exceptions import PingdomException
from pingdom_api.log import configure_logger, logger, setup_logging
from pingdom_api.models import (
    Order,
    PerformanceReportRequest,
    Resolution,
    StatusReportByIdRequest,
    StatusReportListRequest,
)

Args = argparse.Namespace


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 timestamp: {value!r}") from exc


def _add_time_range_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--from",
        dest="from_",
        type=_timestamp,
        default=None,
        metavar="TIMESTAMP",
        help="Start of the report, e.g. 2024-01-31T12:00:00+00:00 (naive timestamps are UTC)",
    )
    parser.add_argument(
        "--to",
        type=_timestamp,
        default=None,
        metavar="TIMESTAMP",
        help="End of the report",
    )
    parser.add_argument(
        "--order",
        choices=[o.value for o in Order],
        default=None,
        help="Sort order of the report",
    )


def parse_arguments(argv: Sequence[str] | None) -> Args:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--debug",
        action="store_true",
        help="""Debug mode: raise Python exceptions""",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode (for even more output use -vvv)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Additionally write the log of the API calls to this file",
    )
    parser.add_argument(
        "--token",
        default=None,
        help=f"Pingdom API token (default: ${ENV_API_TOKEN})",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help=f"Base URL of the Pingdom API (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help=f"Timeout of a single request in seconds (default: {DEFAULT_TIMEOUT})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List all TMS checks")
    list_parser.add_argument("--limit", type=int, default=None)
    list_parser.add_argument("--offset", type=int, default=None)
    list_parser.add_argument(
        "--tags",
        default=None,
        help="Comma separated list of tags, only checks carrying one of them are listed",
    )

    show_parser = subparsers.add_parser("show", help="Show a single TMS check")
    show_parser.add_argument("check_id", type=int, metavar="CHECK_ID")

    delete_parser = subparsers.add_parser("delete", help="Delete a TMS check")
    delete_parser.add_argument("check_id", type=int, metavar="CHECK_ID")

    status_parser = subparsers.add_parser(
        "status-report",
        help="Status changes of all TMS checks or of a single one",
    )
    status_parser.add_argument("--check-id", type=int, default=None)
    _add_time_range_arguments(status_parser)
    status_parser.add_argument("--limit", type=int, default=None)
    status_parser.add_argument("--offset", type=int, default=None)
    status_parser.add_argument(
        "--omit-empty",
        action="store_true",
        help="Leave out checks without status changes",
    )

    performance_parser = subparsers.add_parser(
        "performance-report",
        help="Performance of a single TMS check",
    )
    performance_parser.add_argument("check_id", type=int, metavar="CHECK_ID")
    _add_time_range_arguments(performance_parser)
    performance_parser.add_argument(
        "--resolution",
        choices=[r.value for r in Resolution],
        default=None,
    )
    performance_parser.add_argument("--include-uptime", action="store_true")

    return parser.parse_args(argv)


def _create_client(args: Args) -> Client:
    environ = dict(os.environ)
    for key, value in (
        (ENV_API_TOKEN, args.token),
        (ENV_BASE_URL, args.base_url),
        (ENV_TIMEOUT, None if args.timeout is None else str(args.timeout)),
    ):
        if value is not None:
            environ[key] = value
    return Client.from_environment(environ)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, pydantic.BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def _command_list(client: Client, args: Args) -> Any:
    params = {
        key: str(value)
        for key, value in (("limit", args.limit), ("offset", args.offset), ("tags", args.tags))
        if value is not None
    }
    return client.tms_checks.list_checks(params)


def _command_show(client: Client, args: Args) -> Any:
    return client.tms_checks.read_check(args.check_id)


def _command_delete(client: Client, args: Args) -> Any:
    return client.tms_checks.delete_check(args.check_id)


def _command_status_report(client: Client, args: Args) -> Any:
    if args.check_id is None:
        return client.tms_checks.status_report_list(
            StatusReportListRequest(
                from_=args.from_,
                to=args.to,
                order=args.order,
                limit=args.limit,
                offset=args.offset,
                omit_empty=args.omit_empty,
            )
        )
    return client.tms_checks.status_report_by_id(
        args.check_id,
        StatusReportByIdRequest(from_=args.from_, to=args.to, order=args.order),
    )


def _command_performance_report(client: Client, args: Args) -> Any:
    return client.tms_checks.performance_report(
        args.check_id,
        PerformanceReportRequest(
            from_=args.from_,
            to=args.to,
            order=args.order,
            resolution=args.resolution,
            include_uptime=args.include_uptime,
        ),
    )


_COMMANDS: dict[str, Callable[[Client, Args], Any]] = {
    "list": _command_list,
    "show": _command_show,
    "delete": _command_delete,
    "status-report": _command_status_report,
    "performance-report": _command_performance_report,
}


def pingdom_tms_main(args: Args) -> int:
    try:
        with _create_client(args) as client:
            result = _COMMANDS[args.command](client, args)
    except (PingdomException, requests.RequestException) as exc:
        if args.debug:
            raise
        logger.debug("%s failed", args.command, exc_info=True)
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    sys.stdout.write(json.dumps(_to_jsonable(result), indent=2, sort_keys=True) + "\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point to be used"""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    if args.log_file is not None:
        configure_logger(args.log_file)
    return pingdom_tms_main(args)


if __name__ == "__main__":
    sys.exit(main())
