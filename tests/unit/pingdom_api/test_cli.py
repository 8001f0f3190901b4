#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import json
from datetime import datetime
from http import HTTPStatus
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from tests.unit.mocks_and_helpers import BASE_URL, RecordingAdapter

from pingdom_api import cli
from pingdom_api.client import Client
from pingdom_api.exceptions import ValidationError

_create_client = cli._create_client  # pylint: disable=protected-access


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    # setup_logging reconfigures the root logger of the whole test process
    monkeypatch.setattr(cli, "setup_logging", lambda verbosity: None)


@pytest.fixture(autouse=True)
def _fake_client(monkeypatch: pytest.MonkeyPatch, client: Client) -> None:
    monkeypatch.setattr(cli, "_create_client", lambda args: client)


def test_parse_arguments_defaults() -> None:
    args = cli.parse_arguments(["list"])
    assert args.command == "list"
    assert args.debug is False
    assert args.verbose == 0
    assert args.token is None
    assert args.limit is None


def test_parse_arguments_status_report() -> None:
    args = cli.parse_arguments(
        [
            "-vv",
            "status-report",
            "--from",
            "2024-03-01T12:00:00",
            "--order",
            "desc",
            "--limit",
            "5",
            "--omit-empty",
        ]
    )
    assert args.verbose == 2
    assert args.from_ == datetime(2024, 3, 1, 12, 0)
    assert args.to is None
    assert args.order == "desc"
    assert args.limit == 5
    assert args.omit_empty is True
    assert args.check_id is None


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["show"],
        ["show", "not-a-number"],
        ["performance-report", "1", "--resolution", "month"],
        ["status-report", "--from", "yesterday"],
    ],
)
def test_parse_arguments_invalid(argv: list[str]) -> None:
    with pytest.raises(SystemExit):
        cli.parse_arguments(argv)


def test_list(adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]) -> None:
    adapter.add_json_response(
        {"checks": [{"id": 1, "name": "Login", "region": "eu", "tags": ["a", "b"]}]}
    )
    assert cli.main(["list", "--limit", "10", "--tags", "a"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output[0]["id"] == 1
    assert output[0]["region"] == "eu"
    assert output[0]["tags"] == "a,b"
    assert parse_qs(urlsplit(adapter.requests[0].url).query) == {"limit": ["10"], "tags": ["a"]}


def test_show(adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]) -> None:
    adapter.add_json_response(
        {"check": {"id": 7, "name": "Login", "steps": [{"fn": "go_to", "args": {"url": "x"}}]}}
    )
    assert cli.main(["show", "7"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["steps"] == [{"function": "go_to", "args": {"url": "x"}}]
    assert adapter.requests[0].url == f"{BASE_URL}/tms/check/7"


def test_delete(adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]) -> None:
    adapter.add_json_response({"message": "Deletion of check 7 was successful!"})
    assert cli.main(["delete", "7"]) == 0
    assert json.loads(capsys.readouterr().out) == {"message": "Deletion of check 7 was successful!"}
    assert adapter.requests[0].method == "DELETE"


def test_status_report_of_single_check(
    adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]
) -> None:
    adapter.add_json_response(
        {
            "report": {
                "check_id": 7,
                "states": [{"status": "up", "from": "2024-03-01T12:00:00Z"}],
            }
        }
    )
    assert cli.main(["status-report", "--check-id", "7", "--order", "asc"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["report"][0]["states"][0]["from"] == "2024-03-01T12:00:00Z"
    assert urlsplit(adapter.requests[0].url).path == "/api/3.1/tms/check/7/report/status"


def test_performance_report(adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]) -> None:
    adapter.add_json_response({"report": {"check_id": 7, "resolution": "week", "intervals": []}})
    assert cli.main(["performance-report", "7", "--resolution", "week", "--include-uptime"]) == 0

    assert json.loads(capsys.readouterr().out)["report"]["resolution"] == "week"
    assert parse_qs(urlsplit(adapter.requests[0].url).query) == {
        "resolution": ["week"],
        "include_uptime": ["true"],
    }


def test_validation_error_exit_code(
    adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["status-report", "--limit", "0"]) == 1
    assert "limit should be greater 0" in capsys.readouterr().err
    assert not adapter.requests


def test_validation_error_debug() -> None:
    with pytest.raises(ValidationError):
        cli.main(["--debug", "status-report", "--offset", "-1"])


def test_response_error_exit_code(
    adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]
) -> None:
    adapter.add_json_response(
        {"error": {"statuscode": 404, "statusdesc": "Not Found", "errormessage": "No such check"}},
        status_code=HTTPStatus.NOT_FOUND,
    )
    assert cli.main(["show", "4711"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "Error: 404 Not Found: No such check\n"


def test_transport_error_exit_code(
    adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]
) -> None:
    adapter.add_exception(requests.ConnectionError("Name or service not known"))
    assert cli.main(["list"]) == 1
    assert "Name or service not known" in capsys.readouterr().err


def test_malformed_body_exit_code(
    adapter: RecordingAdapter, capsys: pytest.CaptureFixture[str]
) -> None:
    adapter.add_json_response({"checks": [{"id": 1, "name": "x", "tags": [{"type": "u"}]}]})
    assert cli.main(["list"]) == 1
    assert "Unexpected response to GET" in capsys.readouterr().err


def test_log_file(
    monkeypatch: pytest.MonkeyPatch, adapter: RecordingAdapter, tmp_path: Path
) -> None:
    configured = []
    monkeypatch.setattr(cli, "configure_logger", configured.append)
    adapter.add_json_response({"checks": []})
    assert cli.main(["--log-file", str(tmp_path / "pingdom.log"), "list"]) == 0
    assert configured == [tmp_path / "pingdom.log"]


def test_create_client_from_arguments(
    monkeypatch: pytest.MonkeyPatch, session: requests.Session
) -> None:
    monkeypatch.setenv("PINGDOM_API_TOKEN", "env-token")
    monkeypatch.setattr(requests, "Session", lambda: session)

    args = cli.parse_arguments(["--token", "cli-token", "--base-url", BASE_URL, "list"])
    client = _create_client(args)

    request = client.new_request("GET", "/tms/check")
    assert request.url == f"{BASE_URL}/tms/check"
    assert request.headers["Authorization"] == "Bearer cli-token"


def test_missing_token(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli, "_create_client", _create_client)
    assert cli.main(["list"]) == 1
    assert "PINGDOM_API_TOKEN" in capsys.readouterr().err
