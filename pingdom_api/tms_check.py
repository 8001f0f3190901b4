#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""
TMS checks of the Pingdom API, https://docs.pingdom.com/api/, version 3.1. Endpoints:
* /tms/check
* /tms/check/{check_id}
* /tms/check/report/status
* /tms/check/{check_id}/report/status
* /tms/check/{check_id}/report/performance
"""

import functools
from collections.abc import Callable, Mapping, Sequence
from typing import ParamSpec, TYPE_CHECKING, TypeVar

import pydantic

from pingdom_api.constants import TMS_CHECK_PATH
from pingdom_api.exceptions import PingdomResponseError
from pingdom_api.log import logger
from pingdom_api.models import (
    Check,
    PerformanceReportRequest,
    PerformanceReportResponse,
    PingdomResponse,
    StatusChangeResponse,
    StatusReportByIdRequest,
    StatusReportListRequest,
    StepResponse,
)

if TYPE_CHECKING:
    from pingdom_api.client import Client

_TParams = ParamSpec("_TParams")
_TReturn = TypeVar("_TReturn")


def log_response_error(
    log_text: str,
) -> Callable[[Callable[_TParams, _TReturn]], Callable[_TParams, _TReturn]]:
    def decorator(api_call: Callable[_TParams, _TReturn]) -> Callable[_TParams, _TReturn]:
        @functools.wraps(api_call)
        def wrapper(*args: _TParams.args, **kwargs: _TParams.kwargs) -> _TReturn:
            try:
                return api_call(*args, **kwargs)
            except PingdomResponseError as response_error:
                logger.error(
                    "%s. Error message: %s",
                    log_text,
                    response_error,
                )
                raise

        return wrapper

    return decorator


class _TmsCheckResponse(pydantic.BaseModel, frozen=True):
    id: int
    name: str = ""
    steps: Sequence[StepResponse] = ()
    active: bool = False
    contact_ids: Sequence[int] = ()
    custom_message: str = ""
    integration_ids: Sequence[int] = ()
    interval: int = 0
    region: str = ""
    send_notification_when_down: int = 0
    severity_level: str = ""
    tags: Sequence[str] = ()
    team_ids: Sequence[int] = ()
    status: str | None = None
    created_at: int | None = None
    modified_at: int | None = None

    @pydantic.model_validator(mode="before")
    @classmethod
    def _drop_null_fields(cls, data: object) -> object:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @pydantic.field_validator("tags", mode="before")
    @classmethod
    def _tag_names(cls, value: object) -> object:
        # tags may come as objects, e.g. {"name": "prod", "type": "u", "count": 3}
        if isinstance(value, Sequence) and not isinstance(value, str):
            return [
                tag["name"] if isinstance(tag, Mapping) and "name" in tag else tag for tag in value
            ]
        return value

    def to_check(self) -> Check:
        return Check(
            id=self.id,
            name=self.name,
            steps=[step.to_step() for step in self.steps],
            active=self.active,
            contact_ids=list(self.contact_ids),
            custom_message=self.custom_message,
            integration_ids=list(self.integration_ids),
            interval=self.interval,
            region=self.region,
            send_notification_when_down=self.send_notification_when_down,
            severity_level=self.severity_level,
            tags=",".join(self.tags),
            team_ids=list(self.team_ids),
            status=self.status,
            created_at=self.created_at,
            modified_at=self.modified_at,
        )


class _ListTmsChecksResponse(pydantic.BaseModel, frozen=True):
    checks: Sequence[_TmsCheckResponse]


class _TmsCheckDetailsResponse(pydantic.BaseModel, frozen=True):
    check: _TmsCheckResponse


def _check_path(check_id: int) -> str:
    """
    >>> _check_path(42)
    '/tms/check/42'
    """
    return f"{TMS_CHECK_PATH}/{int(check_id)}"


class TmsCheckService:
    """Perform REST-API calls related to TMS checks"""

    def __init__(self, client: "Client") -> None:
        self._client = client

    @log_response_error("Listing TMS checks failed")
    def list_checks(self, params: Mapping[str, str] | None = None) -> list[Check]:
        """Return all TMS checks. params are passed on as query string, e.g. {"limit": "10"}"""
        request = self._client.new_request("GET", TMS_CHECK_PATH, params)
        return [
            check_response.to_check()
            for check_response in self._client.do(request, _ListTmsChecksResponse).checks
        ]

    @log_response_error("Creating TMS check failed")
    def create_check(self, check: Check) -> Check:
        """Create a new TMS check, the returned check carries the id assigned by Pingdom"""
        check.validate()
        request = self._client.new_json_request(
            "POST",
            TMS_CHECK_PATH,
            check.render_for_json_api(),
        )
        return self._client.do(request, _TmsCheckDetailsResponse).check.to_check()

    @log_response_error("Reading TMS check failed")
    def read_check(self, check_id: int) -> Check:
        request = self._client.new_request("GET", _check_path(check_id))
        return self._client.do(request, _TmsCheckDetailsResponse).check.to_check()

    @log_response_error("Updating TMS check failed")
    def update_check(self, check_id: int, check: Check) -> Check:
        """Replace the TMS check with the given ID

        The check has to carry the complete set of values, not just the changed ones:
        Fields left empty fall back to the defaults of the API.
        """
        check.validate()
        request = self._client.new_json_request(
            "PUT",
            _check_path(check_id),
            check.render_for_json_api(),
        )
        return self._client.do(request, _TmsCheckDetailsResponse).check.to_check()

    @log_response_error("Deleting TMS check failed")
    def delete_check(self, check_id: int) -> PingdomResponse:
        request = self._client.new_request("DELETE", _check_path(check_id))
        return self._client.do(request, PingdomResponse)

    @log_response_error("Fetching status report of TMS checks failed")
    def status_report_list(
        self,
        request: StatusReportListRequest | None = None,
    ) -> StatusChangeResponse:
        """Return the status changes of all TMS checks in the current organization"""
        if request is None:
            request = StatusReportListRequest()
        request.validate()
        return self._client.do(
            self._client.new_request(
                "GET",
                f"{TMS_CHECK_PATH}/report/status",
                request.get_params(),
            ),
            StatusChangeResponse,
        )

    @log_response_error("Fetching status report of TMS check failed")
    def status_report_by_id(
        self,
        check_id: int,
        request: StatusReportByIdRequest | None = None,
    ) -> StatusChangeResponse:
        """Return the status changes of a single TMS check"""
        if request is None:
            request = StatusReportByIdRequest()
        request.validate()
        return self._client.do(
            self._client.new_request(
                "GET",
                f"{_check_path(check_id)}/report/status",
                request.get_params(),
            ),
            StatusChangeResponse,
        )

    @log_response_error("Fetching performance report of TMS check failed")
    def performance_report(
        self,
        check_id: int,
        request: PerformanceReportRequest | None = None,
    ) -> PerformanceReportResponse:
        """Return the performance of a single TMS check, bucketed by the requested resolution"""
        if request is None:
            request = PerformanceReportRequest()
        request.validate()
        return self._client.do(
            self._client.new_request(
                "GET",
                f"{_check_path(check_id)}/report/performance",
                request.get_params(),
            ),
            PerformanceReportResponse,
        )
