#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import os
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any, Final, Self, TypeVar

import pydantic
import requests

from pingdom_api.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ENV_API_TOKEN,
    ENV_BASE_URL,
    ENV_TIMEOUT,
)
from pingdom_api.exceptions import ConfigurationError, DecodeError, PingdomResponseError
from pingdom_api.log import logger
from pingdom_api.tms_check import TmsCheckService

_TModel = TypeVar("_TModel", bound=pydantic.BaseModel)


class Client:
    """requests based client used to perform REST-API calls against Pingdom"""

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session() if session is None else session
        # sent with every request, the headers of a given session stay untouched
        self._headers: Final = {
            "Authorization": f"Bearer {api_token}",
            "Accept": "application/json",
        }
        self.tms_checks: Final = TmsCheckService(self)

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> Self:
        env = os.environ if environ is None else environ
        if not (api_token := env.get(ENV_API_TOKEN)):
            raise ConfigurationError(f"No API token configured, please set {ENV_API_TOKEN}")
        try:
            timeout = float(env.get(ENV_TIMEOUT) or DEFAULT_TIMEOUT)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid value for {ENV_TIMEOUT}: {env[ENV_TIMEOUT]!r}"
            ) from exc
        return cls(
            api_token,
            base_url=env.get(ENV_BASE_URL) or DEFAULT_BASE_URL,
            timeout=timeout,
            session=session,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any, **kwargs: Any) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def new_request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> requests.PreparedRequest:
        return self._session.prepare_request(
            requests.Request(
                method,
                f"{self._base_url}{path}",
                headers=self._headers,
                params=dict(params or {}),
            )
        )

    def new_json_request(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any],
    ) -> requests.PreparedRequest:
        # requests sets the content type to application/json
        return self._session.prepare_request(
            requests.Request(method, f"{self._base_url}{path}", headers=self._headers, json=body)
        )

    def send(self, request: requests.PreparedRequest) -> requests.Response:
        """Perform the request and raise PingdomResponseError for any non 2xx answer"""
        logger.debug("%s %s", request.method, request.url)
        settings = self._session.merge_environment_settings(request.url, {}, None, None, None)
        response = self._session.send(request, timeout=self._timeout, **settings)
        logger.debug("%s %s: %s", request.method, request.url, response.status_code)
        verify_response(response)
        return response

    def do(self, request: requests.PreparedRequest, model: type[_TModel]) -> _TModel:
        response = self.send(request)
        try:
            return model.model_validate_json(response.content)
        except pydantic.ValidationError as exc:
            raise DecodeError(
                f"Unexpected response to {request.method} {request.url}: {exc}"
            ) from exc


def verify_response(response: requests.Response) -> None:
    if HTTPStatus.OK <= response.status_code < HTTPStatus.MULTIPLE_CHOICES:
        return
    raise _parse_error_response(response.status_code, response.reason or "", response.text)


class _PingdomErrorDescr(pydantic.BaseModel, frozen=True):
    statuscode: int | None = None
    statusdesc: str = ""
    errormessage: str = ""


class _PingdomErrorResponse(pydantic.BaseModel, frozen=True):
    error: _PingdomErrorDescr


def _parse_error_response(status_code: int, reason: str, body: str) -> PingdomResponseError:
    """
    The API returns JSON error bodies such as
    {"error": {"statuscode": 403, "statusdesc": "Forbidden", "errormessage": "Invalid token"}}
    Anything else (proxies, load balancers) is passed on as it is.

    >>> str(_parse_error_response(403, "Forbidden", '{"error": {"statuscode": 403, "statusdesc": "Forbidden", "errormessage": "Invalid token"}}'))
    '403 Forbidden: Invalid token'
    >>> str(_parse_error_response(502, "Bad Gateway", "upstream down"))
    '502 Bad Gateway: upstream down'
    >>> str(_parse_error_response(404, "Not Found", '{"message": "nope"}'))
    '404 Not Found: {"message": "nope"}'
    """
    try:
        error_descr = _PingdomErrorResponse.model_validate_json(body).error
    except pydantic.ValidationError:
        return PingdomResponseError(status_code, reason, body)
    return PingdomResponseError(
        error_descr.statuscode or status_code,
        error_descr.statusdesc or reason,
        error_descr.errormessage,
    )
