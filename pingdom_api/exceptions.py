#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Transport problems are not wrapped: requests.RequestException and its subclasses
# reach the caller unchanged.


class PingdomException(Exception):
    """Common base of all errors raised by this package"""


class ConfigurationError(PingdomException):
    pass


class ValidationError(PingdomException, ValueError):
    """A value is rejected locally, before any request is sent"""

    def __init__(self, field: str, value: object, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
        self.message = message

    def __str__(self) -> str:
        return self.message


class PingdomResponseError(PingdomException):
    """The API answered with a status code outside of 2xx"""

    def __init__(self, status_code: int, status_desc: str, message: str) -> None:
        super().__init__(status_code, status_desc, message)
        self.status_code = status_code
        self.status_desc = status_desc
        self.message = message

    def __str__(self) -> str:
        """
        >>> str(PingdomResponseError(403, "Forbidden", "Token is invalid"))
        '403 Forbidden: Token is invalid'
        >>> str(PingdomResponseError(502, "", "Bad Gateway"))
        '502: Bad Gateway'
        """
        if self.status_desc:
            return f"{self.status_code} {self.status_desc}: {self.message}"
        return f"{self.status_code}: {self.message}"


class DecodeError(PingdomException):
    """The response body is not the JSON document we expect"""
