#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Values exchanged with the TMS check endpoints of the Pingdom API

Requests (checks and report queries) are plain dataclasses which are validated
explicitly before they are sent. Report responses are pydantic models which are
validated when decoded.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, StrEnum
from typing import Any, Final, TypeVar

import pydantic

from pingdom_api.exceptions import ValidationError


class Order(StrEnum):
    ASC = "asc"
    DESC = "desc"


class Resolution(StrEnum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


class Region(StrEnum):
    US_EAST = "us-east"
    US_WEST = "us-west"
    EU = "eu"
    AU = "au"


class Severity(StrEnum):
    HIGH = "high"
    LOW = "low"


# check interval in minutes
ALLOWED_INTERVALS: Final = (5, 10, 20, 60, 720, 1440)

_TEnum = TypeVar("_TEnum", bound=Enum)


def _parse_enum(enum_type: type[_TEnum], field_name: str, value: object) -> _TEnum:
    """
    >>> _parse_enum(Region, "region", "eu")
    <Region.EU: 'eu'>
    >>> _parse_enum(Severity, "severity_level", "medium")
    Traceback (most recent call last):
        ...
    pingdom_api.exceptions.ValidationError: invalid value 'medium' for `severity_level`, allowed values are ["high", "low"]
    """
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(f'"{member.value}"' for member in enum_type)
        raise ValidationError(
            field_name,
            value,
            f"invalid value {value!r} for `{field_name}`, allowed values are [{allowed}]",
        ) from None


def _is_int(value: object) -> bool:
    """
    >>> _is_int(10), _is_int(10.0), _is_int(True)
    (True, False, False)
    """
    return isinstance(value, int) and not isinstance(value, bool)


def _as_utc(timestamp: datetime) -> datetime:
    # naive timestamps are taken as UTC
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def _rfc3339(timestamp: datetime) -> str:
    """
    >>> _rfc3339(datetime(2024, 1, 2, 3, 4, 5, 678))
    '2024-01-02T03:04:05Z'
    >>> from datetime import timedelta
    >>> _rfc3339(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2))))
    '2024-01-02T01:04:05Z'
    """
    return _as_utc(timestamp).strftime("%Y-%m-%dT%H:%M:%SZ")


def split_tags(tags: str) -> list[str]:
    """Turn the comma separated tags of a check into the list the API expects

    >>> split_tags("a, b,c")
    ['a', 'b', 'c']
    >>> split_tags(" ,lonely, ")
    ['lonely']
    >>> split_tags("")
    []
    """
    return [tag for raw_tag in tags.split(",") if (tag := raw_tag.strip())]


#   .--checks--------------------------------------------------------------.


@dataclass
class Step:
    """One action of a TMS check, e.g. Step("go_to", {"url": "https://example.com"})"""

    function: str = ""
    args: dict[str, str] = field(default_factory=dict)

    def render_for_json_api(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        if self.function:
            rendered["fn"] = self.function
        if self.args:
            rendered["args"] = dict(self.args)
        return rendered


@dataclass
class Check:
    """A TMS check

    Unset fields hold zero values and are left out of the request body, so that
    the API falls back to its own defaults. Use new_check to get an instance that
    carries these defaults locally.
    """

    name: str
    steps: list[Step] = field(default_factory=list)
    active: bool = False
    contact_ids: list[int] = field(default_factory=list)
    custom_message: str = ""
    integration_ids: list[int] = field(default_factory=list)
    interval: int = 0
    region: Region | str = ""
    send_notification_when_down: int = 0
    severity_level: Severity | str = ""
    tags: str = ""
    team_ids: list[int] = field(default_factory=list)
    # assigned by the server, never sent
    id: int | None = None
    status: str | None = None
    created_at: int | None = None
    modified_at: int | None = None

    def validate(self) -> None:
        """Guard against sending illegal values to the Pingdom API"""
        if not self.name:
            raise ValidationError(
                "name",
                self.name,
                "Invalid value for `name`. Must contain non-empty string",
            )
        _parse_enum(Region, "region", self.region)
        _parse_enum(Severity, "severity_level", self.severity_level)
        if not _is_int(self.interval) or self.interval not in ALLOWED_INTERVALS:
            raise ValidationError(
                "interval",
                self.interval,
                f"invalid value {self.interval!r} for `interval`, "
                f"allowed values are [{','.join(map(str, ALLOWED_INTERVALS))}]",
            )

    def render_for_json_api(self) -> dict[str, Any]:
        """The body of a create or update request"""
        body: dict[str, Any] = {
            "name": self.name,
            "steps": [step.render_for_json_api() for step in self.steps],
            "active": self.active,
        }
        optional_fields: Mapping[str, object] = {
            "contact_ids": list(self.contact_ids),
            "custom_message": self.custom_message,
            "integration_ids": list(self.integration_ids),
            "interval": self.interval,
            "region": str(self.region),
            "severity_level": str(self.severity_level),
            "send_notification_when_down": self.send_notification_when_down,
            "tags": split_tags(self.tags),
            "team_ids": list(self.team_ids),
        }
        body.update({key: value for key, value in optional_fields.items() if value})
        return body


def new_check(name: str, steps: Sequence[Step]) -> Check:
    """Create a check carrying the defaults of the Pingdom TMS check API

    >>> new_check("Login", [Step("go_to", {"url": "https://example.com"})]).validate()
    """
    return Check(
        name=name,
        steps=list(steps),
        active=True,
        interval=10,
        region=Region.US_EAST,
        severity_level=Severity.HIGH,
        send_notification_when_down=1,
    )


#   .--report requests-----------------------------------------------------.


@dataclass(frozen=True, kw_only=True)
class _ReportRequest:
    from_: datetime | None = None
    to: datetime | None = None
    order: Order | str | None = None

    def validate(self) -> None:
        if (
            self.from_ is not None
            and self.to is not None
            and _as_utc(self.to) < _as_utc(self.from_)
        ):
            raise ValidationError(
                "to",
                self.to,
                f"from date ({self.from_.isoformat()}) should be earlier than "
                f"to date ({self.to.isoformat()})",
            )
        if self.order:
            _parse_enum(Order, "order", self.order)

    def get_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.from_ is not None:
            params["from"] = _rfc3339(self.from_)
        if self.to is not None:
            params["to"] = _rfc3339(self.to)
        if self.order:
            params["order"] = str(self.order)
        return params


@dataclass(frozen=True, kw_only=True)
class StatusReportListRequest(_ReportRequest):
    """Query for the status changes of all TMS checks"""

    limit: int | None = None
    offset: int | None = None
    omit_empty: bool = False

    def validate(self) -> None:
        super().validate()
        for name, value in (("offset", self.offset), ("limit", self.limit)):
            if value is not None and not _is_int(value):
                raise ValidationError(name, value, f"{name} should be an integer, got {value!r}")
        if self.offset is not None and self.offset < 0:
            raise ValidationError(
                "offset", self.offset, f"offset should be greater or equal 0, got {self.offset}"
            )
        if self.limit is not None and self.limit <= 0:
            raise ValidationError("limit", self.limit, f"limit should be greater 0, got {self.limit}")

    def get_params(self) -> dict[str, str]:
        params = super().get_params()
        if self.offset is not None:
            params["offset"] = str(self.offset)
        if self.limit is not None:
            params["limit"] = str(self.limit)
        if self.omit_empty:
            params["omit_empty"] = "true"
        return params


@dataclass(frozen=True, kw_only=True)
class StatusReportByIdRequest(_ReportRequest):
    """Query for the status changes of a single TMS check"""


@dataclass(frozen=True, kw_only=True)
class PerformanceReportRequest(_ReportRequest):
    """Query for the performance of a single TMS check"""

    include_uptime: bool = False
    resolution: Resolution | str | None = None

    def validate(self) -> None:
        super().validate()
        if self.resolution:
            _parse_enum(Resolution, "resolution", self.resolution)

    def get_params(self) -> dict[str, str]:
        params = super().get_params()
        if self.include_uptime:
            params["include_uptime"] = "true"
        if self.resolution:
            params["resolution"] = str(self.resolution)
        return params


#   .--report responses----------------------------------------------------.


class StepResponse(pydantic.BaseModel, frozen=True):
    fn: str = ""
    args: Mapping[str, str] = {}

    def to_step(self) -> Step:
        return Step(function=self.fn, args=dict(self.args))


class StatusChangeState(pydantic.BaseModel, frozen=True, populate_by_name=True):
    status: str
    from_: datetime = pydantic.Field(alias="from")
    to: datetime | None = None
    error_in: str = ""


class StatusChangeReport(pydantic.BaseModel, frozen=True):
    check_id: int
    name: str = ""
    states: Sequence[StatusChangeState] = ()


class StatusChangeResponse(pydantic.BaseModel, frozen=True):
    report: Sequence[StatusChangeReport]

    @pydantic.field_validator("report", mode="before")
    @classmethod
    def _single_report_as_sequence(cls, value: object) -> object:
        # the endpoint of a single check delivers one report object instead of a list
        if isinstance(value, Mapping):
            return [value]
        return value


class PerformanceStep(pydantic.BaseModel, frozen=True):
    step: StepResponse = StepResponse()
    average_response: int = 0


class PerformanceInterval(pydantic.BaseModel, frozen=True, populate_by_name=True):
    from_: datetime = pydantic.Field(alias="from")
    average_response: int = 0
    downtime: int = 0
    uptime: int = 0
    unmonitored: int = 0
    steps: Sequence[PerformanceStep] = ()


class PerformanceReport(pydantic.BaseModel, frozen=True):
    check_id: int
    name: str = ""
    resolution: Resolution | None = None
    intervals: Sequence[PerformanceInterval] = ()


class PerformanceReportResponse(pydantic.BaseModel, frozen=True):
    report: PerformanceReport


class PingdomResponse(pydantic.BaseModel, frozen=True):
    message: str = ""
