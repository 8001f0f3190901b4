#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Client binding for the transaction monitoring (TMS) part of the Pingdom API"""

from pingdom_api.client import Client
from pingdom_api.exceptions import (
    ConfigurationError,
    DecodeError,
    PingdomException,
    PingdomResponseError,
    ValidationError,
)
from pingdom_api.models import (
    Check,
    new_check,
    Order,
    PerformanceReportRequest,
    Region,
    Resolution,
    Severity,
    StatusReportByIdRequest,
    StatusReportListRequest,
    Step,
)
from pingdom_api.tms_check import TmsCheckService

__all__ = [
    "Check",
    "Client",
    "ConfigurationError",
    "DecodeError",
    "new_check",
    "Order",
    "PerformanceReportRequest",
    "PingdomException",
    "PingdomResponseError",
    "Region",
    "Resolution",
    "Severity",
    "StatusReportByIdRequest",
    "StatusReportListRequest",
    "Step",
    "TmsCheckService",
    "ValidationError",
]
