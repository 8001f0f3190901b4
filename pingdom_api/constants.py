#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from typing import Final

ENV_API_TOKEN: Final = "PINGDOM_API_TOKEN"
ENV_BASE_URL: Final = "PINGDOM_BASE_URL"
ENV_TIMEOUT: Final = "PINGDOM_TIMEOUT"

DEFAULT_BASE_URL: Final = "https://api.pingdom.com/api/3.1"
DEFAULT_TIMEOUT: Final = 30

TMS_CHECK_PATH: Final = "/tms/check"
