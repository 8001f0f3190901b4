#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from setuptools import find_packages, setup

setup(
    name="pingdom-api",
    version="1.0.0",
    description="Client for the TMS check endpoints of the Pingdom API",
    packages=find_packages(include=["pingdom_api", "pingdom_api.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=["requests>=2.28", "pydantic>=2.0"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["pingdom-tms = pingdom_api.cli:main"]},
)
