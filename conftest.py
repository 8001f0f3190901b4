#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Lives in the repository root, so that the root is put on sys.path and both
# "pingdom_api" and "tests" are importable without installing the package.

test_types = [
    "unit",
    "doctest",
]


def pytest_addoption(parser):
    """Register the -T option to pytest"""
    parser.addoption(
        "-T",
        action="store",
        metavar="TYPE",
        default=None,
        help="Run only tests of the given TYPE. Available types are: %s" % ", ".join(test_types),
    )
