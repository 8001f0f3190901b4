#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# This file initializes the pytest environment

import pytest

pytest.register_assert_rewrite("tests.unit.mocks_and_helpers")

test_types = [
    "unit",
    "doctest",  # pytest --doctest-modules pingdom_api
]

#
# Each test is of one of the types listed above.
#
# The tests are marked using the marker pytest.mark.type("TYPE")
# which is added to the test automatically according to their location.
#
# When "-T TYPE" is given, tests of other types are skipped.
#


def pytest_configure(config):
    """Register the type marker to pytest"""
    config.addinivalue_line(
        "markers", "type(TYPE): Mark TYPE of test. Available: %s" % ", ".join(test_types)
    )


def pytest_collection_modifyitems(items: list[pytest.Item], config: pytest.Config) -> None:
    """Mark collected test types based on their location"""
    for item in items:
        type_marker = item.get_closest_marker("type")
        if type_marker and type_marker.args:
            continue  # Do not modify manually set marks

        file_path = str(item.reportinfo()[0])
        if "tests/unit" in file_path:
            ty = "unit"
        elif file_path.endswith(".py") and "/tests/" not in file_path:
            ty = "doctest"
        else:
            raise Exception(f"Test not TYPE marked: {item!r}")

        item.add_marker(pytest.mark.type.with_args(ty))


def pytest_runtest_setup(item: pytest.Item) -> None:
    """Skip tests of unwanted types"""
    wanted = item.config.getoption("-T")
    if not wanted:
        return

    test_type = item.get_closest_marker("type")
    if test_type is None or not test_type.args:
        raise Exception("Test is not TYPE marked: %s" % item)

    if test_type.args[0] != wanted:
        pytest.skip("Not testing type %r" % wanted)
