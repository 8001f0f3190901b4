#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Iterator

import pytest
import requests

from tests.unit.mocks_and_helpers import BASE_URL, RecordingAdapter

from pingdom_api.client import Client
from pingdom_api.constants import ENV_API_TOKEN, ENV_BASE_URL, ENV_TIMEOUT


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    # Never pick up the configuration of the developer running the tests
    for variable in (ENV_API_TOKEN, ENV_BASE_URL, ENV_TIMEOUT):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture(name="adapter")
def fixture_adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture(name="session")
def fixture_session(adapter: RecordingAdapter) -> requests.Session:
    session = requests.Session()
    session.mount("https://", adapter)
    return session


@pytest.fixture(name="client")
def fixture_client(session: requests.Session) -> Iterator[Client]:
    with Client("secret-token", base_url=BASE_URL, session=session) as client:
        yield client
