from __future__ import annotations

import pytest

import main
from errors import UpstreamCallError
from helpers import FakeCompletionClient
from services.completion import get_completion_client


def _install(client: FakeCompletionClient):
    main.app.dependency_overrides[get_completion_client] = lambda: client
    return client


@pytest.fixture
def fake_client():
    yield _install(FakeCompletionClient())
    main.app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    error = UpstreamCallError("rate limited", details="429 rate limit exceeded")
    yield _install(FakeCompletionClient(error=error))
    main.app.dependency_overrides.clear()
