# -*- coding: utf-8 -*-
"""
Shared fixtures
"""

import pytest
from fastapi.testclient import TestClient

from cbt_admin.clients.exam_api_client import get_exam_api
from cbt_admin.main import app
from tests.fixtures import FakeReporter, MockApi


@pytest.fixture
def mock_api():
    """Scripted remote API."""
    return MockApi()


@pytest.fixture
async def api_client(mock_api):
    """ExamApiClient talking to the scripted API."""
    client = mock_api.client()
    yield client
    await client.aclose()


@pytest.fixture
def reporter():
    """Reporter that confirms every prompt."""
    return FakeReporter(answer=True)


@pytest.fixture
def client(mock_api):
    """BFF test client whose remote calls go to the scripted API."""

    async def override_get_exam_api():
        async with mock_api.client() as api:
            yield api

    app.dependency_overrides[get_exam_api] = override_get_exam_api
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
