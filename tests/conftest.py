"""Shared test fixtures for all test modules."""

from __future__ import annotations

import pytest
from factories import TEST_ENDPOINT, TEST_TOKEN

from quota_mcp_server.clients.connection import ConnectionManager
from quota_mcp_server.config import ConnectionDescriptor


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's OpenShift environment out of the tests."""
    for name in (
        "OPENSHIFT_API_URL",
        "OPENSHIFT_API",
        "OPENSHIFT_TOKEN",
        "OPENSHIFT_USER",
        "OPENSHIFT_VERIFY_TLS",
        "OPENSHIFT_REQUEST_TIMEOUT",
        "QUOTA_PAGE_SIZE",
        "QUOTA_SWEEP_CONCURRENCY",
        "QUOTA_MCP_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def descriptor() -> ConnectionDescriptor:
    return ConnectionDescriptor(endpoint=TEST_ENDPOINT, token=TEST_TOKEN)


@pytest.fixture
def connection(descriptor: ConnectionDescriptor) -> ConnectionManager:
    return ConnectionManager(descriptor)

