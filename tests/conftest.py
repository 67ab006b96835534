"""Pytest configuration and shared fixtures."""

import pytest

from stubs import StubTransport, json_response
from transbridge.cache import MemoryCacheStore


@pytest.fixture
def memory_store():
    """Create an in-memory cache store."""
    return MemoryCacheStore()


@pytest.fixture
def empty_transport():
    """Create a transport that answers every call with an empty JSON object."""
    return StubTransport(json_response({}))
