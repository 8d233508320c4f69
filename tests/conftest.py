"""
Pytest configuration and common fixtures for network client tests.

All fixtures follow camelCase naming convention.
"""

from pathlib import Path
from typing import Callable, List

import httpx
import pytest

from lib.network import CustomHost, DefaultNetwork, NetworkMockData

FIXTURES_DIR = Path(__file__).parent / "network" / "fixtures"


# ============================================================================
# Host and Fixture Fixtures
# ============================================================================


@pytest.fixture
def fixtureRoot() -> str:
    """
    Directory with JSON fixtures shipped with the tests.

    Returns:
        str: Absolute path to tests/network/fixtures
    """
    return str(FIXTURES_DIR)


@pytest.fixture
def apiHost() -> CustomHost:
    """
    Host used throughout network tests.

    Returns:
        CustomHost: https://api.example.com with /v1 base path
    """
    return CustomHost(secure=True, host="api.example.com", path="/v1")


@pytest.fixture
def mockEntries(fixtureRoot) -> List[NetworkMockData]:
    """
    Mock entries pointing at shipped fixtures.

    Example:
        def testMock(mockEntries):
            network = NetworkMock(mapper=mockEntries)
    """
    return [
        NetworkMockData(api="/v1/users", filename="users", root=fixtureRoot),
        NetworkMockData(api="/v1/status", filename="status", root=fixtureRoot),
    ]


# ============================================================================
# Transport Fixtures
# ============================================================================


@pytest.fixture
def mockTransport() -> Callable[..., httpx.MockTransport]:
    """
    Factory for httpx.MockTransport serving synthetic responses.

    Example:
        async def testGet(mockTransport):
            transport = mockTransport(lambda request: httpx.Response(200))
    """

    def factory(handler) -> httpx.MockTransport:
        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def liveNetwork(apiHost, mockTransport) -> Callable[..., DefaultNetwork]:
    """
    Factory for DefaultNetwork backed by a mock transport.

    Example:
        async def testGet(liveNetwork):
            network = liveNetwork(lambda request: httpx.Response(200, content=b"ok"))
    """

    def factory(handler, **kwargs) -> DefaultNetwork:
        return DefaultNetwork(customHost=apiHost, transport=mockTransport(handler), **kwargs)

    return factory
