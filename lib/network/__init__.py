"""
Network Client Library

Async HTTP client layer with pluggable implementations: a live client built
on httpx, a fixture-backed mock client and an always-failing client, all
sharing one capability contract and one error taxonomy.

Example usage:
    from lib.network import CustomHost, Endpoint, NetworkFactory, NetworkFactoryConfig

    host = CustomHost(host="api.example.com", path="/v1")
    network = NetworkFactory.make(host=host, config=NetworkFactoryConfig.fromProcess())

    data = await network.get(Endpoint(host, "/users", [("page", "1")]).url)
"""

from lib.network.abstract import Network
from lib.network.client import DefaultNetwork, hasSuccessStatusCode
from lib.network.constants import HttpMethod, NetworkErrorKind
from lib.network.endpoint import DEFAULT_HOST, CustomHost, Endpoint, QueryItem, buildUrl
from lib.network.exceptions import (
    DecodingError,
    MockUnresolvedError,
    NetworkAPIError,
    NoNetworkError,
    ServerError,
    TransportError,
)
from lib.network.factory import NetworkFactory, NetworkFactoryConfig, decodeMapper, encodeMapper
from lib.network.mock import NetworkAPI, NetworkFailed, NetworkMock
from lib.network.models import NetworkMockData, NetworkRequest

__all__ = [
    # Clients
    "Network",
    "DefaultNetwork",
    "NetworkMock",
    "NetworkAPI",
    "NetworkFailed",
    "NetworkFactory",
    "NetworkFactoryConfig",
    # Endpoint
    "CustomHost",
    "DEFAULT_HOST",
    "Endpoint",
    "QueryItem",
    "buildUrl",
    # Models
    "HttpMethod",
    "NetworkMockData",
    "NetworkRequest",
    # Exceptions
    "NetworkErrorKind",
    "NetworkAPIError",
    "NoNetworkError",
    "TransportError",
    "DecodingError",
    "ServerError",
    "MockUnresolvedError",
    # Utils
    "hasSuccessStatusCode",
    "encodeMapper",
    "decodeMapper",
]
