"""
Mock Network Clients

NetworkMock serves requests from local JSON fixtures instead of the network,
NetworkAPI tries fixtures first and falls back to real requests, NetworkFailed
fails every call. They are meant for tests and offline development and are
never built by NetworkFactory in optimised runs.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional, Tuple
from urllib.parse import unquote, urlsplit

import httpx

from lib.utils import bytesToStr

from .abstract import Network
from .client import DefaultNetwork
from .constants import DEFAULT_FIXTURE_ROOT, DEFAULT_TIMEOUT
from .endpoint import CustomHost
from .exceptions import MockUnresolvedError, NoNetworkError, TransportError
from .models import NetworkMockData


class NetworkMock(Network):
    """Network client resolving requests to local fixtures, dood!

    Resolution order for a request path:
        1. First mock entry whose ``api`` equals the decoded path exactly
        2. Override mapping (usually captured environment) keyed by the path,
           value is a fixture name loaded from the default root
        3. MockUnresolvedError

    Example:
        >>> network = NetworkMock(mapper=[NetworkMockData(api="/v1/users", filename="users", root="fixtures")])
        >>> data = await network.get("https://api.example.com/v1/users")
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        customHost: Optional[CustomHost] = None,
        mapper: Optional[Iterable[NetworkMockData]] = None,
        overrides: Optional[Mapping[str, str]] = None,
        fixtureRoot: str = DEFAULT_FIXTURE_ROOT,
        pingResult: bool = False,
    ):
        """Initialize mock client, dood!

        Args:
            logger: Logger for debugging (module logger if None)
            customHost: Host configuration the client was built for
            mapper: Mock entries, first match by path wins
            overrides: Path to fixture name mapping consulted when no entry matched
            fixtureRoot: Default directory for fixtures without explicit root
            pingResult: If True, ``ping`` succeeds instead of raising NoNetworkError
        """
        super().__init__(logger=logger, customHost=customHost, fixtureRoot=fixtureRoot)
        self.mapper: Tuple[NetworkMockData, ...] = tuple(mapper or ())
        self.overrides: Dict[str, str] = dict(overrides or {})
        self.pingResult = pingResult

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        return await self._resolve(url)

    async def post(self, url: str, headers: Optional[Dict[str, str]] = None, body: bytes = b"") -> bytes:
        return await self._resolve(url)

    async def ping(self, url: str) -> None:
        if not self.pingResult:
            raise NoNetworkError()

    async def _resolve(self, url: str) -> bytes:
        try:
            path = unquote(urlsplit(url).path)
        except ValueError as e:
            raise MockUnresolvedError(f"Cannot extract path from {url}") from e

        self.logger.info(f"Mocked data {path}")

        mockData = next((entry for entry in self.mapper if entry.api == path), None)
        if mockData is not None:
            data = await self.loadLocalFixture(mockData.filename, mockData.root)
            self.logger.debug(bytesToStr(data))
            return data

        filename = self.overrides.get(path)
        if filename:
            data = await self.loadLocalFixture(filename)
            self.logger.debug(bytesToStr(data))
            return data

        self.logger.debug(f"No mock data for {path}")
        raise MockUnresolvedError()


class NetworkFailed(Network):
    """Network client failing every call, for error handling tests, dood!

    ``get`` and ``post`` raise TransportError, ``ping`` raises NoNetworkError.
    """

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        raise TransportError()

    async def post(self, url: str, headers: Optional[Dict[str, str]] = None, body: bytes = b"") -> bytes:
        raise TransportError()

    async def ping(self, url: str) -> None:
        raise NoNetworkError()


class NetworkAPI(Network):
    """Mock-first network client with live fallback, dood!

    Every ``get``/``post`` is first resolved by an inner NetworkMock. Only
    MockUnresolvedError sends the request to the inner DefaultNetwork, every
    other mock failure (e.g. a matched fixture that cannot be read) is
    raised as is. ``ping`` always goes to the live client.

    Example:
        >>> network = NetworkAPI(customHost=host, mapper=[NetworkMockData(api="/v1/users", filename="users")])
        >>> data = await network.get(Endpoint(host, "/users").url)  # fixture
        >>> data = await network.get(Endpoint(host, "/posts").url)  # real request
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        customHost: Optional[CustomHost] = None,
        mapper: Optional[Iterable[NetworkMockData]] = None,
        overrides: Optional[Mapping[str, str]] = None,
        fixtureRoot: str = DEFAULT_FIXTURE_ROOT,
        timeout: float = DEFAULT_TIMEOUT,
        trustAllCertificates: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(logger=logger, customHost=customHost, fixtureRoot=fixtureRoot)
        self.mock = NetworkMock(
            logger=logger,
            customHost=customHost,
            mapper=mapper,
            overrides=overrides,
            fixtureRoot=fixtureRoot,
        )
        self.live = DefaultNetwork(
            logger=logger,
            customHost=customHost,
            timeout=timeout,
            trustAllCertificates=trustAllCertificates,
            transport=transport,
            fixtureRoot=fixtureRoot,
        )

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        try:
            return await self.mock.get(url, headers)
        except MockUnresolvedError:
            self.logger.debug(f"No mock for {url}, using live request")
        return await self.live.get(url, headers)

    async def post(self, url: str, headers: Optional[Dict[str, str]] = None, body: bytes = b"") -> bytes:
        try:
            return await self.mock.post(url, headers, body)
        except MockUnresolvedError:
            self.logger.debug(f"No mock for {url}, using live request")
        return await self.live.post(url, headers, body)

    async def ping(self, url: str) -> None:
        await self.live.ping(url)
