"""
Default Network Client

This module provides DefaultNetwork, the production implementation of the
``Network`` contract. It performs real HTTP calls with httpx and classifies
every outcome into the network error taxonomy.
"""

import asyncio
import logging
from typing import Dict, Optional

import httpx

from .abstract import Network
from .constants import (
    CACHE_CONTROL_HEADER,
    DEFAULT_FIXTURE_ROOT,
    DEFAULT_TIMEOUT,
    NO_CACHE,
    SUCCESS_STATUS_MAX,
    SUCCESS_STATUS_MIN,
    HttpMethod,
)
from .endpoint import CustomHost
from .exceptions import NoNetworkError, ServerError, TransportError
from .models import NetworkRequest

# Log request/response headers and bodies. Useful only for client debugging
EXTENDED_DEBUG: bool = False


def hasSuccessStatusCode(statusCode: int) -> bool:
    """Check if HTTP status code is in 200-299 range."""
    return SUCCESS_STATUS_MIN <= statusCode <= SUCCESS_STATUS_MAX


class DefaultNetwork(Network):
    """Async HTTP client executing real requests, dood!

    Creates new HTTP session for each request: no cookies, cached responses
    or pooled connections are shared between calls. The instance keeps only
    read-only configuration, so one client can serve any number of
    concurrent callers.

    Example:
        >>> network = DefaultNetwork(customHost=host)
        >>> data = await network.get(Endpoint(host, "/users").url)
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        customHost: Optional[CustomHost] = None,
        timeout: float = DEFAULT_TIMEOUT,
        trustAllCertificates: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        fixtureRoot: str = DEFAULT_FIXTURE_ROOT,
    ):
        """Initialize network client, dood!

        Args:
            logger: Logger for request/response debugging (module logger if None)
            customHost: Host configuration for this environment
            timeout: Request timeout in seconds (default: 30)
            trustAllCertificates: Skip TLS certificate validation. Only for
                trusted internal hosts (default: False)
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests.
                It must tolerate being closed after every request.
            fixtureRoot: Default directory for local JSON fixtures
        """
        super().__init__(logger=logger, customHost=customHost, fixtureRoot=fixtureRoot)
        self.timeout = timeout
        self.trustAllCertificates = trustAllCertificates
        self.transport = transport

        if trustAllCertificates:
            self.logger.warning("TLS certificate validation is disabled, any server certificate will be accepted")

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        request = self._createRequest(HttpMethod.GET, url, headers)
        return await self._execute(request)

    async def post(self, url: str, headers: Optional[Dict[str, str]] = None, body: bytes = b"") -> bytes:
        request = self._createRequest(HttpMethod.POST, url, headers, body)
        return await self._execute(request)

    async def ping(self, url: str) -> None:
        """Send HEAD request to url.

        Only a completed request with 2xx status counts as reachable, every
        other outcome is reported as NoNetworkError.
        """
        self.logger.debug(f"Pinging {url}")
        try:
            async with self._createSession() as session:
                response = await session.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.warning(f"Ping to {url} failed: {type(e).__name__}#{e}")
            raise NoNetworkError() from e
        except asyncio.CancelledError as e:
            self.logger.warning(f"Ping to {url} cancelled")
            raise NoNetworkError() from e

        if not hasSuccessStatusCode(response.status_code):
            self.logger.warning(f"Ping to {url} returned {response.status_code}")
            raise NoNetworkError()

    def _createSession(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            verify=not self.trustAllCertificates,
            transport=self.transport,
            follow_redirects=True,
        )

    def _createRequest(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[bytes] = None,
    ) -> NetworkRequest:
        """Build request descriptor, caller headers win over defaults."""
        requestHeaders: Dict[str, str] = {}
        callerHeaders = headers or {}
        if not any(key.lower() == CACHE_CONTROL_HEADER.lower() for key in callerHeaders):
            requestHeaders[CACHE_CONTROL_HEADER] = NO_CACHE
        requestHeaders.update(callerHeaders)

        return NetworkRequest(method=method, url=url, headers=requestHeaders, body=body)

    async def _execute(self, request: NetworkRequest) -> bytes:
        """Execute request and classify the outcome.

        Returns:
            Response body for 2xx responses

        Raises:
            TransportError: Request could not be completed (network, timeout, cancellation)
            ServerError: Response status outside 200-299, body kept in ``reason``
        """
        self.logger.debug(f"Making {request.method} request to {request.url}")
        if EXTENDED_DEBUG:
            self.logger.debug(f"Headers: {request.headers}")
            self.logger.debug(f"Body: {request.body!r}")

        try:
            async with self._createSession() as session:
                response = await session.request(
                    request.method.value,
                    request.url,
                    headers=request.headers,
                    content=request.body,
                )

        except httpx.TimeoutException as e:
            self.logger.error(f"Request timeout: {request.method} {request.url}")
            raise TransportError(f"Request timeout: {type(e).__name__}#{e}") from e

        except (httpx.RequestError, httpx.InvalidURL) as e:
            self.logger.error(f"Network error: {type(e).__name__}#{e}")
            raise TransportError(f"Network error: {type(e).__name__}#{e}") from e

        except asyncio.CancelledError as e:
            self.logger.warning(f"Request cancelled: {request.method} {request.url}")
            raise TransportError("Request cancelled") from e

        data = response.content
        if EXTENDED_DEBUG:
            self.logger.debug(f"Response: {response.status_code} {data!r}")

        if not hasSuccessStatusCode(response.status_code):
            self.logger.warning(f"API error: {response.status_code} {request.method} {request.url}")
            raise ServerError(reason=data, statusCode=response.status_code)

        self.logger.debug(f"Request successful: {response.status_code} {request.method} {request.url}")
        return data
