"""
Network Library Exceptions

This module contains the closed set of exceptions raised by network clients.
Every failure of ``get``, ``post``, ``ping`` or fixture loading is reported as
one of the ``NetworkAPIError`` subclasses below, so callers can handle errors
by type instead of parsing messages.
"""

import logging
from typing import Dict, Optional, Type

from lib.utils import bytesToStr

from .constants import ERROR_FETCHING_WITH, ERROR_MESSAGES, NetworkErrorKind

logger = logging.getLogger(__name__)


class NetworkAPIError(Exception):
    """Base exception class for all network layer errors, dood!

    Attributes:
        kind: Error classification (see ``NetworkErrorKind``)
        reason: Raw response body, only set for server errors
    """

    kind: NetworkErrorKind = NetworkErrorKind.TRANSPORT

    def __init__(self, message: Optional[str] = None, reason: Optional[bytes] = None) -> None:
        self.reason = reason
        self.message = message if message is not None else self.description
        super().__init__(self.message)
        logger.debug(f"{type(self).__name__}: {self.message}")

    @property
    def description(self) -> str:
        """Fixed user-facing text for this error kind."""
        return ERROR_MESSAGES[self.kind]

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkAPIError):
            return NotImplemented
        return self.kind == other.kind and self.reason == other.reason

    def __hash__(self) -> int:
        return hash((self.kind, self.reason))


class NoNetworkError(NetworkAPIError):
    """Raised when the reachability check fails.

    ``ping`` narrows every failure (transport error, non-2xx status) to this one.
    """

    kind = NetworkErrorKind.NO_NETWORK


class TransportError(NetworkAPIError):
    """Raised when a request could not be completed.

    This includes DNS failures, refused connections, timeouts, cancellation,
    malformed requests and fixture files that cannot be read.
    """

    kind = NetworkErrorKind.TRANSPORT


class DecodingError(NetworkAPIError):
    """Raised by callers when a payload cannot be decoded.

    The network layer passes bytes through untouched and never raises this
    itself. It lives here so every caller shares one taxonomy.
    """

    kind = NetworkErrorKind.DECODING


class ServerError(NetworkAPIError):
    """Raised when the server answered with a status outside 200-299.

    The response body is kept in ``reason`` so callers can extract
    server-provided error details.
    """

    kind = NetworkErrorKind.SERVER

    def __init__(
        self,
        message: Optional[str] = None,
        reason: Optional[bytes] = None,
        statusCode: Optional[int] = None,
    ) -> None:
        self.statusCode = statusCode
        super().__init__(message, reason)

    @property
    def description(self) -> str:
        text = bytesToStr(self.reason) if self.reason is not None else None
        if not text:
            return ERROR_MESSAGES[self.kind]
        return ERROR_FETCHING_WITH.format(reason=text)


class MockUnresolvedError(NetworkAPIError):
    """Raised by the mock dispatcher when nothing matched the requested path."""

    kind = NetworkErrorKind.MOCK_UNRESOLVED


ERROR_CLASSES: Dict[NetworkErrorKind, Type[NetworkAPIError]] = {
    NetworkErrorKind.NO_NETWORK: NoNetworkError,
    NetworkErrorKind.TRANSPORT: TransportError,
    NetworkErrorKind.DECODING: DecodingError,
    NetworkErrorKind.SERVER: ServerError,
    NetworkErrorKind.MOCK_UNRESOLVED: MockUnresolvedError,
}

